"""Modelos ORM de Permission, RolePermission e UserPermission.

Permission catalog, role-permission mapping and direct user grant tables.

Tables:
    - permissions: catálogo global de permissões (resource, action)
    - role_permissions: vínculo papel ↔ permissão (role ↔ permission)
    - user_permissions: permissões diretas de usuários (Direct user grants)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Permission(Base):
    """Permissão — par (resource, action) do catálogo.

    Attributes:
        id: identificador UUID
        resource: recurso controlado (e.g. "courses")
        action: verbo aplicado ao recurso (e.g. "create", "manage")
        description: descrição exibida
        is_active: permissão ativa no catálogo
        created_at: data de criação
        updated_at: data de atualização
    """

    __tablename__ = "permissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    resource: Mapped[str] = mapped_column(String(50), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("resource", "action", name="uq_permissions_resource_action"),
    )

    role_permissions = relationship("RolePermission", back_populates="permission", passive_deletes=True)

    @property
    def name(self) -> str:
        """Nome derivado no formato "action:resource" (e.g. "create:courses")."""
        return f"{self.action}:{self.resource}"


class RolePermission(Base):
    """Vínculo papel-permissão.

    Attributes:
        id: identificador UUID
        role_id: FK do papel
        permission_id: FK da permissão
        created_by_id: usuário que concedeu a permissão
        created_at: data de criação
    """

    __tablename__ = "role_permissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    permission_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    role = relationship("Role", back_populates="role_permissions")
    permission = relationship("Permission", back_populates="role_permissions")


class UserPermission(Base):
    """Permissão concedida diretamente a um usuário.

    Direct user grant, added to the permissions of the user's roles.
    The grant can be bound to an institution or a polo, and stops
    counting once expires_at has passed.

    Attributes:
        id: identificador UUID
        user_id: FK do usuário
        permission_id: FK da permissão
        institution_id: instituição do vínculo (optional)
        polo_id: polo do vínculo (optional)
        expires_at: fim da validade UTC; None = sem expiração
        created_by_id: usuário que concedeu
        created_at: data de criação
        updated_at: data de atualização
    """

    __tablename__ = "user_permissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    permission_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False)
    institution_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    polo_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint(
            "user_id", "permission_id", "institution_id", "polo_id",
            name="uq_user_permission_context",
            postgresql_nulls_not_distinct=True,
        ),
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        """True quando expires_at já passou (SQLite devolve datas sem fuso: UTC)."""
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= (now or datetime.now(timezone.utc))
