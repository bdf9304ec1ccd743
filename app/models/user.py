"""Modelos ORM de papéis e usuários.

Role and User SQLAlchemy ORM model definitions.
Roles carry a scope (global / institution / polo) and a system flag;
users hold any number of roles through user_roles, each optionally
bound to an institution or a polo.

Tables:
    - roles: papéis do sistema e customizados (System and custom roles)
    - users: contas de usuário (User accounts)
    - user_roles: atribuição de papéis a usuários (User ↔ role assignments)
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class RoleScope(str, enum.Enum):
    """Abrangência organizacional de um papel (Organizational breadth of a role)."""

    GLOBAL = "global"
    INSTITUTION = "institution"
    POLO = "polo"


class Role(Base):
    """Papel — conjunto nomeado de permissões.

    Role model — Named collection of permissions with a scope.
    System roles (is_system=True) are seeded and cannot be edited,
    deleted, or have their permissions changed.

    Attributes:
        id: Identificador UUID (Unique identifier)
        name: Nome do papel, único (Role name, e.g. "super_admin")
        description: Descrição (Role description)
        scope: Abrangência — "global"|"institution"|"polo" (Role scope)
        is_system: Papel do sistema, imutável (Seeded, immutable role)
        institution_id: Instituição dona do papel (Owning institution, optional)
        created_by_id: Criador do papel (Creator, optional)
        created_at: Data de criação UTC (Creation timestamp)
        updated_at: Data de atualização UTC (Last update timestamp)

    Relationships:
        role_permissions: Permissões vinculadas (Linked permissions)
        user_roles: Atribuições a usuários (User assignments)
    """

    __tablename__ = "roles"

    # Identificador — Role unique identifier (UUID v4)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Nome único em todo o sistema (Globally unique name)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Abrangência — valor de RoleScope (RoleScope value)
    scope: Mapped[str] = mapped_column(String(50), nullable=False, default=RoleScope.GLOBAL.value)
    # Papel do sistema: criado pelo seed, não editável (Seeded, not editable)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    institution_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Filhos removidos explicitamente pelo repositório (Children deleted by the repository)
    role_permissions = relationship("RolePermission", back_populates="role", passive_deletes=True)
    user_roles = relationship("UserRole", back_populates="role", passive_deletes=True)


class User(Base):
    """Usuário — conta de acesso à plataforma.

    User model — Platform account. Effective permissions are the union
    of the permissions of every assigned role.

    Attributes:
        id: Identificador UUID (Unique identifier)
        username: Login, único (Login username, unique)
        email: E-mail (Email address, optional)
        full_name: Nome completo (Full display name)
        password_hash: Hash bcrypt da senha (bcrypt-hashed password)
        is_active: Conta ativa (Active status)
        created_at: Data de criação UTC (Creation timestamp)
        updated_at: Data de atualização UTC (Last update timestamp)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Hash bcrypt (bcrypt hash, never plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    user_roles = relationship(
        "UserRole",
        back_populates="user",
        foreign_keys="UserRole.user_id",
        passive_deletes=True,
    )


class UserRole(Base):
    """Atribuição de papel a usuário.

    User-role assignment. Institution-scoped roles are bound to an
    institution_id, polo-scoped roles to a polo_id.

    Attributes:
        id: Identificador UUID
        user_id: FK do usuário
        role_id: FK do papel
        institution_id: Instituição do vínculo (optional)
        polo_id: Polo do vínculo (optional)
        created_by_id: Quem atribuiu (optional)
        created_at: Data de criação UTC
    """

    __tablename__ = "user_roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    institution_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    polo_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        # NULL conta como igual (PostgreSQL 15+): uma só atribuição global por papel
        UniqueConstraint(
            "user_id", "role_id", "institution_id", "polo_id",
            name="uq_user_role_context",
            postgresql_nulls_not_distinct=True,
        ),
    )

    user = relationship("User", back_populates="user_roles", foreign_keys=[user_id])
    role = relationship("Role", back_populates="user_roles")
