"""Modelo ORM da trilha de auditoria de permissões.

Permission audit trail model. One row per change to roles,
role-permission links, direct user grants, or user-role assignments.

Tables:
    - permission_audits: histórico de alterações de acesso (Access change history)
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class AuditAction(str, enum.Enum):
    """Tipo de alteração auditada (Audited change kind)."""

    GRANT = "grant"
    REVOKE = "revoke"
    MODIFY_ROLE = "modify_role"
    ASSIGN_ROLE = "assign_role"
    UNASSIGN_ROLE = "unassign_role"


class PermissionAudit(Base):
    """Registro de auditoria de permissões.

    Attributes:
        id: Identificador UUID
        user_id: Autor da alteração (Actor)
        action: Valor de AuditAction
        resource: Alvo da alteração, e.g. "roles/<id>" (Change target)
        details: Dados adicionais em JSON (Extra details)
        ip_address: IP de origem (Client IP)
        user_agent: User-Agent da requisição
        timestamp: Momento da alteração UTC
    """

    __tablename__ = "permission_audits"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    resource: Mapped[str] = mapped_column(String(100), nullable=False)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("User", lazy="selectin")
