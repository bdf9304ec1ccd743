"""Schemas Pydantic da auditoria de permissões.

Permission audit response schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.models.audit import AuditAction


class PermissionAuditResponse(BaseModel):
    """Registro de auditoria.

    Attributes:
        id: UUID do registro
        user_id: Autor da alteração (nullable)
        username: Login do autor (nullable)
        action: Tipo de alteração
        resource: Alvo, e.g. "roles/<id>"
        details: Dados adicionais
        ip_address: IP de origem
        timestamp: Momento da alteração
    """

    id: str
    user_id: str | None
    username: str | None
    action: AuditAction
    resource: str
    details: dict[str, Any] | None
    ip_address: str | None
    timestamp: datetime
