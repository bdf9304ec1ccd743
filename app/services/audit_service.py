"""Serviço de auditoria de permissões.

Permission Audit Service — records access-control changes and lists them.
Every role create/update/delete, grant, revoke, assign and unassign goes
through record().
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditAction, PermissionAudit
from app.repositories.audit_repository import audit_repository
from app.schemas.audit import PermissionAuditResponse
from app.schemas.common import PaginatedResponse
from app.utils.pagination import page_count

logger = logging.getLogger(__name__)


class AuditService:
    """Gravação e consulta da trilha de auditoria."""

    def _to_response(self, audit: PermissionAudit) -> PermissionAuditResponse:
        return PermissionAuditResponse(
            id=str(audit.id),
            user_id=str(audit.user_id) if audit.user_id else None,
            username=audit.user.username if audit.user else None,
            action=AuditAction(audit.action),
            resource=audit.resource,
            details=audit.details,
            ip_address=audit.ip_address,
            timestamp=audit.timestamp,
        )

    async def record(
        self,
        db: AsyncSession,
        actor_id: UUID | None,
        action: AuditAction,
        resource: str,
        details: dict[str, Any] | None = None,
        request: Request | None = None,
    ) -> PermissionAudit:
        """Grava um registro de auditoria na transação atual.

        Record an audit row in the current transaction. The router's commit
        persists it together with the change it describes.

        Args:
            db: Sessão assíncrona (Async database session)
            actor_id: Usuário autor da alteração (Acting user)
            action: Tipo de alteração (Change kind)
            resource: Alvo, e.g. "roles/<id>/permissions/<id>" (Change target)
            details: Dados adicionais (Extra JSON details)
            request: Requisição de origem, para IP e User-Agent (Source request)

        Returns:
            PermissionAudit: Registro criado (Created audit row)
        """
        ip_address: str | None = None
        user_agent: str | None = None
        if request is not None:
            ip_address = request.client.host if request.client else None
            user_agent = request.headers.get("user-agent")

        audit: PermissionAudit = await audit_repository.create(
            db,
            {
                "user_id": actor_id,
                "action": action.value,
                "resource": resource,
                "details": details,
                "ip_address": ip_address,
                "user_agent": user_agent,
            },
        )
        logger.info("audit %s %s by %s", action.value, resource, actor_id)
        return audit

    async def list_audits(
        self,
        db: AsyncSession,
        action: AuditAction | None = None,
        resource: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> PaginatedResponse:
        """Lista paginada, mais recentes primeiro."""
        items, total = await audit_repository.list_paginated(
            db,
            action=action.value if action else None,
            resource=resource or None,
            page=page,
            per_page=per_page,
        )
        return PaginatedResponse(
            items=[self._to_response(a) for a in items],
            total=total,
            page=page,
            per_page=per_page,
            pages=page_count(total, per_page),
        )


audit_service: AuditService = AuditService()
