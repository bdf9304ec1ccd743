"""Repositório da auditoria de permissões.

Permission Audit Repository — inserts and filtered listing.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import PermissionAudit
from app.repositories.base import BaseRepository
from app.utils.pagination import paginate


class AuditRepository(BaseRepository[PermissionAudit]):
    """Consultas da tabela permission_audits."""

    def __init__(self) -> None:
        super().__init__(PermissionAudit)

    async def list_paginated(
        self,
        db: AsyncSession,
        action: str | None = None,
        resource: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[PermissionAudit], int]:
        """Registros mais recentes primeiro; resource filtra por prefixo."""
        query: Select = select(PermissionAudit)
        if action is not None:
            query = query.where(PermissionAudit.action == action)
        if resource is not None:
            query = query.where(PermissionAudit.resource.startswith(resource, autoescape=True))
        query = query.order_by(PermissionAudit.timestamp.desc(), PermissionAudit.id)

        items, total = await paginate(db, query, page, per_page)
        return list(items), total


audit_repository: AuditRepository = AuditRepository()
