"""Roteador da trilha de auditoria de permissões.

Permission Audit Router — paginated, newest-first audit listing.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_read_roles
from app.database import get_db
from app.models.audit import AuditAction
from app.models.user import User
from app.schemas.common import PaginatedResponse
from app.services.audit_service import audit_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_permission_audits(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_roles)],
    action: Annotated[AuditAction | None, Query()] = None,
    resource: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PaginatedResponse:
    """Lista a auditoria; resource filtra por prefixo (e.g. "roles/")."""
    return await audit_service.list_audits(db, action, resource, page, per_page)
