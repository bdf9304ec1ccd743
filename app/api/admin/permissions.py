"""Roteador do catálogo de permissões (somente leitura).

Permission Catalog Router — read-only; the catalog is managed by the seed.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_read_permissions
from app.database import get_db
from app.models.user import User
from app.schemas.permission import PermissionResponse
from app.services.permission_service import permission_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_permissions)],
) -> list[PermissionResponse]:
    """Catálogo ordenado por (resource, action)."""
    return await permission_service.list_permissions(db)


@router.get("/grouped", response_model=dict[str, list[PermissionResponse]])
async def list_permissions_grouped(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_permissions)],
) -> dict[str, list[PermissionResponse]]:
    """Catálogo agrupado por recurso (Catalog grouped by resource)."""
    return await permission_service.list_permissions_grouped(db)
