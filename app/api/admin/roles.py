"""Roteador de papéis — CRUD, detalhe e vínculos de permissões.

Role Router — CRUD endpoints for roles plus the role-permission links.
Every mutation is checked server-side; system roles answer 403.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_permission_guard,
    require_create_roles,
    require_delete_roles,
    require_read_roles,
    require_update_roles,
)
from app.database import get_db
from app.models.user import User
from app.schemas.common import AckResponse
from app.schemas.permission import (
    GrantPermissionRequest,
    PermissionResponse,
    RoleDetailResponse,
    RolePermissionResponse,
)
from app.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from app.services.permission_service import permission_service
from app.services.role_service import role_service
from app.utils.authorization import PermissionGuard

router: APIRouter = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_roles)],
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
    search: Annotated[str | None, Query()] = None,
) -> list[RoleResponse]:
    """Lista papéis, filtrando por nome, descrição ou abrangência.

    List roles, optionally filtered by a case-insensitive search term.
    """
    return await role_service.list_roles(db, guard, search)


@router.post("", response_model=RoleResponse, status_code=201)
async def create_role(
    data: RoleCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_create_roles)],
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
) -> RoleResponse:
    """Cria um papel customizado."""
    result: RoleResponse = await role_service.create_role(db, data, current_user.id, guard, request)
    await db.commit()
    return result


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_roles)],
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
) -> RoleResponse:
    return await role_service.get_role(db, role_id, guard)


@router.get("/{role_id}/detail", response_model=RoleDetailResponse)
async def get_role_detail(
    role_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_roles)],
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
) -> RoleDetailResponse:
    """Detalhe do papel com permissões agrupadas e disponíveis.

    Role detail: the role, its permissions grouped by resource, the
    permissions still available, and the empty state.
    """
    return await role_service.get_role_detail(db, role_id, guard)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: UUID,
    data: RoleUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_update_roles)],
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
) -> RoleResponse:
    """Atualiza um papel customizado."""
    result: RoleResponse = await role_service.update_role(db, role_id, data, current_user.id, guard, request)
    await db.commit()
    return result


@router.delete("/{role_id}", status_code=204)
async def delete_role(
    role_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_delete_roles)],
) -> None:
    """Remove um papel customizado e seus vínculos."""
    await role_service.delete_role(db, role_id, current_user.id, request)
    await db.commit()


# ---------------------------------------------------------------------------
# Vínculos papel-permissão — Role-permission links
# ---------------------------------------------------------------------------

@router.get("/{role_id}/permissions", response_model=list[RolePermissionResponse])
async def list_role_permissions(
    role_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_roles)],
) -> list[RolePermissionResponse]:
    return await permission_service.list_role_permissions(db, role_id)


@router.get("/{role_id}/permissions/grouped", response_model=dict[str, list[RolePermissionResponse]])
async def list_role_permissions_grouped(
    role_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_roles)],
) -> dict[str, list[RolePermissionResponse]]:
    return await permission_service.list_role_permissions_grouped(db, role_id)


@router.get("/{role_id}/available-permissions", response_model=list[PermissionResponse])
async def list_available_permissions(
    role_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_roles)],
) -> list[PermissionResponse]:
    """Permissões do catálogo ainda não vinculadas ao papel."""
    return await permission_service.list_available_permissions(db, role_id)


@router.post("/{role_id}/permissions", response_model=AckResponse)
async def grant_permission(
    role_id: UUID,
    data: GrantPermissionRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_update_roles)],
) -> AckResponse:
    """Vincula uma permissão ao papel."""
    result: AckResponse = await permission_service.grant_permission(
        db, role_id, data.permission_id, current_user.id, request
    )
    await db.commit()
    return result


@router.delete("/{role_id}/permissions/{permission_id}", response_model=AckResponse)
async def revoke_permission(
    role_id: UUID,
    permission_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_update_roles)],
) -> AckResponse:
    """Remove uma permissão do papel."""
    result: AckResponse = await permission_service.revoke_permission(
        db, role_id, permission_id, current_user.id, request
    )
    await db.commit()
    return result
