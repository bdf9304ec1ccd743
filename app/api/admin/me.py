"""Roteador das permissões do usuário atual.

Current User Router — the permission map, role assignments and a single
permission check for the authenticated user.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_permission_guard
from app.database import get_db
from app.models.user import User
from app.schemas.permission import PermissionCheckResponse
from app.schemas.user import UserRoleResponse
from app.services.user_role_service import user_role_service
from app.utils.authorization import PermissionGuard

router: APIRouter = APIRouter()


@router.get("/permissions", response_model=dict[str, bool])
async def get_my_permissions(
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
) -> dict[str, bool]:
    """Mapa {"action:resource": true} do usuário atual.

    Permission map clients load once per session to drive their gates.
    """
    return guard.as_map()


@router.get("/roles", response_model=list[UserRoleResponse])
async def get_my_roles(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[UserRoleResponse]:
    return await user_role_service.list_user_roles(db, current_user.id)


@router.get("/check-permission", response_model=PermissionCheckResponse)
async def check_permission(
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
    resource: Annotated[str, Query(min_length=1)],
    action: Annotated[str, Query(min_length=1)],
) -> PermissionCheckResponse:
    return PermissionCheckResponse(has_permission=guard.allows(resource, action))
