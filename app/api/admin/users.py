"""Roteador de papéis e permissões diretas de usuários.

User Router — a user's role assignments and direct permission grants.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_manage_users, require_read_users
from app.database import get_db
from app.models.user import User
from app.schemas.user import UserPermissionGrant, UserPermissionResponse, UserRoleAssign, UserRoleResponse
from app.services.user_permission_service import user_permission_service
from app.services.user_role_service import user_role_service

router: APIRouter = APIRouter()


@router.get("/{user_id}/roles", response_model=list[UserRoleResponse])
async def list_user_roles(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_users)],
) -> list[UserRoleResponse]:
    return await user_role_service.list_user_roles(db, user_id)


@router.post("/{user_id}/roles", response_model=UserRoleResponse, status_code=201)
async def assign_role(
    user_id: UUID,
    data: UserRoleAssign,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_users)],
) -> UserRoleResponse:
    """Atribui um papel ao usuário.

    Assign a role. Institution roles need institution_id, polo roles
    need polo_id.
    """
    result: UserRoleResponse = await user_role_service.assign_role(
        db, user_id, data, current_user.id, request
    )
    await db.commit()
    return result


@router.delete("/{user_id}/roles/{role_id}", status_code=204)
async def unassign_role(
    user_id: UUID,
    role_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_users)],
    institution_id: Annotated[UUID | None, Query()] = None,
    polo_id: Annotated[UUID | None, Query()] = None,
) -> None:
    """Remove o papel do usuário; institution_id/polo_id restringem o contexto."""
    await user_role_service.unassign_role(
        db, user_id, role_id, current_user.id, institution_id, polo_id, request
    )
    await db.commit()


@router.get("/{user_id}/permissions", response_model=list[UserPermissionResponse])
async def list_user_permissions(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_read_users)],
) -> list[UserPermissionResponse]:
    """Permissões diretas do usuário, com o indicador de expiração."""
    return await user_permission_service.list_user_permissions(db, user_id)


@router.post("/{user_id}/permissions", response_model=UserPermissionResponse, status_code=201)
async def grant_user_permission(
    user_id: UUID,
    data: UserPermissionGrant,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_users)],
) -> UserPermissionResponse:
    """Concede uma permissão diretamente ao usuário.

    Grant a catalog permission to the user, optionally bound to an
    institution or polo and with an expiration date.
    """
    result: UserPermissionResponse = await user_permission_service.grant_permission(
        db, user_id, data, current_user.id, request
    )
    await db.commit()
    return result


@router.delete("/{user_id}/permissions/{permission_id}", status_code=204)
async def revoke_user_permission(
    user_id: UUID,
    permission_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manage_users)],
    institution_id: Annotated[UUID | None, Query()] = None,
    polo_id: Annotated[UUID | None, Query()] = None,
) -> None:
    await user_permission_service.revoke_permission(
        db, user_id, permission_id, current_user.id, institution_id, polo_id, request
    )
    await db.commit()
