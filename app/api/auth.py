"""Roteador de autenticação — login, renovação de token e perfil.

Auth Router — Login, token refresh and profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_permission_guard
from app.database import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, RefreshRequest, TokenResponse, UserMeResponse
from app.services.auth_service import auth_service
from app.utils.authorization import PermissionGuard

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Login — usuário e senha trocados por um par de tokens.

    Login endpoint. Issues an access/refresh token pair.
    """
    return await auth_service.login(db, data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Renovação — refresh token trocado por um novo par.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    return await auth_service.refresh(db, data)


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
) -> UserMeResponse:
    """Perfil do usuário atual.

    Get the profile of the currently authenticated user.
    """
    return await auth_service.get_me(db, current_user, guard)
