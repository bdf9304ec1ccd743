"""Dependências FastAPI — autenticação e autorização.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for extracting the current user from JWT
and enforcing (resource, action) permissions on API endpoints.

Authentication Flow:
    1. Cliente envia Authorization: Bearer <token>
       (Client sends Authorization: Bearer <token> header)
    2. decode_token() valida o JWT e devolve o payload
       (decode_token verifies JWT and returns payload)
    3. O usuário é lido do banco pelo campo "sub" e precisa estar ativo
       (User is fetched by "sub" and must be active)

Authorization Flow (require_permission):
    1. get_permission_guard carrega a união das permissões dos papéis
       do usuário, uma vez por requisição
       (Union of the user's role permissions, loaded once per request)
    2. guard.allows(resource, action) — "manage" concede todas as ações
       ("manage" grants every action on the resource)
    3. Negado → 403 Forbidden (Denied → 403)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.services.permission_service import permission_service
from app.utils.authorization import PermissionGuard
from app.utils.exceptions import ForbiddenError, UnauthorizedError
from app.utils.jwt import decode_token

# Extrator do token Bearer; a ausência do cabeçalho vira 401 abaixo
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Extrai o usuário autenticado do JWT.

    Decode JWT from the Authorization header and return the authenticated user.

    Raises:
        UnauthorizedError: Token ausente, inválido, expirado ou de refresh;
            usuário inexistente ou inativo
    """
    if credentials is None:
        raise UnauthorizedError("Autenticação necessária")

    try:
        payload: dict = decode_token(credentials.credentials)
        # Refresh token não vale como access token
        if payload.get("type") != "access":
            raise UnauthorizedError("Tipo de token inválido")
        user_id = UUID(payload["sub"])
    except UnauthorizedError:
        raise
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Token inválido ou expirado")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("Usuário não encontrado ou inativo")

    return user


async def get_permission_guard(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionGuard:
    """Guard com as permissões efetivas do usuário atual."""
    return await permission_service.get_user_guard(db, current_user.id)


def require_permission(resource: str, action: str) -> Callable[..., Awaitable[User]]:
    """Fábrica de dependência que exige (resource, action).

    Dependency factory enforcing a permission server-side with the same
    predicate the view data uses.

    Args:
        resource: Recurso exigido (e.g. "roles")
        action: Ação exigida (e.g. "update")

    Returns:
        Dependência FastAPI que devolve o usuário ou lança 403
        (FastAPI dependency returning the User or raising 403)
    """
    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
        guard: Annotated[PermissionGuard, Depends(get_permission_guard)],
    ) -> User:
        if not guard.allows(resource, action):
            raise ForbiddenError("Você não tem permissão para esta ação")
        return current_user
    return _check


# Dependências prontas — Pre-configured permission dependencies
require_read_permissions = require_permission("permissions", "read")
require_read_roles = require_permission("roles", "read")
require_create_roles = require_permission("roles", "create")
require_update_roles = require_permission("roles", "update")
require_delete_roles = require_permission("roles", "delete")
require_read_users = require_permission("users", "read")
require_manage_users = require_permission("users", "manage")
