"""Serviço de autenticação — login, renovação de token e perfil.

Auth Service — Business logic for login, token refresh, and the
current-user profile with role and permission names.
"""

from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.auth import LoginRequest, RefreshRequest, TokenResponse, UserMeResponse
from app.services.permission_service import permission_service
from app.utils.authorization import PermissionGuard
from app.utils.exceptions import UnauthorizedError
from app.utils.jwt import create_access_token, create_refresh_token, decode_token
from app.utils.password import verify_password


class AuthService:
    """Regras de negócio de autenticação.

    Service handling authentication business logic. Refresh tokens are
    stateless JWTs; a refresh re-reads the user so deactivated accounts
    cannot renew.
    """

    def _generate_tokens(self, user: User) -> TokenResponse:
        payload: dict[str, str] = {"sub": str(user.id), "username": user.username}
        return TokenResponse(
            access_token=create_access_token(payload),
            refresh_token=create_refresh_token(payload),
        )

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """Autentica usuário e senha.

        Args:
            db: Sessão assíncrona (Async database session)
            data: Credenciais (Login credentials)

        Returns:
            TokenResponse: Par de tokens (Access and refresh tokens)

        Raises:
            UnauthorizedError: Credenciais inválidas ou conta inativa
        """
        user: User | None = await user_repository.get_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Usuário ou senha inválidos")
        if not user.is_active:
            raise UnauthorizedError("Conta desativada")
        return self._generate_tokens(user)

    async def refresh(self, db: AsyncSession, data: RefreshRequest) -> TokenResponse:
        """Troca um refresh token válido por um novo par."""
        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Token inválido ou expirado")

        if payload.get("type") != "refresh" or "sub" not in payload:
            raise UnauthorizedError("Tipo de token inválido")

        try:
            user_id = UUID(payload["sub"])
        except ValueError:
            raise UnauthorizedError("Token inválido ou expirado")

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("Usuário não encontrado ou inativo")
        return self._generate_tokens(user)

    async def get_me(self, db: AsyncSession, user: User, guard: PermissionGuard | None = None) -> UserMeResponse:
        """Perfil do usuário com nomes de papéis e permissões efetivas."""
        if guard is None:
            guard = await permission_service.get_user_guard(db, user.id)
        rows = await user_repository.get_user_roles(db, user.id)
        role_names: list[str] = sorted({role.name for _, role in rows})
        return UserMeResponse(
            id=str(user.id),
            username=user.username,
            full_name=user.full_name,
            email=user.email,
            is_active=user.is_active,
            roles=role_names,
            permissions=list(guard.as_map()),
        )


auth_service: AuthService = AuthService()
