"""Schemas Pydantic de autenticação.

Authentication request/response schema definitions.
Covers login, token refresh, and current user info.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Requisição de login.

    Attributes:
        username: Login do usuário (User login identifier)
        password: Senha em texto puro, comparada ao hash bcrypt
    """

    username: str
    password: str


class TokenResponse(BaseModel):
    """Par de tokens emitido no login ou refresh.

    Attributes:
        access_token: Token de acesso curto (Short-lived access token)
        refresh_token: Token de renovação (Long-lived refresh token)
        token_type: Sempre "bearer"
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    """Troca de refresh token por um novo par."""

    refresh_token: str


class UserMeResponse(BaseModel):
    """Usuário autenticado (GET /api/auth/me).

    Attributes:
        id: UUID do usuário
        username: Login
        full_name: Nome completo
        email: E-mail (nullable)
        is_active: Conta ativa
        roles: Nomes dos papéis atribuídos
        permissions: Permissões efetivas no formato "action:resource"
    """

    id: str
    username: str
    full_name: str
    email: str | None
    is_active: bool
    roles: list[str] = []
    permissions: list[str] = []
