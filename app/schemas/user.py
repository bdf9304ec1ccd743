"""Schemas Pydantic de papéis e permissões diretas de usuários.

User-role assignment and direct user grant request/response schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from app.models.user import RoleScope


class UserRoleAssign(BaseModel):
    """Requisição de atribuição de papel.

    Institution-scoped roles require institution_id; polo-scoped roles
    require polo_id.
    """

    role_id: UUID
    institution_id: UUID | None = None
    polo_id: UUID | None = None


class UserRoleResponse(BaseModel):
    """Atribuição de papel de um usuário, com dados do papel."""

    id: str
    user_id: str
    role_id: str
    role_name: str
    role_description: str
    role_scope: RoleScope
    institution_id: str | None
    polo_id: str | None
    created_at: datetime


class UserPermissionGrant(BaseModel):
    """Requisição de concessão direta de permissão.

    expires_at, when given, must be in the future; a naive datetime is
    taken as UTC.
    """

    permission_id: UUID
    institution_id: UUID | None = None
    polo_id: UUID | None = None
    expires_at: datetime | None = None


class UserPermissionResponse(BaseModel):
    """Permissão direta do usuário, com dados da permissão."""

    id: str
    user_id: str
    permission_id: str
    resource: str
    action: str
    name: str  # "action:resource"
    description: str | None
    institution_id: str | None
    polo_id: str | None
    expires_at: datetime | None
    expired: bool
    created_at: datetime
