"""Schemas Pydantic de permissões.

Permission catalog and role-permission schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from app.schemas.role import EmptyState, RoleResponse


class PermissionResponse(BaseModel):
    """Permissão do catálogo.

    Attributes:
        id: UUID da permissão (Permission identifier)
        resource: Recurso (e.g. "courses")
        action: Ação (e.g. "create")
        name: Nome derivado "action:resource"
        description: Descrição (nullable)
    """

    id: str
    resource: str
    action: str
    name: str
    description: str | None


class RolePermissionResponse(BaseModel):
    """Vínculo papel-permissão expandido com a permissão.

    Role-permission link expanded with its permission fields.
    """

    id: str  # UUID do vínculo (Link identifier)
    role_id: str
    permission_id: str
    resource: str
    action: str
    name: str  # "action:resource"
    description: str | None
    created_at: datetime


class GrantPermissionRequest(BaseModel):
    """Requisição para vincular uma permissão a um papel."""

    permission_id: UUID  # Permissão do catálogo (Catalog permission)


class RoleDetailResponse(BaseModel):
    """Detalhe de papel — papel, permissões agrupadas e disponíveis.

    Role detail view: the role, its permissions grouped by resource,
    the catalog entries still available to add, and an empty state
    when the role has no permissions.
    """

    role: RoleResponse
    permissions: dict[str, list[RolePermissionResponse]]  # Agrupadas por recurso (Grouped by resource)
    available_permissions: list[PermissionResponse]
    empty_state: EmptyState | None = None


class PermissionCheckResponse(BaseModel):
    """Resultado de /me/check-permission."""

    has_permission: bool
