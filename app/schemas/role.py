"""Schemas Pydantic de papéis (roles).

Role request/response schema definitions, including the view data
(badges, controls, empty state) clients render next to each role.
"""

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.models.user import RoleScope

# Tamanhos mínimos do formulário de papel (Role form minimum lengths)
ROLE_NAME_MIN_LENGTH: int = 3
ROLE_DESCRIPTION_MIN_LENGTH: int = 5


def _check_min_length(value: str, minimum: int, message: str) -> str:
    value = value.strip()
    if len(value) < minimum:
        raise ValueError(message)
    return value


class RoleCreate(BaseModel):
    """Requisição de criação de papel.

    Role creation request schema. Roles created through the API are
    never system roles.

    Attributes:
        name: Nome do papel, mínimo 3 caracteres (Role name)
        description: Descrição, mínimo 5 caracteres (Role description)
        scope: Abrangência (One of global / institution / polo)
    """

    name: str  # Nome do papel (Role name, >= 3 chars)
    description: str  # Descrição (Description, >= 5 chars)
    scope: RoleScope  # Abrangência — "global"|"institution"|"polo"

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _check_min_length(
            value, ROLE_NAME_MIN_LENGTH, "O nome deve ter pelo menos 3 caracteres"
        )

    @field_validator("description")
    @classmethod
    def _validate_description(cls, value: str) -> str:
        return _check_min_length(
            value, ROLE_DESCRIPTION_MIN_LENGTH, "A descrição deve ter pelo menos 5 caracteres"
        )


class RoleUpdate(BaseModel):
    """Requisição de atualização parcial de papel.

    Role update request schema (partial update).
    """

    name: str | None = None
    description: str | None = None
    scope: RoleScope | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _check_min_length(
            value, ROLE_NAME_MIN_LENGTH, "O nome deve ter pelo menos 3 caracteres"
        )

    @field_validator("description")
    @classmethod
    def _validate_description(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _check_min_length(
            value, ROLE_DESCRIPTION_MIN_LENGTH, "A descrição deve ter pelo menos 5 caracteres"
        )


class Badge(BaseModel):
    """Selo exibido ao lado do papel (Display badge)."""

    label: str  # Texto do selo (e.g. "Instituição")
    color: str  # Cor do selo (e.g. "blue")


class RoleControls(BaseModel):
    """Ações disponíveis ao usuário atual para este papel.

    Which role controls the current user may see. All three are False
    for system roles regardless of the user's permissions.
    """

    can_edit: bool = False
    can_delete: bool = False
    can_manage_permissions: bool = False


class RoleResponse(BaseModel):
    """Resposta de papel.

    Role response schema returned from API, with badges and controls.

    Attributes:
        id: UUID do papel (Role identifier)
        name: Nome (Role name)
        description: Descrição (Role description)
        scope: Abrangência (Role scope)
        is_system: Papel do sistema (System role flag)
        institution_id: Instituição dona (Owning institution, nullable)
        created_at: Data de criação (Creation timestamp)
        updated_at: Data de atualização (Last update timestamp)
        scope_badge: Selo de abrangência (Scope badge)
        kind_badge: Selo "Sistema"/"Customizado" (System/custom badge)
        controls: Ações disponíveis (Available controls)
    """

    id: str
    name: str
    description: str
    scope: RoleScope
    is_system: bool
    institution_id: str | None = None
    created_at: datetime
    updated_at: datetime
    scope_badge: Badge
    kind_badge: Badge
    controls: RoleControls


class EmptyState(BaseModel):
    """Estado vazio de um papel sem permissões.

    Attributes:
        message: Mensagem exibida (Displayed message)
        show_add_shortcut: Exibir atalho "adicionar permissão"
    """

    message: str
    show_add_shortcut: bool = False
