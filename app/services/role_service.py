"""Serviço de papéis — CRUD e dados de exibição.

Role Service — Business logic for role CRUD operations.
Handles creation, retrieval, update and deletion of roles with
duplicate-name validation, system-role immutability, and the view data
(badges, controls, empty state) returned with each role.
"""

from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditAction
from app.models.user import Role, RoleScope
from app.repositories.role_repository import role_repository
from app.schemas.permission import PermissionResponse, RoleDetailResponse
from app.schemas.role import EmptyState, RoleControls, RoleCreate, RoleResponse, RoleUpdate
from app.services.audit_service import audit_service
from app.utils.authorization import PermissionGuard
from app.utils.badges import kind_badge, scope_badge
from app.utils.exceptions import DuplicateError, ForbiddenError, NotFoundError

EMPTY_PERMISSIONS_MESSAGE: str = "Este papel ainda não possui permissões"


def filter_roles(roles: list[Role], search: str | None) -> list[Role]:
    """Filtra papéis por substring, sem diferenciar maiúsculas.

    Case-insensitive substring filter over name, description and scope.
    An empty or blank search returns every role.

    Args:
        roles: Papéis a filtrar (Roles to filter)
        search: Termo de busca (Search term)

    Returns:
        list[Role]: Papéis que contêm o termo (Matching roles, order kept)
    """
    term: str = (search or "").strip().lower()
    if not term:
        return list(roles)
    return [
        r for r in roles
        if term in r.name.lower()
        or term in (r.description or "").lower()
        or term in r.scope.lower()
    ]


def build_controls(role: Role, guard: PermissionGuard) -> RoleControls:
    """Controles visíveis para o papel; papéis do sistema não têm nenhum."""
    if role.is_system:
        return RoleControls()
    return RoleControls(
        can_edit=guard.render("roles", "update", True, fallback=False),
        can_delete=guard.render("roles", "delete", True, fallback=False),
        can_manage_permissions=guard.render("roles", "update", True, fallback=False),
    )


class RoleService:
    """Regras de negócio de papéis.

    Service handling role business logic. System roles can be read but
    never updated or deleted.
    """

    def _to_response(self, role: Role, guard: PermissionGuard) -> RoleResponse:
        """Converte o modelo em resposta com selos e controles.

        Convert a Role model instance to a RoleResponse with view data.

        Args:
            role: Modelo do papel (Role model instance)
            guard: Permissões do usuário atual (Current user's permission guard)

        Returns:
            RoleResponse: Resposta do papel (Role response)
        """
        return RoleResponse(
            id=str(role.id),
            name=role.name,
            description=role.description,
            scope=RoleScope(role.scope),
            is_system=role.is_system,
            institution_id=str(role.institution_id) if role.institution_id else None,
            created_at=role.created_at,
            updated_at=role.updated_at,
            scope_badge=scope_badge(role.scope),
            kind_badge=kind_badge(role.is_system),
            controls=build_controls(role, guard),
        )

    async def get_role_or_404(self, db: AsyncSession, role_id: UUID) -> Role:
        role: Role | None = await role_repository.get_by_id(db, role_id)
        if role is None:
            raise NotFoundError("Papel não encontrado")
        return role

    def _ensure_mutable(self, role: Role, message: str) -> None:
        if role.is_system:
            raise ForbiddenError(message)

    async def list_roles(
        self,
        db: AsyncSession,
        guard: PermissionGuard,
        search: str | None = None,
    ) -> list[RoleResponse]:
        """Lista papéis ordenados por nome, com filtro opcional.

        Args:
            db: Sessão assíncrona (Async database session)
            guard: Permissões do usuário atual (Current user's permission guard)
            search: Termo de busca sobre nome, descrição e abrangência

        Returns:
            list[RoleResponse]: Papéis (Role responses)
        """
        roles: list[Role] = await role_repository.list_all(db)
        return [self._to_response(r, guard) for r in filter_roles(roles, search)]

    async def get_role(self, db: AsyncSession, role_id: UUID, guard: PermissionGuard) -> RoleResponse:
        role: Role = await self.get_role_or_404(db, role_id)
        return self._to_response(role, guard)

    async def create_role(
        self,
        db: AsyncSession,
        data: RoleCreate,
        actor_id: UUID,
        guard: PermissionGuard,
        request: Request | None = None,
    ) -> RoleResponse:
        """Cria um papel customizado.

        Create a custom (non-system) role.

        Raises:
            DuplicateError: Nome já usado por outro papel (Name already taken)
        """
        if await role_repository.check_duplicate_name(db, data.name):
            raise DuplicateError("Já existe um papel com este nome")

        role: Role = await role_repository.create(
            db,
            {
                "name": data.name,
                "description": data.description,
                "scope": data.scope.value,
                "is_system": False,
                "created_by_id": actor_id,
            },
        )
        await audit_service.record(
            db,
            actor_id,
            AuditAction.MODIFY_ROLE,
            f"roles/{role.id}",
            {"operation": "create", "name": role.name, "scope": role.scope},
            request,
        )
        return self._to_response(role, guard)

    async def update_role(
        self,
        db: AsyncSession,
        role_id: UUID,
        data: RoleUpdate,
        actor_id: UUID,
        guard: PermissionGuard,
        request: Request | None = None,
    ) -> RoleResponse:
        """Atualiza um papel customizado.

        Raises:
            NotFoundError: Papel inexistente (Role not found)
            ForbiddenError: Papel do sistema (System role)
            DuplicateError: Novo nome já usado (New name already taken)
        """
        role: Role = await self.get_role_or_404(db, role_id)
        self._ensure_mutable(role, "Papéis do sistema não podem ser alterados")

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "scope" in update_data:
            update_data["scope"] = RoleScope(update_data["scope"]).value

        new_name: str | None = update_data.get("name")
        if new_name is not None and await role_repository.check_duplicate_name(db, new_name, exclude_id=role_id):
            raise DuplicateError("Já existe um papel com este nome")

        updated: Role | None = await role_repository.update(db, role_id, update_data)
        if updated is None:
            raise NotFoundError("Papel não encontrado")

        await audit_service.record(
            db,
            actor_id,
            AuditAction.MODIFY_ROLE,
            f"roles/{role_id}",
            {"operation": "update", "changes": update_data},
            request,
        )
        return self._to_response(updated, guard)

    async def delete_role(
        self,
        db: AsyncSession,
        role_id: UUID,
        actor_id: UUID,
        request: Request | None = None,
    ) -> None:
        """Remove um papel customizado junto com seus vínculos.

        Raises:
            NotFoundError: Papel inexistente (Role not found)
            ForbiddenError: Papel do sistema (System role)
        """
        role: Role = await self.get_role_or_404(db, role_id)
        self._ensure_mutable(role, "Papéis do sistema não podem ser removidos")
        name: str = role.name

        await role_repository.delete_with_links(db, role_id)
        await audit_service.record(
            db,
            actor_id,
            AuditAction.MODIFY_ROLE,
            f"roles/{role_id}",
            {"operation": "delete", "name": name},
            request,
        )

    async def get_role_detail(
        self,
        db: AsyncSession,
        role_id: UUID,
        guard: PermissionGuard,
    ) -> RoleDetailResponse:
        """Detalhe do papel: permissões agrupadas, disponíveis e estado vazio.

        Role detail view. When the role has no permissions, empty_state is
        set, with the add shortcut shown only if the caller may manage the
        role's permissions.
        """
        # Import local: permission_service importa role_service
        from app.services.permission_service import group_by_resource, permission_service

        role: Role = await self.get_role_or_404(db, role_id)
        response: RoleResponse = self._to_response(role, guard)

        linked = await permission_service.list_role_permissions(db, role_id)
        available: list[PermissionResponse] = await permission_service.list_available_permissions(db, role_id)

        empty_state: EmptyState | None = None
        if not linked:
            empty_state = EmptyState(
                message=EMPTY_PERMISSIONS_MESSAGE,
                show_add_shortcut=response.controls.can_manage_permissions,
            )

        return RoleDetailResponse(
            role=response,
            permissions=group_by_resource(linked),
            available_permissions=available,
            empty_state=empty_state,
        )


role_service: RoleService = RoleService()
