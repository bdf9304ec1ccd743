"""Serviço de permissões — catálogo e vínculos papel-permissão.

Permission Service — catalog listing, role-permission links, and the
effective permission set of a user.
"""

from collections.abc import Iterable
from typing import Protocol, TypeVar
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditAction
from app.models.permission import Permission, RolePermission
from app.models.user import Role
from app.repositories.permission_repository import permission_repository
from app.repositories.user_repository import user_repository
from app.schemas.common import AckResponse
from app.schemas.permission import PermissionResponse, RolePermissionResponse
from app.services.audit_service import audit_service
from app.services.role_service import role_service
from app.utils.authorization import SUPER_ADMIN_ROLE, PermissionGuard, PermissionPair
from app.utils.exceptions import ForbiddenError, NotFoundError


class _HasResource(Protocol):
    resource: str


R = TypeVar("R", bound=_HasResource)


def group_by_resource(items: Iterable[R]) -> dict[str, list[R]]:
    """Agrupa por recurso, mantendo a ordem de chegada.

    Group items by their resource field. Keys follow first appearance,
    so a list sorted by (resource, action) yields sorted groups.
    """
    grouped: dict[str, list[R]] = {}
    for item in items:
        grouped.setdefault(item.resource, []).append(item)
    return grouped


class PermissionService:
    """Regras de negócio do catálogo e dos vínculos papel-permissão."""

    def _to_response(self, permission: Permission) -> PermissionResponse:
        return PermissionResponse(
            id=str(permission.id),
            resource=permission.resource,
            action=permission.action,
            name=permission.name,
            description=permission.description,
        )

    def _link_to_response(self, link: RolePermission, permission: Permission) -> RolePermissionResponse:
        return RolePermissionResponse(
            id=str(link.id),
            role_id=str(link.role_id),
            permission_id=str(permission.id),
            resource=permission.resource,
            action=permission.action,
            name=permission.name,
            description=permission.description,
            created_at=link.created_at,
        )

    async def list_permissions(self, db: AsyncSession) -> list[PermissionResponse]:
        """Catálogo completo ordenado por (resource, action)."""
        permissions: list[Permission] = await permission_repository.get_all_permissions(db)
        return [self._to_response(p) for p in permissions]

    async def list_permissions_grouped(self, db: AsyncSession) -> dict[str, list[PermissionResponse]]:
        return group_by_resource(await self.list_permissions(db))

    async def list_role_permissions(self, db: AsyncSession, role_id: UUID) -> list[RolePermissionResponse]:
        """Permissões vinculadas ao papel.

        Raises:
            NotFoundError: Papel inexistente (Role not found)
        """
        await role_service.get_role_or_404(db, role_id)
        links = await permission_repository.get_role_links(db, role_id)
        return [self._link_to_response(link, perm) for link, perm in links]

    async def list_role_permissions_grouped(
        self, db: AsyncSession, role_id: UUID
    ) -> dict[str, list[RolePermissionResponse]]:
        return group_by_resource(await self.list_role_permissions(db, role_id))

    async def list_available_permissions(self, db: AsyncSession, role_id: UUID) -> list[PermissionResponse]:
        """Catálogo menos as permissões já vinculadas ao papel.

        Catalog permissions not yet linked to the role, in catalog order.
        """
        await role_service.get_role_or_404(db, role_id)
        linked: set[UUID] = await permission_repository.get_linked_permission_ids(db, role_id)
        catalog: list[Permission] = await permission_repository.get_all_permissions(db)
        return [self._to_response(p) for p in catalog if p.id not in linked]

    async def grant_permission(
        self,
        db: AsyncSession,
        role_id: UUID,
        permission_id: UUID,
        actor_id: UUID,
        request: Request | None = None,
    ) -> AckResponse:
        """Vincula uma permissão ao papel; repetir o vínculo não duplica a linha.

        Args:
            db: Sessão assíncrona (Async database session)
            role_id: Papel alvo (Target role)
            permission_id: Permissão do catálogo (Catalog permission)
            actor_id: Usuário que concede (Granting user)
            request: Requisição de origem (Source request, for the audit row)

        Returns:
            AckResponse: Confirmação (Acknowledgement)

        Raises:
            NotFoundError: Papel ou permissão inexistente (Role or permission not found)
            ForbiddenError: Papel do sistema (System role)
        """
        role: Role = await role_service.get_role_or_404(db, role_id)
        if role.is_system:
            raise ForbiddenError("Permissões de papéis do sistema não podem ser alteradas")

        permission: Permission | None = await permission_repository.get_by_id(db, permission_id)
        if permission is None:
            raise NotFoundError("Permissão não encontrada")

        existing: RolePermission | None = await permission_repository.get_link(db, role_id, permission_id)
        if existing is not None:
            return AckResponse(message="Permissão já vinculada ao papel")

        await permission_repository.add_link(db, role_id, permission_id, created_by_id=actor_id)
        await audit_service.record(
            db,
            actor_id,
            AuditAction.GRANT,
            f"roles/{role_id}/permissions/{permission_id}",
            {"role": role.name, "permission": permission.name},
            request,
        )
        return AckResponse(message="Permissão adicionada ao papel")

    async def revoke_permission(
        self,
        db: AsyncSession,
        role_id: UUID,
        permission_id: UUID,
        actor_id: UUID,
        request: Request | None = None,
    ) -> AckResponse:
        """Remove o vínculo papel-permissão; vínculo ausente é um no-op.

        Raises:
            NotFoundError: Papel inexistente (Role not found)
            ForbiddenError: Papel do sistema (System role)
        """
        role: Role = await role_service.get_role_or_404(db, role_id)
        if role.is_system:
            raise ForbiddenError("Permissões de papéis do sistema não podem ser alteradas")

        removed: bool = await permission_repository.remove_link(db, role_id, permission_id)
        if not removed:
            return AckResponse(message="Permissão não estava vinculada ao papel")

        permission: Permission | None = await permission_repository.get_by_id(db, permission_id)
        await audit_service.record(
            db,
            actor_id,
            AuditAction.REVOKE,
            f"roles/{role_id}/permissions/{permission_id}",
            {"role": role.name, "permission": permission.name if permission else None},
            request,
        )
        return AckResponse(message="Permissão removida do papel")

    async def get_user_guard(self, db: AsyncSession, user_id: UUID) -> PermissionGuard:
        """Guard com as permissões efetivas do usuário.

        Union of role permissions and unexpired direct grants. A user
        holding super_admin gets an unrestricted guard.
        """
        pairs: set[PermissionPair] = await permission_repository.get_user_permission_pairs(db, user_id)
        role_names: set[str] = await user_repository.get_role_names(db, user_id)
        return PermissionGuard(pairs, unrestricted=SUPER_ADMIN_ROLE in role_names)


permission_service: PermissionService = PermissionService()
