"""Repositório de permissões — catálogo e vínculos papel-permissão.

Permission Repository — catalog lookups and role-permission links.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.permission import Permission, RolePermission, UserPermission
from app.models.user import UserRole
from app.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    """Consultas das tabelas permissions / role_permissions."""

    def __init__(self) -> None:
        super().__init__(Permission)

    async def get_all_permissions(self, db: AsyncSession) -> list[Permission]:
        """Catálogo completo de permissões ativas, ordenado por (resource, action)."""
        result = await db.execute(
            select(Permission)
            .where(Permission.is_active.is_(True))
            .order_by(Permission.resource, Permission.action)
        )
        return list(result.scalars().all())

    async def get_role_links(
        self, db: AsyncSession, role_id: UUID
    ) -> list[tuple[RolePermission, Permission]]:
        """Vínculos do papel com suas permissões, ordenados por (resource, action)."""
        result = await db.execute(
            select(RolePermission, Permission)
            .join(Permission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.resource, Permission.action)
        )
        return [(link, perm) for link, perm in result.all()]

    async def get_linked_permission_ids(self, db: AsyncSession, role_id: UUID) -> set[UUID]:
        result = await db.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        return {row[0] for row in result.all()}

    async def get_link(
        self, db: AsyncSession, role_id: UUID, permission_id: UUID
    ) -> RolePermission | None:
        result = await db.execute(
            select(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_link(
        self,
        db: AsyncSession,
        role_id: UUID,
        permission_id: UUID,
        created_by_id: UUID | None = None,
    ) -> RolePermission:
        link = RolePermission(role_id=role_id, permission_id=permission_id, created_by_id=created_by_id)
        db.add(link)
        await db.flush()
        return link

    async def remove_link(self, db: AsyncSession, role_id: UUID, permission_id: UUID) -> bool:
        """Remove o vínculo; retorna False quando ele não existia."""
        result = await db.execute(
            delete(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        await db.flush()
        return (result.rowcount or 0) > 0

    async def get_user_permission_pairs(self, db: AsyncSession, user_id: UUID) -> set[tuple[str, str]]:
        """Conjunto (resource, action) efetivo do usuário.

        Union of the permissions of every assigned role and of the user's
        direct grants that have not expired.
        """
        from_roles = await db.execute(
            select(Permission.resource, Permission.action)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(UserRole.user_id == user_id, Permission.is_active.is_(True))
            .distinct()
        )
        direct = await db.execute(
            select(Permission.resource, Permission.action)
            .join(UserPermission, UserPermission.permission_id == Permission.id)
            .where(
                UserPermission.user_id == user_id,
                Permission.is_active.is_(True),
                or_(
                    UserPermission.expires_at.is_(None),
                    UserPermission.expires_at > datetime.now(timezone.utc),
                ),
            )
            .distinct()
        )
        return {(resource, action) for resource, action in [*from_roles.all(), *direct.all()]}


# Instância singleton
permission_repository: PermissionRepository = PermissionRepository()
