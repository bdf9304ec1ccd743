"""Repositório de permissões diretas de usuários.

User Permission Repository — direct grants of catalog permissions to users.
"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.permission import Permission, UserPermission
from app.repositories.base import BaseRepository


class UserPermissionRepository(BaseRepository[UserPermission]):
    """Consultas da tabela user_permissions."""

    def __init__(self) -> None:
        super().__init__(UserPermission)

    async def get_user_grants(self, db: AsyncSession, user_id: UUID) -> list[tuple[UserPermission, Permission]]:
        """Concessões do usuário com a permissão, ordenadas por (resource, action)."""
        result = await db.execute(
            select(UserPermission, Permission)
            .join(Permission, UserPermission.permission_id == Permission.id)
            .where(UserPermission.user_id == user_id)
            .order_by(Permission.resource, Permission.action, UserPermission.created_at)
        )
        return [(grant, perm) for grant, perm in result.all()]

    async def find_grant(
        self,
        db: AsyncSession,
        user_id: UUID,
        permission_id: UUID,
        institution_id: UUID | None,
        polo_id: UUID | None,
    ) -> UserPermission | None:
        """Busca a concessão exata (usuário, permissão, instituição, polo)."""
        query = select(UserPermission).where(
            UserPermission.user_id == user_id,
            UserPermission.permission_id == permission_id,
            UserPermission.institution_id.is_(None) if institution_id is None else UserPermission.institution_id == institution_id,
            UserPermission.polo_id.is_(None) if polo_id is None else UserPermission.polo_id == polo_id,
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def delete_grants(
        self,
        db: AsyncSession,
        user_id: UUID,
        permission_id: UUID,
        institution_id: UUID | None = None,
        polo_id: UUID | None = None,
    ) -> int:
        """Remove concessões da permissão; instituição/polo restringem quando informados.

        Returns:
            int: Quantidade de linhas removidas (Number of rows removed)
        """
        stmt = delete(UserPermission).where(
            UserPermission.user_id == user_id,
            UserPermission.permission_id == permission_id,
        )
        if institution_id is not None:
            stmt = stmt.where(UserPermission.institution_id == institution_id)
        if polo_id is not None:
            stmt = stmt.where(UserPermission.polo_id == polo_id)
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0


# Instância singleton
user_permission_repository: UserPermissionRepository = UserPermissionRepository()
