"""Repositório de papéis — CRUD e verificação de nome duplicado.

Role Repository — CRUD and duplicate-name queries for roles.
"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.permission import RolePermission
from app.models.user import Role, UserRole
from app.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Consultas da tabela roles.

    Repository handling database queries for the roles table.
    """

    def __init__(self) -> None:
        super().__init__(Role)

    async def list_all(self, db: AsyncSession) -> list[Role]:
        """Todos os papéis, ordenados por nome."""
        result = await db.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    async def get_by_name(self, db: AsyncSession, name: str) -> Role | None:
        result = await db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def check_duplicate_name(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """Verifica se outro papel já usa este nome."""
        role: Role | None = await self.get_by_name(db, name)
        return role is not None and role.id != exclude_id

    async def delete_with_links(self, db: AsyncSession, role_id: UUID) -> bool:
        """Remove o papel e, antes, seus vínculos de permissões e usuários.

        Delete a role after removing its role_permissions and user_roles rows.

        Returns:
            bool: False se o papel não existir (False when the role is missing)
        """
        await db.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        await db.execute(delete(UserRole).where(UserRole.role_id == role_id))
        return await self.delete(db, role_id)


# Instância singleton — Singleton instance
role_repository: RoleRepository = RoleRepository()
