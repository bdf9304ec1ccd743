"""Repositório de usuários e atribuições de papéis.

User Repository — user lookups and user_roles assignments.
"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Role, User, UserRole
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Consultas das tabelas users / user_roles."""

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_username(self, db: AsyncSession, username: str) -> User | None:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_roles(self, db: AsyncSession, user_id: UUID) -> list[tuple[UserRole, Role]]:
        """Atribuições do usuário com os papéis correspondentes, por nome do papel."""
        result = await db.execute(
            select(UserRole, Role)
            .join(Role, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        return [(assignment, role) for assignment, role in result.all()]

    async def get_role_names(self, db: AsyncSession, user_id: UUID) -> set[str]:
        """Nomes dos papéis atribuídos ao usuário."""
        result = await db.execute(
            select(Role.name).join(UserRole, UserRole.role_id == Role.id).where(UserRole.user_id == user_id)
        )
        return set(result.scalars().all())

    async def find_assignment(
        self,
        db: AsyncSession,
        user_id: UUID,
        role_id: UUID,
        institution_id: UUID | None,
        polo_id: UUID | None,
    ) -> UserRole | None:
        """Busca a atribuição exata (usuário, papel, instituição, polo)."""
        query = select(UserRole).where(
            UserRole.user_id == user_id,
            UserRole.role_id == role_id,
            UserRole.institution_id.is_(None) if institution_id is None else UserRole.institution_id == institution_id,
            UserRole.polo_id.is_(None) if polo_id is None else UserRole.polo_id == polo_id,
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def create_assignment(
        self,
        db: AsyncSession,
        user_id: UUID,
        role_id: UUID,
        institution_id: UUID | None = None,
        polo_id: UUID | None = None,
        created_by_id: UUID | None = None,
    ) -> UserRole:
        assignment = UserRole(
            user_id=user_id,
            role_id=role_id,
            institution_id=institution_id,
            polo_id=polo_id,
            created_by_id=created_by_id,
        )
        db.add(assignment)
        await db.flush()
        await db.refresh(assignment)
        return assignment

    async def delete_assignments(
        self,
        db: AsyncSession,
        user_id: UUID,
        role_id: UUID,
        institution_id: UUID | None = None,
        polo_id: UUID | None = None,
    ) -> int:
        """Remove atribuições do papel; instituição/polo restringem quando informados.

        Returns:
            int: Quantidade de linhas removidas (Number of rows removed)
        """
        stmt = delete(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        if institution_id is not None:
            stmt = stmt.where(UserRole.institution_id == institution_id)
        if polo_id is not None:
            stmt = stmt.where(UserRole.polo_id == polo_id)
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0


# Instância singleton
user_repository: UserRepository = UserRepository()
