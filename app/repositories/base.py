"""Repositório CRUD base — classe pai dos repositórios.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic Create, Read, Update, Delete operations.

Usage:
    class RoleRepository(BaseRepository[Role]):
        def __init__(self) -> None:
            super().__init__(Role)
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# Tipo genérico representando um modelo SQLAlchemy
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Repositório CRUD genérico.

    Generic CRUD repository providing common database operations.
    Repositories only flush; committing is the router's job.

    Attributes:
        model: Classe do modelo SQLAlchemy (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> ModelType | None:
        """Busca um registro pelo UUID.

        Args:
            db: Sessão assíncrona (Async database session)
            record_id: UUID do registro (UUID of the record to retrieve)

        Returns:
            ModelType | None: Registro encontrado ou None
        """
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """Cria um registro e o recarrega após o flush."""
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """Atualiza os campos informados de um registro.

        Args:
            db: Sessão assíncrona (Async database session)
            record_id: UUID do registro (UUID of the record to update)
            update_data: Campos e valores (Fields passed via exclude_unset)

        Returns:
            ModelType | None: Registro atualizado ou None se inexistente
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> bool:
        """Remove um registro; retorna False se não existir."""
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return False

        await db.delete(db_obj)
        await db.flush()
        return True
