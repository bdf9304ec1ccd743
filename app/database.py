"""Engine e sessão do banco de dados.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    """Opções do engine conforme o driver.

    Pool sizing and prepared-statement settings only apply to asyncpg;
    SQLite URLs (local runs, tests) get the driver defaults.
    """
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        # Desativa cache de prepared statements para poolers em modo transação
        "connect_args": {"statement_cache_size": 0},
    }


# Engine assíncrono — Async database engine
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)

# Fábrica de sessões; expire_on_commit=False mantém atributos após commit
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Classe base declarativa do SQLAlchemy.

    Declarative base class for all ORM models.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Abre uma sessão assíncrona e a fecha ao fim da requisição.

    FastAPI dependency that yields an async database session.
    The session is closed after the request completes.

    Yields:
        AsyncSession: Sessão assíncrona (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
