"""Infraestrutura de testes — SQLite em memória, sessão e cliente httpx.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Each test gets a fresh engine with the schema created from the ORM metadata,
the seeded permission catalog and system roles.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models import Permission, Role, RolePermission, User, UserRole
from app.seed import seed_permissions, seed_roles
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Function-scoped: engine, sessão, cliente
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Engine em memória; StaticPool mantém uma única conexão viva."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente de teste — get_db devolve a sessão do teste."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Dados: catálogo, papéis e usuários
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def catalog(db: AsyncSession) -> dict[tuple[str, str], Permission]:
    """Catálogo completo de permissões do seed."""
    return await seed_permissions(db)


@pytest_asyncio.fixture
async def system_roles(db: AsyncSession, catalog) -> dict[str, Role]:
    """Os 13 papéis do sistema com suas permissões."""
    roles = await seed_roles(db, catalog)
    await db.commit()
    return roles


@pytest_asyncio.fixture
async def viewer_role(db: AsyncSession, catalog) -> Role:
    """Papel customizado só de leitura de papéis e permissões."""
    role = Role(name="visualizador", description="Apenas visualiza papéis", scope="global")
    db.add(role)
    await db.flush()
    for pair in [("roles", "read"), ("permissions", "read")]:
        db.add(RolePermission(role_id=role.id, permission_id=catalog[pair].id))
    await db.commit()
    return role


@pytest_asyncio.fixture
async def custom_role(db: AsyncSession, catalog) -> Role:
    """Papel customizado de instituição, sem permissões."""
    role = Role(
        name="coordenador_curso",
        description="Coordena os cursos da instituição",
        scope="institution",
    )
    db.add(role)
    await db.commit()
    return role


async def _make_user(db: AsyncSession, username: str, roles: list[Role]) -> User:
    user = User(
        username=username,
        full_name=f"Usuário {username}",
        email=f"{username}@teste.com",
        password_hash=hash_password(f"{username}123!"),
    )
    db.add(user)
    await db.flush()
    for role in roles:
        db.add(UserRole(user_id=user.id, role_id=role.id))
    await db.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, system_roles) -> User:
    """Usuário com o papel super_admin."""
    return await _make_user(db, "admin", [system_roles["super_admin"]])


@pytest_asyncio.fixture
async def viewer_user(db: AsyncSession, viewer_role) -> User:
    return await _make_user(db, "viewer", [viewer_role])


@pytest_asyncio.fixture
async def outsider_user(db: AsyncSession, catalog) -> User:
    """Usuário sem nenhum papel."""
    return await _make_user(db, "outsider", [])


def make_token(user: User) -> str:
    """Access token JWT de teste."""
    return create_access_token({"sub": str(user.id), "username": user.username})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def viewer_token(viewer_user) -> str:
    return make_token(viewer_user)


@pytest.fixture
def outsider_token(outsider_user) -> str:
    return make_token(outsider_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
