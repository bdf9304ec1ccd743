"""Script de seed — catálogo de permissões, papéis do sistema e super_admin.

Seed script — Creates the permission catalog, the system roles with
their permission sets, and the initial super_admin account.

Usage:
    python -m app.seed

Creates:
    - Catálogo: todas as permissões (resource, action) usadas pelos papéis
    - 13 papéis do sistema (is_system=True), abrangência derivada do nome
    - 1 conta super_admin: SEED_ADMIN_USERNAME / SEED_ADMIN_PASSWORD

Idempotent: linhas existentes são mantidas (Existing rows are kept).
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import Base, async_session, engine
from app.models import Permission, Role, RolePermission, RoleScope, User, UserRole
from app.repositories.role_repository import role_repository
from app.utils.password import hash_password

logger = logging.getLogger(__name__)

CRUD: tuple[str, ...] = ("create", "read", "update", "delete", "manage", "export")

ROLE_DESCRIPTIONS: dict[str, str] = {
    # Globais
    "super_admin": "Acesso total ao sistema",
    "admin": "Administrador do sistema",
    # Instituição
    "institution_admin": "Administrador da instituição",
    "institution_manager": "Gerente da instituição",
    "institution_teacher": "Professor da instituição",
    "institution_staff": "Funcionário administrativo da instituição",
    "institution_financial": "Responsável financeiro da instituição",
    # Polo
    "polo_admin": "Administrador do polo",
    "polo_manager": "Gerente do polo",
    "polo_staff": "Funcionário administrativo do polo",
    "polo_financial": "Responsável financeiro do polo",
    # Outros
    "student": "Estudante",
    "guest": "Usuário convidado",
}

# Papéis sem entrada aqui são criados sem permissões
ROLE_PERMISSIONS: dict[str, dict[str, tuple[str, ...]]] = {
    "super_admin": {
        "users": CRUD,
        "institutions": CRUD,
        "polos": CRUD,
        "roles": ("create", "read", "update", "delete", "manage"),
        "permissions": ("create", "read", "update", "delete", "manage"),
        "courses": CRUD,
        "disciplines": CRUD,
        "enrollments": CRUD,
        "assessments": CRUD,
        "questions": CRUD,
        "financial_transactions": CRUD,
        "financial_categories": CRUD,
        "leads": CRUD,
        "clients": CRUD,
        "contacts": CRUD,
        "certificates": CRUD,
        "certificate_templates": CRUD,
        "certificate_signers": CRUD,
        "products": CRUD,
        "invoices": CRUD,
        "payments": CRUD,
        "contracts": CRUD,
        "contract_templates": CRUD,
        "reports": ("create", "read", "manage", "export"),
        "dashboard": ("read",),
        "settings": ("read", "update", "manage"),
        "integrations": ("create", "read", "update", "delete", "manage"),
    },
    "admin": {
        "users": ("create", "read", "update", "export"),
        "institutions": ("read", "update", "export"),
        "polos": ("read", "update", "export"),
        "roles": ("read",),
        "permissions": ("read",),
        "courses": ("create", "read", "update", "export"),
        "disciplines": ("create", "read", "update", "export"),
        "enrollments": ("create", "read", "update", "export"),
        "assessments": ("create", "read", "update", "export"),
        "questions": ("create", "read", "update", "export"),
        "financial_transactions": ("read", "export"),
        "financial_categories": ("read",),
        "certificates": ("create", "read", "export"),
        "certificate_templates": ("read",),
        "certificate_signers": ("read",),
        "reports": ("read", "export"),
        "dashboard": ("read",),
        "settings": ("read",),
    },
    "institution_admin": {
        "users": ("create", "read", "update", "export"),
        "polos": ("create", "read", "update", "export"),
        "roles": ("read",),
        "courses": ("create", "read", "update", "manage", "export"),
        "disciplines": ("create", "read", "update", "manage", "export"),
        "enrollments": ("create", "read", "update", "manage", "export"),
        "assessments": ("create", "read", "update", "manage", "export"),
        "questions": ("create", "read", "update", "manage", "export"),
        "financial_transactions": ("create", "read", "update", "export"),
        "financial_categories": ("create", "read", "update", "export"),
        "leads": ("create", "read", "update", "manage", "export"),
        "clients": ("create", "read", "update", "manage", "export"),
        "contacts": ("create", "read", "update", "manage", "export"),
        "certificates": ("create", "read", "update", "manage", "export"),
        "certificate_templates": ("create", "read", "update", "export"),
        "certificate_signers": ("create", "read", "update", "export"),
        "products": ("create", "read", "update", "manage", "export"),
        "invoices": ("create", "read", "update", "manage", "export"),
        "payments": ("create", "read", "update", "manage", "export"),
        "contracts": ("create", "read", "update", "manage", "export"),
        "contract_templates": ("create", "read", "update", "export"),
        "reports": ("read", "export"),
        "dashboard": ("read",),
        "settings": ("read", "update"),
    },
    "institution_manager": {
        "users": ("read",),
        "polos": ("read",),
        "courses": ("read", "update", "export"),
        "disciplines": ("read", "update", "export"),
        "enrollments": ("read", "update", "export"),
        "assessments": ("read", "update", "export"),
        "questions": ("read", "update", "export"),
        "leads": ("read", "update", "export"),
        "clients": ("read", "update", "export"),
        "contacts": ("read", "update", "export"),
        "certificates": ("read", "export"),
        "products": ("read", "export"),
        "reports": ("read", "export"),
        "dashboard": ("read",),
    },
    "polo_admin": {
        "users": ("create", "read", "update", "export"),
        "courses": ("read", "export"),
        "enrollments": ("create", "read", "update", "export"),
        "leads": ("create", "read", "update", "manage", "export"),
        "clients": ("create", "read", "update", "manage", "export"),
        "contacts": ("create", "read", "update", "manage", "export"),
        "products": ("read", "export"),
        "invoices": ("create", "read", "export"),
        "payments": ("create", "read", "export"),
        "contracts": ("create", "read", "export"),
        "reports": ("read", "export"),
        "dashboard": ("read",),
    },
    "student": {
        "courses": ("read",),
        "disciplines": ("read",),
        "assessments": ("read",),
        "certificates": ("read",),
        "invoices": ("read",),
        "payments": ("read",),
        "contracts": ("read",),
    },
    "guest": {
        "courses": ("read",),
        "products": ("read",),
    },
}

ACTION_LABELS: dict[str, str] = {
    "create": "Criar",
    "read": "Visualizar",
    "update": "Atualizar",
    "delete": "Remover",
    "manage": "Gerenciar (todas as operações)",
    "export": "Exportar",
}


def catalog_pairs() -> list[tuple[str, str]]:
    """Pares (resource, action) do catálogo, ordenados."""
    pairs: set[tuple[str, str]] = set()
    for grants in ROLE_PERMISSIONS.values():
        for resource, actions in grants.items():
            pairs.update((resource, action) for action in actions)
    return sorted(pairs)


def role_scope(name: str) -> RoleScope:
    """Abrangência derivada do nome do papel."""
    if "institution" in name:
        return RoleScope.INSTITUTION
    if "polo" in name:
        return RoleScope.POLO
    return RoleScope.GLOBAL


def permission_description(resource: str, action: str) -> str:
    return f"{ACTION_LABELS.get(action, action)}: {resource}"


async def seed_permissions(db: AsyncSession) -> dict[tuple[str, str], Permission]:
    """Cria as permissões que faltam e devolve o catálogo indexado."""
    existing = {
        (p.resource, p.action): p
        for p in (await db.execute(select(Permission))).scalars().all()
    }
    created = 0
    for resource, action in catalog_pairs():
        if (resource, action) in existing:
            continue
        permission = Permission(
            resource=resource,
            action=action,
            description=permission_description(resource, action),
        )
        db.add(permission)
        existing[(resource, action)] = permission
        created += 1
    await db.flush()
    logger.info("Permissions: %d created, %d total", created, len(existing))
    return existing


async def seed_roles(db: AsyncSession, catalog: dict[tuple[str, str], Permission]) -> dict[str, Role]:
    """Cria os papéis do sistema ausentes com suas permissões.

    Roles that already exist are left untouched, links included.
    """
    roles: dict[str, Role] = {}
    for name, description in ROLE_DESCRIPTIONS.items():
        role: Role | None = await role_repository.get_by_name(db, name)
        if role is not None:
            roles[name] = role
            continue

        role = Role(name=name, description=description, scope=role_scope(name).value, is_system=True)
        db.add(role)
        await db.flush()  # Gera role.id

        for resource, actions in ROLE_PERMISSIONS.get(name, {}).items():
            for action in actions:
                db.add(RolePermission(role_id=role.id, permission_id=catalog[(resource, action)].id))
        await db.flush()
        roles[name] = role
        logger.info("Role created: %s (%s)", name, role.scope)
    return roles


async def seed_admin(db: AsyncSession, super_admin: Role) -> User:
    """Cria a conta super_admin inicial, se ausente."""
    user: User | None = (
        await db.execute(select(User).where(User.username == settings.SEED_ADMIN_USERNAME))
    ).scalar_one_or_none()
    if user is None:
        user = User(
            username=settings.SEED_ADMIN_USERNAME,
            full_name="Administrador do Sistema",
            email=settings.SEED_ADMIN_EMAIL,
            password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
            is_active=True,
        )
        db.add(user)
        await db.flush()
        logger.info("Admin user created: %s", user.username)

    assigned = (
        await db.execute(
            select(UserRole).where(UserRole.user_id == user.id, UserRole.role_id == super_admin.id)
        )
    ).scalars().first()
    if assigned is None:
        db.add(UserRole(user_id=user.id, role_id=super_admin.id))
        await db.flush()
    return user


async def seed() -> None:
    """Popula o banco com os dados iniciais.

    Seed the database with initial data. Creates tables if they don't
    exist, then the permission catalog, system roles and admin user.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        catalog = await seed_permissions(db)
        roles = await seed_roles(db, catalog)
        await seed_admin(db, roles["super_admin"])
        await db.commit()

    logger.info("Seed complete: %d permissions, %d system roles", len(catalog), len(roles))


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(seed())
