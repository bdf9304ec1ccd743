"""Testes do seed — catálogo, papéis do sistema e conta inicial."""

from sqlalchemy import func, select

from app.config import settings
from app.models import Permission, Role, RolePermission, RoleScope, User
from app.seed import ROLE_DESCRIPTIONS, catalog_pairs, role_scope, seed_admin, seed_permissions, seed_roles


class TestSeed:

    async def test_catalog_covers_every_role_grant(self, db, catalog):
        count = (await db.execute(select(func.count()).select_from(Permission))).scalar()
        assert count == len(catalog_pairs()) == len(catalog)

    async def test_seed_is_idempotent(self, db, system_roles):
        catalog = await seed_permissions(db)
        await seed_roles(db, catalog)
        await db.commit()

        permissions = (await db.execute(select(func.count()).select_from(Permission))).scalar()
        roles = (await db.execute(select(func.count()).select_from(Role))).scalar()
        assert permissions == len(catalog_pairs())
        assert roles == len(ROLE_DESCRIPTIONS)

    async def test_system_roles(self, system_roles):
        assert len(system_roles) == 13
        assert all(r.is_system for r in system_roles.values())
        assert system_roles["institution_financial"].scope == "institution"
        assert system_roles["polo_staff"].scope == "polo"
        assert system_roles["student"].scope == "global"

    async def test_role_links(self, db, system_roles, catalog):
        guest = system_roles["guest"]
        rows = (await db.execute(
            select(Permission.resource, Permission.action)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == guest.id)
        )).all()
        assert set(rows) == {("courses", "read"), ("products", "read")}

    async def test_seed_admin(self, db, system_roles):
        user = await seed_admin(db, system_roles["super_admin"])
        again = await seed_admin(db, system_roles["super_admin"])
        await db.commit()
        assert user.id == again.id
        assert user.username == settings.SEED_ADMIN_USERNAME
        users = (await db.execute(select(func.count()).select_from(User))).scalar()
        assert users == 1


def test_role_scope():
    assert role_scope("institution_admin") is RoleScope.INSTITUTION
    assert role_scope("polo_manager") is RoleScope.POLO
    assert role_scope("admin") is RoleScope.GLOBAL
