"""Testes dos vínculos papel-permissão.

Role-permission link tests — grant, revoke, available list, grouping,
the detail view's empty state, and system-role protection.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import func, select

from app.models import RolePermission
from tests.conftest import auth_header

URL = "/api/roles"


async def _grant(client: AsyncClient, token: str, role_id, permission_id):
    return await client.post(
        f"{URL}/{role_id}/permissions",
        json={"permission_id": str(permission_id)},
        headers=auth_header(token),
    )


class TestGrant:
    """Vincular permissões."""

    async def test_grant_lists_permission_once(self, client: AsyncClient, admin_token, custom_role, catalog):
        permission = catalog[("courses", "create")]
        res = await _grant(client, admin_token, custom_role.id, permission.id)
        assert res.status_code == 200
        assert res.json()["success"] is True

        res = await client.get(f"{URL}/{custom_role.id}/permissions", headers=auth_header(admin_token))
        ids = [p["permission_id"] for p in res.json()]
        assert ids.count(str(permission.id)) == 1
        row = res.json()[0]
        assert row["name"] == "create:courses"
        assert row["resource"] == "courses"
        assert row["action"] == "create"

        res = await client.get(f"{URL}/{custom_role.id}/available-permissions", headers=auth_header(admin_token))
        assert str(permission.id) not in [p["id"] for p in res.json()]

    async def test_grant_twice_is_idempotent(self, client: AsyncClient, admin_token, custom_role, catalog, db):
        permission = catalog[("leads", "read")]
        await _grant(client, admin_token, custom_role.id, permission.id)
        res = await _grant(client, admin_token, custom_role.id, permission.id)
        assert res.status_code == 200

        count = (await db.execute(
            select(func.count()).select_from(RolePermission).where(
                RolePermission.role_id == custom_role.id,
                RolePermission.permission_id == permission.id,
            )
        )).scalar()
        assert count == 1

    async def test_grant_unknown_permission(self, client: AsyncClient, admin_token, custom_role):
        res = await _grant(client, admin_token, custom_role.id, uuid.uuid4())
        assert res.status_code == 404

    async def test_grant_to_missing_role(self, client: AsyncClient, admin_token, catalog):
        res = await _grant(client, admin_token, uuid.uuid4(), catalog[("courses", "read")].id)
        assert res.status_code == 404

    async def test_grant_to_system_role_forbidden(self, client: AsyncClient, admin_token, system_roles, catalog):
        res = await _grant(client, admin_token, system_roles["guest"].id, catalog[("users", "delete")].id)
        assert res.status_code == 403

    async def test_grant_forbidden_for_viewer(self, client: AsyncClient, viewer_token, custom_role, catalog):
        res = await _grant(client, viewer_token, custom_role.id, catalog[("courses", "read")].id)
        assert res.status_code == 403

    async def test_grant_invalid_permission_id(self, client: AsyncClient, admin_token, custom_role):
        res = await client.post(
            f"{URL}/{custom_role.id}/permissions",
            json={"permission_id": "not-a-uuid"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 422


class TestRevoke:
    """Remover permissões."""

    async def test_revoke_excludes_permission(self, client: AsyncClient, admin_token, custom_role, catalog):
        permission = catalog[("courses", "update")]
        await _grant(client, admin_token, custom_role.id, permission.id)

        res = await client.delete(
            f"{URL}/{custom_role.id}/permissions/{permission.id}", headers=auth_header(admin_token)
        )
        assert res.status_code == 200

        res = await client.get(f"{URL}/{custom_role.id}/permissions", headers=auth_header(admin_token))
        assert str(permission.id) not in [p["permission_id"] for p in res.json()]

        res = await client.get(f"{URL}/{custom_role.id}/available-permissions", headers=auth_header(admin_token))
        assert str(permission.id) in [p["id"] for p in res.json()]

    async def test_revoke_unlinked_is_noop(self, client: AsyncClient, admin_token, custom_role, catalog):
        res = await client.delete(
            f"{URL}/{custom_role.id}/permissions/{catalog[('courses', 'read')].id}",
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200

    async def test_revoke_from_system_role_forbidden(self, client: AsyncClient, admin_token, system_roles, catalog):
        role = system_roles["student"]
        res = await client.delete(
            f"{URL}/{role.id}/permissions/{catalog[('courses', 'read')].id}", headers=auth_header(admin_token)
        )
        assert res.status_code == 403

        res = await client.get(f"{URL}/{role.id}/permissions", headers=auth_header(admin_token))
        assert "read:courses" in [p["name"] for p in res.json()]


class TestRolePermissionViews:
    """Listas agrupadas, disponíveis e detalhe."""

    async def test_empty_role_lists_nothing(self, client: AsyncClient, admin_token, custom_role, catalog):
        res = await client.get(f"{URL}/{custom_role.id}/permissions", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json() == []

        res = await client.get(f"{URL}/{custom_role.id}/available-permissions", headers=auth_header(admin_token))
        assert len(res.json()) == len(catalog)

    async def test_grouped_by_resource(self, client: AsyncClient, admin_token, custom_role, catalog):
        for pair in [("courses", "read"), ("courses", "create"), ("leads", "read")]:
            await _grant(client, admin_token, custom_role.id, catalog[pair].id)

        res = await client.get(f"{URL}/{custom_role.id}/permissions/grouped", headers=auth_header(admin_token))
        data = res.json()
        assert list(data) == ["courses", "leads"]
        assert [p["action"] for p in data["courses"]] == ["create", "read"]

    async def test_detail_empty_state_for_manager(self, client: AsyncClient, admin_token, custom_role, catalog):
        res = await client.get(f"{URL}/{custom_role.id}/detail", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["permissions"] == {}
        assert data["empty_state"]["show_add_shortcut"] is True
        assert data["empty_state"]["message"]
        assert len(data["available_permissions"]) == len(catalog)

    async def test_detail_empty_state_without_shortcut_for_viewer(
        self, client: AsyncClient, viewer_token, custom_role
    ):
        res = await client.get(f"{URL}/{custom_role.id}/detail", headers=auth_header(viewer_token))
        assert res.json()["empty_state"]["show_add_shortcut"] is False

    async def test_detail_with_permissions(self, client: AsyncClient, admin_token, custom_role, catalog):
        await _grant(client, admin_token, custom_role.id, catalog[("courses", "read")].id)
        res = await client.get(f"{URL}/{custom_role.id}/detail", headers=auth_header(admin_token))
        data = res.json()
        assert data["empty_state"] is None
        assert [p["name"] for p in data["permissions"]["courses"]] == ["read:courses"]
        assert len(data["available_permissions"]) == len(catalog) - 1

    async def test_system_role_detail_has_no_shortcut(self, client: AsyncClient, admin_token, system_roles):
        """Papel do sistema sem permissões: estado vazio sem atalho."""
        role = system_roles["institution_teacher"]
        res = await client.get(f"{URL}/{role.id}/detail", headers=auth_header(admin_token))
        data = res.json()
        assert data["role"]["controls"]["can_manage_permissions"] is False
        assert data["empty_state"]["show_add_shortcut"] is False
