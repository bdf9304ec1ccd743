"""Testes de atribuição de papéis a usuários.

User-role assignment API tests — scope context validation, idempotency,
unassign and authorization.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from app.models import UserPermission, UserRole
from tests.conftest import auth_header


def _url(user) -> str:
    return f"/api/users/{user.id}/roles"


class TestAssignRole:

    async def test_assign_global_role(self, client: AsyncClient, admin_token, outsider_user, system_roles):
        res = await client.post(_url(outsider_user), json={"role_id": str(system_roles["guest"].id)},
                                headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["role_name"] == "guest"
        assert data["role_scope"] == "global"
        assert data["institution_id"] is None

    async def test_institution_role_requires_institution(
        self, client: AsyncClient, admin_token, outsider_user, system_roles
    ):
        role_id = str(system_roles["institution_admin"].id)
        res = await client.post(_url(outsider_user), json={"role_id": role_id}, headers=auth_header(admin_token))
        assert res.status_code == 400

        institution_id = str(uuid.uuid4())
        res = await client.post(_url(outsider_user), json={"role_id": role_id, "institution_id": institution_id},
                                headers=auth_header(admin_token))
        assert res.status_code == 201
        assert res.json()["institution_id"] == institution_id

    async def test_polo_role_requires_polo(self, client: AsyncClient, admin_token, outsider_user, system_roles):
        res = await client.post(_url(outsider_user), json={"role_id": str(system_roles["polo_admin"].id)},
                                headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_assign_is_idempotent(self, client: AsyncClient, admin_token, outsider_user, system_roles):
        body = {"role_id": str(system_roles["guest"].id)}
        first = await client.post(_url(outsider_user), json=body, headers=auth_header(admin_token))
        second = await client.post(_url(outsider_user), json=body, headers=auth_header(admin_token))
        assert first.json()["id"] == second.json()["id"]

        res = await client.get(_url(outsider_user), headers=auth_header(admin_token))
        assert len(res.json()) == 1

    async def test_assign_unknown_role(self, client: AsyncClient, admin_token, outsider_user):
        res = await client.post(_url(outsider_user), json={"role_id": str(uuid.uuid4())},
                                headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_assign_to_unknown_user(self, client: AsyncClient, admin_token, system_roles):
        res = await client.post(f"/api/users/{uuid.uuid4()}/roles", json={"role_id": str(system_roles["guest"].id)},
                                headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_assigned_role_grants_permissions(
        self, client: AsyncClient, admin_token, outsider_user, outsider_token, system_roles
    ):
        await client.post(_url(outsider_user), json={"role_id": str(system_roles["guest"].id)},
                          headers=auth_header(admin_token))
        res = await client.get("/api/me/permissions", headers=auth_header(outsider_token))
        assert res.json() == {"read:courses": True, "read:products": True}

    async def test_assign_forbidden_for_viewer(self, client: AsyncClient, viewer_token, outsider_user, system_roles):
        res = await client.post(_url(outsider_user), json={"role_id": str(system_roles["guest"].id)},
                                headers=auth_header(viewer_token))
        assert res.status_code == 403


class TestUnassignRole:

    async def test_unassign(self, client: AsyncClient, admin_token, outsider_user, system_roles):
        role_id = system_roles["guest"].id
        await client.post(_url(outsider_user), json={"role_id": str(role_id)}, headers=auth_header(admin_token))

        res = await client.delete(f"{_url(outsider_user)}/{role_id}", headers=auth_header(admin_token))
        assert res.status_code == 204

        res = await client.get(_url(outsider_user), headers=auth_header(admin_token))
        assert res.json() == []

    async def test_unassign_missing(self, client: AsyncClient, admin_token, outsider_user, system_roles):
        res = await client.delete(f"{_url(outsider_user)}/{system_roles['guest'].id}",
                                  headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_unassign_one_institution(self, client: AsyncClient, admin_token, outsider_user, system_roles):
        role_id = str(system_roles["institution_manager"].id)
        first, second = str(uuid.uuid4()), str(uuid.uuid4())
        for institution_id in (first, second):
            await client.post(_url(outsider_user), json={"role_id": role_id, "institution_id": institution_id},
                              headers=auth_header(admin_token))

        res = await client.delete(f"{_url(outsider_user)}/{role_id}", params={"institution_id": first},
                                  headers=auth_header(admin_token))
        assert res.status_code == 204

        res = await client.get(_url(outsider_user), headers=auth_header(admin_token))
        assert [r["institution_id"] for r in res.json()] == [second]


class TestListUserRoles:

    async def test_list_requires_read_users(self, client: AsyncClient, viewer_token, outsider_user):
        res = await client.get(_url(outsider_user), headers=auth_header(viewer_token))
        assert res.status_code == 403


def test_context_uniqueness_treats_null_as_equal():
    """Sem instituição/polo, a mesma atribuição não pode existir duas vezes no PostgreSQL."""
    for table in (UserRole.__table__, UserPermission.__table__):
        ddl = str(CreateTable(table).compile(dialect=postgresql.dialect()))
        assert "NULLS NOT DISTINCT" in ddl
