"""Testes da API de papéis.

Role CRUD API tests — listing with search and view data, creation
validation, system-role immutability and authorization.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import func, select

from app.models import PermissionAudit, Role, RolePermission, UserRole
from app.repositories.role_repository import role_repository
from tests.conftest import auth_header

URL = "/api/roles"


class TestRoleList:
    """Listagem e busca de papéis."""

    async def test_list_roles_sorted_by_name(self, client: AsyncClient, admin_token, system_roles):
        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        names = [r["name"] for r in res.json()]
        assert names == sorted(names)
        assert set(system_roles).issubset(names)

    async def test_system_role_has_no_controls(self, client: AsyncClient, admin_token, system_roles):
        """Papel do sistema: sem editar/excluir mesmo para super_admin."""
        res = await client.get(URL, headers=auth_header(admin_token))
        super_admin = next(r for r in res.json() if r["name"] == "super_admin")
        assert super_admin["is_system"] is True
        assert super_admin["controls"] == {
            "can_edit": False,
            "can_delete": False,
            "can_manage_permissions": False,
        }
        assert super_admin["kind_badge"] == {"label": "Sistema", "color": "yellow"}
        assert super_admin["scope_badge"] == {"label": "Global", "color": "indigo"}

    async def test_custom_role_controls_follow_permissions(
        self, client: AsyncClient, admin_token, viewer_token, custom_role
    ):
        res = await client.get(URL, headers=auth_header(admin_token))
        row = next(r for r in res.json() if r["name"] == custom_role.name)
        assert row["controls"] == {"can_edit": True, "can_delete": True, "can_manage_permissions": True}

        res = await client.get(URL, headers=auth_header(viewer_token))
        row = next(r for r in res.json() if r["name"] == custom_role.name)
        assert row["controls"] == {"can_edit": False, "can_delete": False, "can_manage_permissions": False}

    async def test_search_matches_description_only(self, client: AsyncClient, admin_token, custom_role):
        """Busca que só casa com a descrição ainda retorna o papel."""
        res = await client.get(URL, params={"search": "cursos da"}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert [r["name"] for r in res.json()] == [custom_role.name]

    async def test_search_is_case_insensitive(self, client: AsyncClient, admin_token, system_roles):
        res = await client.get(URL, params={"search": "SUPER"}, headers=auth_header(admin_token))
        assert [r["name"] for r in res.json()] == ["super_admin"]

    async def test_search_matches_scope(self, client: AsyncClient, admin_token, system_roles):
        res = await client.get(URL, params={"search": "polo"}, headers=auth_header(admin_token))
        assert res.json()
        assert all(r["scope"] == "polo" for r in res.json())

    async def test_blank_search_returns_all(self, client: AsyncClient, admin_token, system_roles):
        res = await client.get(URL, params={"search": "   "}, headers=auth_header(admin_token))
        assert len(res.json()) == len(system_roles)

    async def test_list_requires_authentication(self, client: AsyncClient, system_roles):
        res = await client.get(URL)
        assert res.status_code == 401

    async def test_list_without_permission_forbidden(self, client: AsyncClient, outsider_token):
        res = await client.get(URL, headers=auth_header(outsider_token))
        assert res.status_code == 403
        assert res.json()["message"]

    async def test_get_role(self, client: AsyncClient, admin_token, custom_role):
        res = await client.get(f"{URL}/{custom_role.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["id"] == str(custom_role.id)

    async def test_get_missing_role(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404
        assert res.json()["message"] == "Papel não encontrado"


class TestRoleCreate:
    """Criação de papéis."""

    async def test_create_role_with_badges(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "Gerente Financeiro",
            "description": "Acesso à gestão financeira",
            "scope": "institution",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["name"] == "Gerente Financeiro"
        assert data["is_system"] is False
        assert data["scope_badge"] == {"label": "Instituição", "color": "blue"}
        assert data["kind_badge"] == {"label": "Customizado", "color": "gray"}

        res = await client.get(URL, params={"search": "financeiro"}, headers=auth_header(admin_token))
        assert "Gerente Financeiro" in [r["name"] for r in res.json()]

    async def test_short_name_rejected_without_row(self, client: AsyncClient, admin_token, db):
        res = await client.post(URL, json={
            "name": "ab",
            "description": "Descrição válida",
            "scope": "global",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422
        body = res.json()
        assert body["detail"]["name"] == "O nome deve ter pelo menos 3 caracteres"
        assert body["message"] == "O nome deve ter pelo menos 3 caracteres"

        count = (await db.execute(select(func.count()).select_from(Role).where(Role.name == "ab"))).scalar()
        assert count == 0

    async def test_short_description_rejected(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "Tutor",
            "description": "abc",
            "scope": "polo",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422
        assert res.json()["detail"]["description"] == "A descrição deve ter pelo menos 5 caracteres"

    async def test_whitespace_padded_name_counts_trimmed(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "  ab  ",
            "description": "Descrição válida",
            "scope": "global",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422

    async def test_invalid_scope_rejected(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "Tutor",
            "description": "Tutor de turmas",
            "scope": "regional",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422
        assert "scope" in res.json()["detail"]

    async def test_duplicate_name_conflict(self, client: AsyncClient, admin_token, custom_role):
        res = await client.post(URL, json={
            "name": custom_role.name,
            "description": "Outra descrição",
            "scope": "global",
        }, headers=auth_header(admin_token))
        assert res.status_code == 409

    async def test_create_forbidden_for_viewer(self, client: AsyncClient, viewer_token):
        res = await client.post(URL, json={
            "name": "Tutor",
            "description": "Tutor de turmas",
            "scope": "global",
        }, headers=auth_header(viewer_token))
        assert res.status_code == 403

    async def test_create_writes_audit(self, client: AsyncClient, admin_token, db):
        res = await client.post(URL, json={
            "name": "Tutor",
            "description": "Tutor de turmas",
            "scope": "global",
        }, headers=auth_header(admin_token))
        role_id = res.json()["id"]
        audits = (await db.execute(
            select(PermissionAudit).where(PermissionAudit.resource == f"roles/{role_id}")
        )).scalars().all()
        assert len(audits) == 1
        assert audits[0].action == "modify_role"
        assert audits[0].details["operation"] == "create"


class TestRoleUpdate:
    """Atualização de papéis."""

    async def test_update_custom_role(self, client: AsyncClient, admin_token, custom_role):
        res = await client.put(f"{URL}/{custom_role.id}", json={
            "description": "Coordena cursos de graduação",
            "scope": "polo",
        }, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["description"] == "Coordena cursos de graduação"
        assert data["scope_badge"] == {"label": "Polo", "color": "purple"}
        assert data["name"] == custom_role.name

    async def test_update_system_role_forbidden(self, client: AsyncClient, admin_token, system_roles):
        role = system_roles["admin"]
        res = await client.put(f"{URL}/{role.id}", json={"description": "Nova descrição"},
                               headers=auth_header(admin_token))
        assert res.status_code == 403

    async def test_update_to_existing_name_conflict(self, client: AsyncClient, admin_token, custom_role, system_roles):
        res = await client.put(f"{URL}/{custom_role.id}", json={"name": "super_admin"},
                               headers=auth_header(admin_token))
        assert res.status_code == 409

    async def test_update_keeping_own_name(self, client: AsyncClient, admin_token, custom_role):
        res = await client.put(f"{URL}/{custom_role.id}", json={"name": custom_role.name},
                               headers=auth_header(admin_token))
        assert res.status_code == 200

    async def test_update_missing_role(self, client: AsyncClient, admin_token):
        res = await client.put(f"{URL}/{uuid.uuid4()}", json={"name": "fantasma"},
                               headers=auth_header(admin_token))
        assert res.status_code == 404


class TestRoleDelete:
    """Remoção de papéis."""

    async def test_delete_custom_role(self, client: AsyncClient, admin_token, custom_role):
        res = await client.delete(f"{URL}/{custom_role.id}", headers=auth_header(admin_token))
        assert res.status_code == 204

        res = await client.get(f"{URL}/{custom_role.id}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_delete_system_role_forbidden(self, client: AsyncClient, admin_token, system_roles, db):
        role = system_roles["guest"]
        res = await client.delete(f"{URL}/{role.id}", headers=auth_header(admin_token))
        assert res.status_code == 403
        assert await db.get(Role, role.id) is not None

    async def test_delete_removes_links_and_assignments(
        self, client: AsyncClient, admin_token, custom_role, catalog, outsider_user, db
    ):
        db.add(RolePermission(role_id=custom_role.id, permission_id=catalog[("courses", "read")].id))
        db.add(UserRole(user_id=outsider_user.id, role_id=custom_role.id, institution_id=uuid.uuid4()))
        await db.commit()

        res = await client.delete(f"{URL}/{custom_role.id}", headers=auth_header(admin_token))
        assert res.status_code == 204

        links = (await db.execute(
            select(func.count()).select_from(RolePermission).where(RolePermission.role_id == custom_role.id)
        )).scalar()
        assignments = (await db.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == custom_role.id)
        )).scalar()
        assert links == 0
        assert assignments == 0

    async def test_delete_forbidden_for_viewer(self, client: AsyncClient, viewer_token, custom_role):
        res = await client.delete(f"{URL}/{custom_role.id}", headers=auth_header(viewer_token))
        assert res.status_code == 403


class TestRoleRepository:

    async def test_duplicate_name_check(self, db, custom_role):
        assert await role_repository.check_duplicate_name(db, "coordenador_curso")
        assert not await role_repository.check_duplicate_name(db, "coordenador_curso", exclude_id=custom_role.id)
        assert not await role_repository.check_duplicate_name(db, "inexistente")

    async def test_delete_with_links_missing_role(self, db):
        assert await role_repository.delete_with_links(db, uuid.uuid4()) is False
