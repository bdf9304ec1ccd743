"""Testes de autenticação — login, refresh e /me.

Auth API tests.
"""

from httpx import AsyncClient

from app.utils.jwt import create_refresh_token
from tests.conftest import auth_header, make_token


class TestLogin:

    async def test_login_success(self, client: AsyncClient, admin_user):
        res = await client.post("/api/auth/login", json={"username": "admin", "password": "admin123!"})
        assert res.status_code == 200
        data = res.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]

    async def test_login_wrong_password(self, client: AsyncClient, admin_user):
        res = await client.post("/api/auth/login", json={"username": "admin", "password": "errada"})
        assert res.status_code == 401
        assert res.json()["message"] == "Usuário ou senha inválidos"

    async def test_login_unknown_user(self, client: AsyncClient, catalog):
        res = await client.post("/api/auth/login", json={"username": "ninguem", "password": "x"})
        assert res.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, outsider_user, db):
        outsider_user.is_active = False
        await db.commit()
        res = await client.post("/api/auth/login", json={"username": "outsider", "password": "outsider123!"})
        assert res.status_code == 401

    async def test_token_from_login_is_accepted(self, client: AsyncClient, viewer_user):
        res = await client.post("/api/auth/login", json={"username": "viewer", "password": "viewer123!"})
        token = res.json()["access_token"]
        res = await client.get("/api/roles", headers=auth_header(token))
        assert res.status_code == 200


class TestRefresh:

    async def test_refresh_issues_new_pair(self, client: AsyncClient, viewer_user):
        refresh = create_refresh_token({"sub": str(viewer_user.id), "username": viewer_user.username})
        res = await client.post("/api/auth/refresh", json={"refresh_token": refresh})
        assert res.status_code == 200
        assert res.json()["access_token"]

    async def test_access_token_cannot_refresh(self, client: AsyncClient, viewer_user):
        res = await client.post("/api/auth/refresh", json={"refresh_token": make_token(viewer_user)})
        assert res.status_code == 401

    async def test_refresh_token_cannot_authenticate(self, client: AsyncClient, viewer_user):
        refresh = create_refresh_token({"sub": str(viewer_user.id), "username": viewer_user.username})
        res = await client.get("/api/roles", headers=auth_header(refresh))
        assert res.status_code == 401

    async def test_garbage_refresh_token(self, client: AsyncClient, catalog):
        res = await client.post("/api/auth/refresh", json={"refresh_token": "abc.def.ghi"})
        assert res.status_code == 401


class TestMe:

    async def test_me_profile(self, client: AsyncClient, viewer_token):
        res = await client.get("/api/auth/me", headers=auth_header(viewer_token))
        assert res.status_code == 200
        data = res.json()
        assert data["username"] == "viewer"
        assert data["roles"] == ["visualizador"]
        assert data["permissions"] == ["read:permissions", "read:roles"]

    async def test_me_invalid_token(self, client: AsyncClient, catalog):
        res = await client.get("/api/auth/me", headers=auth_header("invalido"))
        assert res.status_code == 401
