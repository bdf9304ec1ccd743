"""Pacote de roteadores de controle de acesso.

Access Control API Router package — Aggregates the role, permission,
user-role, audit and current-user endpoints into a single router for
inclusion in the FastAPI application.

Included routers:
    - roles: papéis e vínculos de permissões (Roles and permission links)
    - permissions: catálogo de permissões (Permission catalog)
    - users: papéis de usuários (User role assignments)
    - permission_audits: trilha de auditoria (Audit trail)
    - me: permissões do usuário atual (Current user's permissions)
"""

from fastapi import APIRouter

from app.api.admin.me import router as me_router
from app.api.admin.permission_audits import router as permission_audits_router
from app.api.admin.permissions import router as permissions_router
from app.api.admin.roles import router as roles_router
from app.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(roles_router, prefix="/roles", tags=["Roles"])
admin_router.include_router(permissions_router, prefix="/permissions", tags=["Permissions"])
admin_router.include_router(users_router, prefix="/users", tags=["User Roles"])
admin_router.include_router(permission_audits_router, prefix="/permission-audits", tags=["Permission Audits"])
admin_router.include_router(me_router, prefix="/me", tags=["Me"])
