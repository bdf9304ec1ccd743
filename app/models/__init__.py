"""Pacote de modelos ORM — ponto central de importação.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the metadata,
which Alembic and relationship resolution rely on.

Modules:
    user: papéis, usuários e atribuições (Roles, users and user-role assignments)
    permission: catálogo de permissões e vínculos (Permission catalog, role links and direct user grants)
    audit: trilha de auditoria de permissões (Permission audit trail)
"""

from app.models.user import Role, RoleScope, User, UserRole
from app.models.permission import Permission, RolePermission, UserPermission
from app.models.audit import AuditAction, PermissionAudit

__all__ = [
    "Role", "RoleScope", "User", "UserRole",
    "Permission", "RolePermission", "UserPermission",
    "AuditAction", "PermissionAudit",
]
