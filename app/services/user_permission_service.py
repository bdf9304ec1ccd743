"""Serviço de permissões diretas de usuários.

User Permission Service — grant and revoke catalog permissions directly
to a user, optionally bound to an institution or polo and with an
expiration date. Unexpired grants add to the permissions of the user's
roles.
"""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditAction
from app.models.permission import Permission, UserPermission
from app.models.user import User
from app.repositories.permission_repository import permission_repository
from app.repositories.user_permission_repository import user_permission_repository
from app.repositories.user_repository import user_repository
from app.schemas.user import UserPermissionGrant, UserPermissionResponse
from app.services.audit_service import audit_service
from app.utils.exceptions import BadRequestError, NotFoundError


def as_utc(value: datetime | None) -> datetime | None:
    """Converte para UTC; datas sem fuso são tratadas como UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserPermissionService:
    """Regras de negócio de user_permissions."""

    def _to_response(self, grant: UserPermission, permission: Permission) -> UserPermissionResponse:
        return UserPermissionResponse(
            id=str(grant.id),
            user_id=str(grant.user_id),
            permission_id=str(permission.id),
            resource=permission.resource,
            action=permission.action,
            name=permission.name,
            description=permission.description,
            institution_id=str(grant.institution_id) if grant.institution_id else None,
            polo_id=str(grant.polo_id) if grant.polo_id else None,
            expires_at=grant.expires_at,
            expired=grant.is_expired(),
            created_at=grant.created_at,
        )

    async def _get_user_or_404(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado")
        return user

    async def list_user_permissions(self, db: AsyncSession, user_id: UUID) -> list[UserPermissionResponse]:
        """Permissões diretas do usuário, expiradas incluídas.

        Raises:
            NotFoundError: Usuário inexistente (User not found)
        """
        await self._get_user_or_404(db, user_id)
        rows = await user_permission_repository.get_user_grants(db, user_id)
        return [self._to_response(grant, perm) for grant, perm in rows]

    async def grant_permission(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: UserPermissionGrant,
        actor_id: UUID,
        request: Request | None = None,
    ) -> UserPermissionResponse:
        """Concede uma permissão diretamente ao usuário.

        Granting the same (permission, institution, polo) again returns the
        existing grant; a new expires_at replaces the stored one.

        Args:
            db: Sessão assíncrona (Async database session)
            user_id: Usuário alvo (Target user)
            data: Permissão, contexto e validade (Permission, context and expiration)
            actor_id: Usuário que concede (Granting user)
            request: Requisição de origem (Source request)

        Returns:
            UserPermissionResponse: Concessão (Grant)

        Raises:
            NotFoundError: Usuário ou permissão inexistente (User or permission not found)
            BadRequestError: Expiração no passado (Expiration already passed)
        """
        await self._get_user_or_404(db, user_id)
        permission: Permission | None = await permission_repository.get_by_id(db, data.permission_id)
        if permission is None:
            raise NotFoundError("Permissão não encontrada")

        expires_at: datetime | None = as_utc(data.expires_at)
        if expires_at is not None and expires_at <= datetime.now(timezone.utc):
            raise BadRequestError("A data de expiração deve ser futura")

        details = {
            "permission": permission.name,
            "institution_id": str(data.institution_id) if data.institution_id else None,
            "polo_id": str(data.polo_id) if data.polo_id else None,
            "expires_at": expires_at.isoformat() if expires_at else None,
        }
        resource: str = f"users/{user_id}/permissions/{permission.id}"

        existing: UserPermission | None = await user_permission_repository.find_grant(
            db, user_id, permission.id, data.institution_id, data.polo_id
        )
        if existing is not None:
            if expires_at is None or expires_at == as_utc(existing.expires_at):
                return self._to_response(existing, permission)
            updated: UserPermission | None = await user_permission_repository.update(
                db, existing.id, {"expires_at": expires_at}
            )
            await audit_service.record(db, actor_id, AuditAction.GRANT, resource, details, request)
            return self._to_response(updated or existing, permission)

        grant: UserPermission = await user_permission_repository.create(
            db,
            {
                "user_id": user_id,
                "permission_id": permission.id,
                "institution_id": data.institution_id,
                "polo_id": data.polo_id,
                "expires_at": expires_at,
                "created_by_id": actor_id,
            },
        )
        await audit_service.record(db, actor_id, AuditAction.GRANT, resource, details, request)
        return self._to_response(grant, permission)

    async def revoke_permission(
        self,
        db: AsyncSession,
        user_id: UUID,
        permission_id: UUID,
        actor_id: UUID,
        institution_id: UUID | None = None,
        polo_id: UUID | None = None,
        request: Request | None = None,
    ) -> None:
        """Remove concessões diretas da permissão; instituição/polo restringem quais.

        Raises:
            NotFoundError: Nenhuma concessão correspondente (No matching grant)
        """
        removed: int = await user_permission_repository.delete_grants(
            db, user_id, permission_id, institution_id, polo_id
        )
        if removed == 0:
            raise NotFoundError("Permissão direta não encontrada")

        permission: Permission | None = await permission_repository.get_by_id(db, permission_id)
        await audit_service.record(
            db,
            actor_id,
            AuditAction.REVOKE,
            f"users/{user_id}/permissions/{permission_id}",
            {"permission": permission.name if permission else None, "removed": removed},
            request,
        )


user_permission_service: UserPermissionService = UserPermissionService()
