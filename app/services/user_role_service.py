"""Serviço de atribuição de papéis a usuários.

User Role Service — assign and unassign roles, validating the
institution / polo context each role scope requires.
"""

from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditAction
from app.models.user import Role, RoleScope, User, UserRole
from app.repositories.user_repository import user_repository
from app.schemas.user import UserRoleAssign, UserRoleResponse
from app.services.audit_service import audit_service
from app.services.role_service import role_service
from app.utils.exceptions import BadRequestError, NotFoundError


def validate_scope_context(role: Role, institution_id: UUID | None, polo_id: UUID | None) -> None:
    """Confere se o contexto informado atende à abrangência do papel.

    Institution-scoped roles need an institution_id and polo-scoped roles
    need a polo_id. Global roles accept any context.

    Raises:
        BadRequestError: Contexto obrigatório ausente (Missing required context)
    """
    scope = RoleScope(role.scope)
    if scope is RoleScope.INSTITUTION and institution_id is None:
        raise BadRequestError("Papéis de instituição exigem institution_id")
    if scope is RoleScope.POLO and polo_id is None:
        raise BadRequestError("Papéis de polo exigem polo_id")


class UserRoleService:
    """Regras de negócio de user_roles."""

    def _to_response(self, assignment: UserRole, role: Role) -> UserRoleResponse:
        return UserRoleResponse(
            id=str(assignment.id),
            user_id=str(assignment.user_id),
            role_id=str(role.id),
            role_name=role.name,
            role_description=role.description,
            role_scope=RoleScope(role.scope),
            institution_id=str(assignment.institution_id) if assignment.institution_id else None,
            polo_id=str(assignment.polo_id) if assignment.polo_id else None,
            created_at=assignment.created_at,
        )

    async def _get_user_or_404(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado")
        return user

    async def list_user_roles(self, db: AsyncSession, user_id: UUID) -> list[UserRoleResponse]:
        """Atribuições do usuário, por nome do papel.

        Raises:
            NotFoundError: Usuário inexistente (User not found)
        """
        await self._get_user_or_404(db, user_id)
        rows = await user_repository.get_user_roles(db, user_id)
        return [self._to_response(assignment, role) for assignment, role in rows]

    async def assign_role(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: UserRoleAssign,
        actor_id: UUID,
        request: Request | None = None,
    ) -> UserRoleResponse:
        """Atribui um papel ao usuário no contexto informado.

        Assigning the same (role, institution, polo) twice returns the
        existing assignment.

        Args:
            db: Sessão assíncrona (Async database session)
            user_id: Usuário alvo (Target user)
            data: Papel e contexto (Role and context)
            actor_id: Usuário que atribui (Assigning user)
            request: Requisição de origem (Source request)

        Returns:
            UserRoleResponse: Atribuição (Assignment)

        Raises:
            NotFoundError: Usuário ou papel inexistente (User or role not found)
            BadRequestError: Contexto incompatível com a abrangência (Scope mismatch)
        """
        await self._get_user_or_404(db, user_id)
        role: Role = await role_service.get_role_or_404(db, data.role_id)
        validate_scope_context(role, data.institution_id, data.polo_id)

        existing: UserRole | None = await user_repository.find_assignment(
            db, user_id, role.id, data.institution_id, data.polo_id
        )
        if existing is not None:
            return self._to_response(existing, role)

        assignment: UserRole = await user_repository.create_assignment(
            db,
            user_id=user_id,
            role_id=role.id,
            institution_id=data.institution_id,
            polo_id=data.polo_id,
            created_by_id=actor_id,
        )
        await audit_service.record(
            db,
            actor_id,
            AuditAction.ASSIGN_ROLE,
            f"users/{user_id}/roles/{role.id}",
            {
                "role": role.name,
                "institution_id": str(data.institution_id) if data.institution_id else None,
                "polo_id": str(data.polo_id) if data.polo_id else None,
            },
            request,
        )
        return self._to_response(assignment, role)

    async def unassign_role(
        self,
        db: AsyncSession,
        user_id: UUID,
        role_id: UUID,
        actor_id: UUID,
        institution_id: UUID | None = None,
        polo_id: UUID | None = None,
        request: Request | None = None,
    ) -> None:
        """Remove atribuições do papel; instituição/polo restringem quais.

        Raises:
            NotFoundError: Nenhuma atribuição correspondente (No matching assignment)
        """
        removed: int = await user_repository.delete_assignments(db, user_id, role_id, institution_id, polo_id)
        if removed == 0:
            raise NotFoundError("Atribuição de papel não encontrada")

        await audit_service.record(
            db,
            actor_id,
            AuditAction.UNASSIGN_ROLE,
            f"users/{user_id}/roles/{role_id}",
            {"removed": removed},
            request,
        )


user_role_service: UserRoleService = UserRoleService()
