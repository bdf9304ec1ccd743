"""Exceções HTTP customizadas.

Custom HTTP exception classes module.
Pre-configured HTTPException subclasses so services can raise domain
errors without repeating status codes. Messages are free text meant for
direct display in the client (toast notifications).

Usage:
    from app.utils.exceptions import NotFoundError, ForbiddenError
    raise NotFoundError("Papel não encontrado")
    raise ForbiddenError("Não é possível remover papéis do sistema")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 — recurso inexistente (papel, permissão, usuário).

    Raised when a requested role, permission, or user does not exist.
    """

    def __init__(self, detail: str = "Recurso não encontrado") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 — violação de unicidade (e.g. nome de papel repetido).

    Raised when creating or renaming a role would duplicate an existing name.
    """

    def __init__(self, detail: str = "Registro já existe") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 — permissão insuficiente ou papel do sistema imutável.

    Raised when the caller lacks a (resource, action) permission or tries
    to mutate a system role.
    """

    def __init__(self, detail: str = "Acesso negado") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 — autenticação ausente, inválida ou expirada."""

    def __init__(self, detail: str = "Autenticação necessária") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 — dados válidos no formato mas inválidos para a regra de negócio.

    Raised for business-rule failures Pydantic cannot catch, e.g. assigning
    an institution-scoped role without an institution_id.
    """

    def __init__(self, detail: str = "Requisição inválida") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
