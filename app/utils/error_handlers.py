"""Tratadores de exceção da aplicação.

Application exception handlers. Each error body keeps FastAPI's "detail"
and adds "message", a free-text string clients show as a toast.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Mensagens traduzidas por tipo de erro do Pydantic
_VALIDATION_MESSAGES: dict[str, str] = {
    "missing": "Campo obrigatório",
    "enum": "Valor inválido",
    "uuid_parsing": "Identificador inválido",
    "string_type": "Deve ser um texto",
}


def _field_message(error: dict[str, Any]) -> str:
    if error.get("type") == "value_error":
        # ValueError dos validadores: "Value error, <mensagem>"
        return str(error.get("msg", "")).removeprefix("Value error, ")
    return _VALIDATION_MESSAGES.get(error.get("type", ""), str(error.get("msg", "Valor inválido")))


def _field_name(error: dict[str, Any]) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    return ".".join(loc) or "body"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTPException → {"detail", "message"}."""
    message: str = exc.detail if isinstance(exc.detail, str) else "Erro na requisição"
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Erros de validação → 422 com mensagens por campo.

    Validation errors return 422 with a {field: message} map and the
    first message as the toast text.
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(error), _field_message(error))
    logger.info("Validation error on %s %s: %s", request.method, request.url.path, errors)

    message: str = next(iter(errors.values()), "Dados inválidos")
    return JSONResponse(
        status_code=422,
        content={"detail": errors, "message": message},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Erro de banco → 500 com mensagem genérica."""
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Erro de banco de dados", "message": "Erro interno. Tente novamente mais tarde."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
