"""Schemas Pydantic comuns.

Common request/response schema definitions shared across routers.
"""

from typing import Any

from pydantic import BaseModel


class AckResponse(BaseModel):
    """Confirmação simples de uma ação.

    Generic acknowledgement for actions without a resource body
    (grant, revoke, assign, unassign).

    Attributes:
        success: Ação concluída (Action completed)
        message: Mensagem exibível (Human-readable message)
    """

    success: bool = True
    message: str


class PaginatedResponse(BaseModel):
    """Resposta paginada.

    Attributes:
        items: Itens da página (Items for the current page)
        total: Total de itens (Total count across all pages)
        page: Página atual, a partir de 1 (Current page, 1-based)
        per_page: Itens por página (Items per page)
        pages: Total de páginas (Total number of pages)
    """

    items: list[Any]
    total: int
    page: int
    per_page: int
    pages: int
