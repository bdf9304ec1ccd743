"""Utilitário de paginação.

Pagination helper for SQLAlchemy async queries.
"""

import math
from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """Executa uma consulta paginada.

    Execute a paginated query, returning items and the total count.
    Runs a COUNT over the query as a subquery, then the OFFSET/LIMIT page.

    Args:
        db: Sessão assíncrona (Async database session)
        query: Consulta base (Base query to paginate)
        page: Página, a partir de 1 (Page number, 1-indexed)
        per_page: Itens por página (Items per page)

    Returns:
        tuple[Sequence[Any], int]: (itens, total)
    """
    count_query = select(func.count()).select_from(query.subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().all()

    return items, total


def page_count(total: int, per_page: int) -> int:
    """Total de páginas — ceil(total / per_page), mínimo 1."""
    return max(1, math.ceil(total / per_page))
