"""Pagination utility module.

Pagination utility module for SQLAlchemy async queries.
Provides a generic paginate function and a Page response model
for consistent pagination across all list endpoints.
"""

import math
from typing import Any, Sequence
from pydantic import BaseModel, computed_field
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


class Page(BaseModel):
    """Pagination result model for typed responses.

    Contains the paginated items and metadata for client-side pagination controls.

    Attributes:
        items: Items for the current page
        total: Total count across all pages
        page: Current page number, 1-based
        per_page: Items per page
    """

    items: list[Any]
    total: int
    page: int
    per_page: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pages(self) -> int:
        """Total pages, ceil(total / per_page)."""
        if self.per_page <= 0:
            return 0
        return math.ceil(self.total / self.per_page)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_prev(self) -> bool:
        return self.page > 1


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """Execute a paginated SQLAlchemy query, returning items and total count.

    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT.

    Args:
        db: Async database session
        query: Base query to paginate
        page: Page number, 1-indexed (default: 1)
        per_page: Items per page (default: 20)

    Returns:
        tuple[Sequence[Any], int]: Tuple of paginated items and total count
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    offset: int = (max(page, 1) - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().all()

    return items, total
