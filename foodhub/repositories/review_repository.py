"""Review Repository - restaurant review queries."""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.review import Review
from foodhub.repositories.base import BaseRepository


class ReviewRepository(BaseRepository[Review]):
    """Repository for the reviews table."""

    def __init__(self) -> None:
        super().__init__(Review)

    async def get_by_order(self, db: AsyncSession, order_id: UUID) -> Review | None:
        result = await db.execute(select(Review).where(Review.order_id == order_id))
        return result.scalar_one_or_none()

    async def get_for_restaurant(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        rating: int | None = None,
        status: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Review], int]:
        query: Select = select(Review).where(Review.restaurant_id == restaurant_id)
        if rating is not None:
            query = query.where(Review.rating == rating)
        if status:
            query = query.where(Review.status == status)
        query = query.order_by(Review.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_stats(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[str, Any]:
        """Rating distribution and response counts for one restaurant.

        Returns:
            dict[str, Any]: {count, average, responded, distribution: {1..5: n}}
        """
        criteria = [Review.restaurant_id == restaurant_id]
        if start is not None:
            criteria.append(Review.created_at >= start)
        if end is not None:
            criteria.append(Review.created_at < end)

        result = await db.execute(
            select(Review.rating, func.count()).where(*criteria).group_by(Review.rating)
        )
        distribution: dict[int, int] = {star: 0 for star in range(1, 6)}
        for rating, count in result.all():
            distribution[int(rating)] = count

        total: int = sum(distribution.values())
        rating_sum: int = sum(star * count for star, count in distribution.items())
        responded: int = await self.count(db, *criteria, Review.response.is_not(None))
        return {
            "count": total,
            "average": rating_sum / total if total else 0.0,
            "responded": responded,
            "distribution": distribution,
        }


review_repository: ReviewRepository = ReviewRepository()
