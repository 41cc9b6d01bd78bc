"""Restaurant Repositories - owner accounts and public listings.

Cuisine lists and addresses are JSON documents; filters on them go through
``cuisine_clause`` / ``city_clause`` which work on both PostgreSQL and
SQLite (the JSON text is matched for an exact quoted element, encoded with
``json.dumps`` the same way the column stores it).
"""

import json
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, String, and_, case, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.restaurant import Restaurant, RestaurantUser
from foodhub.repositories.base import LIKE_ESCAPE, BaseRepository, like_pattern


def cuisine_clause(column: Any, cuisine: str):
    """Match a JSON list column containing ``cuisine`` (case-insensitive)."""
    return func.lower(cast(column, String)).like(like_pattern(json.dumps(cuisine.strip().lower())), escape=LIKE_ESCAPE)


def city_clause(address_column: Any, city: str):
    """Match a JSON address whose ``city`` equals ``city`` (case-insensitive)."""
    return func.lower(address_column["city"].as_string()) == city.strip().lower()


class RestaurantUserRepository(BaseRepository[RestaurantUser]):
    """Repository for restaurant owner accounts."""

    def __init__(self) -> None:
        super().__init__(RestaurantUser)

    async def get_by_email(self, db: AsyncSession, email: str) -> RestaurantUser | None:
        result = await db.execute(select(RestaurantUser).where(RestaurantUser.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def get_list(
        self,
        db: AsyncSession,
        status: str | None = None,
        city: str | None = None,
        cuisine: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[RestaurantUser], int]:
        """List owner accounts for management, newest first.

        Args:
            db: Async database session
            status: pending | verified | active | inactive
            city: Address city (case-insensitive)
            cuisine: Served cuisine (case-insensitive)
            search: Match on restaurant name, owner name or e-mail
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[RestaurantUser], int]: (accounts, total count)
        """
        query: Select = select(RestaurantUser)
        if status == "pending":
            query = query.where(RestaurantUser.verification_status.in_(("pending", "under_review")))
        elif status == "verified":
            query = query.where(RestaurantUser.is_verified.is_(True))
        elif status == "active":
            query = query.where(RestaurantUser.is_active.is_(True), RestaurantUser.is_verified.is_(True))
        elif status == "inactive":
            query = query.where(RestaurantUser.is_active.is_(False))
        if city:
            query = query.where(city_clause(RestaurantUser.address, city))
        if cuisine:
            query = query.where(cuisine_clause(RestaurantUser.cuisine, cuisine))
        if search:
            pattern = like_pattern(search.strip().lower())
            query = query.where(
                or_(
                    func.lower(RestaurantUser.restaurant_name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(RestaurantUser.owner_name).like(pattern, escape=LIKE_ESCAPE),
                    RestaurantUser.email.like(pattern, escape=LIKE_ESCAPE),
                )
            )
        query = query.order_by(RestaurantUser.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_verification_queue(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[RestaurantUser], int]:
        """Accounts awaiting a decision, oldest first."""
        query: Select = (
            select(RestaurantUser)
            .where(RestaurantUser.verification_status.in_(("pending", "under_review")))
            .order_by(RestaurantUser.created_at.asc())
        )
        return await self.get_paginated(db, query, page, per_page)

    async def count_by_verification_status(self, db: AsyncSession) -> dict[str, int]:
        result = await db.execute(
            select(RestaurantUser.verification_status, func.count())
            .group_by(RestaurantUser.verification_status)
        )
        return {status: count for status, count in result.all()}


class RestaurantRepository(BaseRepository[Restaurant]):
    """Repository for public restaurant listings."""

    def __init__(self) -> None:
        super().__init__(Restaurant)

    async def get_by_owner(self, db: AsyncSession, owner_id: UUID) -> Restaurant | None:
        result = await db.execute(select(Restaurant).where(Restaurant.owner_id == owner_id))
        return result.scalar_one_or_none()

    def _public(self) -> Select:
        return select(Restaurant).where(Restaurant.is_active.is_(True), Restaurant.is_verified.is_(True))

    async def find_by_cuisine(self, db: AsyncSession, cuisine: str) -> list[Restaurant]:
        query: Select = (
            self._public()
            .where(cuisine_clause(Restaurant.cuisine, cuisine))
            .order_by(Restaurant.rating_average.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_by_city(self, db: AsyncSession, city: str) -> list[Restaurant]:
        query: Select = (
            self._public()
            .where(city_clause(Restaurant.address, city))
            .order_by(Restaurant.rating_average.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_public_list(
        self,
        db: AsyncSession,
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Restaurant], int]:
        query: Select = self._public()
        if search:
            query = query.where(func.lower(Restaurant.name).like(like_pattern(search.strip().lower()), escape=LIKE_ESCAPE))
        query = query.order_by(Restaurant.rating_average.desc(), Restaurant.name)
        return await self.get_paginated(db, query, page, per_page)

    async def get_totals(self, db: AsyncSession) -> dict[str, int]:
        result = await db.execute(
            select(
                func.count(Restaurant.id).label("total"),
                func.sum(case((Restaurant.is_active.is_(True), 1), else_=0)).label("active"),
                func.sum(
                    case((and_(Restaurant.is_active.is_(True), Restaurant.is_open.is_(True)), 1), else_=0)
                ).label("open"),
            )
        )
        row = result.one()
        total: int = row.total or 0
        open_count: int = int(row.open or 0)
        return {"total": total, "active": int(row.active or 0), "open": open_count, "closed": total - open_count}

    async def count_created_between(self, db: AsyncSession, start: datetime, end: datetime | None = None) -> int:
        criteria = [Restaurant.created_at >= start]
        if end is not None:
            criteria.append(Restaurant.created_at < end)
        return await self.count(db, *criteria)

    async def top_by_revenue(self, db: AsyncSession, limit: int = 5) -> list[Restaurant]:
        result = await db.execute(
            select(Restaurant).order_by(Restaurant.total_revenue.desc()).limit(limit)
        )
        return list(result.scalars().all())


restaurant_user_repository: RestaurantUserRepository = RestaurantUserRepository()
restaurant_repository: RestaurantRepository = RestaurantRepository()
