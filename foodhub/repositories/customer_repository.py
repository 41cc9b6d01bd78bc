"""Customer Repository - customer account queries and segment filters."""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.customer import PREMIUM_SPEND, REGULAR_SPEND, Customer
from foodhub.repositories.base import LIKE_ESCAPE, BaseRepository, like_pattern


def segment_clause(segment: str):
    """SQL criterion matching ``Customer.segment`` for one segment name."""
    if segment == "premium":
        return Customer.total_spent >= PREMIUM_SPEND
    if segment == "regular":
        return and_(Customer.total_spent >= REGULAR_SPEND, Customer.total_spent < PREMIUM_SPEND)
    return Customer.total_spent < REGULAR_SPEND


class CustomerRepository(BaseRepository[Customer]):
    """Repository for the customers table."""

    def __init__(self) -> None:
        super().__init__(Customer)

    async def get_by_email(self, db: AsyncSession, email: str) -> Customer | None:
        result = await db.execute(select(Customer).where(Customer.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def email_or_phone_taken(
        self,
        db: AsyncSession,
        email: str | None,
        phone: str | None,
        exclude_id: UUID | None = None,
    ) -> bool:
        """Whether another customer already uses ``email`` or ``phone``."""
        criteria = []
        if email:
            criteria.append(Customer.email == email.strip().lower())
        if phone:
            criteria.append(Customer.phone == phone)
        if not criteria:
            return False
        query: Select = select(func.count()).select_from(Customer).where(or_(*criteria))
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)
        return ((await db.execute(query)).scalar() or 0) > 0

    async def get_list(
        self,
        db: AsyncSession,
        status: str | None = None,
        segment: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Customer], int]:
        """List customers for the back office, newest first.

        Args:
            db: Async database session
            status: ``active`` or ``inactive``
            segment: ``premium``, ``regular`` or ``new``
            search: Case-insensitive match on name or e-mail
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[Customer], int]: (customers, total count)
        """
        query: Select = select(Customer)
        if status == "active":
            query = query.where(Customer.is_active.is_(True))
        elif status == "inactive":
            query = query.where(Customer.is_active.is_(False))
        if segment:
            query = query.where(segment_clause(segment))
        if search:
            pattern = like_pattern(search.strip().lower())
            query = query.where(or_(func.lower(Customer.name).like(pattern, escape=LIKE_ESCAPE), Customer.email.like(pattern, escape=LIKE_ESCAPE)))
        query = query.order_by(Customer.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def count_created_between(self, db: AsyncSession, start: datetime, end: datetime | None = None) -> int:
        criteria = [Customer.created_at >= start]
        if end is not None:
            criteria.append(Customer.created_at < end)
        return await self.count(db, *criteria)

    async def get_active_ids(self, db: AsyncSession) -> list[UUID]:
        result = await db.execute(select(Customer.id).where(Customer.is_active.is_(True)))
        return list(result.scalars().all())


customer_repository: CustomerRepository = CustomerRepository()
