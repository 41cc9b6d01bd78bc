"""Order Repository - order listing and dashboard aggregates."""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.order import PENDING_ORDER_STATUSES, Order
from foodhub.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """Repository for the orders table."""

    def __init__(self) -> None:
        super().__init__(Order)

    async def get_list(
        self,
        db: AsyncSession,
        status: str | None = None,
        restaurant_id: UUID | None = None,
        customer_id: UUID | None = None,
        delivery_person_id: UUID | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Order], int]:
        """List orders, newest first.

        Args:
            db: Async database session
            status: Exact status filter
            restaurant_id: Restaurant listing filter
            customer_id: Customer filter
            delivery_person_id: Assigned courier filter
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[Order], int]: (orders, total count)
        """
        query: Select = select(Order)
        if status:
            query = query.where(Order.status == status)
        if restaurant_id is not None:
            query = query.where(Order.restaurant_id == restaurant_id)
        if customer_id is not None:
            query = query.where(Order.customer_id == customer_id)
        if delivery_person_id is not None:
            query = query.where(Order.delivery_person_id == delivery_person_id)
        query = query.order_by(Order.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_recent(
        self,
        db: AsyncSession,
        limit: int = 10,
        restaurant_id: UUID | None = None,
    ) -> list[Order]:
        query: Select = select(Order)
        if restaurant_id is not None:
            query = query.where(Order.restaurant_id == restaurant_id)
        result = await db.execute(query.order_by(Order.created_at.desc()).limit(limit))
        return list(result.scalars().all())

    async def count_created_between(
        self,
        db: AsyncSession,
        start: datetime,
        end: datetime | None = None,
        restaurant_id: UUID | None = None,
    ) -> int:
        criteria = [Order.created_at >= start]
        if end is not None:
            criteria.append(Order.created_at < end)
        if restaurant_id is not None:
            criteria.append(Order.restaurant_id == restaurant_id)
        return await self.count(db, *criteria)

    async def get_between(
        self,
        db: AsyncSession,
        start: datetime,
        end: datetime,
        restaurant_id: UUID | None = None,
    ) -> list[Order]:
        query: Select = select(Order).where(Order.created_at >= start, Order.created_at < end)
        if restaurant_id is not None:
            query = query.where(Order.restaurant_id == restaurant_id)
        result = await db.execute(query.order_by(Order.created_at))
        return list(result.scalars().all())

    async def get_day_summary(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        start: datetime,
        end: datetime,
    ) -> dict[str, Any]:
        """Order counts and delivered revenue for one restaurant in a window."""
        result = await db.execute(
            select(
                func.count(Order.id).label("total"),
                func.sum(case((Order.status == "delivered", 1), else_=0)).label("completed"),
                func.sum(case((Order.status.in_(PENDING_ORDER_STATUSES), 1), else_=0)).label("pending"),
                func.coalesce(func.sum(case((Order.status == "delivered", Order.total), else_=0)), 0).label("revenue"),
            ).where(
                Order.restaurant_id == restaurant_id,
                Order.created_at >= start,
                Order.created_at < end,
            )
        )
        row = result.one()
        return {
            "total": row.total or 0,
            "completed": int(row.completed or 0),
            "pending": int(row.pending or 0),
            "revenue": float(row.revenue or 0),
        }

    async def customer_has_prior_order(
        self,
        db: AsyncSession,
        customer_id: UUID,
        restaurant_id: UUID,
        before: datetime,
    ) -> bool:
        count: int = await self.count(
            db,
            Order.customer_id == customer_id,
            Order.restaurant_id == restaurant_id,
            Order.created_at < before,
        )
        return count > 0


order_repository: OrderRepository = OrderRepository()
