"""Delivery Repository - courier assignment queries and tracking stats."""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.delivery import ACTIVE_DELIVERY_STATUSES, Delivery
from foodhub.models.order import Order
from foodhub.repositories.base import BaseRepository


class DeliveryRepository(BaseRepository[Delivery]):
    """Repository for the deliveries table."""

    def __init__(self) -> None:
        super().__init__(Delivery)

    async def get_by_order(self, db: AsyncSession, order_id: UUID) -> Delivery | None:
        """Latest delivery of an order; earlier ones ended cancelled or failed."""
        result = await db.execute(
            select(Delivery)
            .where(Delivery.order_id == order_id)
            .order_by(Delivery.assigned_at.desc(), Delivery.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_for_personnel(self, db: AsyncSession, personnel_id: UUID) -> int:
        return await self.count(db, Delivery.personnel_id == personnel_id)

    async def get_list(
        self,
        db: AsyncSession,
        status: str | None = None,
        personnel_id: UUID | None = None,
        zone_id: UUID | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Delivery], int]:
        query: Select = select(Delivery)
        if status:
            query = query.where(Delivery.status == status)
        if personnel_id is not None:
            query = query.where(Delivery.personnel_id == personnel_id)
        if zone_id is not None:
            query = query.where(Delivery.zone_id == zone_id)
        query = query.order_by(Delivery.assigned_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_active(
        self,
        db: AsyncSession,
        personnel_id: UUID | None = None,
        zone_id: UUID | None = None,
    ) -> list[Delivery]:
        """In-flight deliveries, most urgent estimate first."""
        query: Select = select(Delivery).where(Delivery.status.in_(ACTIVE_DELIVERY_STATUSES))
        if personnel_id is not None:
            query = query.where(Delivery.personnel_id == personnel_id)
        if zone_id is not None:
            query = query.where(Delivery.zone_id == zone_id)
        result = await db.execute(query.order_by(Delivery.estimated_delivery.asc()))
        return list(result.scalars().all())

    async def get_tracking_stats(
        self,
        db: AsyncSession,
        day_start: datetime,
        day_end: datetime,
    ) -> dict[str, Any]:
        """Live tracking counters.

        ``completed_today`` and the averages cover deliveries handed over
        between ``day_start`` and ``day_end``.
        """
        active: int = await self.count(db, Delivery.status.in_(ACTIVE_DELIVERY_STATUSES))
        delayed: int = await self.count(
            db,
            Delivery.is_delayed.is_(True),
            Delivery.status.notin_(("delivered", "cancelled", "failed")),
        )

        result = await db.execute(
            select(
                func.count(Delivery.id).label("completed"),
                func.coalesce(func.avg(Delivery.actual_delivery_time), 0).label("average_time"),
                func.sum(case((Delivery.actual_delivery <= Delivery.estimated_delivery, 1), else_=0)).label("on_time"),
                func.coalesce(func.sum(Delivery.distance), 0).label("distance"),
            ).where(
                Delivery.status == "delivered",
                Delivery.actual_delivery >= day_start,
                Delivery.actual_delivery < day_end,
            )
        )
        row = result.one()
        return {
            "active_deliveries": active,
            "completed_today": row.completed or 0,
            "average_delivery_time": round(float(row.average_time or 0), 2),
            "on_time_deliveries": int(row.on_time or 0),
            "delayed_deliveries": delayed,
            "total_distance": round(float(row.distance or 0), 2),
        }

    async def get_for_restaurant_between(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        start: datetime,
        end: datetime,
    ) -> list[Delivery]:
        """Finished deliveries of one restaurant's orders in a window."""
        query: Select = (
            select(Delivery)
            .join(Order, Order.id == Delivery.order_id)
            .where(
                Order.restaurant_id == restaurant_id,
                Delivery.status == "delivered",
                Delivery.actual_delivery >= start,
                Delivery.actual_delivery < end,
            )
        )
        result = await db.execute(query)
        return list(result.scalars().all())


delivery_repository: DeliveryRepository = DeliveryRepository()
