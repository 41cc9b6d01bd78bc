"""Analytics Repositories - delivery analytics, daily sales and restaurant stats.

DeliveryAnalytics holds two kinds of hourly rows: zone rows
(``personnel_id IS NULL``) and courier rows (``personnel_id`` set). Zone-level
queries read only zone rows so a delivery is never counted twice.
"""

from datetime import date
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.analytics import DailySales, DeliveryAnalytics, RestaurantStats
from foodhub.repositories.base import BaseRepository

_COUNTER_COLUMNS: tuple[str, ...] = (
    "total_deliveries",
    "completed_deliveries",
    "cancelled_deliveries",
    "failed_deliveries",
    "total_delivery_time",
    "on_time_deliveries",
    "delayed_deliveries",
    "total_distance",
    "total_revenue",
    "total_delivery_charges",
    "rating_sum",
    "total_ratings",
    "positive_ratings",
    "negative_ratings",
)


def _counter_sums() -> list[Any]:
    return [
        func.coalesce(func.sum(getattr(DeliveryAnalytics, name)), 0).label(name)
        for name in _COUNTER_COLUMNS
    ]


def _row_to_dict(row: Any) -> dict[str, Any]:
    return {name: getattr(row, name) for name in row._fields}


class DeliveryAnalyticsRepository(BaseRepository[DeliveryAnalytics]):
    """Repository for hourly delivery analytics rows."""

    def __init__(self) -> None:
        super().__init__(DeliveryAnalytics)

    async def get_bucket(
        self,
        db: AsyncSession,
        day: date,
        hour: int,
        zone_id: UUID,
        personnel_id: UUID | None = None,
    ) -> DeliveryAnalytics | None:
        query: Select = select(DeliveryAnalytics).where(
            DeliveryAnalytics.date == day,
            DeliveryAnalytics.hour == hour,
            DeliveryAnalytics.zone_id == zone_id,
        )
        if personnel_id is None:
            query = query.where(DeliveryAnalytics.personnel_id.is_(None))
        else:
            query = query.where(DeliveryAnalytics.personnel_id == personnel_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    def _zone_rows(self, start: date, end: date) -> list[Any]:
        return [
            DeliveryAnalytics.personnel_id.is_(None),
            DeliveryAnalytics.date >= start,
            DeliveryAnalytics.date <= end,
        ]

    async def get_overall(self, db: AsyncSession, start: date, end: date) -> dict[str, Any]:
        result = await db.execute(select(*_counter_sums()).where(*self._zone_rows(start, end)))
        return _row_to_dict(result.one())

    async def get_by_zone(
        self,
        db: AsyncSession,
        start: date,
        end: date,
        zone_id: UUID | None = None,
    ) -> list[dict[str, Any]]:
        query: Select = (
            select(DeliveryAnalytics.zone_id, DeliveryAnalytics.zone_name, *_counter_sums())
            .where(*self._zone_rows(start, end))
            .group_by(DeliveryAnalytics.zone_id, DeliveryAnalytics.zone_name)
        )
        if zone_id is not None:
            query = query.where(DeliveryAnalytics.zone_id == zone_id)
        result = await db.execute(query)
        return [_row_to_dict(row) for row in result.all()]

    async def get_by_personnel(
        self,
        db: AsyncSession,
        start: date,
        end: date,
        personnel_id: UUID | None = None,
    ) -> list[dict[str, Any]]:
        query: Select = (
            select(DeliveryAnalytics.personnel_id, DeliveryAnalytics.personnel_name, *_counter_sums())
            .where(
                DeliveryAnalytics.personnel_id.is_not(None),
                DeliveryAnalytics.date >= start,
                DeliveryAnalytics.date <= end,
            )
            .group_by(DeliveryAnalytics.personnel_id, DeliveryAnalytics.personnel_name)
        )
        if personnel_id is not None:
            query = query.where(DeliveryAnalytics.personnel_id == personnel_id)
        result = await db.execute(query)
        return [_row_to_dict(row) for row in result.all()]

    async def get_by_hour(self, db: AsyncSession, start: date, end: date) -> list[dict[str, Any]]:
        result = await db.execute(
            select(DeliveryAnalytics.hour, *_counter_sums())
            .where(*self._zone_rows(start, end))
            .group_by(DeliveryAnalytics.hour)
            .order_by(DeliveryAnalytics.hour)
        )
        return [_row_to_dict(row) for row in result.all()]

    async def get_by_day(self, db: AsyncSession, start: date, end: date) -> list[dict[str, Any]]:
        result = await db.execute(
            select(DeliveryAnalytics.date, *_counter_sums())
            .where(*self._zone_rows(start, end))
            .group_by(DeliveryAnalytics.date)
            .order_by(DeliveryAnalytics.date)
        )
        return [_row_to_dict(row) for row in result.all()]


class DailySalesRepository(BaseRepository[DailySales]):
    """Repository for per-restaurant daily sales rollups."""

    def __init__(self) -> None:
        super().__init__(DailySales)

    async def get_for_day(self, db: AsyncSession, restaurant_id: UUID, day: date) -> DailySales | None:
        result = await db.execute(
            select(DailySales).where(DailySales.restaurant_id == restaurant_id, DailySales.date == day)
        )
        return result.scalar_one_or_none()

    async def get_range(
        self,
        db: AsyncSession,
        start: date,
        end: date,
        restaurant_id: UUID | None = None,
    ) -> Sequence[DailySales]:
        query: Select = select(DailySales).where(DailySales.date >= start, DailySales.date <= end)
        if restaurant_id is not None:
            query = query.where(DailySales.restaurant_id == restaurant_id)
        result = await db.execute(query.order_by(DailySales.date, DailySales.restaurant_id))
        return result.scalars().all()

    async def get_totals_since(self, db: AsyncSession, start: date) -> dict[str, float]:
        """Platform revenue and commission from ``start`` onwards."""
        result = await db.execute(
            select(
                func.coalesce(func.sum(DailySales.total_revenue), 0).label("revenue"),
                func.coalesce(func.sum(DailySales.commission), 0).label("commission"),
            ).where(DailySales.date >= start)
        )
        row = result.one()
        return {"revenue": round(float(row.revenue or 0), 2), "commission": round(float(row.commission or 0), 2)}


class RestaurantStatsRepository(BaseRepository[RestaurantStats]):
    """Repository for restaurant period statistics snapshots."""

    def __init__(self) -> None:
        super().__init__(RestaurantStats)

    async def get_for_period(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        period: str,
        start_date: date,
    ) -> RestaurantStats | None:
        result = await db.execute(
            select(RestaurantStats).where(
                RestaurantStats.restaurant_id == restaurant_id,
                RestaurantStats.period == period,
                RestaurantStats.start_date == start_date,
            )
        )
        return result.scalar_one_or_none()


delivery_analytics_repository: DeliveryAnalyticsRepository = DeliveryAnalyticsRepository()
daily_sales_repository: DailySalesRepository = DailySalesRepository()
restaurant_stats_repository: RestaurantStatsRepository = RestaurantStatsRepository()
