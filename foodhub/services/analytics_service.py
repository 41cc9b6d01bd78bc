"""Analytics Service - delivery performance, daily sales and restaurant statistics.

Write side:
    - ``record_delivery`` folds a finished delivery into its hourly bucket,
      once for the zone and once for the courier.
    - ``record_rating`` adds a customer rating to the same buckets.
    - ``record_order_sales`` upserts the restaurant's DailySales row when an
      order is delivered or cancelled.

Read side: named ranges (today | week | month | quarter | year) over the
zone rows, per-courier performance, and on-demand RestaurantStats.
"""

import logging
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.config import settings
from foodhub.models.analytics import PEAK_HOURS, DailySales, DeliveryAnalytics, RestaurantStats, empty_payment_methods
from foodhub.models.delivery import Delivery
from foodhub.models.order import Order
from foodhub.repositories.analytics_repository import (
    daily_sales_repository,
    delivery_analytics_repository,
    restaurant_stats_repository,
)
from foodhub.repositories.delivery_repository import delivery_repository
from foodhub.repositories.order_repository import order_repository
from foodhub.repositories.review_repository import review_repository
from foodhub.schemas.analytics import (
    DailySalesResponse,
    OverallAnalytics,
    PersonnelPerformance,
    RestaurantStatsResponse,
    TimeSlot,
    TrendPoint,
    ZonePerformance,
)
from foodhub.utils.clock import as_utc, growth_rate, start_of_day, utcnow
from foodhub.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)

# Days covered by each named range, counting back from today
RANGE_DAYS: dict[str, int] = {"today": 0, "week": 7, "month": 30, "quarter": 90, "year": 365}
TOP_ITEMS_LIMIT: int = 10
_ALL_TIME: tuple[date, date] = (date(2000, 1, 1), date(9999, 12, 31))
_STAR_NAMES: dict[int, str] = {5: "five", 4: "four", 3: "three", 2: "two", 1: "one"}


def date_range(range_name: str = "week", today: date | None = None) -> tuple[date, date]:
    """Inclusive (start, end) dates for a named range.

    Raises:
        BadRequestError: Unknown range name
    """
    if range_name not in RANGE_DAYS:
        raise BadRequestError("Date range must be one of: today, week, month, quarter, year")
    today = today or utcnow().date()
    return today - timedelta(days=RANGE_DAYS[range_name]), today


def period_window(period: str, reference: date) -> tuple[date, date]:
    """Inclusive (start, end) of the daily/weekly/monthly/yearly period containing ``reference``."""
    if period == "daily":
        return reference, reference
    if period == "weekly":
        start = reference - timedelta(days=reference.weekday())
        return start, start + timedelta(days=6)
    if period == "monthly":
        start = reference.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return start, next_month - timedelta(days=1)
    if period == "yearly":
        return reference.replace(month=1, day=1), reference.replace(month=12, day=31)
    raise BadRequestError("Period must be one of: daily, weekly, monthly, yearly")


def summarize(counters: dict[str, Any]) -> dict[str, Any]:
    """Derive rates and averages from summed counters.

    Mirrors ``DeliveryAnalytics.recompute`` so aggregated ranges use the
    same formulas as a single hourly row.
    """
    total = int(counters.get("total_deliveries") or 0)
    completed = int(counters.get("completed_deliveries") or 0)
    on_time = int(counters.get("on_time_deliveries") or 0)
    total_ratings = int(counters.get("total_ratings") or 0)

    def ratio(part: float, whole: float) -> float:
        return part / whole if whole else 0.0

    completion_rate = round(ratio(completed, total) * 100)
    on_time_rate = round(ratio(on_time, completed) * 100)
    return {
        "total_deliveries": total,
        "completed_deliveries": completed,
        "cancelled_deliveries": int(counters.get("cancelled_deliveries") or 0),
        "failed_deliveries": int(counters.get("failed_deliveries") or 0),
        "on_time_deliveries": on_time,
        "delayed_deliveries": int(counters.get("delayed_deliveries") or 0),
        "completion_rate": completion_rate,
        "on_time_rate": on_time_rate,
        "efficiency": round((completion_rate + on_time_rate) / 2),
        "average_delivery_time": round(ratio(float(counters.get("total_delivery_time") or 0), completed), 2),
        "total_distance": round(float(counters.get("total_distance") or 0), 2),
        "average_distance": round(ratio(float(counters.get("total_distance") or 0), completed), 2),
        "total_revenue": round(float(counters.get("total_revenue") or 0), 2),
        "total_delivery_charges": round(float(counters.get("total_delivery_charges") or 0), 2),
        "average_order_value": round(ratio(float(counters.get("total_revenue") or 0), completed), 2),
        "average_rating": round(ratio(float(counters.get("rating_sum") or 0), total_ratings), 2),
        "satisfaction_score": round(ratio(int(counters.get("positive_ratings") or 0), total_ratings) * 100),
    }


def zone_grade(summary: dict[str, Any]) -> str:
    """A..F from the mean of completion, on-time and satisfaction."""
    score = (summary["completion_rate"] + summary["on_time_rate"] + summary["satisfaction_score"]) / 3
    for threshold, grade in ((90, "A"), (80, "B"), (70, "C"), (60, "D")):
        if score >= threshold:
            return grade
    return "F"


def personnel_grade(efficiency: float) -> str:
    if efficiency >= 90:
        return "excellent"
    if efficiency >= 80:
        return "good"
    if efficiency >= 70:
        return "average"
    return "poor"


class AnalyticsService:
    """Analytics recording and reporting service."""

    # --- Recording --------------------------------------------------------

    async def _bucket(
        self,
        db: AsyncSession,
        moment: datetime,
        delivery: Delivery,
        personnel: bool,
    ) -> DeliveryAnalytics:
        day, hour = moment.date(), moment.hour
        personnel_id: UUID | None = delivery.personnel_id if personnel else None
        bucket: DeliveryAnalytics | None = await delivery_analytics_repository.get_bucket(
            db, day, hour, delivery.zone_id, personnel_id
        )
        if bucket is None:
            bucket = DeliveryAnalytics(
                date=day,
                hour=hour,
                zone_id=delivery.zone_id,
                zone_name=(delivery.zone or {}).get("name") or "Unknown",
                personnel_id=personnel_id,
                personnel_name=(delivery.personnel or {}).get("name") if personnel else None,
                **{name: 0 for name in (
                    "total_deliveries", "completed_deliveries", "cancelled_deliveries", "failed_deliveries",
                    "on_time_deliveries", "delayed_deliveries", "total_ratings", "positive_ratings",
                    "negative_ratings",
                )},
                **{name: 0.0 for name in (
                    "total_delivery_time", "total_distance", "total_revenue", "total_delivery_charges", "rating_sum",
                )},
            )
            db.add(bucket)
        return bucket

    async def record_delivery(self, db: AsyncSession, delivery: Delivery) -> None:
        """Fold a delivered, cancelled or failed delivery into its hour buckets."""
        moment: datetime = as_utc(delivery.actual_delivery) or utcnow()
        for personnel in (False, True):
            bucket: DeliveryAnalytics = await self._bucket(db, moment, delivery, personnel)
            bucket.total_deliveries += 1
            if delivery.status == "delivered":
                bucket.completed_deliveries += 1
                bucket.total_delivery_time += float(delivery.actual_delivery_time or delivery.delivery_duration or 0)
                if delivery.is_on_time:
                    bucket.on_time_deliveries += 1
                else:
                    bucket.delayed_deliveries += 1
                bucket.total_distance += float(delivery.distance or 0)
                bucket.total_revenue += float(delivery.order_value or 0)
                bucket.total_delivery_charges += float(delivery.delivery_charge or 0)
            elif delivery.status == "cancelled":
                bucket.cancelled_deliveries += 1
            else:
                bucket.failed_deliveries += 1
        await db.flush()
        logger.debug("Analytics recorded for delivery %s (%s)", delivery.order_number, delivery.status)

    async def record_rating(self, db: AsyncSession, delivery: Delivery, rating: int) -> None:
        moment: datetime = as_utc(delivery.actual_delivery) or utcnow()
        for personnel in (False, True):
            bucket: DeliveryAnalytics = await self._bucket(db, moment, delivery, personnel)
            bucket.rating_sum += rating
            bucket.total_ratings += 1
            if rating >= 4:
                bucket.positive_ratings += 1
            elif rating <= 2:
                bucket.negative_ratings += 1
        await db.flush()

    async def record_order_sales(self, db: AsyncSession, order: Order) -> DailySales:
        """Upsert the restaurant's DailySales row for a delivered or cancelled order."""
        moment: datetime = as_utc(order.actual_delivery_time) or utcnow()
        sales: DailySales | None = await daily_sales_repository.get_for_day(db, order.restaurant_id, moment.date())
        if sales is None:
            sales = DailySales(
                date=moment.date(),
                restaurant_id=order.restaurant_id,
                total_orders=0, completed_orders=0, cancelled_orders=0,
                total_revenue=0.0, net_revenue=0.0, commission=0.0, delivery_fees=0.0,
                discounts=0.0, refunds=0.0, average_order_value=0.0,
                peak_hours=[], payment_methods=empty_payment_methods(), top_items=[],
                customer_metrics={"new": 0, "returning": 0},
            )
            db.add(sales)

        sales.total_orders += 1
        if order.status == "cancelled":
            sales.cancelled_orders += 1
            if order.payment_status in ("paid", "refunded"):
                sales.refunds = round(sales.refunds + order.total, 2)
        else:
            await self._fold_completed_order(db, sales, order)

        sales.net_revenue = round(sales.total_revenue - sales.commission - sales.refunds, 2)
        sales.average_order_value = round(sales.total_revenue / sales.completed_orders, 2) if sales.completed_orders else 0.0
        await db.flush()
        return sales

    async def _fold_completed_order(self, db: AsyncSession, sales: DailySales, order: Order) -> None:
        sales.completed_orders += 1
        sales.total_revenue = round(sales.total_revenue + order.total, 2)
        sales.commission = round(sales.commission + order.total * settings.PLATFORM_COMMISSION_RATE, 2)
        sales.delivery_fees = round(sales.delivery_fees + (order.delivery_fee or 0), 2)
        sales.discounts = round(sales.discounts + (order.discount or 0), 2)

        # JSON columns are reassigned so the change is flushed
        methods: dict[str, dict] = {k: dict(v) for k, v in (sales.payment_methods or empty_payment_methods()).items()}
        method = methods.setdefault(order.payment_method, {"count": 0, "amount": 0.0})
        method["count"] += 1
        method["amount"] = round(method["amount"] + order.total, 2)
        sales.payment_methods = methods

        hours: Counter = Counter({entry["hour"]: entry["order_count"] for entry in sales.peak_hours or []})
        hours[as_utc(order.created_at).hour] += 1
        sales.peak_hours = [{"hour": h, "order_count": c} for h, c in sorted(hours.items(), key=lambda kv: (-kv[1], kv[0]))]

        items: dict[str, dict] = {entry["name"]: dict(entry) for entry in sales.top_items or []}
        for line in order.items or []:
            name: str = (line.get("menu_item") or {}).get("name", "Unknown")
            entry = items.setdefault(name, {"name": name, "quantity": 0, "revenue": 0.0})
            entry["quantity"] += int(line.get("quantity") or 0)
            entry["revenue"] = round(entry["revenue"] + float(line.get("subtotal") or 0), 2)
        sales.top_items = sorted(items.values(), key=lambda e: (-e["quantity"], e["name"]))[:TOP_ITEMS_LIMIT]

        returning: bool = await order_repository.customer_has_prior_order(
            db, order.customer_id, order.restaurant_id, order.created_at
        )
        metrics: dict[str, int] = dict(sales.customer_metrics or {"new": 0, "returning": 0})
        metrics["returning" if returning else "new"] = metrics.get("returning" if returning else "new", 0) + 1
        sales.customer_metrics = metrics

    # --- Reporting --------------------------------------------------------

    async def get_overall(self, db: AsyncSession, range_name: str = "week") -> OverallAnalytics:
        start, end = date_range(range_name)
        counters: dict[str, Any] = await delivery_analytics_repository.get_overall(db, start, end)
        return OverallAnalytics(range=range_name, start_date=start, end_date=end, **summarize(counters))

    def _zone_performance(self, rows: list[dict[str, Any]]) -> list[ZonePerformance]:
        results: list[ZonePerformance] = []
        for row in rows:
            summary = summarize(row)
            results.append(
                ZonePerformance(zone_id=str(row["zone_id"]), zone_name=row["zone_name"], grade=zone_grade(summary), **summary)
            )
        results.sort(key=lambda z: z.efficiency, reverse=True)
        return results

    def _personnel_performance(self, rows: list[dict[str, Any]]) -> list[PersonnelPerformance]:
        results: list[PersonnelPerformance] = []
        for row in rows:
            summary = summarize(row)
            results.append(
                PersonnelPerformance(
                    personnel_id=str(row["personnel_id"]),
                    personnel_name=row["personnel_name"],
                    performance=personnel_grade(summary["efficiency"]),
                    **summary,
                )
            )
        results.sort(key=lambda p: p.efficiency, reverse=True)
        return results

    async def get_zone_performance(
        self,
        db: AsyncSession,
        range_name: str = "week",
        zone_id: UUID | None = None,
    ) -> list[ZonePerformance]:
        start, end = date_range(range_name)
        return self._zone_performance(await delivery_analytics_repository.get_by_zone(db, start, end, zone_id))

    async def get_personnel_performance(
        self,
        db: AsyncSession,
        range_name: str = "week",
        personnel_id: UUID | None = None,
    ) -> list[PersonnelPerformance]:
        start, end = date_range(range_name)
        rows = await delivery_analytics_repository.get_by_personnel(db, start, end, personnel_id)
        return self._personnel_performance(rows)

    async def get_time_analytics(self, db: AsyncSession, range_name: str = "week") -> list[TimeSlot]:
        start, end = date_range(range_name)
        return [
            TimeSlot(
                hour=row["hour"],
                label=f"{row['hour']:02d}:00",
                is_peak_hour=row["hour"] in PEAK_HOURS,
                **summarize(row),
            )
            for row in await delivery_analytics_repository.get_by_hour(db, start, end)
        ]

    async def get_delivery_trends(self, db: AsyncSession, range_name: str = "week") -> list[TrendPoint]:
        start, end = date_range(range_name)
        return [
            TrendPoint(date=row["date"], **summarize(row))
            for row in await delivery_analytics_repository.get_by_day(db, start, end)
        ]

    async def get_top_zones(self, db: AsyncSession, limit: int = 10) -> list[ZonePerformance]:
        rows = await delivery_analytics_repository.get_by_zone(db, *_ALL_TIME)
        return self._zone_performance(rows)[:limit]

    async def get_top_personnel(self, db: AsyncSession, limit: int = 10) -> list[PersonnelPerformance]:
        rows = await delivery_analytics_repository.get_by_personnel(db, *_ALL_TIME)
        return self._personnel_performance(rows)[:limit]

    # --- Sales and restaurant statistics ----------------------------------

    def sales_to_response(self, sales: DailySales) -> DailySalesResponse:
        return DailySalesResponse(
            id=str(sales.id),
            date=sales.date,
            restaurant_id=str(sales.restaurant_id),
            total_orders=sales.total_orders,
            completed_orders=sales.completed_orders,
            cancelled_orders=sales.cancelled_orders,
            total_revenue=sales.total_revenue,
            net_revenue=sales.net_revenue,
            commission=sales.commission,
            delivery_fees=sales.delivery_fees,
            discounts=sales.discounts,
            refunds=sales.refunds,
            average_order_value=sales.average_order_value,
            peak_hours=list(sales.peak_hours or []),
            payment_methods=dict(sales.payment_methods or {}),
            top_items=list(sales.top_items or []),
            customer_metrics=dict(sales.customer_metrics or {}),
        )

    async def list_daily_sales(
        self,
        db: AsyncSession,
        start: date,
        end: date,
        restaurant_id: UUID | None = None,
    ) -> list[DailySalesResponse]:
        if end < start:
            raise BadRequestError("End date must not be before start date")
        return [self.sales_to_response(s) for s in await daily_sales_repository.get_range(db, start, end, restaurant_id)]

    def _stats_to_response(self, stats: RestaurantStats) -> RestaurantStatsResponse:
        return RestaurantStatsResponse(
            id=str(stats.id),
            restaurant_id=str(stats.restaurant_id),
            period=stats.period,
            start_date=stats.start_date,
            end_date=stats.end_date,
            orders=dict(stats.orders or {}),
            revenue=dict(stats.revenue or {}),
            customers=dict(stats.customers or {}),
            ratings=dict(stats.ratings or {}),
            delivery=dict(stats.delivery or {}),
            updated_at=stats.updated_at,
        )

    async def _gross_revenue(self, db: AsyncSession, restaurant_id: UUID, start: datetime, end: datetime) -> float:
        orders = await order_repository.get_between(db, start, end, restaurant_id)
        return round(sum(o.total for o in orders if o.status == "delivered"), 2)

    async def compute_restaurant_stats(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        period: str = "daily",
        reference: date | None = None,
    ) -> RestaurantStatsResponse:
        """Compute and persist one restaurant's statistics for a period.

        An existing snapshot for the same period start is overwritten.

        Args:
            db: Async database session
            restaurant_id: Public listing id
            period: daily | weekly | monthly | yearly
            reference: Any day inside the period (default today)

        Returns:
            RestaurantStatsResponse: The stored snapshot
        """
        start_day, end_day = period_window(period, reference or utcnow().date())
        start, end = start_of_day(start_day), start_of_day(end_day + timedelta(days=1))
        orders: list[Order] = await order_repository.get_between(db, start, end, restaurant_id)

        delivered = [o for o in orders if o.status == "delivered"]
        cancelled = [o for o in orders if o.status == "cancelled"]
        gross: float = round(sum(o.total for o in delivered), 2)
        commission: float = round(gross * settings.PLATFORM_COMMISSION_RATE, 2)
        previous_start = start - (end - start)
        previous_gross: float = await self._gross_revenue(db, restaurant_id, previous_start, start)

        customer_ids = {o.customer_id for o in orders}
        returning: int = 0
        for customer_id in customer_ids:
            if await order_repository.customer_has_prior_order(db, customer_id, restaurant_id, start):
                returning += 1

        review_stats: dict[str, Any] = await review_repository.get_stats(db, restaurant_id, start, end)
        deliveries: list[Delivery] = await delivery_repository.get_for_restaurant_between(db, restaurant_id, start, end)
        delivery_times = [d.actual_delivery_time for d in deliveries if d.actual_delivery_time is not None]
        on_time: int = sum(1 for d in deliveries if d.is_on_time)

        sections: dict[str, dict] = {
            "orders": {
                "total": len(orders),
                "completed": len(delivered),
                "cancelled": len(cancelled),
                "average_value": round(gross / len(delivered), 2) if delivered else 0.0,
                "completion_rate": round(len(delivered) / len(orders) * 100, 2) if orders else 0.0,
            },
            "revenue": {
                "gross": gross,
                "net": round(gross - commission, 2),
                "commission": commission,
                "growth": growth_rate(gross, previous_gross),
            },
            "customers": {
                "total": len(customer_ids),
                "new": len(customer_ids) - returning,
                "returning": returning,
                "retention_rate": round(returning / len(customer_ids) * 100, 2) if customer_ids else 0.0,
            },
            "ratings": {
                "average": round(review_stats["average"], 1),
                "count": review_stats["count"],
                "distribution": {
                    _STAR_NAMES[star]: count for star, count in sorted(review_stats["distribution"].items(), reverse=True)
                },
            },
            "delivery": {
                "average_time": round(sum(delivery_times) / len(delivery_times), 2) if delivery_times else 0.0,
                "on_time_rate": round(on_time / len(deliveries) * 100, 2) if deliveries else 0.0,
                "delayed_orders": len(deliveries) - on_time,
            },
        }

        stats: RestaurantStats | None = await restaurant_stats_repository.get_for_period(
            db, restaurant_id, period, start_day
        )
        if stats is None:
            stats = await restaurant_stats_repository.create(
                db,
                {"restaurant_id": restaurant_id, "period": period, "start_date": start_day, "end_date": end_day, **sections},
            )
        else:
            stats = await restaurant_stats_repository.update(db, stats.id, {"end_date": end_day, **sections})
        return self._stats_to_response(stats)


# Singleton instance
analytics_service: AnalyticsService = AnalyticsService()
