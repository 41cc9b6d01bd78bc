"""Analytics SQLAlchemy ORM model definitions.

Tables:
    - delivery_analytics: Hourly delivery aggregates per zone (and courier)
    - daily_sales: Daily sales rollup per restaurant
    - restaurant_stats: Period statistics snapshot per restaurant
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column

from foodhub.database import Base

STATS_PERIODS: tuple[str, ...] = ("daily", "weekly", "monthly", "yearly")
# Hours counted as lunch and dinner rush
PEAK_HOURS: frozenset[int] = frozenset({12, 13, 19, 20, 21})


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole else 0.0


class DeliveryAnalytics(Base):
    """Hourly delivery aggregate for one zone, optionally one courier.

    Rates are recomputed from the raw counters before every flush, so only
    the counters need to be incremented by callers.
    """

    __tablename__ = "delivery_analytics"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    hour: Mapped[int] = mapped_column(Integer, nullable=False)  # 0..23
    day_of_week: Mapped[int] = mapped_column(Integer, default=0)  # 0=Monday
    month: Mapped[int] = mapped_column(Integer, default=1)
    year: Mapped[int] = mapped_column(Integer, default=2000)

    zone_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("zones.id", ondelete="CASCADE"), nullable=False)
    zone_name: Mapped[str] = mapped_column(String(100), nullable=False)
    personnel_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("delivery_personnel.id", ondelete="SET NULL"), nullable=True)
    personnel_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Counters
    total_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    completed_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    cancelled_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    failed_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    total_delivery_time: Mapped[float] = mapped_column(Float, default=0.0)
    on_time_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    delayed_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    total_distance: Mapped[float] = mapped_column(Float, default=0.0)
    total_revenue: Mapped[float] = mapped_column(Float, default=0.0)
    total_delivery_charges: Mapped[float] = mapped_column(Float, default=0.0)
    rating_sum: Mapped[float] = mapped_column(Float, default=0.0)
    total_ratings: Mapped[int] = mapped_column(Integer, default=0)
    positive_ratings: Mapped[int] = mapped_column(Integer, default=0)  # 4-5 stars
    negative_ratings: Mapped[int] = mapped_column(Integer, default=0)  # 1-2 stars

    # Derived
    average_delivery_time: Mapped[float] = mapped_column(Float, default=0.0)
    average_distance: Mapped[float] = mapped_column(Float, default=0.0)
    average_order_value: Mapped[float] = mapped_column(Float, default=0.0)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0)
    completion_rate: Mapped[int] = mapped_column(Integer, default=0)
    on_time_rate: Mapped[int] = mapped_column(Integer, default=0)
    efficiency: Mapped[int] = mapped_column(Integer, default=0)

    is_peak_hour: Mapped[bool] = mapped_column(Boolean, default=False)
    weather: Mapped[str | None] = mapped_column(String(30), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def success_rate(self) -> int:
        return round(_ratio(self.completed_deliveries or 0, self.total_deliveries or 0) * 100)

    @property
    def satisfaction_score(self) -> int:
        return round(_ratio(self.positive_ratings or 0, self.total_ratings or 0) * 100)

    @property
    def performance_grade(self) -> str:
        score = ((self.completion_rate or 0) + (self.on_time_rate or 0) + self.satisfaction_score) / 3
        if score >= 90:
            return "A"
        if score >= 80:
            return "B"
        if score >= 70:
            return "C"
        if score >= 60:
            return "D"
        return "F"

    def recompute(self) -> None:
        """Derive rates, averages and date parts from the counters."""
        total: int = self.total_deliveries or 0
        completed: int = self.completed_deliveries or 0

        self.completion_rate = round(_ratio(completed, total) * 100)
        self.on_time_rate = round(_ratio(self.on_time_deliveries or 0, completed) * 100)
        self.average_delivery_time = round(_ratio(self.total_delivery_time or 0.0, completed), 2)
        self.average_distance = round(_ratio(self.total_distance or 0.0, completed), 2)
        self.average_order_value = round(_ratio(self.total_revenue or 0.0, completed), 2)
        self.average_rating = round(_ratio(self.rating_sum or 0.0, self.total_ratings or 0), 2)
        self.efficiency = round((self.completion_rate + self.on_time_rate) / 2)

        if self.date is not None:
            self.day_of_week = self.date.weekday()
            self.month = self.date.month
            self.year = self.date.year
        if self.hour is not None:
            self.is_peak_hour = self.hour in PEAK_HOURS


@event.listens_for(DeliveryAnalytics, "before_insert")
@event.listens_for(DeliveryAnalytics, "before_update")
def _recompute_analytics(mapper, connection, target: DeliveryAnalytics) -> None:
    target.recompute()


def empty_payment_methods() -> dict[str, dict]:
    return {key: {"count": 0, "amount": 0.0} for key in ("card", "cash", "wallet", "upi")}


class DailySales(Base):
    """Daily sales rollup for one restaurant.

    Attributes:
        date / restaurant_id: Unique key
        total_orders / completed_orders / cancelled_orders: Order counts
        total_revenue / net_revenue / commission / delivery_fees / discounts / refunds: Money
        average_order_value: total_revenue / completed_orders
        peak_hours: [{hour, order_count}]
        payment_methods: {card, cash, wallet, upi: {count, amount}}
        top_items: [{name, quantity, revenue}]
        customer_metrics: {new, returning}
    """

    __tablename__ = "daily_sales"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    restaurant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)

    total_orders: Mapped[int] = mapped_column(Integer, default=0)
    completed_orders: Mapped[int] = mapped_column(Integer, default=0)
    cancelled_orders: Mapped[int] = mapped_column(Integer, default=0)
    total_revenue: Mapped[float] = mapped_column(Float, default=0.0)
    net_revenue: Mapped[float] = mapped_column(Float, default=0.0)
    commission: Mapped[float] = mapped_column(Float, default=0.0)
    delivery_fees: Mapped[float] = mapped_column(Float, default=0.0)
    discounts: Mapped[float] = mapped_column(Float, default=0.0)
    refunds: Mapped[float] = mapped_column(Float, default=0.0)
    average_order_value: Mapped[float] = mapped_column(Float, default=0.0)

    peak_hours: Mapped[list] = mapped_column(JSON, default=list)
    payment_methods: Mapped[dict] = mapped_column(JSON, default=empty_payment_methods)
    top_items: Mapped[list] = mapped_column(JSON, default=list)
    customer_metrics: Mapped[dict] = mapped_column(JSON, default=lambda: {"new": 0, "returning": 0})

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("date", "restaurant_id", name="uq_daily_sales_date_restaurant"),
    )


class RestaurantStats(Base):
    """Statistics snapshot for one restaurant over one period.

    The nested sections are JSON documents:
        orders: {total, completed, cancelled, average_value, completion_rate}
        revenue: {gross, net, commission, growth}
        customers: {total, new, returning, retention_rate}
        ratings: {average, count, distribution: {five, four, three, two, one}}
        delivery: {average_time, on_time_rate, delayed_orders}
    """

    __tablename__ = "restaurant_stats"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    period: Mapped[str] = mapped_column(String(10), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    orders: Mapped[dict] = mapped_column(JSON, default=dict)
    revenue: Mapped[dict] = mapped_column(JSON, default=dict)
    customers: Mapped[dict] = mapped_column(JSON, default=dict)
    ratings: Mapped[dict] = mapped_column(JSON, default=dict)
    delivery: Mapped[dict] = mapped_column(JSON, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("restaurant_id", "period", "start_date", name="uq_restaurant_stats_period"),
    )
