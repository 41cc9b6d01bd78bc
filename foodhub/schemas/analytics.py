"""Delivery analytics, daily sales and restaurant statistics schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

ANALYTICS_RANGE_PATTERN = r"^(today|week|month|quarter|year)$"


class PerformanceSummary(BaseModel):
    """Rates and totals derived from summed hourly counters.

    Attributes:
        total_deliveries / completed_deliveries / cancelled_deliveries / failed_deliveries: Counts
        completion_rate / on_time_rate / efficiency: Percentages (rounded)
        average_delivery_time: Minutes per completed delivery
        total_distance / average_distance: Kilometres
        total_revenue / total_delivery_charges / average_order_value: Money
        average_rating / satisfaction_score: Customer feedback
    """

    total_deliveries: int = 0
    completed_deliveries: int = 0
    cancelled_deliveries: int = 0
    failed_deliveries: int = 0
    on_time_deliveries: int = 0
    delayed_deliveries: int = 0
    completion_rate: int = 0
    on_time_rate: int = 0
    efficiency: int = 0
    average_delivery_time: float = 0.0
    total_distance: float = 0.0
    average_distance: float = 0.0
    total_revenue: float = 0.0
    total_delivery_charges: float = 0.0
    average_order_value: float = 0.0
    average_rating: float = 0.0
    satisfaction_score: int = 0


class OverallAnalytics(PerformanceSummary):
    range: str
    start_date: date
    end_date: date


class ZonePerformance(PerformanceSummary):
    zone_id: str
    zone_name: str
    grade: str  # A..F


class PersonnelPerformance(PerformanceSummary):
    personnel_id: str
    personnel_name: str | None = None
    performance: str  # excellent | good | average | poor


class TimeSlot(PerformanceSummary):
    hour: int
    label: str  # "HH:00"
    is_peak_hour: bool


class TrendPoint(PerformanceSummary):
    date: date


class DailySalesResponse(BaseModel):
    id: str
    date: date
    restaurant_id: str
    total_orders: int
    completed_orders: int
    cancelled_orders: int
    total_revenue: float
    net_revenue: float
    commission: float
    delivery_fees: float
    discounts: float
    refunds: float
    average_order_value: float
    peak_hours: list[dict[str, Any]] = []
    payment_methods: dict[str, Any] = {}
    top_items: list[dict[str, Any]] = []
    customer_metrics: dict[str, Any] = {}


class RestaurantStatsResponse(BaseModel):
    """Period statistics snapshot for one restaurant."""

    id: str
    restaurant_id: str
    period: str
    start_date: date
    end_date: date
    orders: dict[str, Any]
    revenue: dict[str, Any]
    customers: dict[str, Any]
    ratings: dict[str, Any]
    delivery: dict[str, Any]
    updated_at: datetime
