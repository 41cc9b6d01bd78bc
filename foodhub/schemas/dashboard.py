"""Dashboard response schemas."""

from pydantic import BaseModel

from foodhub.schemas.delivery import TrackingStats
from foodhub.schemas.order import OrderResponse
from foodhub.schemas.personnel import PersonnelStats
from foodhub.schemas.zone import ZoneStats


class RestaurantSummary(BaseModel):
    id: str
    name: str
    total_orders: int
    total_revenue: float
    rating_average: float


class GrowthRates(BaseModel):
    """Month-over-month growth percentages."""

    restaurants: float
    customers: float
    orders: float


class AdminOverview(BaseModel):
    """Platform-wide overview for super admins.

    Attributes:
        open_restaurants: Active listings currently flagged open
        monthly_revenue / monthly_commission: DailySales since the month start
        top_restaurants: Five listings with the highest revenue
        recent_orders: Ten newest orders
    """

    total_restaurants: int
    active_restaurants: int
    open_restaurants: int
    closed_restaurants: int
    total_customers: int
    total_orders: int
    today_orders: int
    monthly_orders: int
    monthly_revenue: float
    monthly_commission: float
    top_restaurants: list[RestaurantSummary]
    recent_orders: list[OrderResponse]
    growth: GrowthRates


class RatingSummary(BaseModel):
    average: float
    count: int


class RestaurantDashboard(BaseModel):
    restaurant_id: str
    restaurant_name: str
    today_orders: int
    today_revenue: float
    completed_orders: int
    pending_orders: int
    average_order_value: float
    recent_orders: list[OrderResponse]
    rating: RatingSummary


class DeliveryDashboard(BaseModel):
    tracking: TrackingStats
    personnel: PersonnelStats
    zones: ZoneStats
