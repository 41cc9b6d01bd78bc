"""Delivery request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

_STATUS_PATTERN = r"^(assigned|picked_up|in_transit|delivered|cancelled|delayed|failed)$"
_PAYMENT_PATTERN = r"^(Cash on Delivery|Credit Card|Debit Card|Digital Wallet|Bank Transfer)$"


class DeliveryAssign(BaseModel):
    """Courier assignment request.

    Attributes:
        order_id: Order to deliver
        personnel_id: Courier; must be available
        priority: low | normal | high | urgent
        estimated_minutes: Minutes from now until the promised hand-over
        distance: Route length in kilometres
    """

    order_id: str
    personnel_id: str
    priority: str = Field("normal", pattern=r"^(low|normal|high|urgent)$")
    estimated_minutes: int = Field(30, ge=1, le=600)
    distance: float = Field(0.0, ge=0)
    payment_method: str = Field("Cash on Delivery", pattern=_PAYMENT_PATTERN)
    special_instructions: str | None = Field(None, max_length=500)


class DeliveryStatusUpdate(BaseModel):
    status: str = Field(..., pattern=_STATUS_PATTERN)
    note: str | None = Field(None, max_length=500)


class DeliveryDelay(BaseModel):
    reason: str = Field(..., min_length=1, max_length=255)
    minutes: int = Field(..., ge=1, le=600)


class DeliveryRating(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    feedback: str | None = Field(None, max_length=1000)


class DeliveryResponse(BaseModel):
    id: str
    order_id: str
    order_number: str
    customer: dict[str, Any]
    delivery_address: dict[str, Any]
    restaurant: dict[str, Any]
    personnel: dict[str, Any]
    zone: dict[str, Any]
    personnel_id: str
    zone_id: str
    status: str
    progress_status: str = "assigned"
    priority: str
    assigned_at: datetime
    picked_up_at: datetime | None = None
    estimated_delivery: datetime
    actual_delivery: datetime | None = None
    current_location: dict[str, Any] = {}
    distance: float
    estimated_time_remaining: int
    actual_delivery_time: int | None = None
    delivery_duration: int | None = None
    is_on_time: bool | None = None
    order_value: float
    delivery_charge: float
    total_amount: float
    payment_method: str
    special_instructions: str | None = None
    is_delayed: bool
    delay_reason: str | None = None
    delay_time: int
    customer_rating: int | None = None
    feedback: str | None = None


class TrackingStats(BaseModel):
    active_deliveries: int
    completed_today: int
    average_delivery_time: float
    on_time_deliveries: int
    delayed_deliveries: int
    total_distance: float
