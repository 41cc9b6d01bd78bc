"""Order request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

_STATUS_PATTERN = r"^(placed|confirmed|preparing|ready|picked_up|delivered|cancelled)$"


class OrderItemPayload(BaseModel):
    """One order line; the price comes from the restaurant's menu item."""

    menu_item_id: str
    quantity: int = Field(..., ge=1)
    customizations: list[str] = []


class OrderCreate(BaseModel):
    """Order placement request.

    Attributes:
        restaurant_id: Public listing UUID; the restaurant must be active
        items: At least one line
        delivery_address: Address document; defaults to the customer's default address
        delivery_fee: Falls back to the restaurant's or the platform default fee
        tax / discount: Pricing adjustments
    """

    restaurant_id: str
    items: list[OrderItemPayload] = Field(..., min_length=1)
    delivery_address: dict[str, Any] | None = None
    delivery_fee: float | None = Field(None, ge=0)
    tax: float = Field(0.0, ge=0)
    discount: float = Field(0.0, ge=0)
    payment_method: str = Field("cash", pattern=r"^(cash|card|wallet|upi)$")
    special_instructions: str | None = Field(None, max_length=500)


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., pattern=_STATUS_PATTERN)
    note: str | None = Field(None, max_length=500)
    cancellation_reason: str | None = Field(None, max_length=500)


class OrderCancel(BaseModel):
    reason: str | None = Field(None, max_length=500)


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    restaurant_id: str
    zone_id: str | None = None
    items: list[dict[str, Any]]
    delivery_address: dict[str, Any]
    subtotal: float
    delivery_fee: float
    tax: float
    discount: float
    total: float
    status: str
    payment_status: str
    payment_method: str
    estimated_delivery_time: datetime | None = None
    picked_up_at: datetime | None = None
    actual_delivery_time: datetime | None = None
    delivery_person_id: str | None = None
    tracking_updates: list[dict[str, Any]]
    delivery_otp: str | None = None
    special_instructions: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime
