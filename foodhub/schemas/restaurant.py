"""Restaurant owner account and listing schemas."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from foodhub.models.restaurant import WEEKDAYS
from foodhub.schemas.common import Coordinates


class RestaurantAddress(BaseModel):
    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    coordinates: Coordinates | None = None


class DayHours(BaseModel):
    open: str = Field("09:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    close: str = Field("22:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    is_closed: bool = False


def _check_established_year(value: int | None) -> int | None:
    if value is not None and not 1900 <= value <= datetime.now(timezone.utc).year:
        raise ValueError("Established year must be between 1900 and the current year")
    return value


def _check_delivery_window(data: Any) -> Any:
    low, high = getattr(data, "delivery_time_min", None), getattr(data, "delivery_time_max", None)
    if low is not None and high is not None and high <= low:
        raise ValueError("Maximum delivery time must be greater than minimum delivery time")
    return data


class RestaurantRegister(BaseModel):
    """Restaurant owner registration request.

    Attributes:
        email / password: Credentials (password >= 6 chars)
        restaurant_name / owner_name / phone: Identity
        description: <= 500 chars
        address: Postal address
        business_license / tax_id / established_year: Business details
        cuisine: Served cuisines
        delivery_time_min / delivery_time_max: Promised window (max > min)
        delivery_fee / minimum_order / delivery_radius: Delivery terms
    """

    email: EmailStr
    password: str = Field(..., min_length=6)
    restaurant_name: str = Field(..., min_length=1, max_length=100)
    owner_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=7, max_length=20)
    description: str | None = Field(None, max_length=500)
    address: RestaurantAddress
    business_license: str | None = Field(None, max_length=100)
    tax_id: str | None = Field(None, max_length=100)
    established_year: int | None = None
    cuisine: list[str] = []
    features: list[str] = ["delivery"]
    delivery_time_min: int = Field(30, ge=15)
    delivery_time_max: int = Field(60, ge=20)
    delivery_fee: float = Field(0.0, ge=0)
    minimum_order: float = Field(0.0, ge=0)
    delivery_radius: float = Field(10.0, ge=1)

    @field_validator("established_year")
    @classmethod
    def validate_established_year(cls, value: int | None) -> int | None:
        return _check_established_year(value)

    @model_validator(mode="after")
    def validate_delivery_window(self) -> "RestaurantRegister":
        return _check_delivery_window(self)


class RestaurantProfileUpdate(BaseModel):
    """Partial owner profile update (also used by admins)."""

    restaurant_name: str | None = Field(None, min_length=1, max_length=100)
    owner_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, min_length=7, max_length=20)
    description: str | None = Field(None, max_length=500)
    address: RestaurantAddress | None = None
    business_license: str | None = Field(None, max_length=100)
    tax_id: str | None = Field(None, max_length=100)
    established_year: int | None = None
    cuisine: list[str] | None = None
    features: list[str] | None = None
    opening_hours: dict[str, DayHours] | None = None
    delivery_time_min: int | None = Field(None, ge=15)
    delivery_time_max: int | None = Field(None, ge=20)
    delivery_fee: float | None = Field(None, ge=0)
    minimum_order: float | None = Field(None, ge=0)
    delivery_radius: float | None = Field(None, ge=1)

    @field_validator("established_year")
    @classmethod
    def validate_established_year(cls, value: int | None) -> int | None:
        return _check_established_year(value)

    @field_validator("opening_hours")
    @classmethod
    def validate_weekdays(cls, value: dict[str, DayHours] | None) -> dict[str, DayHours] | None:
        if value is not None:
            unknown = [day for day in value if day not in WEEKDAYS]
            if unknown:
                raise ValueError(f"Unknown weekdays: {', '.join(unknown)}")
        return value

    @model_validator(mode="after")
    def validate_delivery_window(self) -> "RestaurantProfileUpdate":
        return _check_delivery_window(self)


class RestaurantAdminUpdate(RestaurantProfileUpdate):
    """Admin-side update: profile fields plus visibility and zone."""

    is_active: bool | None = None
    zone_id: str | None = None


class OpenStatusUpdate(BaseModel):
    is_open: bool


class VerifyRequest(BaseModel):
    """Verification decision.

    Attributes:
        action: approve | reject
        reason: Required when rejecting
    """

    action: str = Field(..., pattern=r"^(approve|reject)$")
    reason: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def require_reason_on_reject(self) -> "VerifyRequest":
        if self.action == "reject" and not (self.reason or "").strip():
            raise ValueError("Rejection reason is required")
        return self


class BulkVerifyRequest(VerifyRequest):
    restaurant_ids: list[str] = Field(..., min_length=1)


class BulkVerifyResult(BaseModel):
    processed: list[str]
    skipped: list[dict[str, str]]


class RestaurantUserResponse(BaseModel):
    """Owner account view."""

    id: str
    email: str
    restaurant_name: str
    owner_name: str
    phone: str
    description: str | None = None
    address: dict[str, Any] = {}
    full_address: str = ""
    business_license: str | None = None
    tax_id: str | None = None
    established_year: int | None = None
    business_age: int | None = None
    cuisine: list[str] = []
    features: list[str] = []
    opening_hours: dict[str, Any] = {}
    delivery_time_min: int
    delivery_time_max: int
    delivery_fee: float
    minimum_order: float
    delivery_radius: float
    is_active: bool
    is_verified: bool
    is_open: bool
    is_currently_open: bool
    verification_status: str
    verified_at: datetime | None = None
    rejection_reason: str | None = None
    rating_average: float
    rating_count: int
    total_orders: int
    total_revenue: float
    average_order_value: float
    restaurant_id: str | None = None  # Public listing, once approved
    created_at: datetime


class RestaurantResponse(BaseModel):
    """Public listing view."""

    id: str
    owner_id: str
    zone_id: str | None = None
    name: str
    description: str | None = None
    email: str
    phone: str | None = None
    address: dict[str, Any] = {}
    full_address: str = ""
    cuisine: list[str] = []
    features: list[str] = []
    opening_hours: dict[str, Any] = {}
    delivery_time_min: int
    delivery_time_max: int
    delivery_fee: float
    minimum_order: float
    is_active: bool
    is_verified: bool
    is_open: bool
    is_currently_open: bool
    rating_average: float
    rating_count: int
    total_orders: int
    total_revenue: float


class VerificationStats(BaseModel):
    pending: int = 0
    under_review: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0
