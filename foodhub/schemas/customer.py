"""Customer request/response schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from foodhub.schemas.common import Coordinates


class AddressPayload(BaseModel):
    """Saved delivery address.

    Attributes:
        type: home | work | other
        label: Free label ("Mum's place")
        street / apartment / city / state / zip_code / country: Postal parts
        instructions: Notes for the courier
        coordinates: Optional {lat, lng}
        is_default: Whether this is the default address
    """

    type: str = Field("home", pattern=r"^(home|work|other)$")
    label: str | None = Field(None, max_length=50)
    street: str = Field(..., min_length=1, max_length=200)
    apartment: str | None = Field(None, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str = "Nepal"
    instructions: str | None = Field(None, max_length=200)
    coordinates: Coordinates | None = None
    is_default: bool = False


class AddressUpdate(BaseModel):
    type: str | None = Field(None, pattern=r"^(home|work|other)$")
    label: str | None = Field(None, max_length=50)
    street: str | None = Field(None, min_length=1, max_length=200)
    apartment: str | None = Field(None, max_length=100)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = None
    instructions: str | None = Field(None, max_length=200)
    coordinates: Coordinates | None = None
    is_default: bool | None = None


class CustomerPreferences(BaseModel):
    cuisines: list[str] = []
    dietary_restrictions: list[str] = []
    spice_level: str = Field("medium", pattern=r"^(mild|medium|hot|extra_hot)$")
    allergies: list[str] = []


class CustomerRegister(BaseModel):
    """Customer self-registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: str = Field(..., min_length=7, max_length=20)


class CustomerProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, min_length=7, max_length=20)
    date_of_birth: date | None = None
    gender: str | None = Field(None, pattern=r"^(male|female|other)$")
    avatar: str | None = None
    preferences: CustomerPreferences | None = None
    notification_preferences: dict[str, bool] | None = None


class CustomerStatusUpdate(BaseModel):
    is_active: bool


class CustomerResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    date_of_birth: date | None = None
    gender: str | None = None
    avatar: str | None = None
    addresses: list[dict[str, Any]] = []
    preferences: dict[str, Any] = {}
    notification_preferences: dict[str, bool] = {}
    loyalty_points: int = 0
    total_orders: int = 0
    total_spent: float = 0.0
    average_order_value: float = 0.0
    segment: str
    is_active: bool
    is_verified: bool
    last_login: datetime | None = None
    created_at: datetime


class CustomerAnalyticsResponse(BaseModel):
    """Back-office customer analytics."""

    total_customers: int
    active_customers: int
    verified_customers: int
    new_this_month: int
    segments: dict[str, int]
    growth_rate: float
