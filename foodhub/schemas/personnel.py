"""Delivery personnel request/response schemas."""

import re
from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

_PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")
_STATUS_PATTERN = r"^(active|inactive|on_duty|off_duty|suspended)$"
_VEHICLE_PATTERN = r"^(Motorcycle|Bicycle|Car|Scooter|E-bike)$"


def normalize_phone(value: str | None) -> str | None:
    """Strip spaces and dashes, then require an E.164-like number."""
    if value is None:
        return value
    cleaned = re.sub(r"[\s-]", "", value)
    if not _PHONE_RE.match(cleaned):
        raise ValueError("Please provide a valid phone number")
    return cleaned


def _check_vehicle_year(value: int | None) -> int | None:
    if value is not None and not 2000 <= value <= datetime.now(timezone.utc).year + 1:
        raise ValueError("Vehicle year must be between 2000 and next year")
    return value


class PersonnelCreate(BaseModel):
    """Courier creation request.

    Attributes:
        name / email / phone / employee_id: Identity (email, phone, employee_id unique)
        zone: Zone UUID or the name of an active zone
        vehicle_type: Motorcycle | Bicycle | Car | Scooter | E-bike
        vehicle_number: Plate number, stored upper-cased
        password: Optional app password (>= 6 chars)
    """

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str
    employee_id: str = Field(..., min_length=1, max_length=50)
    zone: str = Field(..., min_length=1)
    vehicle_type: str = Field(..., pattern=_VEHICLE_PATTERN)
    vehicle_number: str = Field(..., min_length=1, max_length=30)
    vehicle_model: str | None = Field(None, max_length=100)
    vehicle_year: int | None = None
    status: str = Field("active", pattern=_STATUS_PATTERN)
    base_salary: float = Field(0.0, ge=0)
    commission_rate: float = Field(0.1, ge=0, le=1)
    password: str | None = Field(None, min_length=6)
    work_schedule: dict[str, Any] = {}
    documents: dict[str, Any] = {}

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        return normalize_phone(value)

    @field_validator("vehicle_year")
    @classmethod
    def validate_vehicle_year(cls, value: int | None) -> int | None:
        return _check_vehicle_year(value)


class PersonnelUpdate(BaseModel):
    """Partial courier update; an empty password leaves the hash untouched."""

    name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = None
    employee_id: str | None = Field(None, min_length=1, max_length=50)
    zone: str | None = None
    vehicle_type: str | None = Field(None, pattern=_VEHICLE_PATTERN)
    vehicle_number: str | None = Field(None, min_length=1, max_length=30)
    vehicle_model: str | None = Field(None, max_length=100)
    vehicle_year: int | None = None
    status: str | None = Field(None, pattern=_STATUS_PATTERN)
    base_salary: float | None = Field(None, ge=0)
    commission_rate: float | None = Field(None, ge=0, le=1)
    rating: float | None = Field(None, ge=0, le=5)
    password: str | None = None
    work_schedule: dict[str, Any] | None = None
    documents: dict[str, Any] | None = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        return normalize_phone(value)

    @field_validator("vehicle_year")
    @classmethod
    def validate_vehicle_year(cls, value: int | None) -> int | None:
        return _check_vehicle_year(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        if value and len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class CourierProfileUpdate(BaseModel):
    """Fields a courier may change on their own profile."""

    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = None
    vehicle_model: str | None = Field(None, max_length=100)
    work_schedule: dict[str, Any] | None = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        return normalize_phone(value)


class PersonnelStatusUpdate(BaseModel):
    status: str = Field(..., pattern=_STATUS_PATTERN)


class LocationUpdate(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str | None = Field(None, max_length=255)


class PersonnelBulkStatus(BaseModel):
    personnel_ids: list[str] = Field(..., min_length=1)
    status: str = Field(..., pattern=_STATUS_PATTERN)


class PersonnelResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    employee_id: str
    status: str
    zone_id: str
    zone_name: str | None = None
    vehicle_type: str
    vehicle_number: str
    vehicle_model: str | None = None
    vehicle_year: int | None = None
    rating: float
    total_deliveries: int
    completed_deliveries: int
    cancelled_deliveries: int
    on_time_deliveries: int
    average_delivery_time: float
    completion_rate: float
    on_time_rate: float
    efficiency: int
    performance: str
    earnings: float
    base_salary: float
    commission_rate: float
    current_location: dict[str, Any]
    is_online: bool
    is_available: bool
    last_active: datetime | None = None
    last_login: datetime | None = None
    work_schedule: dict[str, Any] = {}
    join_date: date | None = None
    created_at: datetime


class PersonnelStats(BaseModel):
    total_personnel: int
    active_personnel: int
    on_duty_personnel: int
    online_personnel: int
    average_rating: float
    total_deliveries: int
    monthly_growth: float
