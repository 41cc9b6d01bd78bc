"""Zone request/response schemas."""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

_STATUS_PATTERN = r"^(active|inactive|maintenance)$"
_PINCODE_PATTERN = r"^\d{5}$"


def _check_pincodes(value: list[str] | None) -> list[str] | None:
    for code in value or []:
        if not re.fullmatch(_PINCODE_PATTERN, code):
            raise ValueError(f"Invalid pincode: {code}")
    return value


def _check_areas(value: list[str] | None) -> list[str] | None:
    if value is None:
        return value
    cleaned = [a.strip() for a in value if a and a.strip()]
    if not cleaned:
        raise ValueError("At least one area is required")
    return cleaned


class ZoneCreate(BaseModel):
    """Zone creation request.

    Attributes:
        name: Unique (case-insensitive), <= 100 chars
        description: <= 500 chars
        areas: Covered area names, at least one
        pincodes: 5-digit postal codes
        delivery_charge: 0..1000
        status: active | inactive | maintenance
        center_lat / center_lng: Optional map centre
    """

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    areas: list[str] = Field(..., min_length=1)
    pincodes: list[str] = []
    delivery_charge: float = Field(..., ge=0, le=1000)
    status: str = Field("active", pattern=_STATUS_PATTERN)
    coverage: str = Field("5km radius", max_length=100)
    estimated_delivery_time: str = Field("30-45 minutes", max_length=50)
    center_lat: float | None = Field(None, ge=-90, le=90)
    center_lng: float | None = Field(None, ge=-180, le=180)
    boundaries: list[Any] = []

    @field_validator("areas")
    @classmethod
    def validate_areas(cls, value: list[str]) -> list[str]:
        return _check_areas(value)

    @field_validator("pincodes")
    @classmethod
    def validate_pincodes(cls, value: list[str]) -> list[str]:
        return _check_pincodes(value)


class ZoneUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    areas: list[str] | None = None
    pincodes: list[str] | None = None
    delivery_charge: float | None = Field(None, ge=0, le=1000)
    status: str | None = Field(None, pattern=_STATUS_PATTERN)
    coverage: str | None = Field(None, max_length=100)
    estimated_delivery_time: str | None = Field(None, max_length=50)
    center_lat: float | None = Field(None, ge=-90, le=90)
    center_lng: float | None = Field(None, ge=-180, le=180)
    boundaries: list[Any] | None = None

    @field_validator("areas")
    @classmethod
    def validate_areas(cls, value: list[str] | None) -> list[str] | None:
        return _check_areas(value)

    @field_validator("pincodes")
    @classmethod
    def validate_pincodes(cls, value: list[str] | None) -> list[str] | None:
        return _check_pincodes(value)


class ZoneResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    areas: list[str]
    pincodes: list[str]
    delivery_charge: float
    status: str
    coverage: str
    estimated_delivery_time: str
    center_lat: float | None = None
    center_lng: float | None = None
    boundaries: list[Any] = []
    restaurant_count: int
    order_count: int
    total_revenue: float
    efficiency: int
    created_by: str
    updated_by: str | None = None
    created_at: datetime
    updated_at: datetime


class ZoneDropdownItem(BaseModel):
    value: str
    label: str
    id: str
    delivery_charge: float


class ZoneStats(BaseModel):
    total_zones: int
    active_zones: int
    total_delivery_charges: float
    average_charge: float
    total_orders: int
    monthly_growth: float


class ZoneBulkStatus(BaseModel):
    zone_ids: list[str] = Field(..., min_length=1)
    status: str = Field(..., pattern=_STATUS_PATTERN)
