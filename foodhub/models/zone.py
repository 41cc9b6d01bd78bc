"""Zone SQLAlchemy ORM model definitions.

Tables:
    - zones: Delivery regions with a flat delivery charge and coverage metadata
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from foodhub.database import Base

ZONE_STATUSES: tuple[str, ...] = ("active", "inactive", "maintenance")

# Separator between areas in the searchable area_index column
AREA_SEPARATOR: str = "\n"


def normalize_areas(areas: list[str] | None) -> list[str]:
    """Lower-case, strip and de-duplicate area names, preserving order."""
    seen: set[str] = set()
    result: list[str] = []
    for area in areas or []:
        cleaned = area.strip().lower()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            result.append(cleaned)
    return result


class Zone(Base):
    """Zone model - a geographic delivery-charge/coverage region.

    Attributes:
        id: Unique identifier
        name: Zone name (unique case-insensitively, enforced by the service)
        description: Free text
        areas: Covered area names, lower-cased and de-duplicated
        area_index: The same names joined by AREA_SEPARATOR, for substring search
        pincodes: 5-digit postal codes covered
        delivery_charge: Flat charge for deliveries in the zone (0..1000)
        status: active | inactive | maintenance
        coverage / estimated_delivery_time: Display strings
        center_lat / center_lng / boundaries: Geometry
        restaurant_count / order_count / total_revenue: Counters
        created_by / updated_by: Admin audit
    """

    __tablename__ = "zones"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    areas: Mapped[list] = mapped_column(JSON, default=list)
    area_index: Mapped[str] = mapped_column(Text, default="")
    pincodes: Mapped[list] = mapped_column(JSON, default=list)
    delivery_charge: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="active")
    coverage: Mapped[str] = mapped_column(String(100), default="5km radius")
    estimated_delivery_time: Mapped[str] = mapped_column(String(50), default="30-45 minutes")

    center_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    center_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    boundaries: Mapped[list] = mapped_column(JSON, default=list)

    restaurant_count: Mapped[int] = mapped_column(Integer, default=0)
    order_count: Mapped[int] = mapped_column(Integer, default=0)
    total_revenue: Mapped[float] = mapped_column(Float, default=0.0)

    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @validates("areas")
    def _normalize_areas(self, key: str, value: list[str]) -> list[str]:
        areas = normalize_areas(value)
        self.area_index = AREA_SEPARATOR.join(areas)
        return areas

    @property
    def efficiency(self) -> int:
        orders: int = self.order_count or 0
        if orders == 0:
            return 0
        return round(orders / (orders * 1.1) * 100)

    def record_order(self, amount: float) -> None:
        self.order_count = (self.order_count or 0) + 1
        self.total_revenue = round((self.total_revenue or 0.0) + amount, 2)
