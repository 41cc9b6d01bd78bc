"""Delivery personnel SQLAlchemy ORM model definitions.

Tables:
    - delivery_personnel: Courier accounts with vehicle, location and performance data
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column, validates

from foodhub.database import Base

PERSONNEL_STATUSES: tuple[str, ...] = ("active", "inactive", "on_duty", "off_duty", "suspended")
VEHICLE_TYPES: tuple[str, ...] = ("Motorcycle", "Bicycle", "Car", "Scooter", "E-bike")
# Statuses in which a courier may sign in and receive work
WORKING_STATUSES: tuple[str, ...] = ("active", "on_duty")


class DeliveryPersonnel(Base):
    """Courier account.

    Performance counters follow ``completed <= total`` and
    ``on_time <= completed``; both are clamped before every flush.

    Attributes:
        id: Unique identifier
        name / email / phone / employee_id: Identity (email, phone, employee_id unique)
        status: active | inactive | on_duty | off_duty | suspended
        zone_id / zone_name: Home zone
        vehicle_type / vehicle_number / vehicle_model / vehicle_year: Vehicle
        rating: 0..5
        total_deliveries / completed_deliveries / cancelled_deliveries / on_time_deliveries: Counters
        average_delivery_time: Running mean in minutes
        earnings / base_salary / commission_rate: Pay
        current_lat / current_lng / current_address / location_updated_at: Last known location
        is_online / last_active / last_login: Presence
        work_schedule / documents: Free-form JSON
    """

    __tablename__ = "delivery_personnel"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    employee_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")

    zone_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("zones.id", ondelete="RESTRICT"), nullable=False)
    zone_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Vehicle
    vehicle_type: Mapped[str] = mapped_column(String(20), nullable=False)
    vehicle_number: Mapped[str] = mapped_column(String(30), nullable=False)
    vehicle_model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    vehicle_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Performance
    rating: Mapped[float] = mapped_column(Float, default=5.0)
    total_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    completed_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    cancelled_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    on_time_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    average_delivery_time: Mapped[float] = mapped_column(Float, default=30.0)

    # Pay
    earnings: Mapped[float] = mapped_column(Float, default=0.0)
    base_salary: Mapped[float] = mapped_column(Float, default=0.0)
    commission_rate: Mapped[float] = mapped_column(Float, default=0.1)

    # Location and presence
    current_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    current_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    current_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location_updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_online: Mapped[bool] = mapped_column(Boolean, default=False)
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    work_schedule: Mapped[dict] = mapped_column(JSON, default=dict)
    documents: Mapped[dict] = mapped_column(JSON, default=dict)
    join_date: Mapped[date] = mapped_column(Date, default=lambda: datetime.now(timezone.utc).date())

    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return value.strip().lower()

    @validates("employee_id", "vehicle_number")
    def _upper(self, key: str, value: str) -> str:
        return value.strip().upper()

    @property
    def completion_rate(self) -> float:
        total: int = self.total_deliveries or 0
        if total == 0:
            return 0.0
        return round((self.completed_deliveries or 0) / total * 100, 2)

    @property
    def on_time_rate(self) -> float:
        completed: int = self.completed_deliveries or 0
        if completed == 0:
            return 0.0
        return round((self.on_time_deliveries or 0) / completed * 100, 2)

    @property
    def efficiency(self) -> int:
        return round((self.completion_rate + self.on_time_rate) / 2)

    @property
    def performance(self) -> str:
        """new / excellent / good / average / poor."""
        if not self.total_deliveries:
            return "new"
        completion, on_time, rating = self.completion_rate, self.on_time_rate, self.rating or 0.0
        if completion >= 95 and on_time >= 90 and rating >= 4.5:
            return "excellent"
        if completion >= 85 and on_time >= 80 and rating >= 4.0:
            return "good"
        if completion >= 70 and on_time >= 70 and rating >= 3.5:
            return "average"
        return "poor"

    @property
    def is_available(self) -> bool:
        return self.status in WORKING_STATUSES and bool(self.is_online)

    def update_location(self, lat: float, lng: float, address: str | None = None) -> None:
        now = datetime.now(timezone.utc)
        self.current_lat = lat
        self.current_lng = lng
        if address is not None:
            self.current_address = address
        self.location_updated_at = now
        self.is_online = True
        self.last_active = now

    def go_online(self) -> None:
        self.status = "on_duty"
        self.is_online = True
        self.last_active = datetime.now(timezone.utc)

    def go_offline(self) -> None:
        self.status = "off_duty"
        self.is_online = False
        self.last_active = datetime.now(timezone.utc)

    def update_performance(self, delivery_time: float, is_on_time: bool) -> None:
        """Record one completed delivery and refresh the running mean time."""
        self.total_deliveries = (self.total_deliveries or 0) + 1
        self.completed_deliveries = (self.completed_deliveries or 0) + 1
        if is_on_time:
            self.on_time_deliveries = (self.on_time_deliveries or 0) + 1

        completed: int = self.completed_deliveries
        previous: float = self.average_delivery_time if self.average_delivery_time is not None else 30.0
        self.average_delivery_time = round((previous * (completed - 1) + delivery_time) / completed, 2)

    def record_cancellation(self) -> None:
        self.total_deliveries = (self.total_deliveries or 0) + 1
        self.cancelled_deliveries = (self.cancelled_deliveries or 0) + 1

    def clamp_counters(self) -> None:
        total: int = self.total_deliveries or 0
        if (self.completed_deliveries or 0) > total:
            self.completed_deliveries = total
        if (self.on_time_deliveries or 0) > (self.completed_deliveries or 0):
            self.on_time_deliveries = self.completed_deliveries or 0


@event.listens_for(DeliveryPersonnel, "before_insert")
@event.listens_for(DeliveryPersonnel, "before_update")
def _clamp_personnel_counters(mapper, connection, target: DeliveryPersonnel) -> None:
    target.clamp_counters()
