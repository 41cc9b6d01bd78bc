"""Delivery SQLAlchemy ORM model definitions.

A delivery is the physical handoff of an order to a courier. It keeps
snapshots of the customer, restaurant, courier and zone as they were at
assignment time, so later edits to those records never rewrite history.

Tables:
    - deliveries: Courier assignments with timing, location and payment data
"""

import math
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column

from foodhub.database import Base
from foodhub.utils.clock import as_utc

DELIVERY_STATUSES: tuple[str, ...] = ("assigned", "picked_up", "in_transit", "delivered", "cancelled", "delayed", "failed")
ACTIVE_DELIVERY_STATUSES: tuple[str, ...] = ("assigned", "picked_up", "in_transit")
FINISHED_DELIVERY_STATUSES: tuple[str, ...] = ("delivered", "cancelled", "failed")
DELIVERY_PRIORITIES: tuple[str, ...] = ("low", "normal", "high", "urgent")
PAYMENT_METHODS: tuple[str, ...] = ("Cash on Delivery", "Credit Card", "Debit Card", "Digital Wallet", "Bank Transfer")
DEFAULT_DELIVERY_MINUTES: int = 30


class Delivery(Base):
    """Delivery model.

    Attributes:
        id: Unique identifier
        order_id / order_number: Source order; a reassigned order keeps its earlier deliveries
        customer / restaurant / personnel / zone: Snapshots taken at assignment
        personnel_id / zone_id: Foreign keys used for filtering; a courier with deliveries cannot be deleted
        status: assigned | picked_up | in_transit | delivered | cancelled | delayed | failed
        progress_status: Furthest status reached on the assigned -> delivered path
        priority: low | normal | high | urgent
        assigned_at / picked_up_at / estimated_delivery / actual_delivery: Timeline
        current_location: {lat, lng, address, updated_at}
        distance: Kilometres
        estimated_time_remaining / actual_delivery_time: Minutes
        order_value / delivery_charge / total_amount: Money (total = value + charge)
        is_delayed / delay_reason / delay_time: Delay bookkeeping
        customer_rating / feedback: Customer feedback after delivery
    """

    __tablename__ = "deliveries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    order_number: Mapped[str] = mapped_column(String(40), nullable=False)

    # Snapshots
    customer: Mapped[dict] = mapped_column(JSON, default=dict)
    delivery_address: Mapped[dict] = mapped_column(JSON, default=dict)
    restaurant: Mapped[dict] = mapped_column(JSON, default=dict)
    personnel: Mapped[dict] = mapped_column(JSON, default=dict)
    zone: Mapped[dict] = mapped_column(JSON, default=dict)

    personnel_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("delivery_personnel.id", ondelete="RESTRICT"), nullable=False)
    zone_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("zones.id", ondelete="CASCADE"), nullable=False)

    status: Mapped[str] = mapped_column(String(20), default="assigned")
    progress_status: Mapped[str] = mapped_column(String(20), default="assigned")
    priority: Mapped[str] = mapped_column(String(10), default="normal")

    # Timeline
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    picked_up_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    estimated_delivery: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    actual_delivery: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    current_location: Mapped[dict] = mapped_column(JSON, default=dict)
    distance: Mapped[float] = mapped_column(Float, default=0.0)
    estimated_time_remaining: Mapped[int] = mapped_column(Integer, default=0)
    actual_delivery_time: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Money
    order_value: Mapped[float] = mapped_column(Float, default=0.0)
    delivery_charge: Mapped[float] = mapped_column(Float, default=0.0)
    total_amount: Mapped[float] = mapped_column(Float, default=0.0)
    payment_method: Mapped[str] = mapped_column(String(30), default="Cash on Delivery")

    special_instructions: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_delayed: Mapped[bool] = mapped_column(Boolean, default=False)
    delay_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)
    delay_time: Mapped[int] = mapped_column(Integer, default=0)
    customer_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def delivery_duration(self) -> int | None:
        """Minutes from assignment to hand-over, None until delivered."""
        assigned, actual = as_utc(self.assigned_at), as_utc(self.actual_delivery)
        if assigned is None or actual is None:
            return None
        return round((actual - assigned).total_seconds() / 60)

    @property
    def is_on_time(self) -> bool | None:
        actual, estimated = as_utc(self.actual_delivery), as_utc(self.estimated_delivery)
        if actual is None or estimated is None:
            return None
        return actual <= estimated

    @property
    def delay_duration(self) -> int:
        """Minutes past the estimate (0 when on time or not yet late)."""
        estimated = as_utc(self.estimated_delivery)
        if estimated is None:
            return 0
        reference = as_utc(self.actual_delivery) or datetime.now(timezone.utc)
        return max(0, math.ceil((reference - estimated).total_seconds() / 60))

    def refresh_derived(self, now: datetime | None = None) -> None:
        """Recompute totals, remaining time and the delay flag."""
        now = now or datetime.now(timezone.utc)
        self.total_amount = round((self.order_value or 0.0) + (self.delivery_charge or 0.0), 2)

        estimated = as_utc(self.estimated_delivery)
        if estimated is not None:
            remaining = (estimated - now).total_seconds() / 60
            self.estimated_time_remaining = max(0, math.ceil(remaining))
            if now > estimated and self.status != "delivered" and self.status not in ("cancelled", "failed"):
                self.is_delayed = True
                if not self.delay_reason:
                    self.delay_reason = "Delivery delayed"

    def update_location(self, lat: float, lng: float, address: str | None = None) -> None:
        self.current_location = {
            "lat": lat,
            "lng": lng,
            "address": address,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

    def add_delay(self, reason: str, minutes: int) -> None:
        """Mark the delivery delayed and push the estimate back by ``minutes``."""
        self.is_delayed = True
        self.delay_reason = reason
        self.delay_time = (self.delay_time or 0) + minutes
        estimated = as_utc(self.estimated_delivery) or datetime.now(timezone.utc)
        self.estimated_delivery = estimated + timedelta(minutes=minutes)


@event.listens_for(Delivery, "before_insert")
@event.listens_for(Delivery, "before_update")
def _refresh_delivery(mapper, connection, target: Delivery) -> None:
    target.refresh_derived()
