"""Order SQLAlchemy ORM model definitions.

Tables:
    - orders: Food orders with embedded items, pricing and tracking history
"""

import random
import string
import time
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from foodhub.database import Base

ORDER_STATUSES: tuple[str, ...] = (
    "placed",
    "confirmed",
    "preparing",
    "ready",
    "picked_up",
    "delivered",
    "cancelled",
)
TERMINAL_ORDER_STATUSES: tuple[str, ...] = ("delivered", "cancelled")
# Orders in these statuses count as "pending" on the restaurant dashboard
PENDING_ORDER_STATUSES: tuple[str, ...] = ("placed", "confirmed", "preparing")
# A customer may cancel only before the courier has the food
CANCELLABLE_STATUSES: tuple[str, ...] = ("placed", "confirmed", "preparing", "ready")
PAYMENT_STATUSES: tuple[str, ...] = ("pending", "paid", "failed", "refunded")

_ORDER_SUFFIX_ALPHABET: str = string.ascii_uppercase + string.digits


def generate_order_number() -> str:
    """``ORD-<epoch milliseconds>-<5 upper-case base36 chars>``."""
    suffix: str = "".join(random.choices(_ORDER_SUFFIX_ALPHABET, k=5))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def generate_delivery_otp() -> str:
    return f"{random.randint(0, 9999):04d}"


class Order(Base):
    """Order model - one customer purchase from one restaurant.

    ``items`` is a list of ``{menu_item_id, menu_item: {name, price, image,
    description, category}, quantity, customizations, subtotal}`` dicts and
    ``tracking_updates`` a list of ``{status, timestamp, note}`` dicts.
    Pricing holds ``total = subtotal + delivery_fee + tax - discount``.
    """

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number: Mapped[str] = mapped_column(String(40), unique=True, default=generate_order_number)
    customer_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)
    restaurant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    zone_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("zones.id", ondelete="SET NULL"), nullable=True)

    items: Mapped[list] = mapped_column(JSON, default=list)
    delivery_address: Mapped[dict] = mapped_column(JSON, default=dict)

    # Pricing
    subtotal: Mapped[float] = mapped_column(Float, default=0.0)
    delivery_fee: Mapped[float] = mapped_column(Float, default=0.0)
    tax: Mapped[float] = mapped_column(Float, default=0.0)
    discount: Mapped[float] = mapped_column(Float, default=0.0)
    total: Mapped[float] = mapped_column(Float, default=0.0)

    status: Mapped[str] = mapped_column(String(20), default="placed")
    payment_status: Mapped[str] = mapped_column(String(20), default="pending")
    payment_method: Mapped[str] = mapped_column(String(30), default="cash")
    payment_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Delivery timing and tracking
    estimated_delivery_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    picked_up_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_delivery_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    delivery_person_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("delivery_personnel.id", ondelete="SET NULL"), nullable=True)
    tracking_updates: Mapped[list] = mapped_column(JSON, default=list)
    delivery_otp: Mapped[str] = mapped_column(String(4), default=generate_delivery_otp)

    special_instructions: Mapped[str | None] = mapped_column(String(500), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_ORDER_STATUSES

    def recalculate_total(self) -> float:
        self.total = round(
            (self.subtotal or 0.0) + (self.delivery_fee or 0.0) + (self.tax or 0.0) - (self.discount or 0.0),
            2,
        )
        return self.total

    def add_tracking_update(self, status: str, note: str | None = None, moment: datetime | None = None) -> None:
        # Reassign so the JSON column is flagged dirty
        self.tracking_updates = [
            *(self.tracking_updates or []),
            {
                "status": status,
                "timestamp": (moment or datetime.now(timezone.utc)).isoformat(),
                "note": note,
            },
        ]
