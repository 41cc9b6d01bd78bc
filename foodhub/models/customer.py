"""Customer SQLAlchemy ORM model definitions.

Tables:
    - customers: Customer accounts with embedded addresses and preferences
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from foodhub.database import Base
from foodhub.models.mixins import LoginSecurityMixin

GENDERS: tuple[str, ...] = ("male", "female", "other")
ADDRESS_TYPES: tuple[str, ...] = ("home", "work", "other")

# Spending thresholds used for segmentation
PREMIUM_SPEND: float = 1000.0
REGULAR_SPEND: float = 100.0


def default_notification_preferences() -> dict[str, bool]:
    return {"email": True, "sms": True, "push": True, "promotions": False}


class Customer(LoginSecurityMixin, Base):
    """Customer model - marketplace buyer account.

    Addresses are stored as a JSON list of dicts (see
    ``foodhub.schemas.customer.AddressPayload`` for the shape); exactly one
    of them carries ``is_default=True`` once any address exists.

    Attributes:
        id: Unique identifier
        name: Display name
        email: Login e-mail (unique, lower-cased)
        phone: Contact phone (unique)
        addresses: Saved delivery addresses
        preferences: Cuisines, dietary restrictions, spice level, allergies
        loyalty_points: Accumulated loyalty points
        total_orders / total_spent: Lifetime order counters (delivered orders)
        notification_preferences: Channel opt-ins
    """

    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)

    addresses: Mapped[list] = mapped_column(JSON, default=list)
    preferences: Mapped[dict] = mapped_column(JSON, default=dict)
    notification_preferences: Mapped[dict] = mapped_column(JSON, default=default_notification_preferences)

    loyalty_points: Mapped[int] = mapped_column(Integer, default=0)
    total_orders: Mapped[int] = mapped_column(Integer, default=0)
    total_spent: Mapped[float] = mapped_column(Float, default=0.0)
    last_order_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return value.strip().lower()

    @property
    def average_order_value(self) -> float:
        if not self.total_orders:
            return 0.0
        return round((self.total_spent or 0.0) / self.total_orders, 2)

    @property
    def segment(self) -> str:
        """premium / regular / new, by lifetime spend."""
        spent: float = self.total_spent or 0.0
        if spent >= PREMIUM_SPEND:
            return "premium"
        if spent >= REGULAR_SPEND:
            return "regular"
        return "new"

    @property
    def default_address(self) -> dict | None:
        for address in self.addresses or []:
            if address.get("is_default"):
                return address
        return (self.addresses or [None])[0]

    def record_order(self, amount: float, moment: datetime | None = None) -> None:
        """Fold a delivered order into the lifetime counters.

        One loyalty point is earned per 100 currency units spent.
        """
        self.total_orders = (self.total_orders or 0) + 1
        self.total_spent = round((self.total_spent or 0.0) + amount, 2)
        self.loyalty_points = (self.loyalty_points or 0) + int(amount // 100)
        self.last_order_at = moment or datetime.now(timezone.utc)
