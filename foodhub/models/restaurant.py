"""Restaurant SQLAlchemy ORM model definitions.

A restaurant exists twice: the owner account that signs in and goes through
verification, and the public listing customers order from. The listing is
created (or re-synchronised) when an admin approves the owner account.

Tables:
    - restaurant_users: Owner accounts (auth, verification, business details)
    - restaurants: Public listings linked one-to-one to their owner account
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from foodhub.database import Base
from foodhub.models.mixins import LoginSecurityMixin

VERIFICATION_STATUSES: tuple[str, ...] = ("pending", "under_review", "approved", "rejected")
WEEKDAYS: tuple[str, ...] = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def default_opening_hours() -> dict[str, dict]:
    """Default weekly schedule: 09-22, Fri/Sat until 23, Sunday 10-21."""
    hours: dict[str, dict] = {
        day: {"open": "09:00", "close": "22:00", "is_closed": False} for day in WEEKDAYS
    }
    hours["friday"]["close"] = "23:00"
    hours["saturday"]["close"] = "23:00"
    hours["sunday"] = {"open": "10:00", "close": "21:00", "is_closed": False}
    return hours


def is_open_at(opening_hours: dict | None, moment: datetime) -> bool:
    """Whether ``moment`` falls inside the opening window for its weekday.

    Windows whose close time is earlier than the open time wrap past midnight.
    """
    day: dict | None = (opening_hours or {}).get(WEEKDAYS[moment.weekday()])
    if not day or day.get("is_closed"):
        return False
    current: str = moment.strftime("%H:%M")
    opens, closes = day.get("open", "00:00"), day.get("close", "23:59")
    if opens <= closes:
        return opens <= current <= closes
    return current >= opens or current <= closes


def format_address(address: dict | None) -> str:
    if not address:
        return ""
    parts = [address.get("street"), address.get("city"), address.get("state"), address.get("zip_code")]
    return ", ".join(p for p in parts if p)


class RestaurantUser(LoginSecurityMixin, Base):
    """Restaurant owner account.

    Attributes:
        id: Unique identifier
        email: Login e-mail (unique, lower-cased)
        restaurant_name / owner_name / phone / description: Business identity
        address: {street, city, state, zip_code, coordinates}
        business_license: Licence number (unique when present)
        cuisine: Served cuisines
        opening_hours: Per-weekday {open, close, is_closed}
        delivery_time_min / delivery_time_max: Promised delivery window (minutes)
        delivery_fee / minimum_order / delivery_radius: Delivery terms
        verification_status: pending | under_review | approved | rejected
        rating_average / rating_count: Running review rating
        total_orders / total_revenue: Delivered-order counters
    """

    __tablename__ = "restaurant_users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    restaurant_name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    address: Mapped[dict] = mapped_column(JSON, default=dict)

    business_license: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    tax_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    established_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    cuisine: Mapped[list] = mapped_column(JSON, default=list)
    opening_hours: Mapped[dict] = mapped_column(JSON, default=default_opening_hours)
    features: Mapped[list] = mapped_column(JSON, default=lambda: ["delivery"])

    # Delivery terms
    delivery_time_min: Mapped[int] = mapped_column(Integer, default=30)
    delivery_time_max: Mapped[int] = mapped_column(Integer, default=60)
    delivery_fee: Mapped[float] = mapped_column(Float, default=0.0)
    minimum_order: Mapped[float] = mapped_column(Float, default=0.0)
    delivery_radius: Mapped[float] = mapped_column(Float, default=10.0)

    # Status and verification
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    is_open: Mapped[bool] = mapped_column(Boolean, default=False)
    verification_status: Mapped[str] = mapped_column(String(20), default="pending")
    verified_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Metrics
    rating_average: Mapped[float] = mapped_column(Float, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)
    total_orders: Mapped[int] = mapped_column(Integer, default=0)
    total_revenue: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    restaurant = relationship("Restaurant", back_populates="owner", uselist=False, cascade="all, delete-orphan")

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return value.strip().lower()

    @property
    def full_address(self) -> str:
        return format_address(self.address)

    @property
    def average_order_value(self) -> float:
        if not self.total_orders:
            return 0.0
        return round((self.total_revenue or 0.0) / self.total_orders, 2)

    @property
    def business_age(self) -> int | None:
        """Years since establishment, None when unknown."""
        if not self.established_year:
            return None
        return datetime.now(timezone.utc).year - self.established_year

    def is_currently_open(self, now: datetime | None = None) -> bool:
        if not self.is_open:
            return False
        return is_open_at(self.opening_hours, now or datetime.now(timezone.utc))

    def update_rating(self, new_rating: float) -> None:
        """Fold one review into the running average (2 decimals)."""
        count: int = self.rating_count or 0
        total: float = (self.rating_average or 0.0) * count + new_rating
        self.rating_count = count + 1
        self.rating_average = round(total / self.rating_count, 2)

    def update_order_stats(self, amount: float) -> None:
        self.total_orders = (self.total_orders or 0) + 1
        self.total_revenue = round((self.total_revenue or 0.0) + amount, 2)


class Restaurant(Base):
    """Public restaurant listing.

    Attributes:
        id: Unique identifier
        owner_id: Owner account FK (one listing per owner)
        zone_id: Delivery zone FK, optional
        name / description / email / phone / address / cuisine: Public profile
        delivery_time_min / delivery_time_max / delivery_fee / minimum_order: Delivery terms
        is_active / is_verified / is_open: Visibility flags
        rating_average / rating_count / total_orders / total_revenue: Metrics
    """

    __tablename__ = "restaurants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("restaurant_users.id", ondelete="CASCADE"), unique=True, nullable=False)
    zone_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("zones.id", ondelete="SET NULL"), nullable=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[dict] = mapped_column(JSON, default=dict)
    cuisine: Mapped[list] = mapped_column(JSON, default=list)
    features: Mapped[list] = mapped_column(JSON, default=list)
    opening_hours: Mapped[dict] = mapped_column(JSON, default=default_opening_hours)
    business_license: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tax_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    delivery_time_min: Mapped[int] = mapped_column(Integer, default=30)
    delivery_time_max: Mapped[int] = mapped_column(Integer, default=60)
    delivery_fee: Mapped[float] = mapped_column(Float, default=0.0)
    minimum_order: Mapped[float] = mapped_column(Float, default=0.0)

    is_active: Mapped[bool] = mapped_column(Boolean, default=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    is_open: Mapped[bool] = mapped_column(Boolean, default=False)
    verified_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    rating_average: Mapped[float] = mapped_column(Float, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)
    total_orders: Mapped[int] = mapped_column(Integer, default=0)
    total_revenue: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    owner = relationship("RestaurantUser", back_populates="restaurant")

    @property
    def full_address(self) -> str:
        return format_address(self.address)

    @property
    def city(self) -> str | None:
        return (self.address or {}).get("city")

    def is_currently_open(self, now: datetime | None = None) -> bool:
        if not (self.is_open and self.is_active):
            return False
        return is_open_at(self.opening_hours, now or datetime.now(timezone.utc))

    def update_rating(self, new_rating: float) -> None:
        count: int = self.rating_count or 0
        total: float = (self.rating_average or 0.0) * count + new_rating
        self.rating_count = count + 1
        self.rating_average = round(total / self.rating_count, 2)

    def update_order_stats(self, amount: float) -> None:
        self.total_orders = (self.total_orders or 0) + 1
        self.total_revenue = round((self.total_revenue or 0.0) + amount, 2)
