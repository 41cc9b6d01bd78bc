"""Menu SQLAlchemy ORM model definitions.

Tables:
    - menu_categories: Per-restaurant menu sections
    - menu_items: Dishes a restaurant sells; orders price their lines from here
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from foodhub.database import Base

SPICE_LEVELS: tuple[str, ...] = ("mild", "medium", "hot", "very_hot")


class MenuCategory(Base):
    """Menu category model.

    Attributes:
        id: Unique identifier
        restaurant_id: Owning restaurant account (restaurant_users.id)
        name: Section name (<= 50 chars, unique per restaurant ignoring case)
        description: Free text (<= 200 chars)
        is_active: Inactive categories are hidden from customers
        sort_order: Display position, ascending
    """

    __tablename__ = "menu_categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("restaurant_users.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class MenuItem(Base):
    """Menu item model.

    Attributes:
        id: Unique identifier
        restaurant_id: Owning restaurant account (restaurant_users.id)
        category_id: Menu section; a category with items cannot be deleted
        name / description / price: What the customer orders and pays
        images / tags: Display data
        is_vegetarian / is_vegan / is_gluten_free / spice_level / calories: Dietary info
        preparation_time: Minutes
        is_available: Unavailable items cannot be ordered
        sort_order: Display position within the category
        order_count: Units ordered so far
    """

    __tablename__ = "menu_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("restaurant_users.id", ondelete="CASCADE"), nullable=False)
    category_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("menu_categories.id", ondelete="RESTRICT"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    images: Mapped[list] = mapped_column(JSON, default=list)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, default=False)
    is_vegan: Mapped[bool] = mapped_column(Boolean, default=False)
    is_gluten_free: Mapped[bool] = mapped_column(Boolean, default=False)
    spice_level: Mapped[str] = mapped_column(String(20), default="mild")
    preparation_time: Mapped[int] = mapped_column(Integer, default=15)
    calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    order_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def image(self) -> str | None:
        return self.images[0] if self.images else None

    def snapshot(self, category_name: str | None = None) -> dict[str, Any]:
        """The item as stored on an order line."""
        return {
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "description": self.description,
            "category": category_name,
        }
