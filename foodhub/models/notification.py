"""Notification SQLAlchemy ORM model definitions.

Every row targets one account (recipient_type + recipient_id). Broadcasts
fan out into one row per recipient so each account keeps its own read state.

Tables:
    - notifications: In-app notifications
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from foodhub.database import Base

RECIPIENT_TYPES: tuple[str, ...] = ("admin", "customer", "restaurant", "delivery")
# Broadcast targets: a single recipient type or everybody
BROADCAST_TARGETS: tuple[str, ...] = (*RECIPIENT_TYPES, "all")
NOTIFICATION_TYPES: tuple[str, ...] = ("info", "success", "warning", "error", "order", "promotion", "system")
NOTIFICATION_PRIORITIES: tuple[str, ...] = ("low", "normal", "high")


class Notification(Base):
    """Notification model - a message shown in an account's inbox.

    Attributes:
        id: Unique identifier
        recipient_type: admin | customer | restaurant | delivery
        recipient_id: Target account UUID
        title / message: Content
        type: info | success | warning | error | order | promotion | system
        priority: low | normal | high
        is_read / read_at: Read tracking
        reference_type / reference_id: Entity that triggered the notification
        broadcast_id: Shared by all rows fanned out from one broadcast
        created_by: Admin who created it, NULL for system events
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    recipient_type: Mapped[str] = mapped_column(String(20), nullable=False)
    recipient_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="info")
    priority: Mapped[str] = mapped_column(String(10), default="normal")
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    broadcast_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_notifications_recipient", "recipient_type", "recipient_id"),
    )
