"""Notification Service - in-app inbox plus optional e-mail delivery.

Order lifecycle events (ORDER_PLACED, STATUS_CHANGED) are turned into
notifications here. When EMAIL_NOTIFICATIONS_ENABLED is off the e-mail leg
is only logged, so nothing leaves the process in development and tests.
"""

import logging
import uuid
from typing import Sequence
from uuid import UUID

import aiosmtplib
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.config import settings
from foodhub.models.notification import RECIPIENT_TYPES, Notification
from foodhub.models.order import Order
from foodhub.repositories.admin_repository import admin_repository
from foodhub.repositories.customer_repository import customer_repository
from foodhub.repositories.notification_repository import notification_repository
from foodhub.repositories.personnel_repository import personnel_repository
from foodhub.repositories.restaurant_repository import restaurant_user_repository
from foodhub.schemas.notification import (
    BroadcastRequest,
    BroadcastResult,
    NotificationCreate,
    NotificationResponse,
    NotificationStats,
    NotificationUpdate,
)
from foodhub.utils.clock import utcnow
from foodhub.utils.email import render_notification, send_email
from foodhub.utils.exceptions import NotFoundError
from foodhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)

ORDER_PLACED: str = "ORDER_PLACED"
STATUS_CHANGED: str = "STATUS_CHANGED"

_STATUS_MESSAGES: dict[str, str] = {
    "confirmed": "Your order {number} has been confirmed by the restaurant.",
    "preparing": "Your order {number} is being prepared.",
    "ready": "Your order {number} is ready for pickup.",
    "picked_up": "Your order {number} has been picked up and is on its way.",
    "delivered": "Your order {number} has been delivered. Enjoy your meal!",
    "cancelled": "Your order {number} has been cancelled.",
}


def recipient_type_for(account_type: str) -> str:
    """Inbox kind for a JWT ``type`` claim (super admins share the admin inbox)."""
    return "admin" if account_type == "super_admin" else account_type


class NotificationService:
    """Notification service: inbox operations, broadcasts and order events."""

    def _to_response(self, notification: Notification) -> NotificationResponse:
        return NotificationResponse(
            id=str(notification.id),
            recipient_type=notification.recipient_type,
            recipient_id=str(notification.recipient_id),
            title=notification.title,
            message=notification.message,
            type=notification.type,
            priority=notification.priority,
            reference_type=notification.reference_type,
            reference_id=str(notification.reference_id) if notification.reference_id else None,
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )

    # --- Inbox -------------------------------------------------------------

    async def list_notifications(
        self,
        db: AsyncSession,
        recipient_type: str | None = None,
        recipient_id: UUID | None = None,
        notification_type: str | None = None,
        is_read: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[NotificationResponse], int]:
        """List notifications, optionally scoped to one recipient.

        Returns:
            tuple[list[NotificationResponse], int]: (page of notifications, total)
        """
        items, total = await notification_repository.get_list(
            db,
            recipient_type=recipient_type,
            recipient_id=recipient_id,
            notification_type=notification_type,
            is_read=is_read,
            page=page,
            per_page=per_page,
        )
        return [self._to_response(n) for n in items], total

    async def get_unread_count(self, db: AsyncSession, recipient_type: str, recipient_id: UUID) -> int:
        return await notification_repository.get_unread_count(db, recipient_type, recipient_id)

    async def mark_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        recipient_type: str | None = None,
        recipient_id: UUID | None = None,
    ) -> None:
        """Mark one notification read.

        Raises:
            NotFoundError: No such notification for this recipient
        """
        if not await notification_repository.mark_read(db, notification_id, recipient_type, recipient_id):
            raise NotFoundError("Notification not found")

    async def mark_all_read(self, db: AsyncSession, recipient_type: str, recipient_id: UUID) -> int:
        return await notification_repository.mark_all_read(db, recipient_type, recipient_id)

    # --- Admin management --------------------------------------------------

    async def create_notification(
        self,
        db: AsyncSession,
        data: NotificationCreate,
        created_by: UUID | None = None,
    ) -> NotificationResponse:
        notification: Notification = await notification_repository.create(
            db,
            {
                "recipient_type": data.recipient_type,
                "recipient_id": parse_uuid(data.recipient_id, "recipient_id"),
                "title": data.title,
                "message": data.message,
                "type": data.type,
                "priority": data.priority,
                "created_by": created_by,
            },
        )
        return self._to_response(notification)

    async def update_notification(
        self,
        db: AsyncSession,
        notification_id: UUID,
        data: NotificationUpdate,
    ) -> NotificationResponse:
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("is_read") is True:
            update_data["read_at"] = utcnow()
        elif update_data.get("is_read") is False:
            update_data["read_at"] = None

        notification: Notification | None = await notification_repository.update(db, notification_id, update_data)
        if notification is None:
            raise NotFoundError("Notification not found")
        return self._to_response(notification)

    async def delete_notification(self, db: AsyncSession, notification_id: UUID) -> None:
        if not await notification_repository.delete(db, notification_id):
            raise NotFoundError("Notification not found")

    async def get_stats(self, db: AsyncSession) -> NotificationStats:
        return NotificationStats(**await notification_repository.get_stats(db))

    async def _recipient_ids(self, db: AsyncSession, recipient_type: str) -> list[UUID]:
        if recipient_type == "admin":
            return await admin_repository.get_active_ids(db)
        if recipient_type == "customer":
            return await customer_repository.get_active_ids(db)
        if recipient_type == "restaurant":
            owners = await restaurant_user_repository.get_all(db, filters={"is_active": True})
            return [owner.id for owner in owners]
        return await personnel_repository.get_active_ids(db)

    async def broadcast(
        self,
        db: AsyncSession,
        data: BroadcastRequest,
        created_by: UUID | None = None,
    ) -> BroadcastResult:
        """Fan a message out to every active account of the target kind.

        Args:
            db: Async database session
            data: Target kind (or ``all``) and content
            created_by: Sending admin

        Returns:
            BroadcastResult: Broadcast id and number of recipients
        """
        broadcast_id: UUID = uuid.uuid4()
        targets: Sequence[str] = RECIPIENT_TYPES if data.target == "all" else (data.target,)

        rows: list[Notification] = []
        for recipient_type in targets:
            for recipient_id in await self._recipient_ids(db, recipient_type):
                rows.append(
                    Notification(
                        recipient_type=recipient_type,
                        recipient_id=recipient_id,
                        title=data.title,
                        message=data.message,
                        type=data.type,
                        priority=data.priority,
                        broadcast_id=broadcast_id,
                        created_by=created_by,
                    )
                )
        await notification_repository.add_many(db, rows)
        logger.info("Broadcast %s sent to %d %s recipients", broadcast_id, len(rows), data.target)
        return BroadcastResult(broadcast_id=str(broadcast_id), target=data.target, recipients=len(rows))

    # --- System events -----------------------------------------------------

    async def notify(
        self,
        db: AsyncSession,
        recipient_type: str,
        recipient_id: UUID,
        title: str,
        message: str,
        notification_type: str = "info",
        priority: str = "normal",
        reference_type: str | None = None,
        reference_id: UUID | None = None,
        email: str | None = None,
    ) -> Notification:
        """Store an in-app notification and, if enabled, e-mail it too.

        SMTP failures are logged and never propagate, so a mail outage cannot
        roll back the business operation that triggered the notification.
        """
        notification: Notification = await notification_repository.create(
            db,
            {
                "recipient_type": recipient_type,
                "recipient_id": recipient_id,
                "title": title,
                "message": message,
                "type": notification_type,
                "priority": priority,
                "reference_type": reference_type,
                "reference_id": reference_id,
            },
        )

        if email and settings.EMAIL_NOTIFICATIONS_ENABLED:
            try:
                html, text = render_notification(title, message, priority)
                await send_email(email, title, html, text)
            except (aiosmtplib.SMTPException, OSError):
                logger.warning("E-mail notification to %s failed", email, exc_info=True)
        elif email:
            logger.info("E-mail notifications disabled; would send '%s' to %s", title, email)

        return notification

    async def dispatch_order_event(
        self,
        db: AsyncSession,
        event: str,
        order: Order,
        restaurant_owner_id: UUID | None = None,
        customer_email: str | None = None,
    ) -> None:
        """Turn an order lifecycle event into notifications.

        Args:
            db: Async database session
            event: ORDER_PLACED or STATUS_CHANGED
            order: The order after the change
            restaurant_owner_id: Owner account to alert about new orders
            customer_email: Customer address for the e-mail leg
        """
        logger.info("Order event %s for %s (status=%s)", event, order.order_number, order.status)

        if event == ORDER_PLACED:
            await self.notify(
                db, "customer", order.customer_id,
                "Order placed",
                f"Your order {order.order_number} has been placed.",
                notification_type="order",
                reference_type="order", reference_id=order.id,
                email=customer_email,
            )
            if restaurant_owner_id is not None:
                await self.notify(
                    db, "restaurant", restaurant_owner_id,
                    "New order received",
                    f"New order {order.order_number} worth {order.total:.2f}.",
                    notification_type="order", priority="high",
                    reference_type="order", reference_id=order.id,
                )
            return

        if event == STATUS_CHANGED:
            template = _STATUS_MESSAGES.get(order.status)
            if template is None:
                return
            await self.notify(
                db, "customer", order.customer_id,
                f"Order {order.status.replace('_', ' ')}",
                template.format(number=order.order_number),
                notification_type="order",
                reference_type="order", reference_id=order.id,
                email=customer_email,
            )
            if order.status == "cancelled" and restaurant_owner_id is not None:
                await self.notify(
                    db, "restaurant", restaurant_owner_id,
                    "Order cancelled",
                    f"Order {order.order_number} was cancelled.",
                    notification_type="order",
                    reference_type="order", reference_id=order.id,
                )
            return

        logger.warning("Unknown order event %s", event)


# Singleton instance
notification_service: NotificationService = NotificationService()
