"""Notification Repository - inbox queries per recipient."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.notification import Notification
from foodhub.repositories.base import BaseRepository
from foodhub.utils.clock import utcnow


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository with recipient-scoped read/unread operations."""

    def __init__(self) -> None:
        super().__init__(Notification)

    async def get_list(
        self,
        db: AsyncSession,
        recipient_type: str | None = None,
        recipient_id: UUID | None = None,
        notification_type: str | None = None,
        is_read: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """List notifications, newest first.

        Args:
            db: Async database session
            recipient_type: Recipient account kind
            recipient_id: Recipient account UUID
            notification_type: Notification ``type`` filter
            is_read: Read flag filter
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[Notification], int]: (notifications, total count)
        """
        query: Select = select(Notification)
        if recipient_type:
            query = query.where(Notification.recipient_type == recipient_type)
        if recipient_id is not None:
            query = query.where(Notification.recipient_id == recipient_id)
        if notification_type:
            query = query.where(Notification.type == notification_type)
        if is_read is not None:
            query = query.where(Notification.is_read.is_(is_read))
        query = query.order_by(Notification.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_unread_count(
        self,
        db: AsyncSession,
        recipient_type: str,
        recipient_id: UUID,
    ) -> int:
        return await self.count(
            db,
            Notification.recipient_type == recipient_type,
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )

    async def mark_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        recipient_type: str | None = None,
        recipient_id: UUID | None = None,
    ) -> bool:
        """Mark one notification read; recipient filters restrict ownership.

        Returns:
            bool: Whether a notification matched
        """
        stmt = update(Notification).where(Notification.id == notification_id)
        if recipient_type is not None:
            stmt = stmt.where(Notification.recipient_type == recipient_type)
        if recipient_id is not None:
            stmt = stmt.where(Notification.recipient_id == recipient_id)
        result = await db.execute(
            stmt.values(is_read=True, read_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return (result.rowcount or 0) > 0

    async def mark_all_read(
        self,
        db: AsyncSession,
        recipient_type: str,
        recipient_id: UUID,
    ) -> int:
        result = await db.execute(
            update(Notification)
            .where(
                Notification.recipient_type == recipient_type,
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True, read_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return result.rowcount or 0

    async def add_many(self, db: AsyncSession, notifications: list[Notification]) -> None:
        db.add_all(notifications)
        await db.flush()

    async def get_stats(self, db: AsyncSession) -> dict:
        total: int = await self.count(db)
        unread: int = await self.count(db, Notification.is_read.is_(False))
        result = await db.execute(select(Notification.type, func.count()).group_by(Notification.type))
        return {"total": total, "unread": unread, "by_type": {t: c for t, c in result.all()}}


notification_repository: NotificationRepository = NotificationRepository()
