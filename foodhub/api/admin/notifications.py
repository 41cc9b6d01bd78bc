"""Admin Notification Router - notification management and broadcasts.

Requires the ``user_support`` permission (super admins bypass). An
admin's own inbox is served by foodhub.api.notifications.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.common import MessageResponse
from foodhub.schemas.notification import (
    BroadcastRequest,
    BroadcastResult,
    NotificationCreate,
    NotificationResponse,
    NotificationStats,
    NotificationUpdate,
)
from foodhub.services.notification_service import notification_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()

_user_support = require_permission("user_support")


@router.get("", response_model=Page)
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_user_support)],
    recipient_type: str | None = None,
    recipient_id: UUID | None = None,
    type: str | None = None,
    is_read: bool | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    items, total = await notification_service.list_notifications(
        db,
        recipient_type=recipient_type,
        recipient_id=recipient_id,
        notification_type=type,
        is_read=is_read,
        page=page,
        per_page=per_page,
    )
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/stats", response_model=NotificationStats)
async def get_notification_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_user_support)],
) -> NotificationStats:
    return await notification_service.get_stats(db)


@router.post("", response_model=NotificationResponse, status_code=201)
async def create_notification(
    data: NotificationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_user_support)],
) -> NotificationResponse:
    result: NotificationResponse = await notification_service.create_notification(db, data, current_admin.id)
    await db.commit()
    return result


@router.post("/broadcast", response_model=BroadcastResult, status_code=201)
async def broadcast(
    data: BroadcastRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_user_support)],
) -> BroadcastResult:
    """Send one notification to every active account of a type (or ``all``)."""
    result: BroadcastResult = await notification_service.broadcast(db, data, current_admin.id)
    await db.commit()
    return result


@router.put("/{notification_id}", response_model=NotificationResponse)
async def update_notification(
    notification_id: UUID,
    data: NotificationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_user_support)],
) -> NotificationResponse:
    result: NotificationResponse = await notification_service.update_notification(db, notification_id, data)
    await db.commit()
    return result


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_user_support)],
) -> MessageResponse:
    await notification_service.mark_read(db, notification_id)
    await db.commit()
    return MessageResponse(message="Notification marked as read")


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_user_support)],
) -> None:
    await notification_service.delete_notification(db, notification_id)
    await db.commit()
