"""Inbox Router - the caller's own notifications, for any account kind."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import Principal, get_current_principal
from foodhub.database import get_db
from foodhub.schemas.common import MessageResponse
from foodhub.schemas.notification import UnreadCountResponse
from foodhub.services.notification_service import notification_service, recipient_type_for
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_my_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    is_read: bool | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    items, total = await notification_service.list_notifications(
        db,
        recipient_type=recipient_type_for(principal.type),
        recipient_id=principal.id,
        is_read=is_read,
        page=page,
        per_page=per_page,
    )
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> UnreadCountResponse:
    count: int = await notification_service.get_unread_count(db, recipient_type_for(principal.type), principal.id)
    return UnreadCountResponse(unread_count=count)


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> MessageResponse:
    updated: int = await notification_service.mark_all_read(db, recipient_type_for(principal.type), principal.id)
    await db.commit()
    return MessageResponse(message=f"{updated} notifications marked as read")


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> MessageResponse:
    """Mark one of the caller's notifications as read (404 for someone else's)."""
    await notification_service.mark_read(db, notification_id, recipient_type_for(principal.type), principal.id)
    await db.commit()
    return MessageResponse(message="Notification marked as read")
