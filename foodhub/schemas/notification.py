"""Notification request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

_RECIPIENT_PATTERN = r"^(admin|customer|restaurant|delivery)$"
_TYPE_PATTERN = r"^(info|success|warning|error|order|promotion|system)$"
_PRIORITY_PATTERN = r"^(low|normal|high)$"


class NotificationCreate(BaseModel):
    recipient_type: str = Field(..., pattern=_RECIPIENT_PATTERN)
    recipient_id: str
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    type: str = Field("info", pattern=_TYPE_PATTERN)
    priority: str = Field("normal", pattern=_PRIORITY_PATTERN)


class NotificationUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    message: str | None = Field(None, min_length=1, max_length=1000)
    type: str | None = Field(None, pattern=_TYPE_PATTERN)
    priority: str | None = Field(None, pattern=_PRIORITY_PATTERN)
    is_read: bool | None = None


class BroadcastRequest(BaseModel):
    """Broadcast to every active account of a type, or ``all``."""

    target: str = Field(..., pattern=r"^(admin|customer|restaurant|delivery|all)$")
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    type: str = Field("info", pattern=_TYPE_PATTERN)
    priority: str = Field("normal", pattern=_PRIORITY_PATTERN)


class BroadcastResult(BaseModel):
    broadcast_id: str
    target: str
    recipients: int


class NotificationResponse(BaseModel):
    id: str
    recipient_type: str
    recipient_id: str
    title: str
    message: str
    type: str
    priority: str
    reference_type: str | None = None
    reference_id: str | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime


class UnreadCountResponse(BaseModel):
    unread_count: int


class NotificationStats(BaseModel):
    total: int
    unread: int
    by_type: dict[str, int]
