"""Refresh token model - stores issued JWT refresh tokens.

Tokens are bound to a principal (account id + account type) rather than a
single users table, since each role lives in its own table.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from foodhub.database import Base


class RefreshToken(Base):
    """Refresh token table.

    Attributes:
        id: Primary key UUID
        principal_id: Owning account UUID
        principal_type: admin | super_admin | customer | restaurant | delivery
        token: JWT refresh token string
        expires_at: Expiration timestamp
        created_at: Creation timestamp
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    principal_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    principal_type: Mapped[str] = mapped_column(String(20), nullable=False)
    token: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
