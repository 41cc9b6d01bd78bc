"""Admin SQLAlchemy ORM model definitions.

Back-office accounts. Admins and super admins share this table; the
``role`` column decides which JWT ``type`` the account receives.

Tables:
    - admins: Back-office accounts with role, department and permission list
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from foodhub.database import Base
from foodhub.models.mixins import LoginSecurityMixin

ADMIN_ROLES: tuple[str, ...] = ("super_admin", "admin", "moderator")
DEPARTMENTS: tuple[str, ...] = ("Management", "Operations", "Customer Service", "IT", "Finance")
ADMIN_PERMISSIONS: tuple[str, ...] = (
    "manage_users",
    "manage_restaurants",
    "manage_orders",
    "manage_payments",
    "view_analytics",
    "system_settings",
    "user_support",
)


class Admin(LoginSecurityMixin, Base):
    """Admin model - back-office account.

    Attributes:
        id: Unique identifier
        name: Display name
        email: Login e-mail (unique, lower-cased)
        password_hash: bcrypt hash
        admin_id: Human-readable staff code (unique, upper-cased)
        role: super_admin | admin | moderator
        department: Owning department
        permissions: Granted permission codes (ignored for super_admin)
        login_attempts / lock_until: Failed-login lockout state
        last_login / login_count / last_logout_at / logout_count: Session audit counters
    """

    __tablename__ = "admins"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    admin_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), default="admin")
    department: Mapped[str] = mapped_column(String(50), default="Operations")
    permissions: Mapped[list] = mapped_column(JSON, default=list)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)

    # Session audit
    last_logout_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    logout_count: Mapped[int] = mapped_column(Integer, default=0)

    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return value.strip().lower()

    @validates("admin_id")
    def _normalize_admin_id(self, key: str, value: str) -> str:
        return value.strip().upper()

    @property
    def token_type(self) -> str:
        """JWT ``type`` claim for this account."""
        return "super_admin" if self.role == "super_admin" else "admin"

    def has_permission(self, permission: str) -> bool:
        """Super admins hold every permission; others need it listed."""
        if self.role == "super_admin":
            return True
        return permission in (self.permissions or [])
