"""Shared column mixins for account models.

Customers, restaurant owners and admins all lock themselves for a while
after repeated failed logins; the columns and the bookkeeping live here.
"""

from datetime import datetime, timedelta

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from foodhub.config import settings
from foodhub.utils.clock import as_utc, utcnow


class LoginSecurityMixin:
    """Failed-login lockout and login audit columns.

    Attributes:
        login_attempts: Consecutive failed logins since the last success
        lock_until: Account is locked while this is in the future
        last_login: Timestamp of the last successful login
        login_count: Number of successful logins
    """

    login_attempts: Mapped[int] = mapped_column(Integer, default=0)
    lock_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    login_count: Mapped[int] = mapped_column(Integer, default=0)

    def is_locked(self, now: datetime | None = None) -> bool:
        lock_until = as_utc(self.lock_until)
        return lock_until is not None and lock_until > (now or utcnow())

    def register_failed_login(self, now: datetime | None = None) -> None:
        """Count a failed attempt, locking the account at MAX_LOGIN_ATTEMPTS.

        An expired lock is cleared first so the count restarts at one.
        """
        now = now or utcnow()
        lock_until = as_utc(self.lock_until)
        if lock_until is not None and lock_until <= now:
            self.login_attempts = 0
            self.lock_until = None

        self.login_attempts = (self.login_attempts or 0) + 1
        if self.login_attempts >= settings.MAX_LOGIN_ATTEMPTS and not self.is_locked(now):
            self.lock_until = now + timedelta(hours=settings.LOCK_DURATION_HOURS)

    def register_successful_login(self, now: datetime | None = None) -> None:
        self.login_attempts = 0
        self.lock_until = None
        self.last_login = now or utcnow()
        self.login_count = (self.login_count or 0) + 1
