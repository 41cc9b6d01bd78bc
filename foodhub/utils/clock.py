"""UTC time helpers shared by models and services."""

from datetime import date, datetime, time, timedelta, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from the database.

    Some backends (SQLite) drop the tzinfo of ``DateTime(timezone=True)``
    columns, so every comparison against ``utcnow()`` goes through here.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def start_of_month(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1, tzinfo=timezone.utc)


def previous_month_start(month_start: datetime) -> datetime:
    """First instant of the month before ``month_start``."""
    last_day_prev = month_start - timedelta(days=1)
    return datetime(last_day_prev.year, last_day_prev.month, 1, tzinfo=timezone.utc)


def growth_rate(current: int | float, previous: int | float) -> float:
    """Percentage change from ``previous`` to ``current``.

    A zero baseline yields 100 when there is any current activity, else 0.
    """
    if not previous:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 2)
