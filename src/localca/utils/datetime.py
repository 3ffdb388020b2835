# localca/utils/datetime.py

from __future__ import annotations

from datetime import datetime, timezone

TEXT_FORMAT = "%b %d %H:%M:%S %Y UTC"


def _ensure_utc(dt: datetime) -> datetime:
    """
    Return a timezone-aware datetime in UTC.
    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def format_datetime(date: datetime) -> str:
    """
    Format a datetime in UTC as 'Jan 15 14:30:45 2024 UTC'.

    Args:
        date: The datetime to format (naive treated as UTC).
    """
    return _ensure_utc(date).strftime(TEXT_FORMAT)

def now_utc() -> datetime:
    """Return current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)

def days_remaining(not_after: datetime) -> int:
    """Whole days until `not_after`; negative once expired."""
    return (_ensure_utc(not_after) - now_utc()).days
