# src/ratetick/shared/timeutils.py
"""
Time Utilities - UTC Clock and Query Window Bounds

All timestamps handled by the engine are naive UTC datetimes truncated to
whole seconds, which is what the storage layer keeps.

Files that USE this module:
- ratetick.adapters.persistence.* (utcnow for created_at/updated_at)
- ratetick.application.query_service (window bounds)
- ratetick.application.ingestion_service (cycle completion time)

Files that this module USES:
- None
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Tuple

Clock = Callable[[], datetime]

TRAILING_WINDOW = timedelta(hours=24)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime with microseconds dropped."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=0)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time(0, 0, 0))


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time(23, 59, 59))


def day_window(day: date) -> Tuple[datetime, datetime]:
    """Inclusive [00:00:00, 23:59:59] window for a calendar date."""
    return start_of_day(day), end_of_day(day)


def trailing_window(now: datetime) -> Tuple[datetime, datetime]:
    """Inclusive [now - 24h, now] window."""
    now = to_naive_utc(now)
    return now - TRAILING_WINDOW, now
