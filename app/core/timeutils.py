"""UTC timestamp helpers.

Timestamps are persisted as ``YYYY-MM-DDTHH:MM:SSZ`` strings. That format
sorts lexicographically in time order, which the response ordering and the
monthly trend windows rely on.
"""

from datetime import date, datetime, time, timezone
from typing import Callable

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(moment: datetime) -> datetime:
    """Read a naive datetime as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def to_iso(moment: datetime) -> str:
    """Format a datetime as a persisted UTC timestamp."""
    return ensure_utc(moment).astimezone(timezone.utc).strftime(ISO_FORMAT)


def parse_iso(value: str | None) -> datetime | None:
    """Parse a persisted timestamp; returns None when it can't be read."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """23:59:59 UTC of ``day``."""
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)
