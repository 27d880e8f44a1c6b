"""Time utilities for registry timestamps.

Registry records store their registration time as integer milliseconds since
the Unix epoch, in UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

__all__ = [
    "Clock",
    "format_utc_iso8601",
    "from_epoch_millis",
    "get_current_utc",
    "to_epoch_millis",
]

Clock = Callable[[], datetime]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def get_current_utc() -> datetime:
    """Get current time in UTC.

    Returns
    -------
    datetime
        Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch.

    Naive datetimes are interpreted as UTC.

    Example
    -------
    >>> to_epoch_millis(datetime(2025, 9, 6, 15, 50, 20, 641000, tzinfo=timezone.utc))
    1757173820641
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    delta = dt - _EPOCH
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000


def from_epoch_millis(millis: int) -> datetime:
    """Convert epoch milliseconds back to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=millis)


def format_utc_iso8601(dt: datetime) -> str:
    """Format datetime as ISO-8601 UTC string.

    Parameters
    ----------
    dt
        Datetime to format (with or without timezone)

    Returns
    -------
    str
        ISO-8601 UTC string (e.g., "2025-10-08T12:30:00+00:00")
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.isoformat()
