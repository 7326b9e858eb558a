"""
Timestamp helpers.

CRITICAL: All datetimes handled by the core are timezone-aware UTC to prevent
comparison bugs between Firestore timestamps, seeded ISO strings and naive
values produced by tests or scripts.
"""

import math
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse various timestamp formats to timezone-aware datetime (UTC).

    Accepts datetimes (naive values are assumed UTC), ISO strings with or
    without a trailing Z, and objects exposing ``timestamp()`` such as
    Firestore's ``DatetimeWithNanoseconds``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    if hasattr(value, "timestamp"):
        return datetime.fromtimestamp(value.timestamp(), tz=timezone.utc)
    return None


def day_key(value: datetime) -> str:
    """Calendar day bucket (UTC) as YYYY-MM-DD."""
    return parse_timestamp(value).strftime("%Y-%m-%d")


def hours_between(start: datetime, end: datetime) -> float:
    return (parse_timestamp(end) - parse_timestamp(start)).total_seconds() / 3600.0


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves toward positive infinity.

    Python's round() uses banker's rounding (round(2.5) == 2); every count,
    rate and allocation in this service rounds halves up instead.
    """
    return int(math.floor(value + 0.5))
