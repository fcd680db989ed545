"""
Time utilities for the Customs Review Service.

Centralizes all time-related operations to ensure consistency
across the application. All datetimes handed out are timezone-aware UTC.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def now() -> int:
    """
    Get current UTC time as a unix timestamp integer.

    Returns:
        Current timestamp as integer (seconds since epoch)
    """
    return int(now_utc().timestamp())


def make_timezone_aware(dt: datetime) -> datetime:
    """
    Make a naive datetime timezone-aware (UTC).

    Args:
        dt: Datetime to convert

    Returns:
        Timezone-aware datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_timestamp(value: Union[str, int, float, datetime, None]) -> Optional[datetime]:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Accepts datetime objects (as returned by psycopg2), ISO-8601 strings
    (as stored in JSON payloads and SQLite; a trailing ``Z`` is accepted) and
    numbers, read as epoch milliseconds.

    Args:
        value: Raw timestamp value

    Returns:
        Aware datetime, or None if the value is empty or not a valid timestamp

    Example:
        >>> parse_timestamp("2024-03-01T08:00:00.000Z").hour
        8
        >>> parse_timestamp("not a date") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return make_timezone_aware(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Client payloads may carry epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    try:
        return make_timezone_aware(datetime.fromisoformat(text))
    except ValueError:
        return None


def to_iso(dt: datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Example:
        >>> from datetime import datetime, timezone
        >>> to_iso(datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc))
        '2024-03-01T08:00:00.000Z'
    """
    dt = make_timezone_aware(dt).astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def minutes_between(start: datetime, end: datetime) -> float:
    """Fractional minutes from start to end (negative if start is later)."""
    return (make_timezone_aware(end) - make_timezone_aware(start)).total_seconds() / 60
