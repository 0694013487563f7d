"""Timestamp utilities for UTC handling and lenient datetime parsing.

Volunteer availability windows and event times arrive from many places
(database strings, YAML seed files, datetime objects). Everything is
normalized to timezone-aware UTC, and anything that cannot be understood
becomes None so that comparisons degrade to "no match" instead of raising.
"""

from datetime import date, datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    If the datetime is timezone-naive, it's treated as UTC.
    If the datetime has a different timezone, it's converted to UTC.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_iso_datetime(iso_string: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string to UTC datetime.

    Supports:
    - 2024-01-10T09:00:00Z
    - 2024-01-10T09:00:00+00:00
    - 2024-01-10T09:00:00
    - 2024-01-10 09:00:00 (MySQL DATETIME style)
    - 2024-01-10

    Args:
        iso_string: ISO 8601 formatted datetime string

    Returns:
        Timezone-aware datetime in UTC, or None if parsing fails

    Example:
        >>> dt = parse_iso_datetime("2024-01-10T09:00:00Z")
        >>> dt.year == 2024 and dt.month == 1 and dt.day == 10
        True
        >>> parse_iso_datetime("not a date") is None
        True
    """
    if not iso_string or not iso_string.strip():
        return None

    cleaned = iso_string.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        pass

    for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
        try:
            return ensure_utc(datetime.strptime(iso_string.strip(), fmt))
        except ValueError:
            continue

    return None


def coerce_datetime(value: Any) -> Optional[datetime]:
    """Best-effort conversion of an arbitrary value to a UTC datetime.

    Accepts datetimes, dates (midnight UTC) and strings. Every other value,
    including unparseable strings, yields None.

    Args:
        value: Raw timestamp value

    Returns:
        Timezone-aware datetime in UTC, or None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        return parse_iso_datetime(value)
    return None


def format_timestamp(dt: Optional[datetime], include_microseconds: bool = False) -> Optional[str]:
    """Format a datetime as ISO 8601 string in UTC.

    Args:
        dt: Datetime to format (None passes through)
        include_microseconds: Whether to include microseconds in output

    Returns:
        ISO 8601 formatted string with 'Z' suffix, or None

    Example:
        >>> from datetime import datetime, timezone
        >>> format_timestamp(datetime(2024, 1, 10, 9, 0, 0, tzinfo=timezone.utc))
        '2024-01-10T09:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return None

    if include_microseconds:
        return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")
