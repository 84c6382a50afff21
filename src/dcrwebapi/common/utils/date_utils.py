"""
Date Utilities
==============

Unix-second conversions used for provider launch dates and record stamps.
"""

from datetime import UTC, datetime


def to_unix_seconds(dt: datetime) -> int:
    """
    Convert datetime to Unix timestamp in seconds.

    Args:
        dt: Datetime object (timezone-aware or naive assumed UTC)

    Returns:
        Unix timestamp in whole seconds
    """
    if dt.tzinfo is None:
        # Assume UTC for naive datetimes
        dt = dt.replace(tzinfo=UTC)

    return int(dt.timestamp())


def unix_time(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> int:
    """
    Unix timestamp for a UTC wall-clock date.

    Args:
        year: Year
        month: Month (1-12)
        day: Day of month
        hour: Hour (UTC)
        minute: Minute

    Returns:
        Unix timestamp in seconds

    Example:
        >>> unix_time(2016, 5, 19, 15, 19)
        1463671140
    """
    return to_unix_seconds(datetime(year, month, day, hour, minute, tzinfo=UTC))
