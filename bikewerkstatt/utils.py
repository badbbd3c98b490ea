"""Shared time-of-day and date helpers used across the booking tools.

Times are ``HH:MM`` strings on the 24-hour clock, dates are ISO
``YYYY-MM-DD`` strings, matching what the booking store persists. Both are
compared as plain strings elsewhere, so only the zero-padded forms are
accepted.
"""

import re
from datetime import date, datetime

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")


def parse_date(value: str) -> date:
    """Parse a zero-padded ISO date string.

    Raises:
        ValueError: If the value is not exactly ``YYYY-MM-DD``.
    """
    if not _DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return datetime.strptime(value, DATE_FORMAT).date()


def is_valid_date(value: str) -> bool:
    try:
        parse_date(value)
        return True
    except ValueError:
        return False


def is_valid_time(value: str) -> bool:
    """Check zero-padded ``HH:MM`` format (00:00 - 23:59)."""
    if not _TIME_PATTERN.fullmatch(value):
        return False
    try:
        datetime.strptime(value, TIME_FORMAT)
        return True
    except ValueError:
        return False


def time_to_minutes(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight.

    Examples:
        >>> time_to_minutes("10:30")
        630
    """
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total: int) -> str:
    """Convert minutes since midnight back to ``HH:MM``.

    Values past midnight are not wrapped, so ``minutes_to_time(1500)``
    gives ``'25:00'``; callers compare them numerically.
    """
    return f"{total // 60:02d}:{total % 60:02d}"


def add_minutes(value: str, minutes: int) -> str:
    """Add minutes to an ``HH:MM`` time.

    Examples:
        >>> add_minutes("10:00", 45)
        '10:45'
    """
    return minutes_to_time(time_to_minutes(value) + minutes)


def compare_times(first: str, second: str) -> int:
    """Compare two ``HH:MM`` times, returning -1, 0 or 1."""
    a, b = time_to_minutes(first), time_to_minutes(second)
    return (a > b) - (a < b)


def combine(date_str: str, time_str: str) -> datetime:
    """Build a naive local datetime from a date and an ``HH:MM`` time."""
    return datetime.combine(parse_date(date_str), datetime.strptime(time_str, TIME_FORMAT).time())
