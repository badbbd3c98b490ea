"""
Weekly schedule lookup, booking-horizon checks and German date formatting.

Every date maps to exactly one OpeningHours record via its weekday. There
are no holiday overrides: the weekly template repeats indefinitely.
"""

import logging
from datetime import timedelta
from typing import Optional

from bikewerkstatt.clock import Clock, SystemClock
from bikewerkstatt.config import settings
from bikewerkstatt.schemas.booking_schema import OpeningHours, WeeklySchedule
from bikewerkstatt.tools.catalog import WEEKLY_SCHEDULE
from bikewerkstatt.utils import DATE_FORMAT, combine, parse_date, time_to_minutes

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sonntag", "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag"]

MONTH_NAMES = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]


def weekday_index(date_str: str) -> int:
    """Weekday of an ISO date with Sunday = 0 .. Saturday = 6."""
    return (parse_date(date_str).weekday() + 1) % 7


def opening_hours(date_str: str, schedule: Optional[WeeklySchedule] = None) -> OpeningHours:
    """Return the opening window for a date from the weekly template."""
    schedule = WEEKLY_SCHEDULE if schedule is None else schedule
    return schedule[weekday_index(date_str)]


def is_business_day(date_str: str, schedule: Optional[WeeklySchedule] = None) -> bool:
    return not opening_hours(date_str, schedule).closed


def get_today(clock: Optional[Clock] = None) -> str:
    clock = clock or SystemClock()
    return clock.today().strftime(DATE_FORMAT)


def get_date_in_days(days: int, clock: Optional[Clock] = None) -> str:
    """ISO date ``days`` calendar days after today."""
    clock = clock or SystemClock()
    return (clock.today() + timedelta(days=days)).strftime(DATE_FORMAT)


def is_date_in_past(date_str: str, clock: Optional[Clock] = None) -> bool:
    """True for dates before today. Today itself is not in the past."""
    return date_str < get_today(clock)


def is_date_too_far_ahead(
    date_str: str, clock: Optional[Clock] = None, max_days: Optional[int] = None
) -> bool:
    """True for dates after today + max_days."""
    if max_days is None:
        max_days = settings.booking.max_days_ahead
    return date_str > get_date_in_days(max_days, clock)


def satisfies_lead_time(
    date_str: str,
    time_str: str,
    clock: Optional[Clock] = None,
    lead_hours: Optional[int] = None,
) -> bool:
    """Check the minimum advance notice for a slot.

    Lead time is an absolute duration from now, applied to same-day slots
    only. A slot exactly ``lead_hours`` ahead is still bookable.
    """
    clock = clock or SystemClock()
    if lead_hours is None:
        lead_hours = settings.booking.lead_time_hours
    if date_str != get_today(clock):
        return True
    earliest = clock.now() + timedelta(hours=lead_hours)
    return combine(date_str, time_str) >= earliest


def is_offered_start(
    date_str: str,
    time_str: str,
    total_minutes: int,
    step_minutes: int,
    schedule: Optional[WeeklySchedule] = None,
) -> bool:
    """True if the slot grid for this date contains ``time_str``.

    Matches what generate_time_slots emits: a multiple of the step after
    opening time, with the whole occupied interval ending by closing time.
    """
    hours = opening_hours(date_str, schedule)
    if hours.closed:
        return False
    start = time_to_minutes(time_str)
    opens = time_to_minutes(hours.open)
    return (
        start >= opens
        and (start - opens) % step_minutes == 0
        and start + total_minutes <= time_to_minutes(hours.close)
    )


def get_available_dates(
    clock: Optional[Clock] = None,
    max_days: Optional[int] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> list[str]:
    """Business days from today through today + max_days, inclusive."""
    if max_days is None:
        max_days = settings.booking.max_days_ahead
    dates = [get_date_in_days(offset, clock) for offset in range(max_days + 1)]
    return [d for d in dates if is_business_day(d, schedule)]


def format_date_long(date_str: str) -> str:
    """German long form, e.g. ``Montag, 19. Oktober 2026``."""
    day = parse_date(date_str)
    return (
        f"{DAY_NAMES[weekday_index(date_str)]}, {day.day}. "
        f"{MONTH_NAMES[day.month - 1]} {day.year}"
    )


def format_date_short(date_str: str) -> str:
    """German short form, e.g. ``19.10.2026``."""
    return parse_date(date_str).strftime("%d.%m.%Y")


def format_time(time_str: str) -> str:
    return f"{time_str} Uhr"
