"""
Slot generation for one day and one appointment type.

Walks the day's opening window in fixed steps, emitting a TimeSlot per step
until the next appointment (duration + buffer) would run past closing time.
Slots are returned in ascending time order; callers rely on that order when
grouping them into display buckets.
"""

import logging
from typing import Optional

from bikewerkstatt.clock import Clock, SystemClock
from bikewerkstatt.config import BookingRulesConfig, settings
from bikewerkstatt.schemas.booking_schema import (
    AppointmentType,
    SlotBlockReason,
    TimeSlot,
    WeeklySchedule,
)
from bikewerkstatt.tools.booking_store import BookingStore
from bikewerkstatt.tools.conflicts import find_conflicts
from bikewerkstatt.tools.schedule import opening_hours, satisfies_lead_time
from bikewerkstatt.utils import minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)

# Display buckets by start hour: (label, first hour, end hour exclusive)
SLOT_GROUPS: list[tuple[str, int, int]] = [
    ("Vormittag", 0, 12),
    ("Mittag", 12, 14),
    ("Nachmittag", 14, 24),
]


def generate_time_slots(
    date_str: str,
    appointment_type: AppointmentType,
    store: BookingStore,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> list[TimeSlot]:
    """Generate every candidate slot for a date, marking each as available or not.

    A slot is blocked when it is on today's date and starts inside the lead
    time, or when its occupied interval overlaps an active booking.
    """
    clock = clock or SystemClock()
    rules = rules or settings.booking

    hours = opening_hours(date_str, schedule)
    if hours.closed:
        return []

    close = time_to_minutes(hours.close)
    step = rules.slot_step_minutes
    total = appointment_type.total_minutes
    day_bookings = store.list_for_date(date_str)

    slots: list[TimeSlot] = []
    current = time_to_minutes(hours.open)
    while current + total <= close:
        slot_time = minutes_to_time(current)
        reason = None
        if not satisfies_lead_time(date_str, slot_time, clock, rules.lead_time_hours):
            reason = SlotBlockReason.LEAD_TIME
        elif find_conflicts(
            day_bookings,
            date_str,
            slot_time,
            appointment_type.duration_minutes,
            appointment_type.buffer_minutes,
        ):
            reason = SlotBlockReason.CONFLICT
        slots.append(TimeSlot(time=slot_time, available=reason is None, reason=reason))
        current += step

    logger.debug(
        "Generated %d slots for %s (%s), %d available",
        len(slots), date_str, appointment_type.id, sum(s.available for s in slots),
    )
    return slots


def get_available_slots(
    date_str: str,
    appointment_type: AppointmentType,
    store: BookingStore,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> list[TimeSlot]:
    """Only the bookable slots, in time order."""
    return [
        slot
        for slot in generate_time_slots(date_str, appointment_type, store, clock, rules, schedule)
        if slot.available
    ]


def has_available_slots(
    date_str: str,
    appointment_type: AppointmentType,
    store: BookingStore,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> bool:
    return bool(get_available_slots(date_str, appointment_type, store, clock, rules, schedule))


def get_next_available_slot(
    date_str: str,
    appointment_type: AppointmentType,
    store: BookingStore,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> Optional[TimeSlot]:
    available = get_available_slots(date_str, appointment_type, store, clock, rules, schedule)
    return available[0] if available else None


def count_available_slots(
    date_str: str,
    appointment_type: AppointmentType,
    store: BookingStore,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> int:
    return len(get_available_slots(date_str, appointment_type, store, clock, rules, schedule))


def group_slots(slots: list[TimeSlot]) -> list[tuple[str, list[TimeSlot]]]:
    """Split slots into morning / midday / afternoon buckets by start hour.

    Keeps the input order inside each bucket and drops empty buckets.
    """
    groups = []
    for label, first_hour, end_hour in SLOT_GROUPS:
        members = [s for s in slots if first_hour <= int(s.time.split(":")[0]) < end_hour]
        if members:
            groups.append((label, members))
    return groups
