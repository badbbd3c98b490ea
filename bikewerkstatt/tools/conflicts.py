"""
Overlap detection between a requested slot and existing bookings.

A booking occupies the half-open interval [start, start + duration + buffer).
Two intervals conflict when ``req_start < existing_end and req_end >
existing_start``; touching endpoints are not a conflict. Canceled bookings
never conflict.
"""

import logging
from typing import Iterable, Optional

from bikewerkstatt.schemas.booking_schema import Booking
from bikewerkstatt.tools.booking_store import BookingStore
from bikewerkstatt.utils import time_to_minutes

logger = logging.getLogger(__name__)

Interval = tuple[int, int]


def occupied_interval(booking: Booking) -> Interval:
    """Minutes-since-midnight interval a stored booking blocks."""
    return booking.start_minutes, booking.end_minutes


def requested_interval(time_str: str, duration_minutes: int, buffer_minutes: int) -> Interval:
    start = time_to_minutes(time_str)
    return start, start + duration_minutes + buffer_minutes


def intervals_overlap(first: Interval, second: Interval) -> bool:
    return first[0] < second[1] and first[1] > second[0]


def find_conflicts(
    bookings: Iterable[Booking],
    date_str: str,
    time_str: str,
    duration_minutes: int,
    buffer_minutes: int,
    exclude_id: Optional[str] = None,
) -> list[Booking]:
    """Return the active bookings on ``date_str`` that overlap the request."""
    requested = requested_interval(time_str, duration_minutes, buffer_minutes)
    return [
        booking
        for booking in bookings
        if booking.is_active
        and booking.date == date_str
        and booking.id != exclude_id
        and intervals_overlap(requested, occupied_interval(booking))
    ]


def has_conflict(
    store: BookingStore,
    date_str: str,
    time_str: str,
    duration_minutes: int,
    buffer_minutes: int,
    exclude_id: Optional[str] = None,
) -> bool:
    """Check a slot against the store's current contents.

    Reads the store on every call so a check made at commit time sees
    bookings written since the slot list was generated.
    """
    conflicts = find_conflicts(
        store.list_all(), date_str, time_str, duration_minutes, buffer_minutes, exclude_id
    )
    if conflicts:
        logger.debug(
            "Slot %s %s conflicts with %s", date_str, time_str, [b.id for b in conflicts]
        )
    return bool(conflicts)
