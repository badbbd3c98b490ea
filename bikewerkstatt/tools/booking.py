"""
Booking commands: create, change status, delete.

These are the only write paths into the store that keep the no-overlap
invariant. Creation re-validates at commit time, so a slot taken in another
tab since the slot list was shown is rejected rather than double-booked.
"""

import logging
from enum import Enum
from typing import Optional, TypedDict

from bikewerkstatt.clock import Clock
from bikewerkstatt.config import BookingRulesConfig
from bikewerkstatt.schemas.booking_schema import (
    AppointmentType,
    Booking,
    BookingStatus,
    CustomerData,
    NewBooking,
    WeeklySchedule,
)
from bikewerkstatt.tools.booking_store import BookingStore, StorageError
from bikewerkstatt.tools.conflicts import has_conflict
from bikewerkstatt.tools.validation import (
    MSG_SLOT_TAKEN,
    MSG_SUBMIT_FAILED,
    FieldError,
    validate_booking,
)

logger = logging.getLogger(__name__)


class BookingOutcome(str, Enum):
    BOOKED = "booked"
    UPDATED = "updated"
    DELETED = "deleted"
    INVALID = "invalid"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


class BookingResult(TypedDict, total=False):
    """Result from create_booking, update_booking_status or delete_booking."""

    success: bool
    outcome: BookingOutcome
    message: str
    booking: Booking
    errors: list[FieldError]


def create_booking(
    store: BookingStore,
    appointment_type: Optional[AppointmentType],
    date: Optional[str],
    time: Optional[str],
    customer: CustomerData,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> BookingResult:
    """Validate a request against current store contents and persist it."""
    errors = validate_booking(
        appointment_type, date, time, customer, store, clock, rules, schedule
    )
    if errors:
        if any(e.code == "conflict" for e in errors):
            logger.info("Slot %s %s no longer available", date, time)
            return {
                "success": False,
                "outcome": BookingOutcome.CONFLICT,
                "message": MSG_SLOT_TAKEN,
                "errors": errors,
            }
        return {
            "success": False,
            "outcome": BookingOutcome.INVALID,
            "message": f"Cannot create booking - {len(errors)} validation error(s).",
            "errors": errors,
        }

    new_booking = NewBooking(
        appointment_type=appointment_type.model_copy(),
        date=date,
        time=time,
        customer=customer.model_copy(),
        status=BookingStatus.REQUESTED,
    )
    try:
        booking = store.append(new_booking)
    except StorageError as exc:
        logger.error("Booking could not be stored: %s", exc)
        return {
            "success": False,
            "outcome": BookingOutcome.STORAGE_ERROR,
            "message": MSG_SUBMIT_FAILED,
            "errors": [FieldError("submit", MSG_SUBMIT_FAILED, "storage_error")],
        }

    logger.info(
        "Booking created: %s (%s) for %s on %s at %s",
        booking.id, appointment_type.id, customer.name, date, time,
    )
    return {
        "success": True,
        "outcome": BookingOutcome.BOOKED,
        "message": f"Booking {booking.id} requested for {date} at {time}.",
        "booking": booking,
    }


def update_booking_status(
    store: BookingStore, booking_id: str, status: BookingStatus
) -> BookingResult:
    """Change a booking's status.

    Reactivating a canceled booking re-checks its slot, excluding the booking
    itself, and is refused if another booking has taken the time meanwhile.
    """
    existing = store.get(booking_id)
    if existing is None:
        logger.info("Status change for unknown booking %s ignored", booking_id)
        return {
            "success": False,
            "outcome": BookingOutcome.NOT_FOUND,
            "message": f"Booking {booking_id} not found.",
        }

    reactivating = not existing.is_active and status != BookingStatus.CANCELED
    if reactivating and has_conflict(
        store,
        existing.date,
        existing.time,
        existing.appointment_type.duration_minutes,
        existing.appointment_type.buffer_minutes,
        exclude_id=booking_id,
    ):
        logger.info("Cannot reactivate %s: slot %s %s taken", booking_id, existing.date, existing.time)
        return {
            "success": False,
            "outcome": BookingOutcome.CONFLICT,
            "message": MSG_SLOT_TAKEN,
            "errors": [FieldError("time", MSG_SLOT_TAKEN, "conflict")],
        }

    try:
        updated = store.update_status(booking_id, status)
    except StorageError as exc:
        logger.error("Status change for %s could not be stored: %s", booking_id, exc)
        return {
            "success": False,
            "outcome": BookingOutcome.STORAGE_ERROR,
            "message": MSG_SUBMIT_FAILED,
        }
    if updated is None:
        return {
            "success": False,
            "outcome": BookingOutcome.NOT_FOUND,
            "message": f"Booking {booking_id} not found.",
        }

    logger.info("Booking %s status: %s -> %s", booking_id, existing.status.value, status.value)
    return {
        "success": True,
        "outcome": BookingOutcome.UPDATED,
        "message": f"Booking {booking_id} is now {status.value}.",
        "booking": updated,
    }


def delete_booking(store: BookingStore, booking_id: str) -> BookingResult:
    """Remove a booking permanently."""
    try:
        deleted = store.delete(booking_id)
    except StorageError as exc:
        logger.error("Delete of %s could not be stored: %s", booking_id, exc)
        return {
            "success": False,
            "outcome": BookingOutcome.STORAGE_ERROR,
            "message": MSG_SUBMIT_FAILED,
        }
    if not deleted:
        logger.info("Delete for unknown booking %s ignored", booking_id)
        return {
            "success": False,
            "outcome": BookingOutcome.NOT_FOUND,
            "message": f"Booking {booking_id} not found.",
        }
    logger.info("Booking deleted: %s", booking_id)
    return {
        "success": True,
        "outcome": BookingOutcome.DELETED,
        "message": f"Booking {booking_id} has been deleted.",
    }


def get_bookings_for_date(store: BookingStore, date: str) -> list[Booking]:
    """Active bookings on a date, earliest first."""
    return sorted(store.list_for_date(date), key=lambda b: b.start_minutes)
