"""
Business-rule validation for a booking request.

Every check runs and contributes a FieldError; nothing short-circuits except
where a later rule cannot be evaluated (no date means no time checks). The
messages are the German texts shown next to the form fields.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from bikewerkstatt.clock import Clock, SystemClock
from bikewerkstatt.config import BookingRulesConfig, settings
from bikewerkstatt.schemas.booking_schema import AppointmentType, CustomerData, WeeklySchedule
from bikewerkstatt.tools.booking_store import BookingStore
from bikewerkstatt.tools.conflicts import has_conflict
from bikewerkstatt.tools.schedule import (
    is_business_day,
    is_date_in_past,
    is_date_too_far_ahead,
    is_offered_start,
    satisfies_lead_time,
)
from bikewerkstatt.utils import is_valid_date, is_valid_time

logger = logging.getLogger(__name__)

# Validation thresholds
MIN_NAME_LENGTH = 2
MIN_PHONE_LENGTH = 6

PHONE_PATTERN = re.compile(r"^[+\d\s\-()]+$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MSG_TIME_NOT_OFFERED = "Diese Uhrzeit ist nicht buchbar."
MSG_SLOT_TAKEN = "Dieser Termin ist leider nicht mehr verfügbar."
MSG_SUBMIT_FAILED = "Ein Fehler ist aufgetreten. Bitte versuchen Sie es erneut."


@dataclass(frozen=True)
class FieldError:
    """One failed rule, tagged with the form field it belongs to."""

    field: str
    message: str
    code: str = "invalid"


def validate_customer_data(data: CustomerData) -> list[FieldError]:
    errors: list[FieldError] = []

    if not data.name or len(data.name.strip()) < MIN_NAME_LENGTH:
        errors.append(FieldError(
            "name",
            f"Bitte geben Sie Ihren Namen ein (mindestens {MIN_NAME_LENGTH} Zeichen).",
            "too_short",
        ))

    if not data.phone or len(data.phone.strip()) < MIN_PHONE_LENGTH:
        errors.append(FieldError(
            "phone", "Bitte geben Sie eine gültige Telefonnummer ein.", "too_short",
        ))
    elif not PHONE_PATTERN.match(data.phone):
        errors.append(FieldError(
            "phone", "Die Telefonnummer enthält ungültige Zeichen.", "invalid_characters",
        ))

    if data.email and data.email.strip() and not EMAIL_PATTERN.match(data.email):
        errors.append(FieldError(
            "email", "Bitte geben Sie eine gültige E-Mail-Adresse ein.", "malformed",
        ))

    return errors


def validate_booking_date(
    date_str: Optional[str],
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> list[FieldError]:
    rules = rules or settings.booking

    if not date_str:
        return [FieldError("date", "Bitte wählen Sie ein Datum.", "missing")]
    if not is_valid_date(date_str):
        return [FieldError("date", "Das Datum ist ungültig.", "malformed")]

    errors: list[FieldError] = []
    if is_date_in_past(date_str, clock):
        errors.append(FieldError(
            "date", "Das gewählte Datum liegt in der Vergangenheit.", "in_past",
        ))
    if is_date_too_far_ahead(date_str, clock, rules.max_days_ahead):
        errors.append(FieldError(
            "date",
            f"Termine können maximal {rules.max_days_ahead} Tage im Voraus gebucht werden.",
            "too_far_ahead",
        ))
    if not is_business_day(date_str, schedule):
        errors.append(FieldError(
            "date", "An diesem Tag ist die Werkstatt geschlossen.", "closed",
        ))
    return errors


def validate_booking_time(
    date_str: str,
    time_str: Optional[str],
    appointment_type: Optional[AppointmentType],
    store: BookingStore,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> list[FieldError]:
    """Slot-grid, lead-time and double-booking checks for a chosen start time.

    A start time is only bookable if the slot generator would offer it: on
    the step grid from opening time, with duration and buffer ending by
    closing time.
    """
    rules = rules or settings.booking

    if not time_str:
        return [FieldError("time", "Bitte wählen Sie eine Uhrzeit.", "missing")]
    if not is_valid_time(time_str):
        return [FieldError("time", "Die Uhrzeit ist ungültig.", "malformed")]
    if appointment_type is None:
        return [FieldError("appointmentType", "Bitte wählen Sie einen Termintyp.", "missing")]

    errors: list[FieldError] = []
    if is_business_day(date_str, schedule) and not is_offered_start(
        date_str, time_str, appointment_type.total_minutes, rules.slot_step_minutes, schedule
    ):
        errors.append(FieldError("time", MSG_TIME_NOT_OFFERED, "not_offered"))
    if not satisfies_lead_time(date_str, time_str, clock, rules.lead_time_hours):
        errors.append(FieldError(
            "time",
            f"Termine müssen mindestens {rules.lead_time_hours} Stunden im Voraus gebucht werden.",
            "lead_time",
        ))
    if has_conflict(
        store,
        date_str,
        time_str,
        appointment_type.duration_minutes,
        appointment_type.buffer_minutes,
    ):
        errors.append(FieldError("time", MSG_SLOT_TAKEN, "conflict"))
    return errors


def validate_booking(
    appointment_type: Optional[AppointmentType],
    date_str: Optional[str],
    time_str: Optional[str],
    customer: CustomerData,
    store: BookingStore,
    clock: Optional[Clock] = None,
    rules: Optional[BookingRulesConfig] = None,
    schedule: Optional[WeeklySchedule] = None,
) -> list[FieldError]:
    """Collect every rule violation for a complete booking request."""
    clock = clock or SystemClock()
    errors: list[FieldError] = []

    if appointment_type is None:
        errors.append(FieldError(
            "appointmentType", "Bitte wählen Sie einen Termintyp.", "missing",
        ))

    date_errors = validate_booking_date(date_str, clock, rules, schedule)
    errors.extend(date_errors)

    date_usable = date_str and not any(e.code in ("missing", "malformed") for e in date_errors)
    if date_usable and appointment_type is not None:
        errors.extend(validate_booking_time(
            date_str, time_str, appointment_type, store, clock, rules, schedule
        ))

    errors.extend(validate_customer_data(customer))

    if errors:
        logger.debug("Booking validation failed: %s", [(e.field, e.code) for e in errors])
    return errors


def get_field_error(errors: list[FieldError], field: str) -> Optional[str]:
    """First message recorded for a field, if any."""
    for error in errors:
        if error.field == field:
            return error.message
    return None


def has_errors(errors: list[FieldError]) -> bool:
    return len(errors) > 0
