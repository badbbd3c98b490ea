"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from bikewerkstatt.clock import FixedClock
from bikewerkstatt.config import BookingRulesConfig
from bikewerkstatt.schemas.booking_schema import (
    AppointmentType,
    Booking,
    BookingStatus,
    CustomerData,
    NewBooking,
)
from bikewerkstatt.tools.booking_store import InMemoryBookingStore
from bikewerkstatt.wizard.booking_wizard import BookingWizard
from bikewerkstatt.wizard.state_machine import WizardStateMachine

# Monday. Shop opens 10:00-18:00; Sunday 2026-10-25 is closed.
NOW = datetime(2026, 10, 19, 9, 0)
TODAY = "2026-10-19"
TOMORROW = "2026-10-20"
SATURDAY = "2026-10-24"
SUNDAY = "2026-10-25"

RULES = BookingRulesConfig(slot_step_minutes=15, lead_time_hours=4, max_days_ahead=30)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def rules():
    return RULES


@pytest.fixture
def store(clock):
    return InMemoryBookingStore(clock=clock)


@pytest.fixture
def wizard(store, clock, rules):
    return BookingWizard(store, clock, rules)


@pytest.fixture
def state_machine():
    return WizardStateMachine()


def make_type(
    duration: int = 30, buffer: int = 0, type_id: str = "test"
) -> AppointmentType:
    """Helper to create an AppointmentType."""
    return AppointmentType(
        id=type_id,
        name=f"Test {duration}+{buffer}",
        duration_minutes=duration,
        buffer_minutes=buffer,
    )


def make_customer(
    name: str = "Jo Lee",
    phone: str = "+49 170 1234567",
    email: str = "",
    notes: str = "",
) -> CustomerData:
    return CustomerData(name=name, phone=phone, email=email, notes=notes)


def add_booking(
    store: InMemoryBookingStore,
    date: str = TOMORROW,
    time: str = "10:00",
    appointment_type: Optional[AppointmentType] = None,
    status: BookingStatus = BookingStatus.REQUESTED,
    customer: Optional[CustomerData] = None,
) -> Booking:
    """Append a booking straight to the store, bypassing validation."""
    return store.append(
        NewBooking(
            appointment_type=appointment_type or make_type(),
            date=date,
            time=time,
            customer=customer or make_customer(),
            status=status,
        )
    )
