"""Tests for the booking commands: create, status change, delete."""

from datetime import datetime

import pytest

from bikewerkstatt.clock import FixedClock
from bikewerkstatt.schemas.booking_schema import BookingStatus, CustomerData
from bikewerkstatt.tools.booking import (
    BookingOutcome,
    create_booking,
    delete_booking,
    get_bookings_for_date,
    update_booking_status,
)
from bikewerkstatt.tools.booking_store import InMemoryBookingStore, StorageError
from bikewerkstatt.tools.catalog import get_appointment_type
from bikewerkstatt.tools.validation import MSG_SLOT_TAKEN, MSG_SUBMIT_FAILED

from tests.conftest import SUNDAY, TOMORROW, add_booking, make_customer, make_type

REPARATUR = get_appointment_type("reparatur")


class FailingStore(InMemoryBookingStore):
    """Store whose writes always fail."""

    def _save(self, bookings):
        raise StorageError("disk full")


class TestCreateBooking:
    def test_success(self, store, clock, rules):
        result = create_booking(store, REPARATUR, TOMORROW, "10:00", make_customer(), clock, rules)
        assert result["success"] is True
        assert result["outcome"] == BookingOutcome.BOOKED
        booking = result["booking"]
        assert booking.status == BookingStatus.REQUESTED
        assert booking.appointment_type == REPARATUR
        assert store.list_all() == [booking]

    def test_validation_errors_not_stored(self, store, clock, rules):
        customer = CustomerData(name="A", phone="123", email="bad")
        result = create_booking(store, REPARATUR, TOMORROW, "10:00", customer, clock, rules)
        assert result["success"] is False
        assert result["outcome"] == BookingOutcome.INVALID
        assert len(result["errors"]) == 3
        assert store.list_all() == []

    def test_closed_day_rejected(self, store, clock, rules):
        result = create_booking(store, REPARATUR, SUNDAY, "10:00", make_customer(), clock, rules)
        assert result["outcome"] == BookingOutcome.INVALID

    def test_conflict(self, store, clock, rules):
        add_booking(store, TOMORROW, "10:00", make_type(30, 10))
        result = create_booking(store, REPARATUR, TOMORROW, "10:30", make_customer(), clock, rules)
        assert result["outcome"] == BookingOutcome.CONFLICT
        assert result["message"] == MSG_SLOT_TAKEN
        assert len(store.list_all()) == 1

    def test_second_identical_request_conflicts(self, store, clock, rules):
        first = create_booking(store, REPARATUR, TOMORROW, "10:00", make_customer(), clock, rules)
        second = create_booking(store, REPARATUR, TOMORROW, "10:00", make_customer(), clock, rules)
        assert first["success"]
        assert second["outcome"] == BookingOutcome.CONFLICT

    def test_back_to_back_allowed(self, store, clock, rules):
        short = make_type(30, 0)
        assert create_booking(store, short, TOMORROW, "10:00", make_customer(), clock, rules)["success"]
        assert create_booking(store, short, TOMORROW, "10:30", make_customer(), clock, rules)["success"]

    def test_rebook_after_cancel(self, store, clock, rules):
        short = make_type(30, 0)
        first = create_booking(store, short, TOMORROW, "10:00", make_customer(), clock, rules)
        update_booking_status(store, first["booking"].id, BookingStatus.CANCELED)
        again = create_booking(store, short, TOMORROW, "10:00", make_customer(), clock, rules)
        assert again["success"]
        assert len(store.list_all()) == 2

    @pytest.mark.parametrize("time_str", ["03:00", "17:55"])
    def test_time_outside_slot_grid_rejected(self, store, clock, rules, time_str):
        result = create_booking(store, REPARATUR, TOMORROW, time_str, make_customer(), clock, rules)
        assert result["outcome"] == BookingOutcome.INVALID
        assert [(e.field, e.code) for e in result["errors"]] == [("time", "not_offered")]
        assert store.list_all() == []

    def test_unpadded_date_cannot_double_book(self, rules):
        clock = FixedClock(datetime(2026, 12, 1, 9, 0))
        store = InMemoryBookingStore(clock=clock)
        first = create_booking(store, REPARATUR, "2026-12-02", "10:00", make_customer(), clock, rules)
        assert first["success"]
        second = create_booking(store, REPARATUR, "2026-12-2", "10:00", make_customer(), clock, rules)
        assert second["outcome"] == BookingOutcome.INVALID
        assert [(e.field, e.code) for e in second["errors"]] == [("date", "malformed")]
        assert len(store.list_all()) == 1

    def test_unpadded_past_date_rejected(self, store, clock, rules):
        result = create_booking(store, REPARATUR, "2026-10-2", "10:00", make_customer(), clock, rules)
        assert result["outcome"] == BookingOutcome.INVALID
        assert store.list_all() == []

    def test_storage_failure(self, clock, rules):
        result = create_booking(FailingStore(), REPARATUR, TOMORROW, "10:00", make_customer(), clock, rules)
        assert result["outcome"] == BookingOutcome.STORAGE_ERROR
        assert result["message"] == MSG_SUBMIT_FAILED
        assert result["errors"][0].field == "submit"


class TestUpdateBookingStatus:
    def test_confirm(self, store):
        booking = add_booking(store)
        result = update_booking_status(store, booking.id, BookingStatus.CONFIRMED)
        assert result["outcome"] == BookingOutcome.UPDATED
        assert result["booking"].status == BookingStatus.CONFIRMED

    def test_any_status_to_any_status(self, store):
        booking = add_booking(store, status=BookingStatus.CONFIRMED)
        assert update_booking_status(store, booking.id, BookingStatus.REQUESTED)["success"]
        assert update_booking_status(store, booking.id, BookingStatus.CANCELED)["success"]
        assert update_booking_status(store, booking.id, BookingStatus.CONFIRMED)["success"]

    def test_unknown_id(self, store):
        result = update_booking_status(store, "bk_missing", BookingStatus.CONFIRMED)
        assert result["outcome"] == BookingOutcome.NOT_FOUND

    def test_reactivation_blocked_when_slot_taken(self, store):
        canceled = add_booking(store, TOMORROW, "10:00", status=BookingStatus.CANCELED)
        add_booking(store, TOMORROW, "10:00")
        result = update_booking_status(store, canceled.id, BookingStatus.CONFIRMED)
        assert result["outcome"] == BookingOutcome.CONFLICT
        assert store.get(canceled.id).status == BookingStatus.CANCELED

    def test_reactivation_allowed_when_slot_free(self, store):
        canceled = add_booking(store, TOMORROW, "10:00", status=BookingStatus.CANCELED)
        result = update_booking_status(store, canceled.id, BookingStatus.REQUESTED)
        assert result["outcome"] == BookingOutcome.UPDATED

    def test_storage_failure(self):
        booking = add_booking(InMemoryBookingStore())
        store = FailingStore([booking])
        result = update_booking_status(store, booking.id, BookingStatus.CONFIRMED)
        assert result["outcome"] == BookingOutcome.STORAGE_ERROR


class TestDeleteBooking:
    def test_delete(self, store):
        booking = add_booking(store)
        assert delete_booking(store, booking.id)["outcome"] == BookingOutcome.DELETED
        assert store.get(booking.id) is None

    def test_delete_unknown(self, store):
        assert delete_booking(store, "bk_missing")["outcome"] == BookingOutcome.NOT_FOUND

    def test_delete_frees_slot(self, store):
        booking = add_booking(store, TOMORROW, "10:00")
        delete_booking(store, booking.id)
        assert get_bookings_for_date(store, TOMORROW) == []


class TestBookingsForDate:
    def test_sorted_by_time_active_only(self, store):
        late = add_booking(store, TOMORROW, "15:00")
        early = add_booking(store, TOMORROW, "10:00")
        add_booking(store, TOMORROW, "12:00", status=BookingStatus.CANCELED)
        assert [b.id for b in get_bookings_for_date(store, TOMORROW)] == [early.id, late.id]
