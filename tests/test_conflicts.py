"""Tests for overlap detection between a requested slot and stored bookings."""

from bikewerkstatt.schemas.booking_schema import BookingStatus
from bikewerkstatt.tools.availability import generate_time_slots
from bikewerkstatt.tools.conflicts import (
    find_conflicts,
    has_conflict,
    intervals_overlap,
    occupied_interval,
    requested_interval,
)

from tests.conftest import TOMORROW, add_booking, make_type


class TestIntervals:
    def test_occupied_interval_includes_buffer(self, store):
        booking = add_booking(store, TOMORROW, "10:00", make_type(30, 10))
        assert occupied_interval(booking) == (600, 640)

    def test_requested_interval(self):
        assert requested_interval("10:45", 30, 10) == (645, 685)

    def test_touching_intervals_do_not_overlap(self):
        assert not intervals_overlap((600, 630), (630, 660))
        assert not intervals_overlap((630, 660), (600, 630))

    def test_contained_interval_overlaps(self):
        assert intervals_overlap((600, 700), (620, 640))


class TestFindConflicts:
    def test_back_to_back_bookings_allowed(self, store):
        add_booking(store, TOMORROW, "10:00", make_type(30, 0))
        assert not has_conflict(store, TOMORROW, "10:30", 30, 0)

    def test_buffer_blocks_following_slot(self, store):
        add_booking(store, TOMORROW, "10:00", make_type(30, 10))
        assert has_conflict(store, TOMORROW, "10:30", 30, 10)
        assert not has_conflict(store, TOMORROW, "10:40", 30, 10)

    def test_buffer_only_trails_the_booking(self, store):
        add_booking(store, TOMORROW, "11:00", make_type(30, 10))
        # [10:20, 11:00) touches the existing start
        assert not has_conflict(store, TOMORROW, "10:20", 30, 10)

    def test_canceled_bookings_ignored(self, store):
        add_booking(store, TOMORROW, "10:00", status=BookingStatus.CANCELED)
        assert not has_conflict(store, TOMORROW, "10:00", 30, 0)

    def test_confirmed_bookings_block(self, store):
        add_booking(store, TOMORROW, "10:00", status=BookingStatus.CONFIRMED)
        assert has_conflict(store, TOMORROW, "10:15", 30, 0)

    def test_other_dates_ignored(self, store):
        add_booking(store, "2026-10-21", "10:00")
        assert not has_conflict(store, TOMORROW, "10:00", 30, 0)

    def test_exclude_id(self, store):
        booking = add_booking(store, TOMORROW, "10:00")
        assert not has_conflict(store, TOMORROW, "10:00", 30, 0, exclude_id=booking.id)

    def test_returns_every_overlapping_booking(self, store):
        first = add_booking(store, TOMORROW, "10:00", make_type(30, 0))
        second = add_booking(store, TOMORROW, "10:30", make_type(30, 0))
        add_booking(store, TOMORROW, "12:00", make_type(30, 0))
        conflicts = find_conflicts(store.list_all(), TOMORROW, "10:15", 30, 0)
        assert [b.id for b in conflicts] == [first.id, second.id]

    def test_sees_bookings_written_after_slot_list(self, store, clock, rules):
        slot = generate_time_slots(TOMORROW, make_type(30, 0), store, clock, rules)[0]
        assert slot.available
        add_booking(store, TOMORROW, slot.time)
        assert has_conflict(store, TOMORROW, slot.time, 30, 0)
