"""Tests for the seat map and day availability."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date, datetime

import pytest

from data.booking_store import InMemoryBookingStore
from engine.admission import release, submit
from engine.seat_map import compute_availability, render_seat_map
from models.booking import Batch
from models.seat_map import SeatStatus

MONDAY = datetime(2024, 1, 1, 9, 0)
AFTERNOON = datetime(2024, 1, 1, 15, 0)
TUESDAY = date(2024, 1, 2)

RULES = {
    "total_seats": 20,
    "members_per_batch": 16,
    "buffer_window_start_hour": 15,
    "max_advance_weeks": 2,
}


def make_store():
    return InMemoryBookingStore(total_seats=20)


def make_booking(store, user, batch=Batch.BATCH_1, seat=None, now=MONDAY):
    result = submit(store, user, batch, TUESDAY, seat, now, RULES)
    assert result.ok, result.rejection
    return result.booking


def statuses(view):
    return [cell.status for cell in view.seats]


class TestScheduledView:
    def test_empty_day_all_available(self):
        view = render_seat_map(make_store(), TUESDAY, "u1", Batch.BATCH_1, MONDAY, RULES)
        assert view.total_seats == 20
        assert len(view.seats) == 20
        assert set(statuses(view)) == {SeatStatus.AVAILABLE}
        assert view.can_book
        assert not view.can_book_buffer
        assert view.is_user_scheduled
        assert view.buffer_reason is None

    def test_other_bookings_show_full(self):
        store = make_store()
        make_booking(store, "u2", seat=3)
        view = render_seat_map(store, TUESDAY, "u1", Batch.BATCH_1, MONDAY, RULES)
        assert view.seat(3).status is SeatStatus.FULL
        assert view.seat(4).status is SeatStatus.AVAILABLE
        assert view.booked_seats == 1
        assert view.available_seats == 19

    def test_own_booking_marks_rest_full(self):
        store = make_store()
        booking = make_booking(store, "u1", seat=5)
        view = render_seat_map(store, TUESDAY, "u1", Batch.BATCH_1, MONDAY, RULES)
        assert view.seat(5).status is SeatStatus.YOUR_BOOKING
        assert view.seat(5).booking_id == booking.booking_id
        assert view.seat(6).status is SeatStatus.FULL
        assert not view.can_book

    def test_released_seat_is_available_again(self):
        store = make_store()
        booking = make_booking(store, "u2", seat=5)
        release(store, booking.booking_id, "u2", MONDAY)
        view = render_seat_map(store, TUESDAY, "u1", Batch.BATCH_1, MONDAY, RULES)
        assert view.seat(5).status is SeatStatus.AVAILABLE

    def test_saturated_day(self):
        store = make_store()
        for n in range(20):
            make_booking(store, f"u{n}")
        view = render_seat_map(store, TUESDAY, "late", Batch.BATCH_1, MONDAY, RULES)
        assert set(statuses(view)) == {SeatStatus.FULL}
        assert not view.can_book


class TestBufferView:
    def test_window_closed(self):
        view = render_seat_map(make_store(), TUESDAY, "u1", Batch.BATCH_2, MONDAY, RULES)
        assert set(statuses(view)) == {SeatStatus.FULL}
        assert not view.can_book_buffer
        assert view.buffer_reason == "Buffer bookings can only be made after 3:00 PM"

    def test_window_open(self):
        view = render_seat_map(make_store(), TUESDAY, "u1", Batch.BATCH_2, AFTERNOON, RULES)
        assert set(statuses(view)) == {SeatStatus.BUFFER}
        assert view.can_book
        assert view.can_book_buffer
        assert view.buffer_quota.available == 4

    def test_quota_exhausted(self):
        store = make_store()
        for n in range(4):
            make_booking(store, f"b{n}", batch=Batch.BATCH_2, now=AFTERNOON)
        view = render_seat_map(store, TUESDAY, "u1", Batch.BATCH_2, AFTERNOON, RULES)
        assert view.buffer_quota.used == 4
        assert not view.can_book_buffer
        assert view.buffer_reason == "No buffer seats available for this date"
        assert SeatStatus.BUFFER not in statuses(view)

    def test_no_squad(self):
        view = render_seat_map(make_store(), TUESDAY, "u1", None, AFTERNOON, RULES)
        assert not view.can_book
        assert view.buffer_reason == "You must be assigned to a squad to make a booking"


class TestEdges:
    def test_weekend(self):
        view = render_seat_map(make_store(), date(2024, 1, 6), "u1", Batch.BATCH_1, MONDAY, RULES)
        assert view.scheduled_batch is None
        assert not view.can_book

    def test_bad_date_raises(self):
        with pytest.raises(ValueError):
            render_seat_map(make_store(), "someday", "u1", Batch.BATCH_1, MONDAY, RULES)


class TestAvailability:
    def test_counts(self):
        store = make_store()
        make_booking(store, "u1")
        make_booking(store, "b1", batch=Batch.BATCH_2, now=AFTERNOON)
        avail = compute_availability(store, TUESDAY, Batch.BATCH_1, MONDAY, RULES)
        assert avail.booked_seats == 2
        assert avail.buffer_bookings == 1
        assert avail.available_seats == 18
        assert avail.scheduled_batch is Batch.BATCH_1
        assert avail.is_user_scheduled
        assert avail.can_book
        assert not avail.can_book_buffer

    def test_buffer_user(self):
        avail = compute_availability(make_store(), TUESDAY, "BATCH_2", AFTERNOON, RULES)
        assert not avail.is_user_scheduled
        assert avail.can_book
        assert avail.can_book_buffer

    def test_buffer_user_before_window(self):
        avail = compute_availability(make_store(), TUESDAY, Batch.BATCH_2, MONDAY, RULES)
        assert not avail.can_book
        assert not avail.can_book_buffer


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
