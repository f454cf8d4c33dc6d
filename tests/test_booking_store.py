"""Tests for the in-memory and SQL booking stores."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import gc
from datetime import date, datetime

import pytest

from data.booking_store import DateLocks, InMemoryBookingStore, StoreUnavailableError, WriteConflictError
from data.sql_store import SqlBookingStore, create_store_engine
from engine.admission import release, release_by_date, submit
from models.booking import Batch, Booking, BookingStatus
from models.rejection import RejectionCode

TUESDAY = date(2024, 1, 2)
WEDNESDAY = date(2024, 1, 3)
MONDAY_9AM = datetime(2024, 1, 1, 9, 0)


def make_memory_store():
    return InMemoryBookingStore(total_seats=50)


def make_sql_store():
    return SqlBookingStore(engine=create_store_engine("sqlite://"))


def make_booking(user="u1", day=TUESDAY, seat=1, batch=Batch.BATCH_1, status=BookingStatus.ACTIVE,
                 is_buffer=False, booked_at=MONDAY_9AM):
    return Booking(
        user_id=user,
        booking_date=day,
        batch=batch,
        seat_number=seat,
        is_buffer_booking=is_buffer,
        status=status,
        booked_at=booked_at,
    )


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return make_memory_store()
    return make_sql_store()


class TestQueries:
    def test_add_assigns_id_and_round_trips(self, store):
        saved = store.add(make_booking(seat=4))
        assert saved.booking_id is not None
        fetched = store.get_booking(saved.booking_id)
        assert fetched.user_id == "u1"
        assert fetched.booking_date == TUESDAY
        assert fetched.seat_number == 4
        assert fetched.batch is Batch.BATCH_1
        assert fetched.status is BookingStatus.ACTIVE

    def test_missing_booking(self, store):
        assert store.get_booking(12345) is None
        assert store.find_booking("nobody", TUESDAY) is None

    def test_counts(self, store):
        store.add(make_booking("u1", seat=1))
        store.add(make_booking("u2", seat=2, batch=Batch.BATCH_2, is_buffer=True))
        store.add(make_booking("u3", seat=3, status=BookingStatus.RELEASED))
        store.add(make_booking("u4", seat=None, status=BookingStatus.RELEASED, batch=Batch.BATCH_2))
        store.add(make_booking("u5", seat=5, day=WEDNESDAY))

        assert store.count_active(TUESDAY) == 2
        assert store.count_active_buffer(TUESDAY) == 1
        assert store.count_released_scheduled(TUESDAY, Batch.BATCH_1) == 1
        assert store.count_released_scheduled(TUESDAY, Batch.BATCH_2) == 1
        assert [b.seat_number for b in store.list_active(TUESDAY)] == [1, 2]

    def test_list_bookings_filters(self, store):
        store.add(make_booking("u1", seat=1))
        store.add(make_booking("u1", seat=2, day=WEDNESDAY, status=BookingStatus.RELEASED))
        store.add(make_booking("u2", seat=3, batch=Batch.BATCH_2, is_buffer=True))

        assert len(store.list_bookings()) == 3
        assert [b.booking_date for b in store.list_bookings(user_ids=["u1"])] == [TUESDAY, WEDNESDAY]
        assert len(store.list_bookings(start=WEDNESDAY)) == 1
        assert len(store.list_bookings(end=TUESDAY)) == 2
        assert len(store.list_bookings(status=BookingStatus.ACTIVE)) == 2
        assert len(store.list_bookings(batch=Batch.BATCH_2)) == 1
        assert len(store.list_bookings(is_buffer_booking=True)) == 1


class TestConstraints:
    def test_one_record_per_user_and_date(self, store):
        store.add(make_booking("u1", seat=1))
        with pytest.raises(WriteConflictError):
            store.add(make_booking("u1", seat=2, status=BookingStatus.RELEASED))

    def test_active_seat_is_unique(self, store):
        store.add(make_booking("u1", seat=7))
        with pytest.raises(WriteConflictError):
            store.add(make_booking("u2", seat=7))

    def test_released_rows_keep_their_seat(self, store):
        store.add(make_booking("u1", seat=7, status=BookingStatus.RELEASED))
        store.add(make_booking("u2", seat=7))
        assert store.count_active(TUESDAY) == 1

    def test_active_booking_needs_seat(self, store):
        with pytest.raises(WriteConflictError):
            store.add(make_booking("u1", seat=None))

    def test_seat_out_of_range(self, store):
        with pytest.raises(WriteConflictError):
            store.add(make_booking("u1", seat=51))

    def test_save_unknown_booking(self, store):
        ghost = make_booking()
        ghost.booking_id = 999
        with pytest.raises(WriteConflictError):
            store.save(ghost)

    def test_returned_records_are_detached(self, store):
        saved = store.add(make_booking("u1", seat=1))
        saved.status = BookingStatus.CANCELLED
        assert store.get_booking(saved.booking_id).status is BookingStatus.ACTIVE


class TestEngineOnStore:
    def test_book_release_rebook(self, store):
        first = submit(store, "u1", Batch.BATCH_1, TUESDAY, 3, MONDAY_9AM)
        assert first.ok
        assert release(store, first.booking.booking_id, "u1", MONDAY_9AM).ok
        again = submit(store, "u1", Batch.BATCH_1, TUESDAY, None, MONDAY_9AM)
        assert again.ok
        assert again.booking.booking_id == first.booking.booking_id
        assert again.booking.seat_number == 1

    def test_release_by_date_then_buffer(self, store):
        rules = {"total_seats": 50, "members_per_batch": 50}
        afternoon = datetime(2024, 1, 1, 15, 0)
        assert submit(store, "b1", Batch.BATCH_2, TUESDAY, None, afternoon, rules).code is RejectionCode.NO_BUFFER_SEATS
        assert release_by_date(store, "s1", Batch.BATCH_1, TUESDAY, afternoon, rules).ok
        result = submit(store, "b1", Batch.BATCH_2, TUESDAY, None, afternoon, rules)
        assert result.ok
        assert result.booking.is_buffer_booking


class TestDateLocks:
    def test_same_date_shares_a_lock(self):
        locks = DateLocks()
        with locks.hold(TUESDAY):
            assert TUESDAY in locks._locks
            assert not locks._locks[TUESDAY].acquire(blocking=False)

    def test_idle_locks_are_dropped(self):
        locks = DateLocks()
        for offset in range(30):
            with locks.hold(date(2024, 1, 1 + offset)):
                pass
        gc.collect()
        assert len(locks._locks) == 0


class TestSqlStore:
    def test_constraint_violation_is_rolled_back(self):
        store = make_sql_store()
        store.add(make_booking("u1", seat=7))
        with pytest.raises(WriteConflictError):
            store.add(make_booking("u2", seat=7))
        # session still usable after the failed write
        store.add(make_booking("u2", seat=8))
        assert store.count_active(TUESDAY) == 2

    def test_bad_url_is_unavailable(self, tmp_path):
        missing_dir = tmp_path / "missing" / "bookings.db"
        with pytest.raises(StoreUnavailableError):
            SqlBookingStore(database_url=f"sqlite:///{missing_dir}")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
