"""Tests for utilization analytics and user statistics."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date, datetime

from data.booking_store import InMemoryBookingStore
from engine.admission import release, submit
from engine.analytics import (
    booking_history,
    bookings_to_frame,
    daily_utilization,
    outlook_frame,
    squad_analytics,
    system_overview,
    upcoming_bookings,
    user_stats,
    utilization_status,
    weekly_outlook,
)
from models.booking import Batch, BookingStatus
from models.squad import Employee, Roster, Squad

MONDAY = datetime(2024, 1, 1, 9, 0)
AFTERNOON = datetime(2024, 1, 1, 15, 0)
TUESDAY = date(2024, 1, 2)
RULES = {"total_seats": 10, "members_per_batch": 6}


def make_store():
    return InMemoryBookingStore(total_seats=10)


def make_roster():
    squads = {
        "Alpha": Squad("Alpha", Batch.BATCH_1, members=["a1", "a2"]),
        "Bravo": Squad("Bravo", Batch.BATCH_2, members=["b1"]),
    }
    employees = {
        "a1": Employee("a1", "Ann", "a1@company.com", "Alpha"),
        "a2": Employee("a2", "Amit", "a2@company.com", "Alpha"),
        "b1": Employee("b1", "Ben", "b1@company.com", "Bravo"),
        "x1": Employee("x1", "Xavi", "x1@company.com", None),
    }
    return Roster(squads=squads, employees=employees)


def make_bookings(store):
    a1 = submit(store, "a1", Batch.BATCH_1, TUESDAY, None, MONDAY, RULES).booking
    submit(store, "a2", Batch.BATCH_1, TUESDAY, None, MONDAY, RULES)
    submit(store, "b1", Batch.BATCH_2, TUESDAY, None, AFTERNOON, RULES)
    submit(store, "a1", Batch.BATCH_1, date(2024, 1, 3), None, MONDAY, RULES)
    release(store, a1.booking_id, "a1", MONDAY)


class TestDailyUtilization:
    def test_counts(self):
        store = make_store()
        make_bookings(store)
        stats = daily_utilization(store, TUESDAY, RULES)
        assert stats["booked_seats"] == 2
        assert stats["buffer_bookings"] == 1
        assert stats["regular_bookings"] == 1
        assert stats["released_seats"] == 1
        assert stats["available_seats"] == 8
        assert abs(stats["utilization_pct"] - 0.2) < 0.001
        assert stats["scheduled_batch"] is Batch.BATCH_1
        assert len(stats["bookings"]) == 2

    def test_available_never_negative_after_seat_cut(self):
        store = make_store()
        for n in range(5):
            assert submit(store, f"a{n}", Batch.BATCH_1, TUESDAY, None, MONDAY, RULES).ok
        stats = daily_utilization(store, TUESDAY, {"total_seats": 3})
        assert stats["booked_seats"] == 5
        assert stats["available_seats"] == 0

    def test_weekly_outlook_spans_seven_days(self):
        outlook = weekly_outlook(make_store(), MONDAY.date(), rule_config=RULES)
        assert len(outlook) == 7
        assert outlook[5]["scheduled_batch"] is None
        assert "bookings" not in outlook[0]

    def test_outlook_frame_status(self):
        store = make_store()
        make_bookings(store)
        df = outlook_frame(weekly_outlook(store, MONDAY.date(), rule_config=RULES))
        assert list(df["scheduled_batch"][:2]) == ["BATCH_1", "BATCH_1"]
        assert set(df["status"]) == {"Surplus"}

    def test_utilization_status(self):
        assert utilization_status(0.95) == "Saturated"
        assert utilization_status(0.7) == "Healthy"
        assert utilization_status(0.2) == "Surplus"


class TestOverview:
    def test_system_overview(self):
        store = make_store()
        make_bookings(store)
        overview = system_overview(store, make_roster(), TUESDAY, RULES)
        assert overview["system"]["total_seats"] == 10
        assert overview["system"]["total_squads"] == 2
        assert overview["system"]["total_employees"] == 4
        assert overview["system"]["unassigned_employees"] == 1
        assert overview["batches"]["BATCH_1"]["members"] == 2
        assert overview["batches"]["BATCH_2"]["squads"] == 1
        assert overview["today"]["booked_seats"] == 2

    def test_squad_analytics(self):
        store = make_store()
        make_bookings(store)
        stats = {s["squad_name"]: s for s in squad_analytics(store, make_roster(), TUESDAY)}
        assert stats["Alpha"]["bookings_last_period"] == 2
        assert stats["Alpha"]["avg_bookings_per_member"] == 1.0
        assert stats["Bravo"]["bookings_last_period"] == 1


class TestHistory:
    def test_newest_first(self):
        store = make_store()
        make_bookings(store)
        history = booking_history(store)
        assert history[0].booking_date == date(2024, 1, 3)
        assert len(history) == 4

    def test_filters_and_limit(self):
        store = make_store()
        make_bookings(store)
        assert len(booking_history(store, status=BookingStatus.RELEASED)) == 1
        assert len(booking_history(store, batch=Batch.BATCH_2)) == 1
        assert len(booking_history(store, user_id="a1")) == 2
        assert len(booking_history(store, end=TUESDAY)) == 3
        assert len(booking_history(store, limit=2)) == 2

    def test_frame_uses_roster_names(self):
        store = make_store()
        make_bookings(store)
        df = bookings_to_frame(booking_history(store), make_roster())
        assert "Ann" in set(df["User"])
        assert list(df.columns)[:3] == ["Booking ID", "User", "Date"]

    def test_empty_frame_has_columns(self):
        df = bookings_to_frame([])
        assert df.empty
        assert "Status" in df.columns


class TestUserStats:
    def test_stats(self):
        store = make_store()
        make_bookings(store)
        stats = user_stats(store, "a1", MONDAY)
        assert stats["total_bookings"] == 1
        assert stats["released_bookings"] == 1
        assert stats["upcoming_bookings"] == 1
        assert stats["period"] == "Last 30 days"

    def test_upcoming(self):
        store = make_store()
        make_bookings(store)
        upcoming = upcoming_bookings(store, "a1", MONDAY.date())
        assert [b.booking_date for b in upcoming] == [date(2024, 1, 3)]


if __name__ == "__main__":
    import pytest
    pytest.main([__file__, "-v"])
