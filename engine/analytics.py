"""Utilization analytics, booking history and per-user statistics."""

from datetime import date, datetime, timedelta
from typing import List, Optional

import pandas as pd

from data.booking_store import BookingStore
from engine.rotation import DAY_NAMES, scheduled_batch
from models.booking import Batch, Booking, BookingStatus
from models.squad import Roster
from config.defaults import (
    TOTAL_SEATS, MEMBERS_PER_SQUAD, OUTLOOK_DAYS, STATS_LOOKBACK_DAYS,
    SQUAD_LOOKBACK_DAYS, HISTORY_LIMIT, UPCOMING_LIMIT,
    DAY_SATURATION_THRESHOLD, DAY_SURPLUS_THRESHOLD,
)

HISTORY_COLUMNS = [
    "Booking ID", "User", "Date", "Seat", "Batch", "Buffer", "Status", "Booked At", "Released At",
]


def bookings_to_frame(bookings: List[Booking], roster: Optional[Roster] = None) -> pd.DataFrame:
    """Flatten bookings into a display DataFrame, resolving names through the roster."""
    rows = []
    for b in bookings:
        user = b.user_id
        if roster and b.user_id in roster.employees:
            user = roster.employees[b.user_id].name
        rows.append({
            "Booking ID": b.booking_id,
            "User": user,
            "Date": b.booking_date,
            "Seat": b.seat_number,
            "Batch": b.batch.value,
            "Buffer": b.is_buffer_booking,
            "Status": b.status.value,
            "Booked At": b.booked_at,
            "Released At": b.released_at,
        })
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def _utilization(booked: int, total_seats: int) -> float:
    return booked / total_seats if total_seats > 0 else 0.0


def daily_utilization(
    store: BookingStore,
    day: date,
    rule_config: Optional[dict] = None,
) -> dict:
    cfg = rule_config or {}
    total_seats = cfg.get("total_seats", TOTAL_SEATS)

    active = store.list_active(day)
    buffer_count = sum(1 for b in active if b.is_buffer_booking)
    return {
        "date": day,
        "day_name": DAY_NAMES[day.weekday()],
        "scheduled_batch": scheduled_batch(day),
        "total_seats": total_seats,
        "booked_seats": len(active),
        "buffer_bookings": buffer_count,
        "regular_bookings": len(active) - buffer_count,
        "released_seats": len(store.list_bookings(start=day, end=day, status=BookingStatus.RELEASED)),
        "available_seats": max(total_seats - len(active), 0),
        "utilization_pct": _utilization(len(active), total_seats),
        "bookings": active,
    }


def weekly_outlook(
    store: BookingStore,
    today: date,
    days: int = OUTLOOK_DAYS,
    rule_config: Optional[dict] = None,
) -> List[dict]:
    """Daily utilization for `days` consecutive days starting today (weekends included)."""
    results = []
    for i in range(days):
        stats = daily_utilization(store, today + timedelta(days=i), rule_config)
        stats.pop("bookings")
        results.append(stats)
    return results


def utilization_status(utilization_pct: float) -> str:
    if utilization_pct > DAY_SATURATION_THRESHOLD:
        return "Saturated"
    if utilization_pct < DAY_SURPLUS_THRESHOLD:
        return "Surplus"
    return "Healthy"


def system_overview(
    store: BookingStore,
    roster: Roster,
    today: date,
    rule_config: Optional[dict] = None,
) -> dict:
    cfg = rule_config or {}
    total_seats = cfg.get("total_seats", TOTAL_SEATS)

    total_employees = roster.employee_count
    assigned = roster.assigned_count
    today_stats = daily_utilization(store, today, cfg)
    today_stats.pop("bookings")

    batches = {}
    for batch in Batch:
        squads = roster.squads_in_batch(batch)
        batches[batch.value] = {
            "squads": len(squads),
            "members": sum(s.member_count for s in squads),
            "expected_members": len(squads) * MEMBERS_PER_SQUAD,
        }

    return {
        "system": {
            "total_seats": total_seats,
            "total_squads": len(roster.squads),
            "total_employees": total_employees,
            "assigned_employees": assigned,
            "unassigned_employees": total_employees - assigned,
        },
        "batches": batches,
        "today": today_stats,
    }


def booking_history(
    store: BookingStore,
    start: Optional[date] = None,
    end: Optional[date] = None,
    user_id: Optional[str] = None,
    batch: Optional[Batch] = None,
    status: Optional[BookingStatus] = None,
    limit: int = HISTORY_LIMIT,
) -> List[Booking]:
    """Filtered bookings, newest date first, then most recently booked."""
    bookings = store.list_bookings(
        user_ids=[user_id] if user_id else None,
        start=start,
        end=end,
        status=status,
        batch=batch,
    )
    bookings.sort(key=lambda b: (b.booking_date, b.booked_at or datetime.min), reverse=True)
    return bookings[:limit]


def squad_analytics(
    store: BookingStore,
    roster: Roster,
    today: date,
    lookback_days: int = SQUAD_LOOKBACK_DAYS,
) -> List[dict]:
    """Active bookings per squad since `today - lookback_days`."""
    since = today - timedelta(days=lookback_days)
    results = []
    for squad in sorted(roster.squads.values(), key=lambda s: s.name):
        count = 0
        if squad.members:
            count = len(store.list_bookings(
                user_ids=squad.members, start=since, status=BookingStatus.ACTIVE,
            ))
        results.append({
            "squad_name": squad.name,
            "batch": squad.batch.value,
            "member_count": squad.member_count,
            "max_members": squad.max_members,
            "bookings_last_period": count,
            "avg_bookings_per_member": round(count / squad.member_count, 2) if squad.member_count else 0.0,
        })
    return results


def user_bookings(
    store: BookingStore,
    user_id: str,
    status: Optional[BookingStatus] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    limit: int = HISTORY_LIMIT,
) -> List[Booking]:
    """A user's bookings in date order."""
    return store.list_bookings(user_ids=[user_id], start=start, end=end, status=status)[:limit]


def upcoming_bookings(
    store: BookingStore,
    user_id: str,
    today: date,
    limit: int = UPCOMING_LIMIT,
) -> List[Booking]:
    return user_bookings(store, user_id, status=BookingStatus.ACTIVE, start=today, limit=limit)


def user_stats(
    store: BookingStore,
    user_id: str,
    now: datetime,
    lookback_days: int = STATS_LOOKBACK_DAYS,
) -> dict:
    since = now.date() - timedelta(days=lookback_days)
    recent = store.list_bookings(user_ids=[user_id], start=since)
    active = [b for b in recent if b.is_active]
    buffer_count = sum(1 for b in active if b.is_buffer_booking)
    upcoming = store.list_bookings(user_ids=[user_id], start=now.date(), status=BookingStatus.ACTIVE)
    return {
        "period": f"Last {lookback_days} days",
        "total_bookings": len(active),
        "buffer_bookings": buffer_count,
        "regular_bookings": len(active) - buffer_count,
        "released_bookings": sum(1 for b in recent if b.status is BookingStatus.RELEASED),
        "upcoming_bookings": len(upcoming),
    }


def outlook_frame(outlook: List[dict]) -> pd.DataFrame:
    """Weekly outlook as a DataFrame with a readable status column."""
    df = pd.DataFrame(outlook)
    if df.empty:
        return df
    df["scheduled_batch"] = df["scheduled_batch"].map(lambda b: b.value if b else "—")
    df["status"] = df["utilization_pct"].map(utilization_status)
    return df
