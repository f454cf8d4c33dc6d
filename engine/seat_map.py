"""Per-seat availability grid and day-level availability summary.

The view is advisory: it mirrors the admission predicates so a client can grey
out seats, but `submit` re-validates everything.
"""

from datetime import datetime
from typing import Optional

from data.booking_store import BookingStore
from engine.admission import (
    DateLike, BatchLike, check_eligibility, coerce_batch, compute_buffer_quota,
)
from engine.explainer import reject
from engine.rotation import scheduled_batch, to_day
from models.rejection import RejectionCode
from models.seat_map import Availability, SeatCell, SeatMapView, SeatStatus
from config.defaults import TOTAL_SEATS


def render_seat_map(
    store: BookingStore,
    booking_date: DateLike,
    user_id: str,
    user_batch: BatchLike,
    now: datetime,
    rule_config: Optional[dict] = None,
) -> SeatMapView:
    """Status of every seat on `booking_date` as seen by `user_id`.

    Raises ValueError when `booking_date` cannot be parsed.
    """
    cfg = rule_config or {}
    total_seats = cfg.get("total_seats", TOTAL_SEATS)

    day = to_day(booking_date)
    batch = coerce_batch(user_batch)
    sched = scheduled_batch(day)
    is_scheduled = batch is not None and batch == sched

    active = store.list_active(day)
    by_seat = {b.seat_number: b for b in active if b.seat_number is not None}
    own = store.find_booking(user_id, day)
    quota = compute_buffer_quota(store, day, cfg)

    rejection = check_eligibility(batch, day, now, cfg)
    if rejection is None and own is not None and own.is_active:
        rejection = reject(RejectionCode.ALREADY_BOOKED)
    if rejection is None and len(active) >= total_seats:
        rejection = reject(RejectionCode.NO_SEATS)
    if rejection is None and not is_scheduled and quota.available <= 0:
        rejection = reject(RejectionCode.NO_BUFFER_SEATS)

    can_book = rejection is None
    can_book_buffer = can_book and not is_scheduled

    seats = []
    for seat_number in range(1, total_seats + 1):
        booking = by_seat.get(seat_number)
        if booking is not None:
            status = SeatStatus.YOUR_BOOKING if booking.user_id == user_id else SeatStatus.FULL
            seats.append(SeatCell(seat_number, status, booking.booking_id))
            continue
        if not can_book:
            status = SeatStatus.FULL
        elif is_scheduled:
            status = SeatStatus.AVAILABLE
        else:
            status = SeatStatus.BUFFER
        seats.append(SeatCell(seat_number, status))

    return SeatMapView(
        date=day,
        total_seats=total_seats,
        booked_seats=len(active),
        scheduled_batch=sched,
        user_batch=batch,
        is_user_scheduled=is_scheduled,
        can_book=can_book,
        can_book_buffer=can_book_buffer,
        buffer_quota=quota,
        buffer_reason=None if is_scheduled or rejection is None else rejection.message,
        seats=seats,
    )


def compute_availability(
    store: BookingStore,
    booking_date: DateLike,
    user_batch: BatchLike,
    now: datetime,
    rule_config: Optional[dict] = None,
) -> Availability:
    """Day-level seat counts and whether `user_batch` could book at `now`."""
    cfg = rule_config or {}
    total_seats = cfg.get("total_seats", TOTAL_SEATS)

    day = to_day(booking_date)
    batch = coerce_batch(user_batch)
    sched = scheduled_batch(day)
    is_scheduled = batch is not None and batch == sched

    booked = store.count_active(day)
    has_room = booked < total_seats
    eligible = check_eligibility(batch, day, now, cfg) is None
    buffer_open = False
    if not is_scheduled and has_room and eligible:
        buffer_open = compute_buffer_quota(store, day, cfg).available > 0

    return Availability(
        date=day,
        total_seats=total_seats,
        booked_seats=booked,
        buffer_bookings=store.count_active_buffer(day),
        scheduled_batch=sched,
        user_batch=batch,
        is_user_scheduled=is_scheduled,
        can_book=has_room and eligible and (is_scheduled or buffer_open),
        can_book_buffer=buffer_open,
    )
