"""Booking admission: eligibility rules, dynamic buffer quota and seat assignment.

Every command returns an AdmissionResult carrying either the committed booking or
a Rejection with a stable code and message. Store failures never escape as
exceptions; they come back as TRANSIENT rejections the caller may retry.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

from loguru import logger

from data.booking_store import BookingStore, StoreError, WriteConflictError
from engine.explainer import reject
from engine.rotation import (
    buffer_window_open, format_hour, is_weekday, is_within_advance_window,
    next_buffer_date, scheduled_batch, to_day,
)
from models.booking import Batch, Booking, BookingStatus
from models.rejection import AdmissionResult, Rejection, RejectionCode
from models.seat_map import BufferQuota
from config.defaults import (
    TOTAL_SEATS, MEMBERS_PER_BATCH,
    BUFFER_WINDOW_START_HOUR, MAX_ADVANCE_BOOKING_WEEKS,
)

DateLike = Union[date, datetime, str]
BatchLike = Union[Batch, str, None]


# --- Input normalization ---

def parse_booking_date(value: DateLike) -> Optional[date]:
    try:
        return to_day(value)
    except (TypeError, ValueError):
        return None


def coerce_batch(value: BatchLike) -> Optional[Batch]:
    """Batch from an enum or its string value; raises ValueError on unknown strings."""
    if value is None or value == "":
        return None
    return Batch(value)


def _validate_seat(seat_number, total_seats: int) -> Optional[Rejection]:
    if seat_number is None:
        return None
    if isinstance(seat_number, bool) or not isinstance(seat_number, int):
        return reject(RejectionCode.INVALID_SEAT, total_seats=total_seats)
    if not 1 <= seat_number <= total_seats:
        return reject(RejectionCode.INVALID_SEAT, total_seats=total_seats)
    return None


# --- Read-only predicates (shared with the seat map) ---

def check_calendar(day: date, now: datetime) -> Optional[Rejection]:
    """Weekday and not-in-the-past checks."""
    if not is_weekday(day):
        return reject(RejectionCode.NOT_WEEKDAY)
    if day < now.date():
        return reject(RejectionCode.PAST_DATE)
    return None


def check_booking_window(
    user_batch: Batch,
    day: date,
    now: datetime,
    rule_config: Optional[dict] = None,
) -> Optional[Rejection]:
    """Advance window for scheduled users; buffer time/date window for everyone else."""
    cfg = rule_config or {}
    max_weeks = cfg.get("max_advance_weeks", MAX_ADVANCE_BOOKING_WEEKS)
    start_hour = cfg.get("buffer_window_start_hour", BUFFER_WINDOW_START_HOUR)

    if user_batch == scheduled_batch(day):
        if not is_within_advance_window(day, max_weeks, now.date()):
            return reject(RejectionCode.OUTSIDE_ADVANCE_WINDOW, max_weeks=max_weeks)
        return None

    if not buffer_window_open(now, start_hour):
        return reject(RejectionCode.BUFFER_WINDOW_CLOSED, window_start=format_hour(start_hour))
    if day != next_buffer_date(now):
        return reject(RejectionCode.WRONG_BUFFER_DATE)
    return None


def check_eligibility(
    user_batch: Optional[Batch],
    day: date,
    now: datetime,
    rule_config: Optional[dict] = None,
) -> Optional[Rejection]:
    """All store-free admission rules for `user_batch` booking `day` at `now`."""
    if user_batch is None:
        return reject(RejectionCode.NO_SQUAD)
    return check_calendar(day, now) or check_booking_window(user_batch, day, now, rule_config)


def compute_buffer_quota(
    store: BookingStore,
    day: date,
    rule_config: Optional[dict] = None,
) -> BufferQuota:
    """Seats open to buffer bookings on `day`.

    base     = seats beyond the scheduled batch's guarantee
    released = guaranteed seats the scheduled batch has given back
    used     = buffer bookings already active
    """
    cfg = rule_config or {}
    total_seats = cfg.get("total_seats", TOTAL_SEATS)
    members_per_batch = cfg.get("members_per_batch", MEMBERS_PER_BATCH)

    sched = scheduled_batch(day)
    released = store.count_released_scheduled(day, sched) if sched else 0
    return BufferQuota(
        base=max(total_seats - members_per_batch, 0),
        released=released,
        used=store.count_active_buffer(day),
    )


def find_free_seat(occupied: Iterable[int], total_seats: int) -> Optional[int]:
    """Lowest seat number in 1..total_seats not in `occupied`."""
    taken = set(occupied)
    for seat in range(1, total_seats + 1):
        if seat not in taken:
            return seat
    return None


# --- Commands ---

def _rejected(rejection: Rejection, action: str, **context) -> AdmissionResult:
    logger.debug(f"{action} rejected ({rejection.code.value}): {rejection.message} {context}")
    return AdmissionResult(rejection=rejection)


def _transient(e: StoreError, action: str) -> AdmissionResult:
    code = RejectionCode.WRITE_CONFLICT if isinstance(e, WriteConflictError) else RejectionCode.STORE_UNAVAILABLE
    logger.warning(f"{action} failed on store access: {e}")
    return AdmissionResult(rejection=reject(code))


def submit(
    store: BookingStore,
    user_id: str,
    user_batch: BatchLike,
    booking_date: DateLike,
    seat_number: Optional[int],
    now: datetime,
    rule_config: Optional[dict] = None,
) -> AdmissionResult:
    """Admit one booking request and claim a seat for it."""
    cfg = rule_config or {}
    total_seats = cfg.get("total_seats", TOTAL_SEATS)

    day = parse_booking_date(booking_date)
    if day is None:
        return _rejected(reject(RejectionCode.INVALID_DATE), "submit", user=user_id, date=booking_date)
    try:
        batch = coerce_batch(user_batch)
    except ValueError:
        return _rejected(reject(RejectionCode.INVALID_BATCH, batch=user_batch), "submit", user=user_id)
    if batch is None:
        return _rejected(reject(RejectionCode.NO_SQUAD), "submit", user=user_id)

    rejection = _validate_seat(seat_number, total_seats) or check_calendar(day, now)
    if rejection:
        return _rejected(rejection, "submit", user=user_id, date=day)

    try:
        with store.lock_date(day):
            return _admit(store, user_id, batch, day, seat_number, now, cfg)
    except StoreError as e:
        return _transient(e, "submit")


def _admit(store, user_id, batch, day, seat_number, now, cfg) -> AdmissionResult:
    total_seats = cfg.get("total_seats", TOTAL_SEATS)

    existing = store.find_booking(user_id, day)
    if existing and existing.is_active:
        return _rejected(reject(RejectionCode.ALREADY_BOOKED), "submit", user=user_id, date=day)

    rejection = check_booking_window(batch, day, now, cfg)
    if rejection:
        return _rejected(rejection, "submit", user=user_id, date=day)
    is_buffer = batch != scheduled_batch(day)

    if store.count_active(day) >= total_seats:
        return _rejected(reject(RejectionCode.NO_SEATS), "submit", user=user_id, date=day)

    if is_buffer:
        quota = compute_buffer_quota(store, day, cfg)
        if quota.available <= 0:
            return _rejected(reject(RejectionCode.NO_BUFFER_SEATS), "submit", user=user_id, date=day)

    occupied = {b.seat_number for b in store.list_active(day) if b.seat_number is not None}
    if seat_number is not None:
        if seat_number in occupied:
            return _rejected(reject(RejectionCode.SEAT_TAKEN, seat_number=seat_number),
                             "submit", user=user_id, date=day)
        seat = seat_number
    else:
        seat = find_free_seat(occupied, total_seats)
        if seat is None:
            return _rejected(reject(RejectionCode.NO_SEATS), "submit", user=user_id, date=day)

    if existing:
        existing.activate(seat, batch, is_buffer, now)
        booking = store.save(existing)
    else:
        booking = store.add(Booking(
            user_id=user_id,
            booking_date=day,
            batch=batch,
            seat_number=seat,
            is_buffer_booking=is_buffer,
            status=BookingStatus.ACTIVE,
            booked_at=now,
        ))

    logger.info(
        f"{'Buffer booking' if is_buffer else 'Booking'} #{booking.booking_id}: "
        f"user={user_id} date={day} seat={seat}"
    )
    return AdmissionResult(booking=booking)


def release(
    store: BookingStore,
    booking_id: int,
    user_id: str,
    now: datetime,
) -> AdmissionResult:
    """Give back a booking the user owns, freeing its seat."""
    try:
        booking = store.get_booking(booking_id)
        if booking is None:
            return _rejected(reject(RejectionCode.BOOKING_NOT_FOUND), "release", booking=booking_id)

        with store.lock_date(booking.booking_date):
            booking = store.get_booking(booking_id)
            if booking is None:
                return _rejected(reject(RejectionCode.BOOKING_NOT_FOUND), "release", booking=booking_id)
            if booking.user_id != user_id:
                return _rejected(reject(RejectionCode.NOT_OWNER), "release", booking=booking_id, user=user_id)
            if booking.status is BookingStatus.RELEASED:
                return _rejected(reject(RejectionCode.ALREADY_RELEASED), "release", booking=booking_id)
            if booking.booking_date < now.date():
                return _rejected(reject(RejectionCode.PAST_BOOKING), "release", booking=booking_id)

            booking.release(now)
            booking = store.save(booking)
    except StoreError as e:
        return _transient(e, "release")

    logger.info(f"Released booking #{booking.booking_id}: user={user_id} date={booking.booking_date}")
    return AdmissionResult(booking=booking)


def release_by_date(
    store: BookingStore,
    user_id: str,
    user_batch: BatchLike,
    booking_date: DateLike,
    now: datetime,
    rule_config: Optional[dict] = None,
) -> AdmissionResult:
    """Free a scheduled user's guaranteed seat for `booking_date`, booked or not.

    With no prior record a RELEASED one is created, which is what adds the seat
    to that day's buffer pool.
    """
    day = parse_booking_date(booking_date)
    if day is None:
        return _rejected(reject(RejectionCode.INVALID_DATE), "release_by_date", user=user_id)
    try:
        batch = coerce_batch(user_batch)
    except ValueError:
        return _rejected(reject(RejectionCode.INVALID_BATCH, batch=user_batch), "release_by_date", user=user_id)
    if batch is None:
        return _rejected(reject(RejectionCode.NO_SQUAD), "release_by_date", user=user_id)

    rejection = check_calendar(day, now)
    if rejection:
        return _rejected(rejection, "release_by_date", user=user_id, date=day)
    if batch != scheduled_batch(day):
        return _rejected(reject(RejectionCode.NOT_SCHEDULED), "release_by_date", user=user_id, date=day)

    try:
        with store.lock_date(day):
            existing = store.find_booking(user_id, day)
            if existing is None:
                booking = store.add(Booking(
                    user_id=user_id,
                    booking_date=day,
                    batch=batch,
                    seat_number=None,
                    is_buffer_booking=False,
                    status=BookingStatus.RELEASED,
                    booked_at=now,
                    released_at=now,
                ))
            elif existing.status is BookingStatus.RELEASED:
                return AdmissionResult(booking=existing)
            else:
                existing.release(now)
                booking = store.save(existing)
    except StoreError as e:
        return _transient(e, "release_by_date")

    logger.info(f"Released scheduled seat: user={user_id} date={day} booking=#{booking.booking_id}")
    return AdmissionResult(booking=booking)


def cancel(store: BookingStore, booking_id: int, now: datetime) -> AdmissionResult:
    """Administrative cancellation of an active booking."""
    try:
        booking = store.get_booking(booking_id)
        if booking is None:
            return _rejected(reject(RejectionCode.BOOKING_NOT_FOUND), "cancel", booking=booking_id)

        with store.lock_date(booking.booking_date):
            booking = store.get_booking(booking_id)
            if booking is None:
                return _rejected(reject(RejectionCode.BOOKING_NOT_FOUND), "cancel", booking=booking_id)
            if not booking.cancel(now):
                return _rejected(reject(RejectionCode.BOOKING_NOT_ACTIVE), "cancel", booking=booking_id)
            booking = store.save(booking)
    except StoreError as e:
        return _transient(e, "cancel")

    logger.info(f"Cancelled booking #{booking.booking_id}: user={booking.user_id} date={booking.booking_date}")
    return AdmissionResult(booking=booking)
