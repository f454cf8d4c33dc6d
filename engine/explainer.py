"""Generates human-readable messages for rejections and buffer quotas."""

from typing import List, Optional

from models.rejection import Rejection, RejectionCode
from models.seat_map import BufferQuota


MESSAGES = {
    RejectionCode.INVALID_DATE: "Invalid booking date",
    RejectionCode.INVALID_BATCH: "Unknown batch '{batch}'",
    RejectionCode.INVALID_SEAT: "Seat number must be between 1 and {total_seats}",
    RejectionCode.NO_SQUAD: "You must be assigned to a squad to make a booking",
    RejectionCode.NOT_WEEKDAY: "Bookings can only be made for weekdays (Monday-Friday)",
    RejectionCode.PAST_DATE: "Cannot book for past dates",
    RejectionCode.ALREADY_BOOKED: "You already have an active booking for this date",
    RejectionCode.OUTSIDE_ADVANCE_WINDOW: "You can only book up to {max_weeks} weeks in advance",
    RejectionCode.BUFFER_WINDOW_CLOSED: "Buffer bookings can only be made after {window_start}",
    RejectionCode.WRONG_BUFFER_DATE: "Buffer bookings can only be made for the next day",
    RejectionCode.NOT_SCHEDULED: "Only members of the scheduled batch can release a guaranteed seat",
    RejectionCode.NO_SEATS: "No seats available for this date",
    RejectionCode.NO_BUFFER_SEATS: "No buffer seats available for this date",
    RejectionCode.SEAT_TAKEN: "Seat {seat_number} is already booked for this date",
    RejectionCode.BOOKING_NOT_FOUND: "Booking not found",
    RejectionCode.NOT_OWNER: "Not authorized to release this booking",
    RejectionCode.ALREADY_RELEASED: "Booking is already released",
    RejectionCode.BOOKING_NOT_ACTIVE: "Only active bookings can be cancelled",
    RejectionCode.PAST_BOOKING: "Cannot release past bookings",
    RejectionCode.STORE_UNAVAILABLE: "Booking service is temporarily unavailable, please try again",
    RejectionCode.WRITE_CONFLICT: "Another booking was saved at the same time, please try again",
}


def explain_rejection(code: RejectionCode, **context) -> str:
    return MESSAGES[code].format(**context)


def reject(code: RejectionCode, **context) -> Rejection:
    return Rejection(code=code, message=explain_rejection(code, **context))


def explain_buffer_quota(
    quota: BufferQuota,
    total_seats: int,
    members_per_batch: int,
    scheduled_label: Optional[str] = None,
) -> List[str]:
    """Produce step-by-step explanation of a day's buffer quota."""
    who = scheduled_label or "the scheduled batch"
    steps = [
        f"Step 1 - Base quota: {total_seats} seats - {members_per_batch} guaranteed to "
        f"{who} = {quota.base} buffer seats",
        f"Step 2 - Released seats: {quota.released} scheduled member"
        f"{'s' if quota.released != 1 else ''} freed a guaranteed seat",
        f"Step 3 - Total buffer pool: {quota.base} + {quota.released} = {quota.total}",
        f"Step 4 - Used: {quota.used} buffer booking{'s' if quota.used != 1 else ''} active "
        f"=> {quota.available} available",
    ]
    if quota.total - quota.used < 0:
        steps.append("Note: more buffer bookings are active than the pool allows; none can be added")
    return steps
