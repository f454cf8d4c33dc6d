from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.booking import Booking


class RejectionKind(str, Enum):
    VALIDATION = "validation"      # malformed input, rejected before any store access
    POLICY = "policy"              # calendar / window rules
    CAPACITY = "capacity"          # seats or buffer quota exhausted
    NOT_FOUND = "not_found"
    NOT_OWNED = "not_owned"
    TRANSIENT = "transient"        # store unavailable or write conflict; caller may retry


class RejectionCode(str, Enum):
    INVALID_DATE = "invalid_date"
    INVALID_BATCH = "invalid_batch"
    INVALID_SEAT = "invalid_seat"
    NO_SQUAD = "no_squad"
    NOT_WEEKDAY = "not_weekday"
    PAST_DATE = "past_date"
    ALREADY_BOOKED = "already_booked"
    OUTSIDE_ADVANCE_WINDOW = "outside_advance_window"
    BUFFER_WINDOW_CLOSED = "buffer_window_closed"
    WRONG_BUFFER_DATE = "wrong_buffer_date"
    NOT_SCHEDULED = "not_scheduled"
    NO_SEATS = "no_seats"
    NO_BUFFER_SEATS = "no_buffer_seats"
    SEAT_TAKEN = "seat_taken"
    BOOKING_NOT_FOUND = "booking_not_found"
    NOT_OWNER = "not_owner"
    ALREADY_RELEASED = "already_released"
    BOOKING_NOT_ACTIVE = "booking_not_active"
    PAST_BOOKING = "past_booking"
    STORE_UNAVAILABLE = "store_unavailable"
    WRITE_CONFLICT = "write_conflict"


CODE_KINDS = {
    RejectionCode.INVALID_DATE: RejectionKind.VALIDATION,
    RejectionCode.INVALID_BATCH: RejectionKind.VALIDATION,
    RejectionCode.INVALID_SEAT: RejectionKind.VALIDATION,
    RejectionCode.NO_SQUAD: RejectionKind.POLICY,
    RejectionCode.NOT_WEEKDAY: RejectionKind.POLICY,
    RejectionCode.PAST_DATE: RejectionKind.POLICY,
    RejectionCode.ALREADY_BOOKED: RejectionKind.POLICY,
    RejectionCode.OUTSIDE_ADVANCE_WINDOW: RejectionKind.POLICY,
    RejectionCode.BUFFER_WINDOW_CLOSED: RejectionKind.POLICY,
    RejectionCode.WRONG_BUFFER_DATE: RejectionKind.POLICY,
    RejectionCode.NOT_SCHEDULED: RejectionKind.POLICY,
    RejectionCode.NO_SEATS: RejectionKind.CAPACITY,
    RejectionCode.NO_BUFFER_SEATS: RejectionKind.CAPACITY,
    RejectionCode.SEAT_TAKEN: RejectionKind.CAPACITY,
    RejectionCode.BOOKING_NOT_FOUND: RejectionKind.NOT_FOUND,
    RejectionCode.NOT_OWNER: RejectionKind.NOT_OWNED,
    RejectionCode.ALREADY_RELEASED: RejectionKind.POLICY,
    RejectionCode.BOOKING_NOT_ACTIVE: RejectionKind.POLICY,
    RejectionCode.PAST_BOOKING: RejectionKind.POLICY,
    RejectionCode.STORE_UNAVAILABLE: RejectionKind.TRANSIENT,
    RejectionCode.WRITE_CONFLICT: RejectionKind.TRANSIENT,
}


@dataclass(frozen=True)
class Rejection:
    code: RejectionCode
    message: str

    @property
    def kind(self) -> RejectionKind:
        return CODE_KINDS[self.code]

    @property
    def retryable(self) -> bool:
        return self.kind is RejectionKind.TRANSIENT


@dataclass
class AdmissionResult:
    """Outcome of a booking command: either a booking or a rejection."""
    booking: Optional[Booking] = None
    rejection: Optional[Rejection] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @property
    def code(self) -> Optional[RejectionCode]:
        return self.rejection.code if self.rejection else None
