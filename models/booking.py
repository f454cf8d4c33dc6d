from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Batch(str, Enum):
    BATCH_1 = "BATCH_1"
    BATCH_2 = "BATCH_2"

    @property
    def label(self) -> str:
        return "Batch " + self.value[-1]

    @property
    def other(self) -> "Batch":
        return Batch.BATCH_2 if self is Batch.BATCH_1 else Batch.BATCH_1


class BookingStatus(str, Enum):
    ACTIVE = "active"
    RELEASED = "released"
    CANCELLED = "cancelled"


# Allowed status edges; anything else is a no-op
TRANSITIONS = {
    BookingStatus.ACTIVE: {BookingStatus.RELEASED, BookingStatus.CANCELLED},
    BookingStatus.RELEASED: {BookingStatus.ACTIVE},
    BookingStatus.CANCELLED: {BookingStatus.ACTIVE, BookingStatus.RELEASED},
}


@dataclass
class Booking:
    user_id: str
    booking_date: date
    batch: Batch
    seat_number: Optional[int] = None
    is_buffer_booking: bool = False
    status: BookingStatus = BookingStatus.ACTIVE
    booked_at: Optional[datetime] = None
    released_at: Optional[datetime] = None
    booking_id: Optional[int] = None
    notes: str = ""

    @property
    def is_active(self) -> bool:
        return self.status is BookingStatus.ACTIVE

    def can_transition(self, target: BookingStatus) -> bool:
        return target in TRANSITIONS[self.status]

    def transition(self, target: BookingStatus) -> bool:
        """Move to `target` if the edge exists. Returns False (and changes nothing) otherwise."""
        if not self.can_transition(target):
            return False
        self.status = target
        return True

    def activate(self, seat_number: int, batch: Batch, is_buffer_booking: bool, now: datetime) -> bool:
        """Re-book a released or cancelled record in place."""
        if not self.transition(BookingStatus.ACTIVE):
            return False
        self.seat_number = seat_number
        self.batch = batch
        self.is_buffer_booking = is_buffer_booking
        self.booked_at = now
        self.released_at = None
        return True

    def release(self, now: datetime) -> bool:
        if not self.transition(BookingStatus.RELEASED):
            return False
        self.released_at = now
        return True

    def cancel(self, now: datetime) -> bool:
        if not self.transition(BookingStatus.CANCELLED):
            return False
        self.released_at = now
        return True
