from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from models.booking import Batch


class SeatStatus(str, Enum):
    YOUR_BOOKING = "your-booking"
    FULL = "full"
    BUFFER = "buffer"
    AVAILABLE = "available"


@dataclass
class BufferQuota:
    base: int          # seats beyond the scheduled batch's guarantee
    released: int      # guaranteed seats freed by scheduled members
    used: int          # active buffer bookings

    @property
    def total(self) -> int:
        return self.base + self.released

    @property
    def available(self) -> int:
        return max(self.total - self.used, 0)


@dataclass
class SeatCell:
    seat_number: int
    status: SeatStatus
    booking_id: Optional[int] = None

    @property
    def is_selectable(self) -> bool:
        return self.status in (SeatStatus.AVAILABLE, SeatStatus.BUFFER)


@dataclass
class SeatMapView:
    date: date
    total_seats: int
    booked_seats: int
    scheduled_batch: Optional[Batch]
    user_batch: Optional[Batch]
    is_user_scheduled: bool
    can_book: bool
    can_book_buffer: bool
    buffer_quota: BufferQuota
    buffer_reason: Optional[str] = None
    seats: List[SeatCell] = field(default_factory=list)

    @property
    def available_seats(self) -> int:
        return max(self.total_seats - self.booked_seats, 0)

    def seat(self, seat_number: int) -> SeatCell:
        return self.seats[seat_number - 1]


@dataclass
class Availability:
    date: date
    total_seats: int
    booked_seats: int
    buffer_bookings: int
    scheduled_batch: Optional[Batch]
    user_batch: Optional[Batch]
    is_user_scheduled: bool
    can_book: bool
    can_book_buffer: bool

    @property
    def available_seats(self) -> int:
        return max(self.total_seats - self.booked_seats, 0)
