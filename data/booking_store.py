"""Record store interface for bookings, plus a thread-safe in-memory implementation."""

import copy
import itertools
import threading
import weakref
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional

from models.booking import Batch, Booking, BookingStatus
from config.defaults import TOTAL_SEATS


class StoreError(Exception):
    """Transient store failure. The caller may retry with fresh state."""


class StoreUnavailableError(StoreError):
    pass


class WriteConflictError(StoreError):
    """A write violated a storage-level uniqueness or range constraint."""


class BookingStore(ABC):
    """Narrow query/command surface the booking engine runs against."""

    @abstractmethod
    def lock_date(self, booking_date: date):
        """Context manager serializing read-decide-write sequences for one date."""

    @abstractmethod
    def get_booking(self, booking_id: int) -> Optional[Booking]:
        pass

    @abstractmethod
    def find_booking(self, user_id: str, booking_date: date) -> Optional[Booking]:
        pass

    @abstractmethod
    def count_active(self, booking_date: date) -> int:
        pass

    @abstractmethod
    def list_active(self, booking_date: date) -> List[Booking]:
        pass

    @abstractmethod
    def count_active_buffer(self, booking_date: date) -> int:
        pass

    @abstractmethod
    def count_released_scheduled(self, booking_date: date, batch: Batch) -> int:
        """RELEASED, non-buffer bookings of `batch` on `booking_date`."""

    @abstractmethod
    def add(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    def save(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    def list_bookings(
        self,
        user_ids: Optional[Iterable[str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[BookingStatus] = None,
        batch: Optional[Batch] = None,
        is_buffer_booking: Optional[bool] = None,
    ) -> List[Booking]:
        """Bookings matching every given filter, ordered by date then booking time."""


class DateLocks:
    """One lock per calendar date, created on demand and dropped once nobody holds it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[date, threading.Lock]" = weakref.WeakValueDictionary()

    @contextmanager
    def hold(self, booking_date: date) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(booking_date, threading.Lock())
        with lock:
            yield


def sort_key(b: Booking):
    return (b.booking_date, b.booked_at is None, b.booked_at or 0, b.booking_id or 0)


class InMemoryBookingStore(BookingStore):
    """Dict-backed store. Hands out copies so only `add`/`save` change stored state."""

    def __init__(self, total_seats: int = TOTAL_SEATS):
        self.total_seats = total_seats
        self._records: Dict[int, Booking] = {}
        self._ids = itertools.count(1)
        self._guard = threading.RLock()
        self._date_locks = DateLocks()

    def lock_date(self, booking_date: date):
        return self._date_locks.hold(booking_date)

    # --- Queries ---

    def _select(self, predicate) -> List[Booking]:
        with self._guard:
            return [copy.copy(b) for b in self._records.values() if predicate(b)]

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        with self._guard:
            b = self._records.get(booking_id)
            return copy.copy(b) if b else None

    def find_booking(self, user_id: str, booking_date: date) -> Optional[Booking]:
        found = self._select(lambda b: b.user_id == user_id and b.booking_date == booking_date)
        return found[0] if found else None

    def count_active(self, booking_date: date) -> int:
        return len(self.list_active(booking_date))

    def list_active(self, booking_date: date) -> List[Booking]:
        active = self._select(lambda b: b.booking_date == booking_date and b.is_active)
        return sorted(active, key=lambda b: b.seat_number or 0)

    def count_active_buffer(self, booking_date: date) -> int:
        return len(self._select(
            lambda b: b.booking_date == booking_date and b.is_active and b.is_buffer_booking
        ))

    def count_released_scheduled(self, booking_date: date, batch: Batch) -> int:
        return len(self._select(
            lambda b: (b.booking_date == booking_date
                       and b.status is BookingStatus.RELEASED
                       and not b.is_buffer_booking
                       and b.batch is batch)
        ))

    def list_bookings(self, user_ids=None, start=None, end=None, status=None,
                      batch=None, is_buffer_booking=None) -> List[Booking]:
        wanted = set(user_ids) if user_ids is not None else None

        def match(b: Booking) -> bool:
            if wanted is not None and b.user_id not in wanted:
                return False
            if start is not None and b.booking_date < start:
                return False
            if end is not None and b.booking_date > end:
                return False
            if status is not None and b.status is not status:
                return False
            if batch is not None and b.batch is not batch:
                return False
            if is_buffer_booking is not None and b.is_buffer_booking != is_buffer_booking:
                return False
            return True

        return sorted(self._select(match), key=sort_key)

    # --- Commands ---

    def _check_constraints(self, booking: Booking):
        for other in self._records.values():
            if other.booking_id == booking.booking_id:
                continue
            if other.user_id == booking.user_id and other.booking_date == booking.booking_date:
                raise WriteConflictError(
                    f"User {booking.user_id} already has a booking record for {booking.booking_date}"
                )
            if (booking.is_active and other.is_active
                    and other.booking_date == booking.booking_date
                    and other.seat_number == booking.seat_number):
                raise WriteConflictError(
                    f"Seat {booking.seat_number} is already active on {booking.booking_date}"
                )
        if booking.is_active:
            if booking.seat_number is None or not 1 <= booking.seat_number <= self.total_seats:
                raise WriteConflictError(f"Active booking needs a seat in 1..{self.total_seats}")

    def add(self, booking: Booking) -> Booking:
        with self._guard:
            stored = copy.copy(booking)
            stored.booking_id = next(self._ids)
            self._check_constraints(stored)
            self._records[stored.booking_id] = stored
            return copy.copy(stored)

    def save(self, booking: Booking) -> Booking:
        with self._guard:
            if booking.booking_id not in self._records:
                raise WriteConflictError(f"Booking {booking.booking_id} does not exist")
            self._check_constraints(booking)
            self._records[booking.booking_id] = copy.copy(booking)
            return copy.copy(booking)
