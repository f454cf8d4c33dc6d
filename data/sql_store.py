"""SQLAlchemy-backed booking store.

Seat uniqueness is enforced by the database as well as by the engine: a partial
unique index on (booking_date, seat_number) covers ACTIVE rows only, so released
rows keep their historical seat number without blocking re-assignment.
"""

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, List, Optional

from loguru import logger
from sqlalchemy import (
    Boolean, CheckConstraint, Date, DateTime, Index, Integer, String, Text,
    UniqueConstraint, create_engine, func, select, text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from data.booking_store import BookingStore, DateLocks, StoreUnavailableError, WriteConflictError
from models.booking import Batch, Booking, BookingStatus
from config.defaults import DATABASE_URL, TOTAL_SEATS


class Base(DeclarativeBase):
    pass


class BookingRow(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("user_id", "booking_date", name="uq_bookings_user_date"),
        Index(
            "uq_bookings_active_seat", "booking_date", "seat_number",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
        Index("ix_bookings_date_status", "booking_date", "status"),
        CheckConstraint(
            f"seat_number IS NULL OR (seat_number >= 1 AND seat_number <= {TOTAL_SEATS})",
            name="ck_bookings_seat_range",
        ),
        CheckConstraint(
            "status != 'active' OR seat_number IS NOT NULL",
            name="ck_bookings_active_has_seat",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    seat_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    batch: Mapped[str] = mapped_column(String(16), nullable=False)
    is_buffer_booking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=BookingStatus.ACTIVE.value)
    booked_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    released_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def apply(self, booking: Booking):
        self.user_id = booking.user_id
        self.booking_date = booking.booking_date
        self.seat_number = booking.seat_number
        self.batch = Batch(booking.batch).value
        self.is_buffer_booking = booking.is_buffer_booking
        self.status = BookingStatus(booking.status).value
        self.booked_at = booking.booked_at
        self.released_at = booking.released_at
        self.notes = booking.notes or ""

    def to_domain(self) -> Booking:
        return Booking(
            user_id=self.user_id,
            booking_date=self.booking_date,
            batch=Batch(self.batch),
            seat_number=self.seat_number,
            is_buffer_booking=self.is_buffer_booking,
            status=BookingStatus(self.status),
            booked_at=self.booked_at,
            released_at=self.released_at,
            booking_id=self.id,
            notes=self.notes,
        )


def create_store_engine(database_url: str = DATABASE_URL, echo: bool = False) -> Engine:
    """Engine for `database_url`; SQLite URLs get thread-sharing settings."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


class SqlBookingStore(BookingStore):

    def __init__(self, engine: Optional[Engine] = None, database_url: str = DATABASE_URL):
        self._engine = engine or create_store_engine(database_url)
        self._sessions = sessionmaker(self._engine, expire_on_commit=False)
        self._date_locks = DateLocks()
        try:
            Base.metadata.create_all(self._engine)
        except OperationalError as e:
            raise StoreUnavailableError(f"Cannot initialise booking tables: {e}") from e

    def lock_date(self, booking_date: date):
        return self._date_locks.hold(booking_date)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._sessions() as session:
                yield session
        except OperationalError as e:
            logger.warning(f"Booking database unavailable: {e}")
            raise StoreUnavailableError(str(e)) from e

    def _commit(self, session: Session):
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Booking write rejected by constraint: {e.orig}")
            raise WriteConflictError(str(e.orig)) from e

    # --- Queries ---

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        with self._session() as session:
            row = session.get(BookingRow, booking_id)
            return row.to_domain() if row else None

    def find_booking(self, user_id: str, booking_date: date) -> Optional[Booking]:
        stmt = select(BookingRow).where(
            BookingRow.user_id == user_id,
            BookingRow.booking_date == booking_date,
        )
        with self._session() as session:
            row = session.scalars(stmt).first()
            return row.to_domain() if row else None

    def _count(self, *conditions) -> int:
        stmt = select(func.count()).select_from(BookingRow).where(*conditions)
        with self._session() as session:
            return session.scalar(stmt) or 0

    def count_active(self, booking_date: date) -> int:
        return self._count(
            BookingRow.booking_date == booking_date,
            BookingRow.status == BookingStatus.ACTIVE.value,
        )

    def list_active(self, booking_date: date) -> List[Booking]:
        stmt = (
            select(BookingRow)
            .where(
                BookingRow.booking_date == booking_date,
                BookingRow.status == BookingStatus.ACTIVE.value,
            )
            .order_by(BookingRow.seat_number)
        )
        with self._session() as session:
            return [row.to_domain() for row in session.scalars(stmt)]

    def count_active_buffer(self, booking_date: date) -> int:
        return self._count(
            BookingRow.booking_date == booking_date,
            BookingRow.status == BookingStatus.ACTIVE.value,
            BookingRow.is_buffer_booking.is_(True),
        )

    def count_released_scheduled(self, booking_date: date, batch: Batch) -> int:
        return self._count(
            BookingRow.booking_date == booking_date,
            BookingRow.status == BookingStatus.RELEASED.value,
            BookingRow.is_buffer_booking.is_(False),
            BookingRow.batch == Batch(batch).value,
        )

    def list_bookings(self, user_ids=None, start=None, end=None, status=None,
                      batch=None, is_buffer_booking=None) -> List[Booking]:
        stmt = select(BookingRow)
        if user_ids is not None:
            stmt = stmt.where(BookingRow.user_id.in_(list(user_ids)))
        if start is not None:
            stmt = stmt.where(BookingRow.booking_date >= start)
        if end is not None:
            stmt = stmt.where(BookingRow.booking_date <= end)
        if status is not None:
            stmt = stmt.where(BookingRow.status == BookingStatus(status).value)
        if batch is not None:
            stmt = stmt.where(BookingRow.batch == Batch(batch).value)
        if is_buffer_booking is not None:
            stmt = stmt.where(BookingRow.is_buffer_booking.is_(is_buffer_booking))
        stmt = stmt.order_by(BookingRow.booking_date, BookingRow.booked_at, BookingRow.id)
        with self._session() as session:
            return [row.to_domain() for row in session.scalars(stmt)]

    # --- Commands ---

    def add(self, booking: Booking) -> Booking:
        row = BookingRow()
        row.apply(booking)
        with self._session() as session:
            session.add(row)
            self._commit(session)
            return row.to_domain()

    def save(self, booking: Booking) -> Booking:
        with self._session() as session:
            row = session.get(BookingRow, booking.booking_id)
            if row is None:
                raise WriteConflictError(f"Booking {booking.booking_id} does not exist")
            row.apply(booking)
            self._commit(session)
            return row.to_domain()
