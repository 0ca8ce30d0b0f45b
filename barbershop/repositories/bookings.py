"""Booking store - reservations per barber and client"""

from datetime import date
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from barbershop.models import Booking
from barbershop.schemas import ACTIVE_STATUSES, BookingStatus


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get(db: Session, booking_id: int) -> Optional[Booking]:
        return db.get(Booking, booking_id)

    @staticmethod
    def get_many(db: Session, booking_ids: Sequence[int]) -> List[Booking]:
        return list(db.exec(
            select(Booking).where(Booking.id.in_(booking_ids)).order_by(Booking.id)
        ).all())

    @staticmethod
    def active_for_day(
        db: Session, barber_id: int, on_date: date, exclude_id: Optional[int] = None
    ) -> List[Booking]:
        """Bookings that still occupy time (pending, confirmed, in progress) on a date."""
        stmt = (
            select(Booking)
            .where(Booking.barber_id == barber_id)
            .where(Booking.date == on_date)
            .where(Booking.status.in_([s.value for s in ACTIVE_STATUSES]))
        )
        if exclude_id is not None:
            stmt = stmt.where(Booking.id != exclude_id)
        return list(db.exec(stmt.order_by(Booking.start_time)).all())

    @staticmethod
    def for_range(db: Session, barber_id: int, start_date: date, end_date: date) -> List[Booking]:
        """Non-cancelled bookings between two dates, both inclusive."""
        return list(db.exec(
            select(Booking)
            .where(Booking.barber_id == barber_id)
            .where(Booking.date >= start_date)
            .where(Booking.date <= end_date)
            .where(Booking.status != BookingStatus.CANCELLED.value)
            .order_by(Booking.date, Booking.start_time)
        ).all())

    @staticmethod
    def add(db: Session, booking: Booking) -> Booking:
        db.add(booking)
        db.flush()  # fills booking.id
        return booking

    @staticmethod
    def list_for(
        db: Session,
        *,
        user_id: Optional[int] = None,
        barber_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        on_date: Optional[date] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Booking], int]:
        conditions = []
        if user_id is not None:
            conditions.append(Booking.user_id == user_id)
        if barber_id is not None:
            conditions.append(Booking.barber_id == barber_id)
        if status is not None:
            conditions.append(Booking.status == status.value)
        if on_date is not None:
            conditions.append(Booking.date == on_date)

        total = db.exec(select(func.count()).select_from(Booking).where(*conditions)).one()
        bookings = db.exec(
            select(Booking)
            .where(*conditions)
            .order_by(Booking.date.desc(), Booking.start_time.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()
        return list(bookings), total
