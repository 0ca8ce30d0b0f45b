"""Booking service - create, reschedule and change status of bookings"""

import logging
import math
from datetime import date, datetime
from typing import Callable, List, Optional

from sqlmodel import Session

from barbershop.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from barbershop.core import add_minutes
from barbershop.db import transaction
from barbershop.errors import ForbiddenError, NotFoundError, ValidationError
from barbershop.models import Barber, Booking, Service, User, utcnow
from barbershop.repositories.bookings import BookingRepository
from barbershop.schemas import (
    BookingCreate,
    BookingPage,
    BookingPublic,
    BookingStatus,
    Pagination,
    PersonSummary,
    ServicePublic,
    TERMINAL_STATUSES,
)
from barbershop.services.availability import check_availability
from barbershop.services.notifications import NotificationService

logger = logging.getLogger(__name__)


def _append_note(notes: Optional[str], line: str) -> str:
    return f"{notes or ''}\n{line}".strip()


class BookingService:
    """
    Booking lifecycle. Create and reschedule run the availability check and
    the write in one transaction, holding the barber's schedule row for that
    weekday so concurrent requests for the same barber queue up behind it.
    """

    def __init__(
        self,
        db: Session,
        now: Callable[[], datetime] = datetime.now,
        notifier: Optional[NotificationService] = None,
    ):
        self.db = db
        self.now = now
        self.notifier = notifier or NotificationService(db)

    def get_booking(self, booking_id: int) -> Booking:
        booking = BookingRepository.get(self.db, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def create_booking(self, client_id: int, data: BookingCreate) -> BookingPublic:
        with transaction(self.db):
            barber = self.db.get(Barber, data.barber_id)
            if barber is None:
                raise NotFoundError("Barber not found")

            service = self.db.get(Service, data.service_id)
            if service is None:
                raise NotFoundError("Service not found")
            if service.barber_id != barber.id:
                raise ValidationError("Service is not offered by this barber")

            end_time = add_minutes(data.start_time, service.duration_minutes)

            result = check_availability(
                self.db, barber.id, data.date, data.start_time, end_time,
                now=self.now(), lock=True,
            )
            if not result.is_available:
                raise ValidationError(result.reason)

            booking = BookingRepository.add(self.db, Booking(
                barber_id=barber.id,
                user_id=client_id,
                service_id=service.id,
                date=data.date,
                start_time=data.start_time,
                end_time=end_time,
                notes=data.notes,
                status=BookingStatus.PENDING.value,
            ))
            public = self._to_public(booking)
            barber_user_id = barber.user_id

        logger.info(
            f"Booking {public.id} created: barber {public.barber_id}, client {client_id}, "
            f"{public.date} {public.start_time}-{public.end_time}"
        )
        self.notifier.booking_created(barber_user_id, public)
        return public

    def update_booking_status(self, booking_id: int, status: BookingStatus) -> BookingPublic:
        # Any status may follow any other; only rescheduling looks at the current one.
        with transaction(self.db):
            booking = self.get_booking(booking_id)
            previous = booking.status
            booking.status = status.value
            booking.updated_at = utcnow()
            self.db.add(booking)
            self.db.flush()
            public = self._to_public(booking)

        logger.info(f"Booking {booking_id} status {previous} -> {status.value}")
        self.notifier.booking_status_changed(public)
        return public

    def cancel_booking(self, booking_id: int) -> BookingPublic:
        return self.update_booking_status(booking_id, BookingStatus.CANCELLED)

    def reschedule_booking(
        self,
        booking_id: int,
        new_date: date,
        new_start_time: str,
        reason: Optional[str] = None,
    ) -> BookingPublic:
        with transaction(self.db):
            booking = self.get_booking(booking_id)

            if booking.status in {s.value for s in TERMINAL_STATUSES}:
                raise ValidationError("Cannot reschedule a finished or cancelled booking")

            service = self.db.get(Service, booking.service_id)
            new_end_time = add_minutes(new_start_time, service.duration_minutes)

            result = check_availability(
                self.db, booking.barber_id, new_date, new_start_time, new_end_time,
                exclude_booking_id=booking.id, now=self.now(), lock=True,
            )
            if not result.is_available:
                raise ValidationError(result.reason)

            booking.date = new_date
            booking.start_time = new_start_time
            booking.end_time = new_end_time
            if reason:
                booking.notes = _append_note(booking.notes, f"[Rescheduled: {reason}]")
            booking.updated_at = utcnow()
            self.db.add(booking)
            self.db.flush()
            public = self._to_public(booking)

        logger.info(f"Booking {booking_id} rescheduled to {new_date} {new_start_time}-{new_end_time}")
        self.notifier.booking_rescheduled(public)
        return public

    def bulk_update_booking_status(
        self,
        booking_ids: List[int],
        status: BookingStatus,
        reason: Optional[str] = None,
        barber_id: Optional[int] = None,
    ) -> List[BookingPublic]:
        """
        Set the status of several bookings at once. Nothing is written unless
        every id resolves (and, when barber_id is given, belongs to that barber).
        """
        if not booking_ids:
            raise ValidationError("At least one booking id is required")

        wanted = set(booking_ids)
        with transaction(self.db):
            bookings = BookingRepository.get_many(self.db, list(wanted))
            if len(bookings) != len(wanted):
                raise NotFoundError("Some bookings were not found")
            if barber_id is not None and any(b.barber_id != barber_id for b in bookings):
                raise ForbiddenError("Forbidden")

            updated_at = utcnow()
            for booking in bookings:
                booking.status = status.value
                if reason:
                    booking.notes = _append_note(booking.notes, f"[Bulk Update: {reason}]")
                booking.updated_at = updated_at
                self.db.add(booking)
            self.db.flush()
            result = [self._to_public(b) for b in bookings]

        logger.info(f"Bulk status update to {status.value} for bookings {sorted(wanted)}")
        for public in result:
            self.notifier.booking_status_changed(public)
        return result

    def list_client_bookings(self, client_id: int, **filters) -> BookingPage:
        return self._page(user_id=client_id, **filters)

    def list_barber_bookings(self, barber_id: int, **filters) -> BookingPage:
        return self._page(barber_id=barber_id, **filters)

    def _page(
        self,
        status: Optional[BookingStatus] = None,
        on_date: Optional[date] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        **owner,
    ) -> BookingPage:
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        bookings, total = BookingRepository.list_for(
            self.db, status=status, on_date=on_date, page=page, limit=limit, **owner
        )
        return BookingPage(
            bookings=[self._to_public(b) for b in bookings],
            pagination=Pagination(
                page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)
            ),
        )

    def _to_public(self, booking: Booking) -> BookingPublic:
        """Booking with service, barber and client display data attached."""
        service = self.db.get(Service, booking.service_id)
        barber = self.db.get(Barber, booking.barber_id)
        barber_user = self.db.get(User, barber.user_id) if barber else None
        client = self.db.get(User, booking.user_id)

        return BookingPublic(
            id=booking.id,
            barber_id=booking.barber_id,
            user_id=booking.user_id,
            service_id=booking.service_id,
            date=booking.date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            status=booking.status,
            notes=booking.notes,
            service=ServicePublic.model_validate(service, from_attributes=True) if service else None,
            barber=_person(barber.id, barber_user) if barber_user else None,
            client=_person(client.id, client) if client else None,
        )


def _person(person_id: int, user: User) -> PersonSummary:
    return PersonSummary(
        id=person_id,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
    )
