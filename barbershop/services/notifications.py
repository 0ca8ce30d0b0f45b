"""In-app notifications for booking events. Delivery is best effort."""

import logging
from typing import List

from sqlmodel import Session, select

from barbershop.db import transaction
from barbershop.models import Notification
from barbershop.schemas import BookingPublic

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def notify(self, user_id: int, title: str, message: str, kind: str) -> bool:
        """Store a notification in its own transaction. Failures are logged, never raised."""
        try:
            with transaction(self.db):
                self.db.add(Notification(user_id=user_id, title=title, message=message, kind=kind))
        except Exception:
            logger.exception(f"Failed to store '{kind}' notification for user {user_id}")
            return False
        return True

    def booking_created(self, barber_user_id: int, booking: BookingPublic) -> bool:
        return self.notify(
            barber_user_id,
            "New booking",
            f"New booking on {booking.date.isoformat()} at {booking.start_time}-{booking.end_time}.",
            "booking_created",
        )

    def booking_status_changed(self, booking: BookingPublic) -> bool:
        return self.notify(
            booking.user_id,
            "Booking updated",
            f"Your booking on {booking.date.isoformat()} at {booking.start_time} is now {booking.status.value}.",
            "booking_status",
        )

    def booking_rescheduled(self, booking: BookingPublic) -> bool:
        return self.notify(
            booking.user_id,
            "Booking rescheduled",
            f"Your booking was moved to {booking.date.isoformat()} at {booking.start_time}-{booking.end_time}.",
            "booking_rescheduled",
        )

    def list_for_user(self, user_id: int) -> List[Notification]:
        return list(self.db.exec(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        ).all())
