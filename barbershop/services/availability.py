"""
Availability Checker

Decides whether a [date, start_time, end_time) interval can be booked for a
barber. Checks run in order and stop at the first failure:

1. date before today
2. start time already passed (today only)
3. barber has no working schedule for that weekday
4. interval outside working hours
5. interval intersects the lunch break
6. interval overlaps an active booking (pending, confirmed, in progress)

Rejections are returned, never raised. All intervals are half-open, so a
booking ending at 14:30 does not conflict with one starting at 14:30.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlmodel import Session

from barbershop.core import combine, overlaps, weekday_name
from barbershop.repositories.bookings import BookingRepository
from barbershop.repositories.schedules import ScheduleRepository

logger = logging.getLogger(__name__)

PAST_DATE = "Cannot book a past date. Please choose today or a future date."
PAST_TIME = "This time has already passed. Please choose a future time."
DAY_OFF = "The barber does not work on this day. Please choose another day."
BOOKED = "This time is already booked. Please choose another time."


@dataclass(frozen=True)
class AvailabilityResult:
    is_available: bool
    reason: Optional[str] = None


def _reject(barber_id: int, on_date: date, start_time: str, reason: str) -> AvailabilityResult:
    logger.info(f"Slot rejected for barber {barber_id} on {on_date} at {start_time}: {reason}")
    return AvailabilityResult(False, reason)


def check_availability(
    db: Session,
    barber_id: int,
    on_date: date,
    start_time: str,
    end_time: str,
    exclude_booking_id: Optional[int] = None,
    now: Optional[datetime] = None,
    lock: bool = False,
) -> AvailabilityResult:
    """
    Check whether the barber can take a booking in [start_time, end_time) on on_date.

    Args:
        db: session; when lock is set the schedule row is read FOR UPDATE
        barber_id: barber to check
        on_date: calendar day of the booking
        start_time, end_time: zero-padded "HH:MM" strings
        exclude_booking_id: booking ignored by the conflict check (rescheduling)
        now: current local time, defaults to datetime.now()
        lock: hold the (barber, weekday) schedule row for the rest of the transaction

    Returns:
        AvailabilityResult(is_available, reason)
    """
    now = now or datetime.now()

    if on_date < now.date():
        return _reject(barber_id, on_date, start_time, PAST_DATE)

    if on_date == now.date() and combine(on_date, start_time) <= now:
        return _reject(barber_id, on_date, start_time, PAST_TIME)

    day = weekday_name(on_date)
    if lock:
        schedule = ScheduleRepository.get_entry_for_update(db, barber_id, day)
    else:
        schedule = ScheduleRepository.get_entry(db, barber_id, day)

    if schedule is None or not schedule.is_working:
        return _reject(barber_id, on_date, start_time, DAY_OFF)

    # "HH:MM" strings are zero padded, so string order is time order
    if start_time < schedule.start_time or end_time > schedule.end_time:
        return _reject(
            barber_id, on_date, start_time,
            f"Time must be within working hours {schedule.start_time} - {schedule.end_time}.",
        )

    if schedule.lunch_start and schedule.lunch_end:
        if overlaps(start_time, end_time, schedule.lunch_start, schedule.lunch_end):
            return _reject(
                barber_id, on_date, start_time,
                f"This time overlaps the lunch break ({schedule.lunch_start} - {schedule.lunch_end}). "
                "Please choose another time.",
            )

    for existing in BookingRepository.active_for_day(db, barber_id, on_date, exclude_id=exclude_booking_id):
        if overlaps(start_time, end_time, existing.start_time, existing.end_time):
            return _reject(barber_id, on_date, start_time, BOOKED)

    return AvailabilityResult(True)
