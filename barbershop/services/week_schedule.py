"""
Weekly Schedule Projector

Builds the seven-day calendar shown to clients: for every day, the
SLOT_MINUTES grid of start labels between the barber's working hours (lunch
removed), which of those labels are taken by bookings, and the raw booking
ranges. Read only.
"""

from datetime import date, timedelta
from typing import Dict, List, Optional, Set

from sqlmodel import Session

from barbershop.config import SLOT_MINUTES
from barbershop.core import format_hhmm, labels_between, parse_hhmm, start_of_week, weekday_name
from barbershop.errors import NotFoundError
from barbershop.models import Barber, Booking, WeeklySchedule
from barbershop.repositories.bookings import BookingRepository
from barbershop.repositories.schedules import ScheduleRepository
from barbershop.schemas import DaySchedule, Slot, TimeRange


def day_grid(schedule: WeeklySchedule, step: int = SLOT_MINUTES) -> List[str]:
    """Labels every `step` minutes from start to end, skipping the lunch window, end always kept."""
    start, end = parse_hhmm(schedule.start_time), parse_hhmm(schedule.end_time)
    lunch = None
    if schedule.lunch_start and schedule.lunch_end:
        lunch = (parse_hhmm(schedule.lunch_start), parse_hhmm(schedule.lunch_end))

    labels = []
    for minute in range(start, end + 1, step):
        if lunch and lunch[0] <= minute < lunch[1]:
            continue
        labels.append(format_hhmm(minute))
    if schedule.end_time not in labels:
        labels.append(schedule.end_time)
    return labels


def booked_labels(bookings: List[Booking], grid: List[str], step: int = SLOT_MINUTES) -> Set[str]:
    booked = set()
    for booking in bookings:
        booked.update(labels_between(booking.start_time, booking.end_time, step))
        # grid labels not aligned with the booking start but inside it
        booked.update(t for t in grid if booking.start_time <= t < booking.end_time)
    return booked


def get_week_schedule(
    db: Session,
    barber_id: int,
    week_start: Optional[date] = None,
    today: Optional[date] = None,
) -> List[DaySchedule]:
    """
    Seven DaySchedule entries starting at week_start (default: Monday of the
    current week). Days without a working schedule come back with is_off set
    and no slots.
    """
    if db.get(Barber, barber_id) is None:
        raise NotFoundError("Barber not found")

    start_date = week_start or start_of_week(today or date.today())
    end_date = start_date + timedelta(days=6)

    schedules: Dict[str, WeeklySchedule] = {
        entry.day: entry for entry in ScheduleRepository.list_entries(db, barber_id)
    }
    bookings_by_day: Dict[date, List[Booking]] = {}
    for booking in BookingRepository.for_range(db, barber_id, start_date, end_date):
        bookings_by_day.setdefault(booking.date, []).append(booking)

    week = []
    for offset in range(7):
        current = start_date + timedelta(days=offset)
        day_name = weekday_name(current)
        schedule = schedules.get(day_name)

        if schedule is None or not schedule.is_working:
            week.append(DaySchedule(
                day=day_name.capitalize(),
                date=current,
                day_of_week=day_name,
                is_off=True,
            ))
            continue

        day_bookings = bookings_by_day.get(current, [])
        grid = day_grid(schedule)
        booked = booked_labels(day_bookings, grid)

        lunch_break = None
        if schedule.lunch_start and schedule.lunch_end:
            lunch_break = TimeRange(start=schedule.lunch_start, end=schedule.lunch_end)

        week.append(DaySchedule(
            day=day_name.capitalize(),
            date=current,
            day_of_week=day_name,
            is_off=False,
            times=grid,
            slots=[Slot(time=t, available=t not in booked) for t in grid],
            booked=sorted(booked),
            booked_ranges=[TimeRange(start=b.start_time, end=b.end_time) for b in day_bookings],
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            lunch_break=lunch_break,
        ))

    return week
