"""Schedule service - validate and replace a barber's working week"""

import logging
from typing import List, Sequence

from sqlmodel import Session

from barbershop.config import (
    DEFAULT_LUNCH_END,
    DEFAULT_LUNCH_START,
    DEFAULT_WORK_END,
    DEFAULT_WORK_START,
    DEFAULT_WORKING_DAYS,
)
from barbershop.core import WEEKDAYS
from barbershop.db import transaction
from barbershop.errors import NotFoundError, ValidationError
from barbershop.models import Barber, WeeklySchedule
from barbershop.repositories.schedules import ScheduleRepository
from barbershop.schemas import ScheduleEntry

logger = logging.getLogger(__name__)


def default_week() -> List[ScheduleEntry]:
    """Mon-Sat 09:00-18:00 with lunch 13:00-14:00 (configurable), Sunday off."""
    return [
        ScheduleEntry(
            day=day,
            start_time=DEFAULT_WORK_START,
            end_time=DEFAULT_WORK_END,
            lunch_start=DEFAULT_LUNCH_START,
            lunch_end=DEFAULT_LUNCH_END,
            is_working=day in DEFAULT_WORKING_DAYS,
        )
        for day in WEEKDAYS
    ]


def validate_entry(entry: ScheduleEntry) -> None:
    day = entry.day.value
    if entry.start_time >= entry.end_time:
        raise ValidationError(f"{day}: start_time must be before end_time")

    if (entry.lunch_start is None) != (entry.lunch_end is None):
        raise ValidationError(f"{day}: lunch_start and lunch_end must be given together")

    if entry.lunch_start is not None:
        if entry.lunch_start >= entry.lunch_end:
            raise ValidationError(f"{day}: lunch_start must be before lunch_end")
        if entry.lunch_start < entry.start_time or entry.lunch_end > entry.end_time:
            raise ValidationError(f"{day}: lunch break must be within working hours")


class ScheduleService:
    def __init__(self, db: Session):
        self.db = db

    def get_week(self, barber_id: int) -> List[WeeklySchedule]:
        self._barber(barber_id)
        entries = ScheduleRepository.list_entries(self.db, barber_id)
        return sorted(entries, key=lambda e: WEEKDAYS.index(e.day))

    def replace_week(self, barber_id: int, entries: Sequence[ScheduleEntry]) -> List[WeeklySchedule]:
        """Replace every schedule row of the barber with `entries` (no merging)."""
        days = [entry.day for entry in entries]
        if len(days) != len(set(days)):
            raise ValidationError("Each day may appear only once")
        for entry in entries:
            validate_entry(entry)

        with transaction(self.db):
            self._barber(barber_id)
            rows = ScheduleRepository.replace_entries(
                self.db,
                barber_id,
                [{**entry.model_dump(), "day": entry.day.value} for entry in entries],
            )

        logger.info(f"Schedule replaced for barber {barber_id}: {len(rows)} days")
        return self.get_week(barber_id)

    def _barber(self, barber_id: int) -> Barber:
        barber = self.db.get(Barber, barber_id)
        if barber is None:
            raise NotFoundError("Barber not found")
        return barber
