"""Schedule store - weekly working hours per barber"""

from typing import Iterable, List, Optional

from sqlmodel import Session, select

from barbershop.models import WeeklySchedule


class ScheduleRepository:
    """Repository for weekly schedule rows (one row per barber and weekday)"""

    @staticmethod
    def get_entry(db: Session, barber_id: int, day: str) -> Optional[WeeklySchedule]:
        return db.exec(
            select(WeeklySchedule)
            .where(WeeklySchedule.barber_id == barber_id)
            .where(WeeklySchedule.day == day)
        ).first()

    @staticmethod
    def get_entry_for_update(db: Session, barber_id: int, day: str) -> Optional[WeeklySchedule]:
        """Same as get_entry, but locks the row until the transaction ends."""
        return db.exec(
            select(WeeklySchedule)
            .where(WeeklySchedule.barber_id == barber_id)
            .where(WeeklySchedule.day == day)
            .with_for_update()
        ).first()

    @staticmethod
    def list_entries(db: Session, barber_id: int) -> List[WeeklySchedule]:
        return list(db.exec(
            select(WeeklySchedule).where(WeeklySchedule.barber_id == barber_id)
        ).all())

    @staticmethod
    def replace_entries(db: Session, barber_id: int, entries: Iterable[dict]) -> List[WeeklySchedule]:
        """Delete every row for the barber and insert the new set. Caller commits."""
        for row in ScheduleRepository.list_entries(db, barber_id):
            db.delete(row)
        # deletes must reach the table before the inserts reuse (barber_id, day)
        db.flush()
        rows = [WeeklySchedule(barber_id=barber_id, **entry) for entry in entries]
        db.add_all(rows)
        db.flush()
        return rows
