# barbershop/models.py

from typing import Optional
from datetime import datetime, timezone, date as Date

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    # audit timestamps are stored timezone-aware, in UTC
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # barber or client
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True)
    bio: Optional[str] = None


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    name: str
    duration_minutes: int
    price: float


class WeeklySchedule(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("barber_id", "day", name="uq_barber_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    day: str  # "monday" ... "sunday"
    start_time: str  # "HH:MM"
    end_time: str
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    is_working: bool = True


class Booking(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    barber_id: int = Field(foreign_key="barber.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)  # client
    service_id: int = Field(foreign_key="service.id")
    date: Date = Field(index=True)
    start_time: str
    end_time: str
    status: str = "PENDING"
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    title: str
    message: str
    kind: str
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)
