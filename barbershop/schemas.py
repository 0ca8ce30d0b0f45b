# barbershop/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import date
from typing import List, Optional

from .config import SERVICE_MIN_DURATION, SERVICE_MAX_DURATION

HHMM_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    barber = "barber"
    client = "client"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS)
TERMINAL_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


class WeekDay(str, Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"


class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class BarberCreate(BaseModel):
    bio: Optional[str] = None


class BarberPublic(BaseModel):
    id: int
    user_id: int
    bio: Optional[str] = None


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    duration_minutes: int = Field(ge=SERVICE_MIN_DURATION, le=SERVICE_MAX_DURATION)
    price: float = Field(gt=0)


class ServicePublic(BaseModel):
    id: int
    barber_id: int
    name: str
    duration_minutes: int
    price: float


class ScheduleEntry(BaseModel):
    day: WeekDay
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)
    lunch_start: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    lunch_end: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    is_working: bool = True


class BookingCreate(BaseModel):
    barber_id: int
    service_id: int
    date: date
    start_time: str = Field(pattern=HHMM_PATTERN)
    notes: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingReschedule(BaseModel):
    date: date
    start_time: str = Field(pattern=HHMM_PATTERN)
    reason: Optional[str] = None


class BulkStatusUpdate(BaseModel):
    booking_ids: List[int] = Field(min_length=1)
    status: BookingStatus
    reason: Optional[str] = None


class PersonSummary(BaseModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class BookingPublic(BaseModel):
    id: int
    barber_id: int
    user_id: int
    service_id: int
    date: date
    start_time: str
    end_time: str
    status: BookingStatus
    notes: Optional[str] = None
    service: Optional[ServicePublic] = None
    barber: Optional[PersonSummary] = None
    client: Optional[PersonSummary] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class BookingPage(BaseModel):
    bookings: List[BookingPublic]
    pagination: Pagination


class AvailabilityResponse(BaseModel):
    barber_id: int
    date: date
    start_time: str
    end_time: str
    is_available: bool
    reason: Optional[str] = None


class TimeRange(BaseModel):
    start: str
    end: str


class Slot(BaseModel):
    time: str
    available: bool


class DaySchedule(BaseModel):
    day: str
    date: date
    day_of_week: WeekDay
    is_off: bool
    times: List[str] = []
    slots: List[Slot] = []
    booked: List[str] = []
    booked_ranges: List[TimeRange] = []
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    lunch_break: Optional[TimeRange] = None


class NotificationPublic(BaseModel):
    id: int
    title: str
    message: str
    kind: str
    is_read: bool
