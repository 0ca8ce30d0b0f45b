# barbershop/routers/barbers_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.config import DEFAULT_PAGE_SIZE
from barbershop.core import add_minutes
from barbershop.db import get_session, transaction
from barbershop.deps import require_barber_profile, require_role
from barbershop.errors import ConflictError
from barbershop.models import Barber, Service
from barbershop.repositories.schedules import ScheduleRepository
from barbershop.schemas import (
    AvailabilityResponse,
    BarberCreate,
    BarberPublic,
    BookingPage,
    BookingStatus,
    DaySchedule,
    ScheduleEntry,
    ServicePublic,
)
from barbershop.services.availability import check_availability
from barbershop.services.bookings import BookingService
from barbershop.services.schedules import ScheduleService, default_week
from barbershop.services.week_schedule import get_week_schedule

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.post("", response_model=BarberPublic, status_code=201)
def create_barber_profile(
    data: BarberCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    if current_user["barber_id"] is not None:
        raise ConflictError("Barber profile already exists")

    # profile and its default week are created together
    with transaction(session):
        barber = Barber(user_id=current_user["id"], bio=data.bio)
        session.add(barber)
        session.flush()  # fills barber.id
        ScheduleRepository.replace_entries(
            session, barber.id, [{**e.model_dump(), "day": e.day.value} for e in default_week()]
        )
        public = BarberPublic(id=barber.id, user_id=barber.user_id, bio=barber.bio)

    return public


@router.get("/me/schedule", response_model=List[ScheduleEntry])
def get_my_schedule(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    barber_id = require_barber_profile(current_user)
    return [ScheduleEntry.model_validate(e, from_attributes=True) for e in ScheduleService(session).get_week(barber_id)]


@router.put("/me/schedule", response_model=List[ScheduleEntry])
def replace_my_schedule(
    entries: List[ScheduleEntry],
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    barber_id = require_barber_profile(current_user)
    rows = ScheduleService(session).replace_week(barber_id, entries)
    return [ScheduleEntry.model_validate(e, from_attributes=True) for e in rows]


@router.get("/me/bookings", response_model=BookingPage)
def list_barber_bookings(
    status: Optional[BookingStatus] = None,
    on_date: Optional[date] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    barber_id = require_barber_profile(current_user)
    return BookingService(session).list_barber_bookings(
        barber_id, status=status, on_date=on_date, page=page, limit=limit
    )


@router.get("/{barber_id}/schedule", response_model=List[DaySchedule])
def barber_week_schedule(
    barber_id: int,
    week_start: Optional[date] = None,
    session: Session = Depends(get_session),
):
    return get_week_schedule(session, barber_id, week_start)


@router.get("/{barber_id}/services", response_model=List[ServicePublic])
def barber_services(
    barber_id: int,
    session: Session = Depends(get_session),
):
    if session.get(Barber, barber_id) is None:
        raise HTTPException(status_code=404, detail="Barber not found")
    return session.exec(
        select(Service).where(Service.barber_id == barber_id).order_by(Service.id)
    ).all()


@router.get("/{barber_id}/availability", response_model=AvailabilityResponse)
def barber_availability(
    barber_id: int,
    date: date,
    start_time: str,
    service_id: int,
    session: Session = Depends(get_session),
):
    service = session.get(Service, service_id)
    if service is None or service.barber_id != barber_id:
        raise HTTPException(status_code=404, detail="Service not found")

    try:
        end_time = add_minutes(start_time, service.duration_minutes)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = check_availability(session, barber_id, date, start_time, end_time)
    return {
        "barber_id": barber_id,
        "date": date,
        "start_time": start_time,
        "end_time": end_time,
        "is_available": result.is_available,
        "reason": result.reason,
    }
