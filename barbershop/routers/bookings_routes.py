# barbershop/routers/bookings_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop.auth import get_current_user
from barbershop.config import DEFAULT_PAGE_SIZE
from barbershop.db import get_session
from barbershop.deps import require_barber_profile, require_participant, require_role
from barbershop.schemas import (
    BookingCreate,
    BookingPage,
    BookingPublic,
    BookingReschedule,
    BookingStatus,
    BookingStatusUpdate,
    BulkStatusUpdate,
)
from barbershop.services.bookings import BookingService

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.post("", response_model=BookingPublic, status_code=201)
def create_booking(
    data: BookingCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")
    return BookingService(session).create_booking(current_user["id"], data)


@router.get("/me", response_model=BookingPage)
def list_my_bookings(
    status: Optional[BookingStatus] = None,
    on_date: Optional[date] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return BookingService(session).list_client_bookings(
        current_user["id"], status=status, on_date=on_date, page=page, limit=limit
    )


@router.patch("/bulk-status", response_model=List[BookingPublic])
def bulk_update_status(
    data: BulkStatusUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    barber_id = require_barber_profile(current_user)
    return BookingService(session).bulk_update_booking_status(
        data.booking_ids, data.status, data.reason, barber_id=barber_id
    )


@router.patch("/{booking_id}/status", response_model=BookingPublic)
def update_status(
    booking_id: int,
    data: BookingStatusUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    service = BookingService(session)
    require_participant(current_user, service.get_booking(booking_id))
    return service.update_booking_status(booking_id, data.status)


@router.patch("/{booking_id}/reschedule", response_model=BookingPublic)
def reschedule_booking(
    booking_id: int,
    data: BookingReschedule,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    service = BookingService(session)
    require_participant(current_user, service.get_booking(booking_id))
    return service.reschedule_booking(booking_id, data.date, data.start_time, data.reason)


@router.delete("/{booking_id}", response_model=BookingPublic)
def cancel_booking(
    booking_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    service = BookingService(session)
    require_participant(current_user, service.get_booking(booking_id))
    return service.cancel_booking(booking_id)
