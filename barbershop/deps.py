# barbershop/deps.py

from fastapi import HTTPException

from .models import Booking


def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")


def require_barber_profile(user: dict) -> int:
    require_role(user, "barber")
    if user["barber_id"] is None:
        raise HTTPException(status_code=404, detail="Barber profile not found")
    return user["barber_id"]


def require_participant(user: dict, booking: Booking):
    # client who booked OR the barber
    if user["id"] != booking.user_id and user["barber_id"] != booking.barber_id:
        raise HTTPException(status_code=403, detail="Forbidden")
