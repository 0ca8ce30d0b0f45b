# barbershop/routers/services_routes.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop.auth import get_current_user
from barbershop.db import get_session, transaction
from barbershop.deps import require_barber_profile
from barbershop.models import Service
from barbershop.schemas import ServiceCreate, ServicePublic

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


@router.post("", response_model=ServicePublic, status_code=201)
def create_service(
    data: ServiceCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    barber_id = require_barber_profile(current_user)

    with transaction(session):
        service = Service(barber_id=barber_id, **data.model_dump())
        session.add(service)
        session.flush()  # fills service.id
        public = ServicePublic.model_validate(service, from_attributes=True)

    return public
