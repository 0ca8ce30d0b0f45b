"""Helpers shared by the test modules: in-memory database and row builders."""

from datetime import date, datetime, timedelta

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from barbershop.db import create_db_engine
from barbershop.models import Barber, Booking, Service, User, WeeklySchedule
from barbershop.core import WEEKDAYS

# Monday 2030-01-07, 08:00
FIXED_NOW = datetime(2030, 1, 7, 8, 0)
TODAY = FIXED_NOW.date()
NEXT_MONDAY = date(2030, 1, 14)
NEXT_SUNDAY = date(2030, 1, 20)


def clock():
    return FIXED_NOW


def make_engine(url="sqlite://"):
    kwargs = {"poolclass": StaticPool} if url == "sqlite://" else {}
    engine = create_db_engine(url, **kwargs)
    SQLModel.metadata.create_all(engine)
    return engine


def add_user(session, email, role="client", first_name=None, last_name=None, phone=None):
    user = User(
        email=email,
        password_hash="x",
        role=role,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def add_barber(session, email="barber@example.com", lunch=("13:00", "14:00"),
               start="09:00", end="18:00", days_off=("sunday",)):
    user = add_user(session, email, role="barber", first_name="Bob", last_name="Cutter")
    barber = Barber(user_id=user.id)
    session.add(barber)
    session.commit()
    session.refresh(barber)
    for day in WEEKDAYS:
        if day in days_off:
            continue
        session.add(WeeklySchedule(
            barber_id=barber.id,
            day=day,
            start_time=start,
            end_time=end,
            lunch_start=lunch[0] if lunch else None,
            lunch_end=lunch[1] if lunch else None,
        ))
    session.commit()
    return barber


def add_service(session, barber, duration=30, price=50000.0, name="Haircut"):
    service = Service(barber_id=barber.id, name=name, duration_minutes=duration, price=price)
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


def add_booking(session, barber, client, service, on_date, start_time, end_time, status="PENDING", notes=None):
    booking = Booking(
        barber_id=barber.id,
        user_id=client.id,
        service_id=service.id,
        date=on_date,
        start_time=start_time,
        end_time=end_time,
        status=status,
        notes=notes,
    )
    session.add(booking)
    session.commit()
    session.refresh(booking)
    return booking


def upcoming_monday(today=None):
    """First Monday strictly after today."""
    today = today or date.today()
    return today + timedelta(days=(7 - today.weekday()) or 7)
