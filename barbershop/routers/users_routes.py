# barbershop/routers/users_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from barbershop.db import get_session
from barbershop.errors import ConflictError
from barbershop.models import User
from barbershop.schemas import NotificationPublic, UserCreate, UserPublic
from barbershop.auth import get_current_user, hash_password
from barbershop.services.notifications import NotificationService

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Check if email already exists
    existing = session.exec(
        select(User).where(User.email == user.email)
    ).first()
    if existing is not None:
        raise ConflictError("Email already registered")

    # 2) Create user in DB
    db_user = User(
        email=user.email,
        password_hash=hash_password(user.password),
        role=user.role.value,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id

    # 3) Return public user
    return {
        "id": db_user.id,
        "email": db_user.email,
        "role": db_user.role,
        "first_name": db_user.first_name,
        "last_name": db_user.last_name,
        "phone": db_user.phone,
    }


@router.get("/notifications/me", response_model=List[NotificationPublic])
def my_notifications(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return NotificationService(session).list_for_user(current_user["id"])
