# barberbook/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session

from barberbook.availability import AvailabilityResolver
from barberbook.barbers import BarberService
from barberbook.booking import BookingService, is_staff_for
from barberbook.day_schedule import DayScheduleStore
from barberbook.db import get_session
from barberbook.favorites import FavoriteService
from barberbook.models import Barber
from barberbook.notifications import NotificationService
from barberbook.repository import Repository, SqlRepository


def get_repository(session: Session = Depends(get_session)) -> Repository:
    return SqlRepository(session)


def get_barber_service(repo: Repository = Depends(get_repository)) -> BarberService:
    return BarberService(repo)


def get_schedule_store(repo: Repository = Depends(get_repository)) -> DayScheduleStore:
    return DayScheduleStore(repo)


def get_resolver(repo: Repository = Depends(get_repository)) -> AvailabilityResolver:
    return AvailabilityResolver(repo)


def get_booking_service(repo: Repository = Depends(get_repository)) -> BookingService:
    return BookingService(repo)


def get_notification_service(repo: Repository = Depends(get_repository)) -> NotificationService:
    return NotificationService(repo)


def get_favorite_service(repo: Repository = Depends(get_repository)) -> FavoriteService:
    return FavoriteService(repo)


def require_role(user: dict, *roles: str):
    if user["role"] not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def require_barber_staff(user: dict, barber: Barber):
    # the barber themself or an admin
    if not is_staff_for(user, barber):
        raise HTTPException(status_code=403, detail="Forbidden")
