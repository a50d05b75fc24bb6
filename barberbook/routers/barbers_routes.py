# barberbook/routers/barbers_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from barberbook.auth import get_current_user
from barberbook.availability import AvailabilityResolver
from barberbook.barbers import BarberService
from barberbook.deps import (
    get_barber_service,
    get_repository,
    get_resolver,
    require_barber_staff,
    require_role,
)
from barberbook.repository import Repository
from barberbook.schemas import (
    AvailabilityResponse,
    BarberClient,
    BarberProfileUpdate,
    BarberPublic,
    ReviewPublic,
    SlotDurationUpdate,
    WorkingHours,
)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.get("", response_model=List[BarberPublic])
def list_barbers(barbers: BarberService = Depends(get_barber_service)):
    return barbers.list_barbers()


@router.get("/search", response_model=List[BarberPublic])
def search_barbers(q: str = "", barbers: BarberService = Depends(get_barber_service)):
    return barbers.search(q)


@router.get("/me", response_model=BarberPublic)
def my_barber_profile(
    barbers: BarberService = Depends(get_barber_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    barber = barbers.find_for_user(current_user["id"])
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber profile not found")
    return barber


@router.get("/{barber_id}", response_model=BarberPublic)
def get_barber(barber_id: int, barbers: BarberService = Depends(get_barber_service)):
    return barbers.get(barber_id)


@router.patch("/{barber_id}/profile", response_model=BarberPublic)
def update_profile(
    barber_id: int,
    update: BarberProfileUpdate,
    barbers: BarberService = Depends(get_barber_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return barbers.update_profile(barber_id, **update.model_dump(exclude_none=True))


@router.put("/{barber_id}/working-hours", response_model=BarberPublic)
def update_working_hours(
    barber_id: int,
    hours: WorkingHours,
    barbers: BarberService = Depends(get_barber_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return barbers.update_working_hours(barber_id, hours.model_dump())


@router.patch("/{barber_id}/slot-duration", response_model=BarberPublic)
def update_slot_duration(
    barber_id: int,
    body: SlotDurationUpdate,
    barbers: BarberService = Depends(get_barber_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return barbers.update_slot_duration(barber_id, body.duration)


@router.patch("/{barber_id}/toggle-availability", response_model=BarberPublic)
def toggle_availability(
    barber_id: int,
    barbers: BarberService = Depends(get_barber_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return barbers.toggle_availability(barber_id)


@router.get("/{barber_id}/availability", response_model=AvailabilityResponse)
def barber_availability(
    barber_id: int,
    date: str,
    barbers: BarberService = Depends(get_barber_service),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    barbers.get(barber_id)
    return {
        "barber_id": barber_id,
        "date": date,
        "slots": resolver.resolve(barber_id, date),
    }


@router.get("/{barber_id}/clients", response_model=List[BarberClient])
def barber_clients(
    barber_id: int,
    barbers: BarberService = Depends(get_barber_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return barbers.clients(barber_id)


@router.get("/{barber_id}/reviews", response_model=List[ReviewPublic])
def barber_reviews(
    barber_id: int,
    barbers: BarberService = Depends(get_barber_service),
    repo: Repository = Depends(get_repository),
):
    barbers.get(barber_id)
    return repo.list_reviews(barber_id)
