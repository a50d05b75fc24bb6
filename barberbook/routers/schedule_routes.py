# barberbook/routers/schedule_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from barberbook.auth import get_current_user
from barberbook.availability import AvailabilityResolver
from barberbook.barbers import BarberService
from barberbook.day_schedule import DayScheduleStore
from barberbook.deps import (
    get_barber_service,
    get_resolver,
    get_schedule_store,
    require_barber_staff,
)
from barberbook.schemas import (
    BarberSlot,
    BlockedSlotPublic,
    BlockToggleIn,
    BlockToggleResult,
    DayScheduleIn,
    DaySchedulePublic,
    GenerateSlotsIn,
    SlotIn,
)

router = APIRouter(
    prefix="/schedule",
    tags=["schedule"],
)


@router.put("", response_model=DaySchedulePublic)
def save_day_schedule(
    schedule: DayScheduleIn,
    barbers: BarberService = Depends(get_barber_service),
    store: DayScheduleStore = Depends(get_schedule_store),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(schedule.barber_id))
    return store.save(schedule.barber_id, schedule.date, schedule.slots)


@router.post("/block-slot", response_model=BlockToggleResult)
def toggle_block_slot(
    block: BlockToggleIn,
    barbers: BarberService = Depends(get_barber_service),
    resolver: AvailabilityResolver = Depends(get_resolver),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(block.barber_id))
    return {"blocked": resolver.toggle_block(block.barber_id, block.date, block.time)}


@router.get("/{barber_id}/scheduled-dates", response_model=List[str])
def scheduled_dates(
    barber_id: int,
    dates: List[str] = Query(default=[]),
    store: DayScheduleStore = Depends(get_schedule_store),
):
    return store.list_scheduled_dates(barber_id, dates)


@router.get("/{barber_id}/{date}", response_model=DaySchedulePublic)
def get_day_schedule(
    barber_id: int,
    date: str,
    store: DayScheduleStore = Depends(get_schedule_store),
):
    schedule = store.get(barber_id, date)
    if schedule is None:
        raise HTTPException(status_code=404, detail="No slots set for this date")
    return schedule


@router.get("/{barber_id}/{date}/blocked", response_model=List[BlockedSlotPublic])
def blocked_slots(
    barber_id: int,
    date: str,
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    return resolver.blocked_slots(barber_id, date)


@router.get("/{barber_id}/{date}/slots", response_model=List[BarberSlot])
def barber_day_view(
    barber_id: int,
    date: str,
    barbers: BarberService = Depends(get_barber_service),
    resolver: AvailabilityResolver = Depends(get_resolver),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return resolver.barber_view(barber_id, date)


@router.post("/{barber_id}/{date}/slots", response_model=DaySchedulePublic, status_code=201)
def add_slot(
    barber_id: int,
    date: str,
    slot: SlotIn,
    barbers: BarberService = Depends(get_barber_service),
    store: DayScheduleStore = Depends(get_schedule_store),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return store.add_slot(barber_id, date, slot.time)


@router.delete("/{barber_id}/{date}/slots/{time}", response_model=DaySchedulePublic)
def remove_slot(
    barber_id: int,
    date: str,
    time: str,
    barbers: BarberService = Depends(get_barber_service),
    store: DayScheduleStore = Depends(get_schedule_store),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return store.remove_slot(barber_id, date, time)


@router.post("/{barber_id}/{date}/generate", response_model=DaySchedulePublic)
def generate_slots(
    barber_id: int,
    date: str,
    body: GenerateSlotsIn,
    barbers: BarberService = Depends(get_barber_service),
    store: DayScheduleStore = Depends(get_schedule_store),
    current_user: dict = Depends(get_current_user),
):
    barber = barbers.get(barber_id)
    require_barber_staff(current_user, barber)

    lunch = None
    if body.lunch_start or body.lunch_end:
        lunch = (body.lunch_start, body.lunch_end)

    return store.generate(barber, date, body.open, body.close, lunch)
