# barberbook/routers/bookings_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from barberbook.auth import get_current_user
from barberbook.barbers import BarberService
from barberbook.booking import BookingService
from barberbook.deps import (
    get_barber_service,
    get_booking_service,
    require_barber_staff,
    require_role,
)
from barberbook.schemas import (
    BookingCreate,
    BookingPublic,
    CompleteBookingIn,
    ManualBookingCreate,
)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)

STATUS_FILTERS = ("pending", "confirmed", "completed", "cancelled", "all")


def _status_filter(status: Optional[str]) -> Optional[str]:
    if status is None or status == "all":
        return None
    if status not in STATUS_FILTERS:
        raise HTTPException(
            status_code=422,
            detail="status must be 'pending', 'confirmed', 'completed', 'cancelled', or 'all'",
        )
    return status


@router.post("", response_model=BookingPublic, status_code=201)
def create_booking(
    booking: BookingCreate,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "user")
    return bookings.confirm_booking(
        current_user,
        booking.barber_id,
        booking.service_ids,
        booking.date,
        booking.time,
        booking.notes,
    )


@router.post("/manual", response_model=BookingPublic, status_code=201)
def create_manual_booking(
    booking: ManualBookingCreate,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber", "admin")
    return bookings.create_manual_booking(
        current_user,
        booking.barber_id,
        booking.guest_name,
        booking.guest_phone,
        booking.service_ids,
        booking.date,
        booking.time,
        booking.notes,
    )


@router.get("", response_model=List[BookingPublic])
def list_all_bookings(
    status: Optional[str] = None,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return bookings.ledger.all(_status_filter(status))


@router.get("/me", response_model=List[BookingPublic])
def list_my_bookings(
    status: Optional[str] = None,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "user")
    return bookings.ledger.for_user(current_user["id"], _status_filter(status))


@router.get("/booked-slots", response_model=List[str])
def booked_slots(
    barber_id: int,
    date: str,
    bookings: BookingService = Depends(get_booking_service),
):
    return sorted(bookings.ledger.occupied_times(barber_id, date))


@router.get("/barber/{barber_id}", response_model=List[BookingPublic])
def list_barber_bookings(
    barber_id: int,
    status: Optional[str] = None,
    on_date: Optional[str] = None,
    barbers: BarberService = Depends(get_barber_service),
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    status = _status_filter(status)

    if on_date is not None:
        rows = bookings.ledger.bookings_for(barber_id, on_date)
        return [b for b in rows if status is None or b.status == status]
    return bookings.ledger.for_barber(barber_id, status)


@router.get("/{booking_id}", response_model=BookingPublic)
def get_booking(
    booking_id: int,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    return bookings.get_for(current_user, booking_id)


@router.patch("/{booking_id}/cancel", response_model=BookingPublic)
def cancel_booking(
    booking_id: int,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    return bookings.cancel(booking_id, current_user)


@router.patch("/{booking_id}/complete", response_model=BookingPublic)
def complete_booking(
    booking_id: int,
    body: Optional[CompleteBookingIn] = None,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    # customers may leave a review; staff just close the booking
    if current_user["role"] == "user":
        body = body or CompleteBookingIn()
        return bookings.complete_with_review(booking_id, current_user, body.rating, body.comment)
    return bookings.complete(booking_id, current_user)


@router.patch("/{booking_id}/confirm", response_model=BookingPublic)
def confirm_booking(
    booking_id: int,
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    return bookings.confirm_pending(booking_id, current_user)
