# barberbook/ledger.py
"""Booking records and their status transitions."""
import logging
from typing import List, Optional, Set, Tuple

from barberbook.errors import BookingNotFound, InvalidTransition
from barberbook.models import OCCUPYING_STATUSES, Booking
from barberbook.repository import Repository
from barberbook.slots import normalize_date

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = ("completed", "cancelled")

ALLOWED_TRANSITIONS = {
    "pending": {"confirmed", "completed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
}


class BookingLedger:
    def __init__(self, repo: Repository):
        self.repo = repo

    def get(self, booking_id: int) -> Booking:
        booking = self.repo.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound()
        return booking

    def bookings_for(self, barber_id: int, date: str) -> List[Booking]:
        rows = self.repo.list_bookings(barber_id=barber_id, date=normalize_date(date))
        return sorted(rows, key=lambda b: b.time)

    def for_barber(self, barber_id: int, status: Optional[str] = None) -> List[Booking]:
        return self.repo.list_bookings(
            barber_id=barber_id, statuses=[status] if status else None
        )

    def for_user(self, user_id: int, status: Optional[str] = None) -> List[Booking]:
        return self.repo.list_bookings(
            user_id=user_id, statuses=[status] if status else None
        )

    def all(self, status: Optional[str] = None) -> List[Booking]:
        return self.repo.list_bookings(statuses=[status] if status else None)

    def occupied_times(self, barber_id: int, date: str) -> Set[str]:
        rows = self.repo.list_bookings(
            barber_id=barber_id,
            date=normalize_date(date),
            statuses=OCCUPYING_STATUSES,
        )
        return {b.time for b in rows}

    def create(self, booking: Booking) -> Booking:
        created = self.repo.create_booking(booking)
        logger.info(
            f"Booking {created.id} created for barber {created.barber_id} "
            f"on {created.date} {created.time} ({created.status})"
        )
        return created

    def set_status(self, booking_id: int, status: str) -> Tuple[Booking, bool]:
        """Move a booking to ``status``.

        Returns the booking and whether it changed. Asking a terminal
        booking to move again is a no-op, not an error.
        """
        booking = self.get(booking_id)

        if booking.status == status or booking.status in TERMINAL_STATUSES:
            if booking.status != status:
                logger.info(
                    f"Ignoring {status} for booking {booking_id}, already {booking.status}"
                )
            return booking, False

        if status not in ALLOWED_TRANSITIONS.get(booking.status, ()):
            raise InvalidTransition(f"Cannot move booking from {booking.status} to {status}")

        previous = booking.status
        booking.status = status
        booking = self.repo.save_booking(booking)
        logger.info(f"Booking {booking_id} moved from {previous} to {status}")
        return booking, True
