# barberbook/booking.py
"""Booking transactions: create, cancel and complete bookings.

Every check runs before the first write, and a booking is reported back
only after the repository accepted it. The availability check and the
insert share one ``atomic()`` block; the repository's uniqueness guard
catches the race between two customers picking the same slot.
"""
import logging
from typing import Iterable, List, Optional

from barberbook.availability import AvailabilityResolver
from barberbook.barbers import BarberService
from barberbook.errors import (
    BarberUnavailable,
    BookingValidationError,
    Forbidden,
    SlotUnavailable,
)
from barberbook.ledger import BookingLedger
from barberbook.models import Barber, Booking, Review
from barberbook.notifications import NotificationService
from barberbook.repository import Repository
from barberbook.slots import normalize_date, normalize_time

logger = logging.getLogger(__name__)


def is_staff_for(actor: dict, barber: Barber) -> bool:
    return actor["role"] == "admin" or (
        actor["role"] == "barber" and barber.user_id == actor["id"]
    )


class BookingService:
    def __init__(self, repo: Repository):
        self.repo = repo
        self.ledger = BookingLedger(repo)
        self.availability = AvailabilityResolver(repo)
        self.barbers = BarberService(repo)
        self.notifications = NotificationService(repo)

    # helpers

    def _selection(self, date: Optional[str], time: Optional[str]):
        if not date:
            raise BookingValidationError("Select a date")
        if not time:
            raise BookingValidationError("Select a time")
        return normalize_date(date), normalize_time(time)

    def _snapshot_services(self, barber: Barber, service_ids: Iterable[str]) -> List[dict]:
        offered = {s["id"]: s for s in barber.services}
        wanted = list(dict.fromkeys(service_ids))
        unknown = [sid for sid in wanted if sid not in offered]
        if unknown:
            raise BookingValidationError(f"Unknown services: {', '.join(unknown)}")
        return [dict(offered[sid]) for sid in wanted]

    def _book(self, draft: Booking) -> Booking:
        with self.repo.atomic():
            if not self.availability.is_available(draft.barber_id, draft.date, draft.time):
                raise SlotUnavailable()
            booking = self.ledger.create(draft)

        self.notifications.new_booking(booking)
        return booking

    def _check_party(self, actor: dict, booking: Booking) -> Barber:
        barber = self.barbers.get(booking.barber_id)
        if actor["role"] == "user" and booking.user_id == actor["id"]:
            return barber
        if is_staff_for(actor, barber):
            return barber
        raise Forbidden()

    def _check_staff(self, actor: dict, booking: Booking) -> Barber:
        barber = self.barbers.get(booking.barber_id)
        if not is_staff_for(actor, barber):
            raise Forbidden()
        return barber

    def get_for(self, actor: dict, booking_id: int) -> Booking:
        booking = self.ledger.get(booking_id)
        self._check_party(actor, booking)
        return booking

    # transactions

    def confirm_booking(
        self,
        customer: dict,
        barber_id: int,
        service_ids: List[str],
        date: Optional[str],
        time: Optional[str],
        notes: Optional[str] = None,
    ) -> Booking:
        # 1) Validate the selection before touching storage
        if not service_ids:
            raise BookingValidationError("Select at least one service")
        date, time = self._selection(date, time)

        # 2) Barber must exist and accept bookings
        barber = self.barbers.get(barber_id)
        if not barber.is_available:
            raise BarberUnavailable()

        # 3) Snapshot services and totals
        services = self._snapshot_services(barber, service_ids)
        draft = Booking(
            barber_id=barber.id,
            user_id=customer["id"],
            user_name=customer.get("name", ""),
            services=services,
            date=date,
            time=time,
            status="confirmed",
            total_price=sum(s["price"] for s in services),
            total_duration=sum(s["duration"] for s in services),
            notes=notes,
        )

        # 4) Re-check the slot and create
        booking = self._book(draft)
        self.notifications.booking_confirmed(booking)
        return booking

    def create_manual_booking(
        self,
        actor: dict,
        barber_id: int,
        guest_name: str,
        guest_phone: str,
        service_ids: Optional[List[str]],
        date: Optional[str],
        time: Optional[str],
        notes: Optional[str] = None,
    ) -> Booking:
        """Book a walk-in or phone client who has no account."""
        if not guest_name or not guest_name.strip():
            raise BookingValidationError("Enter the client's name")
        date, time = self._selection(date, time)

        barber = self.barbers.get(barber_id)
        if not is_staff_for(actor, barber):
            raise Forbidden()
        if not barber.is_available:
            raise BarberUnavailable()

        services = self._snapshot_services(barber, service_ids or [])
        draft = Booking(
            barber_id=barber.id,
            user_id=None,
            is_manual=True,
            guest_name=guest_name.strip(),
            guest_phone=guest_phone,
            services=services,
            date=date,
            time=time,
            status="confirmed",
            total_price=sum(s["price"] for s in services),
            total_duration=sum(s["duration"] for s in services),
            notes=notes,
        )
        return self._book(draft)

    def cancel(self, booking_id: int, actor: dict) -> Booking:
        booking = self.ledger.get(booking_id)
        self._check_party(actor, booking)

        with self.repo.atomic():
            booking, changed = self.ledger.set_status(booking_id, "cancelled")

        if changed:
            self.notifications.booking_cancelled(booking)
            if booking.user_id is not None and booking.user_id != actor["id"]:
                self.notifications.booking_cancelled_for_customer(booking)
        return booking

    def complete_with_review(
        self,
        booking_id: int,
        actor: dict,
        rating: int = 0,
        comment: str = "",
    ) -> Booking:
        """Complete a booking; a rating with a comment also leaves a review."""
        if rating < 0 or rating > 5:
            raise BookingValidationError("Rating must be between 0 and 5")

        booking = self.ledger.get(booking_id)
        self._check_party(actor, booking)

        review = None
        with self.repo.atomic():
            booking, changed = self.ledger.set_status(booking_id, "completed")
            if changed and rating > 0 and comment.strip():
                review = self.repo.add_review(
                    Review(
                        barber_id=booking.barber_id,
                        user_id=actor["id"],
                        user_name=actor.get("name", ""),
                        booking_id=booking.id,
                        rating=rating,
                        comment=comment.strip(),
                    )
                )
                barber = self.barbers.recompute_rating(booking.barber_id)
                logger.info(
                    f"Barber {barber.id} rating is now {barber.rating} "
                    f"from {barber.review_count} reviews"
                )

        if review is not None:
            self.notifications.new_review(review)
        return booking

    def complete(self, booking_id: int, actor: dict) -> Booking:
        booking = self.ledger.get(booking_id)
        self._check_staff(actor, booking)
        with self.repo.atomic():
            booking, _ = self.ledger.set_status(booking_id, "completed")
        return booking

    def confirm_pending(self, booking_id: int, actor: dict) -> Booking:
        booking = self.ledger.get(booking_id)
        self._check_staff(actor, booking)
        with self.repo.atomic():
            booking, changed = self.ledger.set_status(booking_id, "confirmed")
        if changed:
            self.notifications.booking_confirmed(booking)
        return booking
