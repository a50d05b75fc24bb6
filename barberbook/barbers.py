# barberbook/barbers.py
"""Barber directory, profile and schedule settings."""
import logging
import math
from typing import Dict, List, Optional

from barberbook.config import get_settings
from barberbook.errors import BarberNotFound, BookingValidationError, InvalidDuration
from barberbook.models import Barber
from barberbook.repository import Repository
from barberbook.slots import WEEKDAYS, to_minutes

logger = logging.getLogger(__name__)


def average_rating(ratings: List[int]) -> float:
    """Mean rating rounded half-up to one decimal, 0.0 without reviews."""
    if not ratings:
        return 0.0
    return math.floor(sum(ratings) / len(ratings) * 10 + 0.5) / 10


class BarberService:
    def __init__(self, repo: Repository):
        self.repo = repo

    def get(self, barber_id: int) -> Barber:
        barber = self.repo.get_barber(barber_id)
        if barber is None:
            raise BarberNotFound()
        return barber

    def list_barbers(self) -> List[Barber]:
        return self.repo.list_barbers()

    def search(self, query: str) -> List[Barber]:
        q = (query or "").strip().lower()
        if not q:
            return self.list_barbers()
        return [
            b for b in self.repo.list_barbers()
            if q in b.name.lower() or q in b.location.lower() or q in b.bio.lower()
        ]

    def update_profile(self, barber_id: int, **changes) -> Barber:
        barber = self.get(barber_id)
        for key, value in changes.items():
            if value is None:
                continue
            if key == "services":
                value = [dict(s) for s in value]
            setattr(barber, key, value)
        return self.repo.save_barber(barber)

    def update_working_hours(self, barber_id: int, hours: Dict[str, dict]) -> Barber:
        barber = self.get(barber_id)
        missing = [day for day in WEEKDAYS if day not in hours]
        if missing:
            raise BookingValidationError(f"Working hours missing for {', '.join(missing)}")

        for day in WEEKDAYS:
            entry = hours[day]
            if entry["is_open"] and to_minutes(entry["open"]) >= to_minutes(entry["close"]):
                raise BookingValidationError(f"{day}: opening time must be before closing time")

        barber.working_hours = {day: dict(hours[day]) for day in WEEKDAYS}
        return self.repo.save_barber(barber)

    def update_slot_duration(self, barber_id: int, minutes: int) -> Barber:
        settings = get_settings()
        if not (settings.MIN_SLOT_DURATION <= minutes <= settings.MAX_SLOT_DURATION):
            raise InvalidDuration(
                f"Slot duration must be between {settings.MIN_SLOT_DURATION} "
                f"and {settings.MAX_SLOT_DURATION} minutes"
            )
        barber = self.get(barber_id)
        barber.slot_duration = minutes
        logger.info(f"Barber {barber_id} slot duration set to {minutes} minutes")
        return self.repo.save_barber(barber)

    def toggle_availability(self, barber_id: int) -> Barber:
        barber = self.get(barber_id)
        barber.is_available = not barber.is_available
        logger.info(f"Barber {barber_id} availability set to {barber.is_available}")
        return self.repo.save_barber(barber)

    def recompute_rating(self, barber_id: int) -> Barber:
        barber = self.get(barber_id)
        ratings = [r.rating for r in self.repo.list_reviews(barber_id)]
        barber.rating = average_rating(ratings)
        barber.review_count = len(ratings)
        return self.repo.save_barber(barber)

    def clients(self, barber_id: int) -> List[dict]:
        """Distinct clients of a barber with their booking counts."""
        clients: Dict[tuple, dict] = {}
        for b in self.repo.list_bookings(barber_id=barber_id):
            if b.is_manual:
                key = ("guest", b.guest_name, b.guest_phone)
                name, phone = b.guest_name or "", b.guest_phone or ""
            else:
                key = ("user", b.user_id)
                user = self.repo.get_user(b.user_id) if b.user_id is not None else None
                name = b.user_name or (user.name if user else "")
                phone = user.phone if user else ""

            entry = clients.setdefault(key, {
                "name": name,
                "phone": phone,
                "user_id": None if b.is_manual else b.user_id,
                "is_manual": b.is_manual,
                "booking_count": 0,
                "last_visit": b.date,
            })
            entry["booking_count"] += 1
            entry["last_visit"] = max(entry["last_visit"], b.date)

        return sorted(clients.values(), key=lambda c: c["last_visit"], reverse=True)

    def find_for_user(self, user_id: int) -> Optional[Barber]:
        return self.repo.get_barber_by_user(user_id)
