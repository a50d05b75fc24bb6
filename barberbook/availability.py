# barberbook/availability.py
"""Customer-facing slot availability.

A date is bookable only if the barber published slots for it. Working
hours never stand in for a missing day schedule here; they only seed the
barber's own slot generator.
"""
import logging
from typing import List, Set

from barberbook.day_schedule import DayScheduleStore
from barberbook.ledger import BookingLedger
from barberbook.models import BlockedSlot
from barberbook.repository import Repository
from barberbook.schemas import BarberSlot, TimeSlot
from barberbook.slots import normalize_date, normalize_time

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    def __init__(self, repo: Repository):
        self.repo = repo
        self.schedules = DayScheduleStore(repo)
        self.ledger = BookingLedger(repo)

    def blocked_slots(self, barber_id: int, date: str) -> List[BlockedSlot]:
        return self.repo.list_blocked_slots(barber_id, normalize_date(date))

    def blocked_times(self, barber_id: int, date: str) -> Set[str]:
        return {s.time for s in self.blocked_slots(barber_id, date)}

    def occupied_times(self, barber_id: int, date: str) -> Set[str]:
        return self.ledger.occupied_times(barber_id, date) | self.blocked_times(barber_id, date)

    def resolve(self, barber_id: int, date: str) -> List[TimeSlot]:
        schedule = self.schedules.get(barber_id, date)
        if schedule is None or not schedule.slots:
            return []

        occupied = self.occupied_times(barber_id, date)
        return [TimeSlot(time=t, available=t not in occupied) for t in schedule.slots]

    def is_available(self, barber_id: int, date: str, time: str) -> bool:
        time = normalize_time(time)
        return any(s.time == time and s.available for s in self.resolve(barber_id, date))

    def barber_view(self, barber_id: int, date: str) -> List[BarberSlot]:
        """Published slots labelled for the barber: booked, blocked or available."""
        schedule = self.schedules.get(barber_id, date)
        if schedule is None:
            return []

        booked = self.ledger.occupied_times(barber_id, date)
        blocked = self.blocked_times(barber_id, date)
        view = []
        for t in schedule.slots:
            if t in booked:
                state = "booked"
            elif t in blocked:
                state = "blocked"
            else:
                state = "available"
            view.append(BarberSlot(time=t, state=state))
        return view

    def toggle_block(self, barber_id: int, date: str, time: str) -> bool:
        """Block or unblock a slot. Returns True if the slot is now blocked."""
        date, time = normalize_date(date), normalize_time(time)
        blocked = self.repo.toggle_blocked_slot(barber_id, date, time)
        logger.info(
            f"Slot {date} {time} for barber {barber_id} {'blocked' if blocked else 'unblocked'}"
        )
        return blocked
