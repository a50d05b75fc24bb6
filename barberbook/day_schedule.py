# barberbook/day_schedule.py
"""Per-date published slot lists."""
import logging
from typing import Iterable, List, Optional, Tuple

from barberbook.errors import BarberNotFound, BookingValidationError, DuplicateSlot, SlotNotFound
from barberbook.models import Barber, BarberDaySchedule
from barberbook.repository import Repository
from barberbook.slots import (
    generate_slots,
    normalize_date,
    normalize_time,
    to_minutes,
    weekday_name,
)

logger = logging.getLogger(__name__)


class DayScheduleStore:
    def __init__(self, repo: Repository):
        self.repo = repo

    def get(self, barber_id: int, date: str) -> Optional[BarberDaySchedule]:
        return self.repo.get_day_schedule(barber_id, normalize_date(date))

    def save(self, barber_id: int, date: str, slots: Iterable[str]) -> BarberDaySchedule:
        """Replace the whole slot list for (barber, date)."""
        date = normalize_date(date)
        cleaned = sorted({normalize_time(t) for t in slots})
        saved = self.repo.save_day_schedule(
            BarberDaySchedule(barber_id=barber_id, date=date, slots=cleaned)
        )
        logger.info(f"Saved {len(cleaned)} slots for barber {barber_id} on {date}")
        return saved

    def add_slot(self, barber_id: int, date: str, time: str) -> BarberDaySchedule:
        time = normalize_time(time)
        with self.repo.atomic():
            current = self.get(barber_id, date)
            slots = list(current.slots) if current else []
            if time in slots:
                raise DuplicateSlot(f"Slot {time} already exists on {date}")
            return self.save(barber_id, date, slots + [time])

    def remove_slot(self, barber_id: int, date: str, time: str) -> BarberDaySchedule:
        time = normalize_time(time)
        with self.repo.atomic():
            current = self.get(barber_id, date)
            if current is None or time not in current.slots:
                raise SlotNotFound(f"Slot {time} is not scheduled on {date}")
            return self.save(barber_id, date, [t for t in current.slots if t != time])

    def list_scheduled_dates(self, barber_id: int, candidate_dates: Iterable[str]) -> List[str]:
        """Candidate dates that have at least one published slot, in input order."""
        candidates = [normalize_date(d) for d in candidate_dates]
        published = {
            s.date for s in self.repo.list_day_schedules(barber_id, candidates) if s.slots
        }
        return [d for d in candidates if d in published]

    def generate(
        self,
        barber: Barber,
        date: str,
        open_time: Optional[str] = None,
        close_time: Optional[str] = None,
        lunch: Optional[Tuple[str, str]] = None,
    ) -> BarberDaySchedule:
        """Generate slots at the barber's slot duration and publish them.

        Without explicit hours the barber's working hours for that weekday
        are used, and a closed day publishes an empty list. Opening and
        closing times, like the two ends of a lunch break, come in pairs.
        """
        if barber is None:
            raise BarberNotFound()
        if (open_time is None) != (close_time is None):
            raise BookingValidationError("Give both opening and closing times, or neither")
        if lunch is not None:
            if not (lunch[0] and lunch[1]):
                raise BookingValidationError("A lunch break needs both a start and an end")
            if to_minutes(lunch[1]) <= to_minutes(lunch[0]):
                raise BookingValidationError("Lunch break must end after it starts")

        if open_time is None:
            day = (barber.working_hours or {}).get(weekday_name(date), {})
            if not day.get("is_open"):
                return self.save(barber.id, date, [])
            open_time, close_time = day["open"], day["close"]

        slots = generate_slots(open_time, close_time, barber.slot_duration, lunch)
        return self.save(barber.id, date, slots)
