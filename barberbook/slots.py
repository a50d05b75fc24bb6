# barberbook/slots.py
"""Wall-clock time helpers and the slot generator.

Times are "HH:MM" strings on a 24-hour clock and dates are "YYYY-MM-DD"
strings. No timezone is attached; same-format strings compare
chronologically.
"""
import re
from datetime import date as Date, datetime
from typing import List, Optional, Tuple

from barberbook.errors import InvalidDateFormat, InvalidDuration, InvalidTimeFormat

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])\Z")


def to_minutes(value: str) -> int:
    match = _TIME_RE.match(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def from_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def normalize_time(value: str) -> str:
    return from_minutes(to_minutes(value))


def parse_date(value: str) -> Date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidDateFormat(f"Invalid date {value!r}, expected YYYY-MM-DD")


def normalize_date(value: str) -> str:
    return parse_date(value).isoformat()


def weekday_name(value: str) -> str:
    return WEEKDAYS[parse_date(value).weekday()]


def generate_slots(
    open_time: str,
    close_time: str,
    duration: int,
    lunch: Optional[Tuple[str, str]] = None,
) -> List[str]:
    """Start times from ``open_time`` stepping by ``duration`` minutes.

    A slot is emitted only if it ends by ``close_time``. Starts falling in
    ``[lunch_start, lunch_end)`` are dropped. Crossing midnight is not
    supported: ``open_time >= close_time`` yields an empty list.
    """
    if duration is None or duration <= 0:
        raise InvalidDuration(f"Slot duration must be positive, got {duration}")

    start = to_minutes(open_time)
    end = to_minutes(close_time)

    lunch_start = lunch_end = None
    if lunch is not None:
        lunch_start, lunch_end = to_minutes(lunch[0]), to_minutes(lunch[1])

    slots = []
    current = start
    while current + duration <= end:
        if lunch_start is None or not (lunch_start <= current < lunch_end):
            slots.append(from_minutes(current))
        current += duration
    return slots
