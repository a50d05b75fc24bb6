# barberbook/models.py

from typing import Optional, List
from datetime import datetime, timezone

from sqlalchemy import Index, UniqueConstraint, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

# Statuses whose bookings hold their slot.
OCCUPYING_STATUSES = ("pending", "confirmed")

_OCCUPYING_SQL = text("status IN ('pending', 'confirmed')")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_working_hours() -> dict:
    hours = {
        day: {"is_open": True, "open": "09:00", "close": "18:00"}
        for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
    }
    hours["sunday"] = {"is_open": False, "open": "09:00", "close": "18:00"}
    return hours


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = ""
    email: str = Field(index=True, unique=True)
    phone: str = ""
    password_hash: str
    role: str  # user, barber or admin
    created_at: datetime = Field(default_factory=utcnow)


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, index=True)

    name: str = ""
    phone: str = ""
    bio: str = ""
    location: str = ""
    experience: int = 0
    gallery: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    # offered services, each a Service payload
    services: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    working_hours: dict = Field(default_factory=default_working_hours, sa_column=Column(JSON))

    slot_duration: int = 30
    is_available: bool = True

    # derived from reviews only
    rating: float = 0.0
    review_count: int = 0


class BarberDaySchedule(SQLModel, table=True):
    barber_id: int = Field(primary_key=True)
    date: str = Field(primary_key=True)  # YYYY-MM-DD
    slots: List[str] = Field(default_factory=list, sa_column=Column(JSON))


class BlockedSlot(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("barber_id", "date", "time", name="uq_blocked_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(index=True)
    date: str = Field(index=True)
    time: str


class Booking(SQLModel, table=True):
    __table_args__ = (
        # at most one occupying booking per barber/date/time
        Index(
            "uq_booking_occupied_slot",
            "barber_id",
            "date",
            "time",
            unique=True,
            sqlite_where=_OCCUPYING_SQL,
            postgresql_where=_OCCUPYING_SQL,
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    barber_id: int = Field(index=True)
    user_id: Optional[int] = Field(default=None, index=True)
    user_name: str = ""

    # manual bookings for walk-in clients
    is_manual: bool = False
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None

    # snapshot of the services at booking time
    services: List[dict] = Field(default_factory=list, sa_column=Column(JSON))

    date: str = Field(index=True)
    time: str
    status: str = "confirmed"  # pending, confirmed, completed or cancelled

    total_price: int = 0
    total_duration: int = 0
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Review(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    barber_id: int = Field(index=True)
    user_id: Optional[int] = None
    user_name: str = ""
    booking_id: Optional[int] = None
    rating: int
    comment: str
    created_at: datetime = Field(default_factory=utcnow)


class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    barber_id: int = Field(index=True)
    type: str  # new_booking, booking_cancelled or new_review
    title: str
    message: str
    booking_id: Optional[int] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class UserNotification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(index=True)
    type: str  # booking_confirmed, booking_cancelled, booking_reminder or visit_reminder
    title: str
    message: str
    booking_id: Optional[int] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class Favorite(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "barber_id", name="uq_favorite"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    barber_id: int
    created_at: datetime = Field(default_factory=utcnow)
