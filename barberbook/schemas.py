# barberbook/schemas.py

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

SlotTime = Annotated[str, Field(pattern=TIME_PATTERN)]


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    user = "user"
    barber = "barber"
    admin = "admin"


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class NotificationType(str, Enum):
    new_booking = "new_booking"
    booking_cancelled = "booking_cancelled"
    new_review = "new_review"


class UserNotificationType(str, Enum):
    booking_confirmed = "booking_confirmed"
    booking_cancelled = "booking_cancelled"
    booking_reminder = "booking_reminder"
    visit_reminder = "visit_reminder"


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    role: UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=2)
    email: str
    phone: str = Field(default="", max_length=32)
    password: str = Field(min_length=6, max_length=72)
    role: UserRole = UserRole.user


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=32)
    old_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=6, max_length=72)


class Service(BaseModel):
    id: str
    name: str
    name_uz: str = ""
    name_ru: str = ""
    description: str = ""
    description_uz: str = ""
    description_ru: str = ""
    price: int = Field(ge=0)
    duration: int = Field(gt=0)  # minutes
    icon: str = ""


class DaySchedule(BaseModel):
    is_open: bool
    open: str = Field(pattern=TIME_PATTERN)
    close: str = Field(pattern=TIME_PATTERN)


class WorkingHours(BaseModel):
    monday: DaySchedule
    tuesday: DaySchedule
    wednesday: DaySchedule
    thursday: DaySchedule
    friday: DaySchedule
    saturday: DaySchedule
    sunday: DaySchedule


class BarberPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int]
    name: str
    phone: str
    bio: str
    location: str
    experience: int
    gallery: List[str]
    services: List[Service]
    working_hours: WorkingHours
    slot_duration: int
    is_available: bool
    rating: float
    review_count: int


class BarberProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    experience: Optional[int] = Field(default=None, ge=0)
    services: Optional[List[Service]] = None


class SlotDurationUpdate(BaseModel):
    duration: int


class TimeSlot(BaseModel):
    time: str
    available: bool


class BarberSlot(BaseModel):
    time: str
    state: str  # available, booked or blocked


class AvailabilityResponse(BaseModel):
    barber_id: int
    date: str
    slots: List[TimeSlot]


class DayScheduleIn(BaseModel):
    barber_id: int
    date: str = Field(pattern=DATE_PATTERN)
    slots: List[SlotTime]


class DaySchedulePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    barber_id: int
    date: str
    slots: List[str]


class SlotIn(BaseModel):
    time: str = Field(pattern=TIME_PATTERN)


class GenerateSlotsIn(BaseModel):
    open: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    close: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    lunch_start: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    lunch_end: Optional[str] = Field(default=None, pattern=TIME_PATTERN)


class BlockToggleIn(BaseModel):
    barber_id: int
    date: str = Field(pattern=DATE_PATTERN)
    time: str = Field(pattern=TIME_PATTERN)


class BlockToggleResult(BaseModel):
    blocked: bool


class BlockedSlotPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    barber_id: int
    date: str
    time: str


class BookingCreate(BaseModel):
    barber_id: int
    service_ids: List[str]
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None


class ManualBookingCreate(BaseModel):
    barber_id: int
    guest_name: str = Field(min_length=1)
    guest_phone: str = ""
    service_ids: List[str] = Field(default_factory=list)
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None


class BookingPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    barber_id: int
    user_id: Optional[int]
    user_name: str
    is_manual: bool
    guest_name: Optional[str]
    guest_phone: Optional[str]
    services: List[Service]
    date: str
    time: str
    status: BookingStatus
    total_price: int
    total_duration: int
    notes: Optional[str]
    created_at: datetime


class CompleteBookingIn(BaseModel):
    rating: int = Field(default=0, ge=0, le=5)
    comment: str = ""


class ReviewPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    barber_id: int
    user_id: Optional[int]
    user_name: str
    booking_id: Optional[int]
    rating: int
    comment: str
    created_at: datetime


class NotificationPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    barber_id: int
    type: NotificationType
    title: str
    message: str
    booking_id: Optional[int]
    is_read: bool
    created_at: datetime


class BarberClient(BaseModel):
    name: str
    phone: str
    user_id: Optional[int]
    is_manual: bool
    booking_count: int
    last_visit: str


class UserNotificationPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: UserNotificationType
    title: str
    message: str
    booking_id: Optional[int]
    is_read: bool
    created_at: datetime


class FavoriteToggleResult(BaseModel):
    barber_id: int
    is_favorite: bool
