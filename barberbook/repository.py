# barberbook/repository.py
"""Persistence contract for the scheduling core.

``SqlRepository`` talks to the database through a SQLModel session and is
what the API uses. ``MemoryRepository`` keeps everything in lists and is
handy for tests and for embedding the booking engine without a database.

Both guarantee at most one occupying booking per (barber, date, time):
the SQL side through the partial unique index on ``booking``, the memory
side by checking under a lock.
"""
import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barberbook.errors import SlotUnavailable
from barberbook.models import (
    OCCUPYING_STATUSES,
    Barber,
    BarberDaySchedule,
    BlockedSlot,
    Booking,
    Favorite,
    Notification,
    Review,
    User,
    UserNotification,
)

logger = logging.getLogger(__name__)


class Repository(ABC):

    @abstractmethod
    def atomic(self):
        """Context manager grouping writes into one unit."""

    # users

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def add_user(self, user: User) -> User: ...

    @abstractmethod
    def save_user(self, user: User) -> User: ...

    @abstractmethod
    def list_users(self, role: Optional[str] = None) -> List[User]: ...

    # barbers

    @abstractmethod
    def get_barber(self, barber_id: int) -> Optional[Barber]: ...

    @abstractmethod
    def get_barber_by_user(self, user_id: int) -> Optional[Barber]: ...

    @abstractmethod
    def list_barbers(self) -> List[Barber]: ...

    @abstractmethod
    def save_barber(self, barber: Barber) -> Barber: ...

    # day schedules and blocked slots

    @abstractmethod
    def get_day_schedule(self, barber_id: int, date: str) -> Optional[BarberDaySchedule]: ...

    @abstractmethod
    def save_day_schedule(self, schedule: BarberDaySchedule) -> BarberDaySchedule: ...

    @abstractmethod
    def list_day_schedules(self, barber_id: int, dates: Iterable[str]) -> List[BarberDaySchedule]: ...

    @abstractmethod
    def list_blocked_slots(self, barber_id: int, date: str) -> List[BlockedSlot]: ...

    @abstractmethod
    def toggle_blocked_slot(self, barber_id: int, date: str, time: str) -> bool:
        """Block the slot if free, unblock it otherwise. Returns True if now blocked."""

    # bookings

    @abstractmethod
    def get_booking(self, booking_id: int) -> Optional[Booking]: ...

    @abstractmethod
    def list_bookings(
        self,
        barber_id: Optional[int] = None,
        user_id: Optional[int] = None,
        date: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> List[Booking]:
        """Bookings matching every given filter, newest first."""

    @abstractmethod
    def create_booking(self, booking: Booking) -> Booking:
        """Persist a new booking; raises SlotUnavailable if its slot is held."""

    @abstractmethod
    def save_booking(self, booking: Booking) -> Booking: ...

    # reviews and notifications

    @abstractmethod
    def add_review(self, review: Review) -> Review: ...

    @abstractmethod
    def list_reviews(self, barber_id: int) -> List[Review]: ...

    @abstractmethod
    def add_notification(self, notification: Notification) -> Notification: ...

    @abstractmethod
    def get_notification(self, notification_id: int) -> Optional[Notification]: ...

    @abstractmethod
    def list_notifications(self, barber_id: int) -> List[Notification]: ...

    @abstractmethod
    def save_notification(self, notification: Notification) -> Notification: ...

    # customer notifications and favorites

    @abstractmethod
    def add_user_notification(self, notification: UserNotification) -> UserNotification: ...

    @abstractmethod
    def get_user_notification(self, notification_id: int) -> Optional[UserNotification]: ...

    @abstractmethod
    def list_user_notifications(self, user_id: int) -> List[UserNotification]: ...

    @abstractmethod
    def save_user_notification(self, notification: UserNotification) -> UserNotification: ...

    @abstractmethod
    def list_favorites(self, user_id: int) -> List[Favorite]:
        """Favorites of a user, newest first."""

    @abstractmethod
    def toggle_favorite(self, user_id: int, barber_id: int) -> bool:
        """Add the barber to the user's favorites or remove it. Returns True if now a favorite."""


class SqlRepository(Repository):
    def __init__(self, session: Session):
        self.session = session
        self._depth = 0

    @contextmanager
    def atomic(self):
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if self._depth == 0:
                self.session.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            try:
                self.session.commit()
            except Exception:
                self.session.rollback()
                raise

    def _commit(self):
        # inside atomic() the outermost block commits
        if self._depth:
            self.session.flush()
            return
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _persist(self, obj):
        self.session.add(obj)
        self._commit()
        self.session.refresh(obj)
        return obj

    def get_user(self, user_id):
        return self.session.get(User, user_id)

    def get_user_by_email(self, email):
        return self.session.exec(select(User).where(User.email == email)).first()

    def add_user(self, user):
        return self._persist(user)

    def save_user(self, user):
        return self._persist(user)

    def list_users(self, role=None):
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        return list(self.session.exec(stmt.order_by(User.id)).all())

    def get_barber(self, barber_id):
        return self.session.get(Barber, barber_id)

    def get_barber_by_user(self, user_id):
        return self.session.exec(select(Barber).where(Barber.user_id == user_id)).first()

    def list_barbers(self):
        return list(self.session.exec(select(Barber).order_by(Barber.id)).all())

    def save_barber(self, barber):
        return self._persist(barber)

    def get_day_schedule(self, barber_id, date):
        return self.session.get(BarberDaySchedule, (barber_id, date))

    def save_day_schedule(self, schedule):
        existing = self.get_day_schedule(schedule.barber_id, schedule.date)
        if existing is None:
            existing = BarberDaySchedule(barber_id=schedule.barber_id, date=schedule.date)
        # replace, never merge
        existing.slots = list(schedule.slots)
        return self._persist(existing)

    def list_day_schedules(self, barber_id, dates):
        dates = list(dates)
        if not dates:
            return []
        stmt = (
            select(BarberDaySchedule)
            .where(BarberDaySchedule.barber_id == barber_id)
            .where(BarberDaySchedule.date.in_(dates))
        )
        return list(self.session.exec(stmt).all())

    def list_blocked_slots(self, barber_id, date):
        stmt = (
            select(BlockedSlot)
            .where(BlockedSlot.barber_id == barber_id)
            .where(BlockedSlot.date == date)
            .order_by(BlockedSlot.time)
        )
        return list(self.session.exec(stmt).all())

    def toggle_blocked_slot(self, barber_id, date, time):
        existing = self.session.exec(
            select(BlockedSlot)
            .where(BlockedSlot.barber_id == barber_id)
            .where(BlockedSlot.date == date)
            .where(BlockedSlot.time == time)
        ).first()

        if existing is not None:
            self.session.delete(existing)
            self._commit()
            return False

        self.session.add(BlockedSlot(barber_id=barber_id, date=date, time=time))
        try:
            self._commit()
        except IntegrityError:
            # another request blocked it first
            self.session.rollback()
        return True

    def get_booking(self, booking_id):
        return self.session.get(Booking, booking_id)

    def list_bookings(self, barber_id=None, user_id=None, date=None, statuses=None):
        stmt = select(Booking)
        if barber_id is not None:
            stmt = stmt.where(Booking.barber_id == barber_id)
        if user_id is not None:
            stmt = stmt.where(Booking.user_id == user_id)
        if date is not None:
            stmt = stmt.where(Booking.date == date)
        if statuses is not None:
            stmt = stmt.where(Booking.status.in_(list(statuses)))
        stmt = stmt.order_by(Booking.created_at.desc(), Booking.id.desc())
        return list(self.session.exec(stmt).all())

    def create_booking(self, booking):
        self.session.add(booking)
        try:
            self._commit()
        except IntegrityError:
            self.session.rollback()
            logger.warning(
                f"Rejected double booking for barber {booking.barber_id} "
                f"on {booking.date} {booking.time}"
            )
            raise SlotUnavailable()
        self.session.refresh(booking)
        return booking

    def save_booking(self, booking):
        return self._persist(booking)

    def add_review(self, review):
        return self._persist(review)

    def list_reviews(self, barber_id):
        stmt = (
            select(Review)
            .where(Review.barber_id == barber_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(self.session.exec(stmt).all())

    def add_notification(self, notification):
        return self._persist(notification)

    def get_notification(self, notification_id):
        return self.session.get(Notification, notification_id)

    def list_notifications(self, barber_id):
        stmt = (
            select(Notification)
            .where(Notification.barber_id == barber_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        return list(self.session.exec(stmt).all())

    def save_notification(self, notification):
        return self._persist(notification)

    def add_user_notification(self, notification):
        return self._persist(notification)

    def get_user_notification(self, notification_id):
        return self.session.get(UserNotification, notification_id)

    def list_user_notifications(self, user_id):
        stmt = (
            select(UserNotification)
            .where(UserNotification.user_id == user_id)
            .order_by(UserNotification.created_at.desc(), UserNotification.id.desc())
        )
        return list(self.session.exec(stmt).all())

    def save_user_notification(self, notification):
        return self._persist(notification)

    def list_favorites(self, user_id):
        stmt = (
            select(Favorite)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )
        return list(self.session.exec(stmt).all())

    def toggle_favorite(self, user_id, barber_id):
        existing = self.session.exec(
            select(Favorite)
            .where(Favorite.user_id == user_id)
            .where(Favorite.barber_id == barber_id)
        ).first()

        if existing is not None:
            self.session.delete(existing)
            self._commit()
            return False

        self.session.add(Favorite(user_id=user_id, barber_id=barber_id))
        try:
            self._commit()
        except IntegrityError:
            # a concurrent toggle added it first
            self.session.rollback()
        return True


class MemoryRepository(Repository):
    """List-backed repository.

    ``atomic()`` is a re-entrant single-writer lock; it does not roll back,
    so services run their checks before their first write.
    """

    def __init__(self):
        self.users: List[User] = []
        self.barbers: List[Barber] = []
        self.day_schedules: dict = {}
        self.blocked_slots: List[BlockedSlot] = []
        self.bookings: List[Booking] = []
        self.reviews: List[Review] = []
        self.notifications: List[Notification] = []
        self.user_notifications: List[UserNotification] = []
        self.favorites: List[Favorite] = []
        self._ids: dict = {}
        self._lock = threading.RLock()

    def _next_id(self, kind: str) -> int:
        self._ids[kind] = self._ids.get(kind, 0) + 1
        return self._ids[kind]

    def _insert(self, rows: list, obj, kind: str):
        with self._lock:
            if obj.id is None:
                obj.id = self._next_id(kind)
            rows.append(obj)
        return obj

    @contextmanager
    def atomic(self):
        with self._lock:
            yield self

    def get_user(self, user_id):
        return next((u for u in self.users if u.id == user_id), None)

    def get_user_by_email(self, email):
        return next((u for u in self.users if u.email == email), None)

    def add_user(self, user):
        return self._insert(self.users, user, "user")

    def save_user(self, user):
        return user

    def list_users(self, role=None):
        return [u for u in self.users if role is None or u.role == role]

    def get_barber(self, barber_id):
        return next((b for b in self.barbers if b.id == barber_id), None)

    def get_barber_by_user(self, user_id):
        return next((b for b in self.barbers if b.user_id == user_id), None)

    def list_barbers(self):
        return list(self.barbers)

    def save_barber(self, barber):
        with self._lock:
            if not any(b is barber for b in self.barbers):
                self._insert(self.barbers, barber, "barber")
        return barber

    def get_day_schedule(self, barber_id, date):
        return self.day_schedules.get((barber_id, date))

    def save_day_schedule(self, schedule):
        stored = BarberDaySchedule(
            barber_id=schedule.barber_id,
            date=schedule.date,
            slots=list(schedule.slots),
        )
        with self._lock:
            self.day_schedules[(schedule.barber_id, schedule.date)] = stored
        return stored

    def list_day_schedules(self, barber_id, dates):
        found = (self.day_schedules.get((barber_id, d)) for d in dates)
        return [s for s in found if s is not None]

    def list_blocked_slots(self, barber_id, date):
        rows = [s for s in self.blocked_slots if s.barber_id == barber_id and s.date == date]
        return sorted(rows, key=lambda s: s.time)

    def toggle_blocked_slot(self, barber_id, date, time):
        with self._lock:
            for slot in self.blocked_slots:
                if (slot.barber_id, slot.date, slot.time) == (barber_id, date, time):
                    self.blocked_slots.remove(slot)
                    return False
            self._insert(
                self.blocked_slots,
                BlockedSlot(barber_id=barber_id, date=date, time=time),
                "blocked_slot",
            )
            return True

    def get_booking(self, booking_id):
        return next((b for b in self.bookings if b.id == booking_id), None)

    def list_bookings(self, barber_id=None, user_id=None, date=None, statuses=None):
        statuses = set(statuses) if statuses is not None else None
        rows = [
            b for b in self.bookings
            if (barber_id is None or b.barber_id == barber_id)
            and (user_id is None or b.user_id == user_id)
            and (date is None or b.date == date)
            and (statuses is None or b.status in statuses)
        ]
        return sorted(rows, key=lambda b: (b.created_at, b.id), reverse=True)

    def create_booking(self, booking):
        with self._lock:
            if booking.status in OCCUPYING_STATUSES:
                taken = self.list_bookings(
                    barber_id=booking.barber_id,
                    date=booking.date,
                    statuses=OCCUPYING_STATUSES,
                )
                if any(b.time == booking.time for b in taken):
                    logger.warning(
                        f"Rejected double booking for barber {booking.barber_id} "
                        f"on {booking.date} {booking.time}"
                    )
                    raise SlotUnavailable()
            return self._insert(self.bookings, booking, "booking")

    def save_booking(self, booking):
        return booking

    def add_review(self, review):
        return self._insert(self.reviews, review, "review")

    def list_reviews(self, barber_id):
        rows = [r for r in self.reviews if r.barber_id == barber_id]
        return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)

    def add_notification(self, notification):
        return self._insert(self.notifications, notification, "notification")

    def get_notification(self, notification_id):
        return next((n for n in self.notifications if n.id == notification_id), None)

    def list_notifications(self, barber_id):
        rows = [n for n in self.notifications if n.barber_id == barber_id]
        return sorted(rows, key=lambda n: (n.created_at, n.id), reverse=True)

    def save_notification(self, notification):
        return notification

    def add_user_notification(self, notification):
        return self._insert(self.user_notifications, notification, "user_notification")

    def get_user_notification(self, notification_id):
        return next((n for n in self.user_notifications if n.id == notification_id), None)

    def list_user_notifications(self, user_id):
        rows = [n for n in self.user_notifications if n.user_id == user_id]
        return sorted(rows, key=lambda n: (n.created_at, n.id), reverse=True)

    def save_user_notification(self, notification):
        return notification

    def list_favorites(self, user_id):
        rows = [f for f in self.favorites if f.user_id == user_id]
        return sorted(rows, key=lambda f: (f.created_at, f.id), reverse=True)

    def toggle_favorite(self, user_id, barber_id):
        with self._lock:
            for favorite in self.favorites:
                if (favorite.user_id, favorite.barber_id) == (user_id, barber_id):
                    self.favorites.remove(favorite)
                    return False
            self._insert(
                self.favorites,
                Favorite(user_id=user_id, barber_id=barber_id),
                "favorite",
            )
            return True
