# barberbook/notifications.py
"""Booking event notifications for barbers and their customers."""
import logging
from typing import List, Optional

from barberbook.errors import Forbidden, NotFound
from barberbook.models import Booking, Notification, Review, UserNotification
from barberbook.repository import Repository

logger = logging.getLogger(__name__)


def _service_names(booking: Booking) -> str:
    return ", ".join(s.get("name", "") for s in booking.services) or "a visit"


def _client_name(booking: Booking) -> str:
    if booking.is_manual:
        return booking.guest_name or "Walk-in client"
    return booking.user_name or "A customer"


class NotificationService:
    def __init__(self, repo: Repository):
        self.repo = repo

    def _emit(self, barber_id: int, type: str, title: str, message: str,
              booking_id: Optional[int] = None) -> Optional[Notification]:
        # The booking is already committed; a lost notification must not undo it.
        try:
            return self.repo.add_notification(
                Notification(
                    barber_id=barber_id,
                    type=type,
                    title=title,
                    message=message,
                    booking_id=booking_id,
                )
            )
        except Exception as e:
            logger.error(f"Failed to store {type} notification for barber {barber_id}: {e}")
            return None

    def new_booking(self, booking: Booking) -> Optional[Notification]:
        message = (
            f"{_client_name(booking)} booked {_service_names(booking)} on {booking.date} "
            f"at {booking.time}. Price: {booking.total_price:,}"
        )
        if booking.notes:
            message += f'\nNotes: "{booking.notes}"'
        return self._emit(
            booking.barber_id,
            "new_booking",
            f"New booking: {booking.date} {booking.time}",
            message,
            booking.id,
        )

    def booking_cancelled(self, booking: Booking) -> Optional[Notification]:
        return self._emit(
            booking.barber_id,
            "booking_cancelled",
            f"Booking cancelled: {booking.date} {booking.time}",
            f"{_client_name(booking)} cancelled {_service_names(booking)} "
            f"on {booking.date} at {booking.time}",
            booking.id,
        )

    def new_review(self, review: Review) -> Optional[Notification]:
        return self._emit(
            review.barber_id,
            "new_review",
            f"{review.user_name or 'A customer'} rated you {review.rating}/5",
            f'"{review.comment}"',
            review.booking_id,
        )

    def get(self, notification_id: int) -> Notification:
        notification = self.repo.get_notification(notification_id)
        if notification is None:
            raise NotFound("Notification not found")
        return notification

    def for_barber(self, barber_id: int) -> List[Notification]:
        return self.repo.list_notifications(barber_id)

    def mark_read(self, notification_id: int) -> Notification:
        notification = self.get(notification_id)
        notification.is_read = True
        return self.repo.save_notification(notification)

    def mark_all_read(self, barber_id: int) -> int:
        count = 0
        with self.repo.atomic():
            for notification in self.repo.list_notifications(barber_id):
                if not notification.is_read:
                    notification.is_read = True
                    self.repo.save_notification(notification)
                    count += 1
        return count

    # customer side

    def _emit_to_user(self, user_id: int, type: str, title: str, message: str,
                      booking_id: Optional[int] = None) -> Optional[UserNotification]:
        try:
            return self.repo.add_user_notification(
                UserNotification(
                    user_id=user_id,
                    type=type,
                    title=title,
                    message=message,
                    booking_id=booking_id,
                )
            )
        except Exception as e:
            logger.error(f"Failed to store {type} notification for user {user_id}: {e}")
            return None

    def booking_confirmed(self, booking: Booking) -> Optional[UserNotification]:
        if booking.user_id is None:
            return None
        return self._emit_to_user(
            booking.user_id,
            "booking_confirmed",
            f"Booking confirmed: {booking.date} {booking.time}",
            f"{_service_names(booking)} on {booking.date} at {booking.time}. "
            f"Price: {booking.total_price:,}",
            booking.id,
        )

    def booking_cancelled_for_customer(self, booking: Booking) -> Optional[UserNotification]:
        if booking.user_id is None:
            return None
        return self._emit_to_user(
            booking.user_id,
            "booking_cancelled",
            f"Booking cancelled: {booking.date} {booking.time}",
            f"Your booking for {_service_names(booking)} on {booking.date} "
            f"at {booking.time} was cancelled by the barbershop",
            booking.id,
        )

    def for_user(self, user_id: int) -> List[UserNotification]:
        return self.repo.list_user_notifications(user_id)

    def mark_user_read(self, user_id: int, notification_id: int) -> UserNotification:
        notification = self.repo.get_user_notification(notification_id)
        if notification is None:
            raise NotFound("Notification not found")
        if notification.user_id != user_id:
            raise Forbidden()
        notification.is_read = True
        return self.repo.save_user_notification(notification)

    def mark_all_user_read(self, user_id: int) -> int:
        count = 0
        with self.repo.atomic():
            for notification in self.repo.list_user_notifications(user_id):
                if not notification.is_read:
                    notification.is_read = True
                    self.repo.save_user_notification(notification)
                    count += 1
        return count
