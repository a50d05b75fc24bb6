# barberbook/routers/notifications_routes.py

from typing import List

from fastapi import APIRouter, Depends

from barberbook.auth import get_current_user
from barberbook.barbers import BarberService
from barberbook.deps import get_barber_service, get_notification_service, require_barber_staff
from barberbook.notifications import NotificationService
from barberbook.schemas import NotificationPublic, UserNotificationPublic

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get("/me", response_model=List[UserNotificationPublic])
def list_my_notifications(
    notifications: NotificationService = Depends(get_notification_service),
    current_user: dict = Depends(get_current_user),
):
    return notifications.for_user(current_user["id"])


@router.patch("/me/read-all")
def mark_all_mine_read(
    notifications: NotificationService = Depends(get_notification_service),
    current_user: dict = Depends(get_current_user),
):
    return {"updated": notifications.mark_all_user_read(current_user["id"])}


@router.patch("/me/{notification_id}/read", response_model=UserNotificationPublic)
def mark_mine_read(
    notification_id: int,
    notifications: NotificationService = Depends(get_notification_service),
    current_user: dict = Depends(get_current_user),
):
    return notifications.mark_user_read(current_user["id"], notification_id)


@router.get("/barber/{barber_id}", response_model=List[NotificationPublic])
def list_notifications(
    barber_id: int,
    barbers: BarberService = Depends(get_barber_service),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return notifications.for_barber(barber_id)


@router.patch("/barber/{barber_id}/read-all")
def mark_all_read(
    barber_id: int,
    barbers: BarberService = Depends(get_barber_service),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: dict = Depends(get_current_user),
):
    require_barber_staff(current_user, barbers.get(barber_id))
    return {"updated": notifications.mark_all_read(barber_id)}


@router.patch("/{notification_id}/read", response_model=NotificationPublic)
def mark_read(
    notification_id: int,
    barbers: BarberService = Depends(get_barber_service),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: dict = Depends(get_current_user),
):
    notification = notifications.get(notification_id)
    require_barber_staff(current_user, barbers.get(notification.barber_id))
    return notifications.mark_read(notification_id)
