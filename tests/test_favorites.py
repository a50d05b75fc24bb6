import pytest

from barberbook.errors import BarberNotFound, Forbidden, NotFound
from barberbook.favorites import FavoriteService
from barberbook.models import Barber, UserNotification
from barberbook.notifications import NotificationService

from conftest import CUSTOMER, OTHER_CUSTOMER


@pytest.fixture
def favorites(repo):
    return FavoriteService(repo)


def test_toggle_adds_then_removes(favorites, barber):
    assert favorites.toggle(CUSTOMER["id"], barber.id) is True
    assert favorites.favorite_ids(CUSTOMER["id"]) == [barber.id]
    assert favorites.favorites(CUSTOMER["id"]) == [barber]

    assert favorites.toggle(CUSTOMER["id"], barber.id) is False
    assert favorites.favorite_ids(CUSTOMER["id"]) == []


def test_favorites_are_per_user(favorites, repo, barber):
    other = repo.save_barber(Barber(user_id=51, name="Sardor"))
    favorites.toggle(CUSTOMER["id"], barber.id)
    favorites.toggle(OTHER_CUSTOMER["id"], other.id)

    assert favorites.favorite_ids(CUSTOMER["id"]) == [barber.id]
    assert favorites.favorite_ids(OTHER_CUSTOMER["id"]) == [other.id]


def test_unknown_barber_cannot_be_favorited(favorites):
    with pytest.raises(BarberNotFound):
        favorites.toggle(CUSTOMER["id"], 999)
    assert favorites.favorite_ids(CUSTOMER["id"]) == []


def test_customer_notifications_mark_read(repo):
    service = NotificationService(repo)
    first = repo.add_user_notification(
        UserNotification(user_id=CUSTOMER["id"], type="booking_confirmed", title="a", message="a")
    )
    repo.add_user_notification(
        UserNotification(user_id=CUSTOMER["id"], type="visit_reminder", title="b", message="b")
    )

    assert service.mark_user_read(CUSTOMER["id"], first.id).is_read is True
    with pytest.raises(Forbidden):
        service.mark_user_read(OTHER_CUSTOMER["id"], first.id)
    with pytest.raises(NotFound):
        service.mark_user_read(CUSTOMER["id"], 999)

    assert service.mark_all_user_read(CUSTOMER["id"]) == 1
    assert all(n.is_read for n in service.for_user(CUSTOMER["id"]))
    assert service.mark_all_user_read(CUSTOMER["id"]) == 0
