import pytest

from barberbook.barbers import BarberService, average_rating
from barberbook.booking import BookingService
from barberbook.day_schedule import DayScheduleStore
from barberbook.errors import (
    BarberUnavailable,
    BookingValidationError,
    Forbidden,
    InvalidTransition,
    SlotUnavailable,
)
from barberbook.ledger import BookingLedger
from barberbook.models import Barber
from barberbook.repository import MemoryRepository

from conftest import ADMIN, CUSTOMER, OTHER_CUSTOMER, SERVICES, barber_actor

DATE = "2025-06-01"


@pytest.fixture
def bookings(repo, barber):
    DayScheduleStore(repo).save(barber.id, DATE, ["10:00", "10:30", "11:00"])
    return BookingService(repo)


def test_confirm_booking_snapshots_services_and_totals(repo, barber, bookings):
    booking = bookings.confirm_booking(
        CUSTOMER, barber.id, ["haircut", "beard_trim"], DATE, "10:00", notes="short please"
    )

    assert booking.id is not None
    assert booking.status == "confirmed"
    assert booking.user_id == CUSTOMER["id"]
    assert booking.total_price == 80000
    assert booking.total_duration == 45
    assert [s["id"] for s in booking.services] == ["haircut", "beard_trim"]

    # later price changes do not touch the booking
    barber.services[0]["price"] = 1
    assert booking.services[0]["price"] == 50000


def test_new_booking_notifies_the_barber(repo, barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")

    [notification] = repo.list_notifications(barber.id)
    assert notification.type == "new_booking"
    assert notification.booking_id == booking.id
    assert "Haircut" in notification.message
    assert "2025-06-01" in notification.title and "10:00" in notification.title
    assert "50,000" in notification.message


@pytest.mark.parametrize(
    "service_ids, date, time",
    [
        ([], DATE, "10:00"),
        (["haircut"], None, "10:00"),
        (["haircut"], DATE, None),
        (["unknown"], DATE, "10:00"),
    ],
)
def test_incomplete_selection_is_rejected_before_writing(repo, barber, bookings, service_ids, date, time):
    with pytest.raises(BookingValidationError):
        bookings.confirm_booking(CUSTOMER, barber.id, service_ids, date, time)
    assert repo.bookings == []
    assert repo.notifications == []


def test_unavailable_barber_cannot_be_booked(repo, barber, bookings):
    barber.is_available = False
    with pytest.raises(BarberUnavailable):
        bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")
    assert repo.bookings == []


def test_taken_slot_is_a_conflict(repo, barber, bookings):
    bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")

    with pytest.raises(SlotUnavailable):
        bookings.confirm_booking(OTHER_CUSTOMER, barber.id, ["fade"], DATE, "10:00")
    assert len(repo.bookings) == 1


def test_unpublished_or_blocked_time_is_a_conflict(repo, barber, bookings):
    with pytest.raises(SlotUnavailable):
        bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "12:00")

    bookings.availability.toggle_block(barber.id, DATE, "10:30")
    with pytest.raises(SlotUnavailable):
        bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:30")


def test_ledger_rejects_double_booking_even_without_resolver(repo, barber):
    from barberbook.models import Booking

    ledger = BookingLedger(repo)
    ledger.create(Booking(barber_id=barber.id, date=DATE, time="10:00"))
    with pytest.raises(SlotUnavailable):
        ledger.create(Booking(barber_id=barber.id, date=DATE, time="10:00", status="pending"))


def test_manual_booking_occupies_the_slot(repo, barber, bookings):
    booking = bookings.create_manual_booking(
        barber_actor(barber), barber.id, "Walk-in Bobur", "+998901234567", [], DATE, "11:00"
    )

    assert booking.is_manual is True
    assert booking.user_id is None
    assert booking.guest_name == "Walk-in Bobur"
    assert booking.total_price == 0
    assert not bookings.availability.is_available(barber.id, DATE, "11:00")


def test_manual_booking_requires_the_barber_or_an_admin(barber, bookings):
    with pytest.raises(Forbidden):
        bookings.create_manual_booking(CUSTOMER, barber.id, "Guest", "", [], DATE, "11:00")

    booking = bookings.create_manual_booking(ADMIN, barber.id, "Guest", "", ["fade"], DATE, "11:00")
    assert booking.total_duration == 45


def test_cancel_notifies_and_is_idempotent(repo, barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")

    assert bookings.cancel(booking.id, CUSTOMER).status == "cancelled"
    assert bookings.cancel(booking.id, CUSTOMER).status == "cancelled"

    types = [n.type for n in repo.list_notifications(barber.id)]
    assert types.count("booking_cancelled") == 1


def test_strangers_cannot_cancel(barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")
    with pytest.raises(Forbidden):
        bookings.cancel(booking.id, OTHER_CUSTOMER)


def test_barber_can_cancel_their_booking(barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")
    assert bookings.cancel(booking.id, barber_actor(barber)).status == "cancelled"


def test_complete_with_review_recomputes_rating(repo, barber, bookings):
    for time, rating in (("10:00", 5), ("10:30", 4), ("11:00", 5)):
        booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, time)
        bookings.complete_with_review(booking.id, CUSTOMER, rating, "Great cut")

    barber = BarberService(repo).get(barber.id)
    assert barber.rating == 4.7
    assert barber.review_count == 3
    assert len(repo.list_reviews(barber.id)) == 3
    assert [n.type for n in repo.list_notifications(barber.id)].count("new_review") == 3


def test_complete_without_review_still_completes(repo, barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")

    assert bookings.complete_with_review(booking.id, CUSTOMER, 5, "   ").status == "completed"
    assert repo.list_reviews(barber.id) == []
    assert barber.review_count == 0


def test_terminal_bookings_stay_terminal(barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")
    bookings.cancel(booking.id, CUSTOMER)

    completed = bookings.complete_with_review(booking.id, CUSTOMER, 5, "late review")
    assert completed.status == "cancelled"
    assert bookings.repo.list_reviews(barber.id) == []


def test_confirmed_booking_cannot_go_back_to_pending(repo, barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")
    with pytest.raises(InvalidTransition):
        BookingLedger(repo).set_status(booking.id, "pending")


def test_pending_booking_can_be_confirmed_by_staff(repo, barber, bookings):
    from barberbook.models import Booking

    pending = repo.create_booking(Booking(barber_id=barber.id, date=DATE, time="10:30", status="pending"))
    with pytest.raises(Forbidden):
        bookings.confirm_pending(pending.id, CUSTOMER)
    assert bookings.confirm_pending(pending.id, barber_actor(barber)).status == "confirmed"


@pytest.mark.parametrize(
    "ratings, expected",
    [([], 0.0), ([5], 5.0), ([5, 4, 5], 4.7), ([4, 5, 4, 4], 4.3), ([3, 4], 3.5)],
)
def test_average_rating(ratings, expected):
    assert average_rating(ratings) == expected


class NotificationStoreDown(MemoryRepository):
    def add_notification(self, notification):
        raise RuntimeError("notification table is locked")


def test_failed_notification_does_not_undo_the_booking():
    repo = NotificationStoreDown()
    barber = repo.save_barber(Barber(user_id=50, name="Jasur", services=[dict(s) for s in SERVICES]))
    DayScheduleStore(repo).save(barber.id, DATE, ["10:00"])
    bookings = BookingService(repo)

    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")

    assert repo.get_booking(booking.id).status == "confirmed"
    assert not bookings.availability.is_available(barber.id, DATE, "10:00")
    assert bookings.cancel(booking.id, CUSTOMER).status == "cancelled"


def test_staff_complete_closes_without_a_review(repo, barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")

    with pytest.raises(Forbidden):
        bookings.complete(booking.id, CUSTOMER)

    assert bookings.complete(booking.id, barber_actor(barber)).status == "completed"
    assert repo.list_reviews(barber.id) == []
    assert barber.rating == 0.0
    assert bookings.availability.is_available(barber.id, DATE, "10:00")

    # completing again is a no-op
    assert bookings.complete(booking.id, ADMIN).status == "completed"


def test_customer_is_told_about_confirmation_and_barber_cancellation(repo, barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")
    bookings.cancel(booking.id, barber_actor(barber))

    types = [n.type for n in repo.list_user_notifications(CUSTOMER["id"])]
    assert sorted(types) == ["booking_cancelled", "booking_confirmed"]


def test_customer_cancelling_their_own_booking_is_not_notified_back(repo, barber, bookings):
    booking = bookings.confirm_booking(CUSTOMER, barber.id, ["haircut"], DATE, "10:00")
    bookings.cancel(booking.id, CUSTOMER)

    types = [n.type for n in repo.list_user_notifications(CUSTOMER["id"])]
    assert types == ["booking_confirmed"]


def test_manual_booking_sends_no_customer_notification(repo, barber, bookings):
    bookings.create_manual_booking(barber_actor(barber), barber.id, "Guest", "", [], DATE, "11:00")
    assert repo.user_notifications == []
