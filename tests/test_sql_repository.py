import pytest

from barberbook.booking import BookingService
from barberbook.day_schedule import DayScheduleStore
from barberbook.errors import SlotUnavailable
from barberbook.models import Barber, BarberDaySchedule, Booking, User, UserNotification

from conftest import CUSTOMER, SERVICES

DATE = "2025-06-01"


@pytest.fixture
def sql_barber(sql_repo):
    return sql_repo.save_barber(Barber(user_id=50, name="Jasur", services=[dict(s) for s in SERVICES]))


def test_unique_index_blocks_a_second_occupying_booking(sql_repo, sql_barber):
    sql_repo.create_booking(Booking(barber_id=sql_barber.id, date=DATE, time="10:00"))

    with pytest.raises(SlotUnavailable):
        sql_repo.create_booking(Booking(barber_id=sql_barber.id, date=DATE, time="10:00"))

    # the session is still usable after the rejected insert
    assert len(sql_repo.list_bookings(barber_id=sql_barber.id)) == 1


def test_cancelled_booking_frees_the_slot_for_rebooking(sql_repo, sql_barber):
    first = sql_repo.create_booking(Booking(barber_id=sql_barber.id, date=DATE, time="10:00"))
    first.status = "cancelled"
    sql_repo.save_booking(first)

    again = sql_repo.create_booking(Booking(barber_id=sql_barber.id, date=DATE, time="10:00"))
    assert again.id != first.id


def test_day_schedule_upsert_replaces(sql_repo, sql_barber):
    sql_repo.save_day_schedule(BarberDaySchedule(barber_id=sql_barber.id, date=DATE, slots=["10:00"]))
    sql_repo.save_day_schedule(BarberDaySchedule(barber_id=sql_barber.id, date=DATE, slots=["12:00", "12:30"]))

    assert sql_repo.get_day_schedule(sql_barber.id, DATE).slots == ["12:00", "12:30"]
    assert len(sql_repo.list_day_schedules(sql_barber.id, [DATE, "2025-06-02"])) == 1


def test_toggle_blocked_slot(sql_repo, sql_barber):
    assert sql_repo.toggle_blocked_slot(sql_barber.id, DATE, "10:00") is True
    assert [s.time for s in sql_repo.list_blocked_slots(sql_barber.id, DATE)] == ["10:00"]
    assert sql_repo.toggle_blocked_slot(sql_barber.id, DATE, "10:00") is False
    assert sql_repo.list_blocked_slots(sql_barber.id, DATE) == []


def test_booking_flow_on_the_database(sql_repo, sql_barber):
    DayScheduleStore(sql_repo).save(sql_barber.id, DATE, ["10:00", "10:30"])
    bookings = BookingService(sql_repo)

    booking = bookings.confirm_booking(CUSTOMER, sql_barber.id, ["fade"], DATE, "10:30")
    assert booking.total_duration == 45

    with pytest.raises(SlotUnavailable):
        bookings.confirm_booking(CUSTOMER, sql_barber.id, ["haircut"], DATE, "10:30")

    bookings.complete_with_review(booking.id, CUSTOMER, 4, "Nice")
    barber = sql_repo.get_barber(sql_barber.id)
    assert barber.rating == 4.0
    assert barber.review_count == 1
    assert sorted(n.type for n in sql_repo.list_notifications(sql_barber.id)) == ["new_booking", "new_review"]


def test_rows_are_stamped_with_aware_utc_times(sql_repo, sql_barber):
    user = sql_repo.add_user(User(name="Ali", email="ali@example.com", password_hash="x", role="user"))
    booking = Booking(barber_id=sql_barber.id, user_id=user.id, date=DATE, time="10:00")
    assert booking.created_at.tzinfo is not None
    assert booking.created_at.utcoffset().total_seconds() == 0

    sql_repo.create_booking(booking)
    sql_repo.add_user_notification(
        UserNotification(user_id=user.id, type="booking_confirmed", title="t", message="m")
    )
    assert len(sql_repo.list_user_notifications(user.id)) == 1


def test_failed_outer_commit_rolls_back(sql_repo, sql_barber, monkeypatch):
    def commit_fails():
        raise RuntimeError("database is locked")

    monkeypatch.setattr(sql_repo.session, "commit", commit_fails)
    with pytest.raises(RuntimeError):
        with sql_repo.atomic():
            sql_repo.create_booking(Booking(barber_id=sql_barber.id, date=DATE, time="10:00"))
    monkeypatch.undo()

    # the flushed insert did not survive
    assert sql_repo.list_bookings(barber_id=sql_barber.id) == []
    sql_repo.create_booking(Booking(barber_id=sql_barber.id, date=DATE, time="10:00"))


def test_toggle_favorite(sql_repo, sql_barber):
    assert sql_repo.toggle_favorite(7, sql_barber.id) is True
    assert [f.barber_id for f in sql_repo.list_favorites(7)] == [sql_barber.id]
    assert sql_repo.toggle_favorite(7, sql_barber.id) is False
    assert sql_repo.list_favorites(7) == []
