import pytest

from barberbook.barbers import BarberService
from barberbook.errors import BarberNotFound, BookingValidationError, InvalidDuration
from barberbook.models import default_working_hours


@pytest.fixture
def barbers(repo):
    return BarberService(repo)


def test_working_hours_update_replaces_the_week(barbers, barber):
    hours = default_working_hours()
    hours["sunday"] = {"is_open": True, "open": "10:00", "close": "14:00"}

    updated = barbers.update_working_hours(barber.id, hours)
    assert updated.working_hours["sunday"]["is_open"] is True
    assert updated.working_hours["monday"]["close"] == "18:00"


@pytest.mark.parametrize("open_time, close_time", [("18:00", "09:00"), ("12:00", "12:00")])
def test_open_day_must_open_before_it_closes(barbers, barber, open_time, close_time):
    hours = default_working_hours()
    hours["tuesday"] = {"is_open": True, "open": open_time, "close": close_time}

    with pytest.raises(BookingValidationError, match="tuesday"):
        barbers.update_working_hours(barber.id, hours)
    assert barber.working_hours["tuesday"]["open"] == "09:00"


def test_closed_day_hours_are_not_checked(barbers, barber):
    hours = default_working_hours()
    hours["sunday"] = {"is_open": False, "open": "18:00", "close": "09:00"}
    assert barbers.update_working_hours(barber.id, hours).working_hours["sunday"]["is_open"] is False


def test_every_weekday_is_required(barbers, barber):
    hours = default_working_hours()
    del hours["friday"]
    with pytest.raises(BookingValidationError, match="friday"):
        barbers.update_working_hours(barber.id, hours)


@pytest.mark.parametrize("minutes", [0, 4, 241])
def test_slot_duration_out_of_bounds(barbers, barber, minutes):
    with pytest.raises(InvalidDuration):
        barbers.update_slot_duration(barber.id, minutes)
    assert barber.slot_duration == 30


def test_search_matches_name_location_and_bio(barbers, barber):
    barber.bio = "Classic fades and hot towel shaves"
    assert barbers.search("TASHKENT") == [barber]
    assert barbers.search("towel") == [barber]
    assert barbers.search("samarkand") == []
    assert barbers.search("  ") == [barber]


def test_toggle_availability(barbers, barber):
    assert barbers.toggle_availability(barber.id).is_available is False
    assert barbers.toggle_availability(barber.id).is_available is True


def test_unknown_barber(barbers):
    with pytest.raises(BarberNotFound):
        barbers.get(999)
