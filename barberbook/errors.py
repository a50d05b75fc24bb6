# barberbook/errors.py
"""Domain errors raised by the scheduling and booking services.

Every error carries the HTTP status the API answers with, so routers never
translate them by hand; see the handler registered in ``barberbook.main``.
"""


class BookingError(Exception):
    status_code = 400

    def __init__(self, detail: str = ""):
        self.detail = detail or self.__class__.__doc__ or "Booking error"
        super().__init__(self.detail)


# validation (422)

class BookingValidationError(BookingError):
    """Invalid booking request"""
    status_code = 422


class InvalidDuration(BookingValidationError):
    """Slot duration must be a positive number of minutes"""


class InvalidTimeFormat(BookingValidationError):
    """Time must be in HH:MM format"""


class InvalidDateFormat(BookingValidationError):
    """Date must be in YYYY-MM-DD format"""


# not found (404)

class NotFound(BookingError):
    """Not found"""
    status_code = 404


class BarberNotFound(NotFound):
    """Barber not found"""


class BookingNotFound(NotFound):
    """Booking not found"""


class SlotNotFound(NotFound):
    """Slot not found in day schedule"""


# conflicts (409)

class Conflict(BookingError):
    """Conflict"""
    status_code = 409


class SlotUnavailable(Conflict):
    """Slot is no longer available, please pick another time"""


class DuplicateSlot(Conflict):
    """Slot already exists"""


class BarberUnavailable(Conflict):
    """Barber is not accepting bookings"""


class InvalidTransition(Conflict):
    """Booking status cannot be changed"""


class Forbidden(BookingError):
    """Forbidden"""
    status_code = 403
