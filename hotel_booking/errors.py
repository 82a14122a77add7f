"""Error taxonomy for the booking engine.

Engine operations raise these internally and report them to callers as
result values. :class:`SeedingError` escapes, and so does a
:class:`PersistenceFailure` from hotel search, which has no result envelope.
"""
from enum import Enum


class BookingErrorCode(str, Enum):
    INVALID_FORMAT = "invalid_format"
    INVALID_RANGE = "invalid_range"
    ROOM_NOT_FOUND = "room_not_found"
    ROOM_ALREADY_BOOKED = "room_already_booked"
    BOOKING_NOT_FOUND = "booking_not_found"
    PERSISTENCE_FAILURE = "persistence_failure"


class BookingError(Exception):
    code: BookingErrorCode
    default_message: str = "Booking operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidDateFormat(BookingError):
    code = BookingErrorCode.INVALID_FORMAT


class InvalidDateRange(BookingError):
    code = BookingErrorCode.INVALID_RANGE
    default_message = "Invalid date range for booking!"


class RoomNotFound(BookingError):
    code = BookingErrorCode.ROOM_NOT_FOUND
    default_message = "Given room does not exist"


class RoomAlreadyBooked(BookingError):
    code = BookingErrorCode.ROOM_ALREADY_BOOKED
    default_message = "Given room is already booked, cannot proceed for a new booking"


class BookingNotFound(BookingError):
    code = BookingErrorCode.BOOKING_NOT_FOUND
    default_message = "Given Booking ID does not exist!"


class PersistenceFailure(BookingError):
    code = BookingErrorCode.PERSISTENCE_FAILURE
    default_message = "Unknown Error"


class SeedingError(RuntimeError):
    """Raised when demo data cannot be written; the seed run is abandoned."""
