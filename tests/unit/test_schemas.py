"""Unit tests for schema validation."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hotel_booking.errors import BookingErrorCode
from hotel_booking.models import Booking, Room, RoomType
from hotel_booking.schemas import (
    BookingRead,
    BookingResult,
    BookRoomInput,
    RoomRead,
    RoomSearchResult,
    SearchRoomInput,
)


class TestInputSchemas:
    """Test request bodies."""

    def test_search_room_type_from_int(self):
        data = SearchRoomInput(room_type=2, start_date="2024-01-01-00", end_date="2024-01-02-00")

        assert data.room_type is RoomType.DELUXE

    def test_search_room_type_out_of_range(self):
        with pytest.raises(ValidationError):
            SearchRoomInput(room_type=3, start_date="2024-01-01-00", end_date="2024-01-02-00")

    def test_book_room_requires_ids(self):
        with pytest.raises(ValidationError):
            BookRoomInput(start_date="2024-01-01-00", end_date="2024-01-02-00")

    def test_dates_are_kept_raw(self):
        data = BookRoomInput(hotel_id=1, room_number=2, start_date="not-a-date", end_date="x")

        assert data.start_date == "not-a-date"


class TestResultSchemas:
    """Test result shaping from ORM objects."""

    def test_room_read_from_model(self):
        room = Room(hotel_id=1, room_number=11, room_type=RoomType.DOUBLE, cost=Decimal("99.50"))

        read = RoomRead.model_validate(room)

        assert read.room_type == RoomType.DOUBLE
        assert read.cost == Decimal("99.50")

    def test_booking_read_from_model(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 1, 2, tzinfo=timezone.utc)
        booking = Booking(booking_id=5, hotel_id=1, room_number=1, start=start, end=end)

        read = BookingRead.model_validate(booking)

        assert read.booking_id == 5
        assert read.end == end

    def test_failed_results_default_to_empty(self):
        search = RoomSearchResult(success=False, message="nope", error=BookingErrorCode.INVALID_RANGE)
        booking = BookingResult(success=False, message="nope")

        assert search.results is None
        assert search.start is None
        assert booking.details is None

    def test_error_code_serializes_as_string(self):
        result = BookingResult(success=False, message="x", error=BookingErrorCode.ROOM_NOT_FOUND)

        assert result.model_dump(mode="json")["error"] == "room_not_found"

    def test_cost_is_a_json_number(self):
        read = RoomRead(hotel_id=1, room_number=1, room_type=RoomType.SINGLE, cost=Decimal("99.50"))

        assert read.model_dump(mode="json")["cost"] == 99.5
        assert read.model_dump()["cost"] == Decimal("99.50")
