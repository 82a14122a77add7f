from datetime import datetime
from unittest.mock import MagicMock

import pytest

from conftest import add_hotel_with_rooms
from hotel_booking.models import RoomType
from hotel_booking.store import SqlHotelStore

SEARCH_PAYLOAD = {"room_type": RoomType.SINGLE.value, "start_date": "2024-01-01-00", "end_date": "2024-01-02-00"}


@pytest.fixture()
def solo_hotel(db_session):
    return add_hotel_with_rooms(SqlHotelStore(db_session), "Solo", [(1, RoomType.SINGLE, 50)])


def book(client, hotel_id, room_number, start_date, end_date):
    return client.post(
        "/book-room",
        json={"hotel_id": hotel_id, "room_number": room_number, "start_date": start_date, "end_date": end_date},
    )


def test_booking_flow(hotels_client, solo_hotel):
    search_resp = hotels_client.post("/search-room", json=SEARCH_PAYLOAD)
    assert search_resp.status_code == 200
    results = search_resp.json()["results"]
    assert len(results) == 1
    assert results[0]["hotel_id"] == solo_hotel.hotel_id
    assert results[0]["room_number"] == 1
    assert results[0]["cost"] == 50
    assert isinstance(results[0]["cost"], float)

    booking_resp = book(hotels_client, solo_hotel.hotel_id, 1, "2024-01-01-00", "2024-01-02-00")
    assert booking_resp.status_code == 200
    booking = booking_resp.json()
    assert booking["success"] is True
    booking_id = booking["details"]["booking_id"]

    again = hotels_client.post("/search-room", json=SEARCH_PAYLOAD)
    assert again.json()["success"] is True
    assert again.json()["results"] == []

    check_resp = hotels_client.post("/check-booking", json={"booking_id": booking_id})
    assert check_resp.status_code == 200
    details = check_resp.json()["details"]
    assert details["room_number"] == 1
    assert datetime.fromisoformat(details["start"].replace("Z", "+00:00")) == datetime.fromisoformat(
        "2024-01-01T00:00:00+00:00"
    )


def test_conflicts_are_reported_in_body(hotels_client, solo_hotel):
    assert book(hotels_client, solo_hotel.hotel_id, 1, "2024-01-10-00", "2024-01-15-00").json()["success"] is True

    conflict = book(hotels_client, solo_hotel.hotel_id, 1, "2024-01-12-00", "2024-01-14-00")
    assert conflict.status_code == 200
    assert conflict.json()["success"] is False
    assert conflict.json()["error"] == "room_already_booked"
    assert conflict.json()["details"] is None

    adjacent = book(hotels_client, solo_hotel.hotel_id, 1, "2024-01-15-00", "2024-01-20-00")
    assert adjacent.json()["success"] is True


def test_unknown_room(hotels_client, solo_hotel):
    response = book(hotels_client, solo_hotel.hotel_id, 2, "2024-01-10-00", "2024-01-15-00")

    assert response.status_code == 200
    assert response.json()["error"] == "room_not_found"
    assert hotels_client.post("/check-booking", json={"booking_id": 1}).json()["success"] is False


def test_invalid_dates(hotels_client, solo_hotel):
    bad_format = hotels_client.post(
        "/search-room", json={"room_type": 0, "start_date": "2024-01-01", "end_date": "2024-01-02-00"}
    )
    assert bad_format.status_code == 200
    assert bad_format.json()["success"] is False
    assert bad_format.json()["error"] == "invalid_format"
    assert bad_format.json()["results"] is None

    bad_range = book(hotels_client, solo_hotel.hotel_id, 1, "2024-01-02-00", "2024-01-01-00")
    assert bad_range.json()["error"] == "invalid_range"


def test_unknown_booking(hotels_client):
    response = hotels_client.post("/check-booking", json={"booking_id": 12345})

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Given Booking ID does not exist!",
        "error": "booking_not_found",
        "details": None,
    }


def test_malformed_body_rejected(hotels_client):
    assert hotels_client.post("/search-room", json={**SEARCH_PAYLOAD, "room_type": 7}).status_code == 422
    assert hotels_client.post("/check-booking", json={}).status_code == 422


def test_memory_backend(hotels_client, monkeypatch):
    from hotel_booking import dependencies

    monkeypatch.setattr(dependencies.get_settings(), "store_backend", "memory")
    store = dependencies.get_memory_store()
    hotel = add_hotel_with_rooms(store, "Ephemeral", [(1, RoomType.DOUBLE, 70)])

    response = book(hotels_client, hotel.hotel_id, 1, "2024-02-01-00", "2024-02-02-00")

    assert response.json()["success"] is True
    assert store.get_booking(response.json()["details"]["booking_id"]) is not None


def test_memory_backend_opens_no_session(hotels_client, monkeypatch):
    from hotel_booking import dependencies

    session_factory = MagicMock(side_effect=AssertionError("database session opened"))
    monkeypatch.setattr(dependencies, "SessionLocal", session_factory)
    monkeypatch.setattr(dependencies.get_settings(), "store_backend", "memory")

    response = hotels_client.post("/check-booking", json={"booking_id": 1})

    assert response.status_code == 200
    assert response.json()["error"] == "booking_not_found"
    session_factory.assert_not_called()


def test_sql_backend_session_closed_after_use(monkeypatch):
    from hotel_booking import dependencies

    session = MagicMock()
    session.__enter__.return_value = session
    session.__exit__.return_value = False
    monkeypatch.setattr(dependencies, "SessionLocal", MagicMock(return_value=session))

    stores = dependencies.get_store()
    store = next(stores)
    assert isinstance(store, SqlHotelStore)
    assert store.db is session
    session.__exit__.assert_not_called()

    stores.close()

    session.__exit__.assert_called_once()
