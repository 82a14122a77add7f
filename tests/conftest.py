import os
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator, Iterable, Tuple

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")
os.environ.setdefault("SERVICE_API_KEY", "test-service-key")

from hotel_booking.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from hotel_booking.database import Base, SessionLocal, engine  # noqa: E402
from hotel_booking.dependencies import get_hotel_cache, get_memory_store  # noqa: E402
from hotel_booking.models import Hotel, Room, RoomType  # noqa: E402
from hotel_booking.store import HotelStore, InMemoryHotelStore  # noqa: E402
from services.hotels.app import app as hotels_app  # noqa: E402

SERVICE_HEADERS = {"X-Service-Key": "test-service-key"}


def utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def add_hotel_with_rooms(
    store: HotelStore, name: str, rooms: Iterable[Tuple[int, RoomType, int]]
) -> Hotel:
    """Add a hotel plus ``(room_number, room_type, cost)`` rooms through ``store``."""
    hotel = store.add_hotel(Hotel(name=name, address="", post_code="", phone="", email=""))
    store.add_rooms(
        Room(hotel_id=hotel.hotel_id, room_number=number, room_type=room_type, cost=Decimal(cost))
        for number, room_type, cost in rooms
    )
    return hotel


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    get_hotel_cache().clear()
    get_memory_store.cache_clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def memory_store() -> InMemoryHotelStore:
    return InMemoryHotelStore()


@pytest.fixture()
def hotels_client() -> Generator[TestClient, None, None]:
    with TestClient(hotels_app) as client:
        yield client
