"""Storage adapters behind the booking engine.

The engine only talks to :class:`HotelStore`. :class:`SqlHotelStore` wraps a
SQLAlchemy session (the database URL decides between SQLite, PostgreSQL and
MSSQL); :class:`InMemoryHotelStore` keeps everything in process.
"""
from __future__ import annotations

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Set

from sqlalchemy import String, cast, delete, exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .availability import RoomKey, intervals_overlap
from .errors import PersistenceFailure
from .models import Booking, Hotel, Room, RoomType

logger = logging.getLogger(__name__)


def hotel_matches(hotel: Hotel, fragment: str, by_id: bool = False) -> bool:
    """Case-sensitive substring test on the hotel name, or on the id rendered as text."""
    text = str(hotel.hotel_id) if by_id else hotel.name
    return fragment in text


class HotelStore(ABC):
    """The three entity collections (hotels, rooms, bookings) the engine works on."""

    @abstractmethod
    def find_hotels(self, fragment: str, by_id: bool = False) -> List[Hotel]:
        """Hotels whose name, or id rendered as text, contains ``fragment`` (case-sensitive)."""
        raise NotImplementedError

    @abstractmethod
    def add_hotel(self, hotel: Hotel) -> Hotel:
        """Persist ``hotel`` and return it with its generated id."""
        raise NotImplementedError

    @abstractmethod
    def add_rooms(self, rooms: Iterable[Room]) -> int:
        """Persist ``rooms`` and return how many were written."""
        raise NotImplementedError

    @abstractmethod
    def rooms_of_type(self, room_type: RoomType) -> List[Room]:
        raise NotImplementedError

    @abstractmethod
    def get_room(self, key: RoomKey) -> Optional[Room]:
        raise NotImplementedError

    @abstractmethod
    def booked_room_keys(self, start: datetime, end: datetime) -> Set[RoomKey]:
        """Keys of rooms holding a booking that overlaps ``[start, end)``."""
        raise NotImplementedError

    @abstractmethod
    def has_overlapping_booking(self, key: RoomKey, start: datetime, end: datetime) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add_booking(self, key: RoomKey, start: datetime, end: datetime) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def get_booking(self, booking_id: int) -> Optional[Booking]:
        raise NotImplementedError

    @abstractmethod
    def delete_all_bookings(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def delete_all_rooms(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def delete_all_hotels(self) -> int:
        raise NotImplementedError


class SqlHotelStore(HotelStore):
    """HotelStore over a SQLAlchemy session. Every write commits immediately."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Database write failed while trying to %s", action)
            raise PersistenceFailure() from exc

    def _delete_all(self, model: type, action: str) -> int:
        try:
            result = self.db.execute(delete(model))
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Database write failed while trying to %s", action)
            raise PersistenceFailure() from exc
        self._commit(action)
        return max(result.rowcount or 0, 0)

    @contextmanager
    def _reading(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Database read failed while trying to %s", action)
            raise PersistenceFailure() from exc

    def find_hotels(self, fragment: str, by_id: bool = False) -> List[Hotel]:
        column = cast(Hotel.hotel_id, String) if by_id else Hotel.name
        query = select(Hotel).where(column.contains(fragment, autoescape=True)).order_by(Hotel.hotel_id)
        with self._reading("find hotels"):
            candidates = list(self.db.scalars(query))
        # LIKE ignores case on SQLite and most MSSQL collations; narrow to the exact match here.
        return [hotel for hotel in candidates if hotel_matches(hotel, fragment, by_id)]

    def add_hotel(self, hotel: Hotel) -> Hotel:
        self.db.add(hotel)
        self._commit("add a hotel")
        self.db.refresh(hotel)
        return hotel

    def add_rooms(self, rooms: Iterable[Room]) -> int:
        rooms = list(rooms)
        self.db.add_all(rooms)
        self._commit("add rooms")
        return len(rooms)

    def rooms_of_type(self, room_type: RoomType) -> List[Room]:
        with self._reading("list rooms"):
            return list(self.db.scalars(select(Room).where(Room.room_type == room_type)))

    def get_room(self, key: RoomKey) -> Optional[Room]:
        with self._reading("load a room"):
            return self.db.get(Room, (key.hotel_id, key.room_number))

    def booked_room_keys(self, start: datetime, end: datetime) -> Set[RoomKey]:
        with self._reading("list booked rooms"):
            rows = self.db.execute(
                select(Booking.hotel_id, Booking.room_number)
                .where(Booking.start < end, start < Booking.end)
                .distinct()
            ).all()
        return {RoomKey(hotel_id, room_number) for hotel_id, room_number in rows}

    def has_overlapping_booking(self, key: RoomKey, start: datetime, end: datetime) -> bool:
        overlap = exists().where(
            Booking.hotel_id == key.hotel_id,
            Booking.room_number == key.room_number,
            Booking.start < end,
            start < Booking.end,
        )
        with self._reading("check for overlapping bookings"):
            return bool(self.db.scalar(select(overlap)))

    def add_booking(self, key: RoomKey, start: datetime, end: datetime) -> Booking:
        booking = Booking(hotel_id=key.hotel_id, room_number=key.room_number, start=start, end=end)
        self.db.add(booking)
        self._commit("add a booking")
        self.db.refresh(booking)
        return booking

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        with self._reading("load a booking"):
            return self.db.get(Booking, booking_id)

    def delete_all_bookings(self) -> int:
        return self._delete_all(Booking, "delete bookings")

    def delete_all_rooms(self) -> int:
        return self._delete_all(Room, "delete rooms")

    def delete_all_hotels(self) -> int:
        return self._delete_all(Hotel, "delete hotels")


class InMemoryHotelStore(HotelStore):
    """Process-local HotelStore. Mirrors the foreign keys and cascades of the SQL schema."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hotels: Dict[int, Hotel] = {}
        self._rooms: Dict[RoomKey, Room] = {}
        self._bookings: Dict[int, Booking] = {}
        self._hotel_ids = itertools.count(1)
        self._booking_ids = itertools.count(1)

    def find_hotels(self, fragment: str, by_id: bool = False) -> List[Hotel]:
        with self._lock:
            hotels = sorted(self._hotels.values(), key=lambda hotel: hotel.hotel_id)
        return [hotel for hotel in hotels if hotel_matches(hotel, fragment, by_id)]

    def add_hotel(self, hotel: Hotel) -> Hotel:
        with self._lock:
            hotel.hotel_id = next(self._hotel_ids)
            for field in ("address", "post_code", "phone", "email"):
                if getattr(hotel, field) is None:
                    setattr(hotel, field, "")
            self._hotels[hotel.hotel_id] = hotel
        return hotel

    def add_rooms(self, rooms: Iterable[Room]) -> int:
        rooms = list(rooms)
        with self._lock:
            for room in rooms:
                if room.hotel_id not in self._hotels:
                    raise PersistenceFailure(f"Hotel {room.hotel_id} does not exist")
                if room.key in self._rooms:
                    raise PersistenceFailure(f"Room {room.key} already exists")
            for room in rooms:
                self._rooms[room.key] = room
        return len(rooms)

    def rooms_of_type(self, room_type: RoomType) -> List[Room]:
        with self._lock:
            return [room for room in self._rooms.values() if room.room_type == room_type]

    def get_room(self, key: RoomKey) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(key)

    def booked_room_keys(self, start: datetime, end: datetime) -> Set[RoomKey]:
        with self._lock:
            return {
                booking.room_key
                for booking in self._bookings.values()
                if intervals_overlap(booking.start, booking.end, start, end)
            }

    def has_overlapping_booking(self, key: RoomKey, start: datetime, end: datetime) -> bool:
        with self._lock:
            return any(
                booking.room_key == key and intervals_overlap(booking.start, booking.end, start, end)
                for booking in self._bookings.values()
            )

    def add_booking(self, key: RoomKey, start: datetime, end: datetime) -> Booking:
        with self._lock:
            if key not in self._rooms:
                raise PersistenceFailure(f"Room {key} does not exist")
            booking = Booking(
                booking_id=next(self._booking_ids),
                hotel_id=key.hotel_id,
                room_number=key.room_number,
                start=start,
                end=end,
            )
            self._bookings[booking.booking_id] = booking
        return booking

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def delete_all_bookings(self) -> int:
        with self._lock:
            count = len(self._bookings)
            self._bookings.clear()
        return count

    def delete_all_rooms(self) -> int:
        with self._lock:
            count = len(self._rooms)
            self._rooms.clear()
            self._bookings.clear()
        return count

    def delete_all_hotels(self) -> int:
        with self._lock:
            count = len(self._hotels)
            self._hotels.clear()
            self._rooms.clear()
            self._bookings.clear()
        return count
