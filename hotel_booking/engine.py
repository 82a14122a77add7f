"""Room availability, booking and administration on top of a HotelStore."""
from __future__ import annotations

import logging
import random
import re
from datetime import datetime
from typing import List, Optional

from .availability import RoomKey
from .cache import SimpleTTLCache
from .dates import validate_date_range
from .errors import BookingError, BookingNotFound, PersistenceFailure, RoomAlreadyBooked, RoomNotFound
from .models import RoomType
from .schemas import BookingRead, BookingResult, HotelRead, ResetResult, RoomRead, RoomSearchResult, SeedResult
from .seeding import DEFAULT_HOTEL_COUNT, seed_database
from .store import HotelStore

logger = logging.getLogger(__name__)

_NUMERIC_KEYWORD = re.compile(r"\s*[+-]?\d+\s*")


def _hotel_search_key(keyword: str) -> str:
    return f"hotel-search:{keyword}"


class BookingEngine:
    """Public operations of the booking service.

    Operations that return a result envelope report failures through it
    instead of raising. :meth:`seed` raises ``SeedingError`` and
    :meth:`find_hotels` lets a ``PersistenceFailure`` through.

    :meth:`book_room` checks for conflicts and inserts in two separate steps,
    so two concurrent requests for the same room and overlapping dates can
    both succeed.
    """

    def __init__(self, store: HotelStore, hotel_cache: Optional[SimpleTTLCache[List[HotelRead]]] = None) -> None:
        self.store = store
        self.hotel_cache = hotel_cache

    def find_hotels(self, keyword: str) -> List[HotelRead]:
        """Hotels whose id (for numeric keywords) or name contains ``keyword``."""

        def lookup() -> List[HotelRead]:
            by_id = bool(_NUMERIC_KEYWORD.fullmatch(keyword))
            return [HotelRead.model_validate(hotel) for hotel in self.store.find_hotels(keyword, by_id=by_id)]

        if self.hotel_cache is None:
            return lookup()
        return self.hotel_cache.get_or_set(_hotel_search_key(keyword), lookup)

    def unavailable_rooms(self, start: datetime, end: datetime) -> set[RoomKey]:
        return self.store.booked_room_keys(start, end)

    def search_rooms(self, room_type: RoomType, start_date: str, end_date: str) -> RoomSearchResult:
        try:
            start, end = validate_date_range(start_date, end_date)
            booked = self.unavailable_rooms(start, end)
            candidates = self.store.rooms_of_type(room_type)
        except BookingError as exc:
            return RoomSearchResult(success=False, message=exc.message, error=exc.code)

        available = [room for room in candidates if room.key not in booked]
        available.sort(key=lambda room: room.cost)
        return RoomSearchResult(
            success=True,
            message="Success",
            start=start,
            end=end,
            results=[RoomRead.model_validate(room) for room in available],
        )

    def book_room(self, hotel_id: int, room_number: int, start_date: str, end_date: str) -> BookingResult:
        key = RoomKey(hotel_id, room_number)
        try:
            start, end = validate_date_range(start_date, end_date)
            if self.store.get_room(key) is None:
                raise RoomNotFound()
            if self.store.has_overlapping_booking(key, start, end):
                raise RoomAlreadyBooked()
            booking = self.store.add_booking(key, start, end)
        except BookingError as exc:
            logger.info("Booking rejected for room %s/%s: %s", hotel_id, room_number, exc.code.value)
            return BookingResult(success=False, message=exc.message, error=exc.code)

        logger.info(
            "Booked room %s/%s from %s to %s as booking %s",
            hotel_id,
            room_number,
            start.isoformat(),
            end.isoformat(),
            booking.booking_id,
        )
        return BookingResult(success=True, message="Booking successful", details=BookingRead.model_validate(booking))

    def check_booking(self, booking_id: int) -> BookingResult:
        try:
            booking = self.store.get_booking(booking_id)
            if booking is None:
                raise BookingNotFound()
        except BookingError as exc:
            return BookingResult(success=False, message=exc.message, error=exc.code)
        return BookingResult(success=True, message="Search successful", details=BookingRead.model_validate(booking))

    def reset(self) -> ResetResult:
        """Delete all bookings, rooms and hotels, in that order."""
        try:
            deleted = self.store.delete_all_bookings()
            deleted += self.store.delete_all_rooms()
            deleted += self.store.delete_all_hotels()
        except PersistenceFailure:
            logger.error("Reset did not complete")
            return ResetResult(success=False, deleted_rows=0)
        finally:
            self._forget_hotels()
        logger.info("Reset removed %d rows", deleted)
        return ResetResult(success=True, deleted_rows=deleted)

    def seed(self, rng: random.Random, hotel_count: int = DEFAULT_HOTEL_COUNT) -> SeedResult:
        """Generate demo data. Raises :class:`~hotel_booking.errors.SeedingError` on a failed write."""
        try:
            return seed_database(self.store, rng, hotel_count)
        finally:
            self._forget_hotels()

    def _forget_hotels(self) -> None:
        if self.hotel_cache is not None:
            self.hotel_cache.clear()
