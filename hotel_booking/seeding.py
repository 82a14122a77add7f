"""Procedural demo data: hotels with made-up names and a handful of rooms each."""
import logging
import random
from decimal import Decimal
from typing import List, Sequence, Tuple

from .errors import PersistenceFailure, SeedingError
from .models import Hotel, Room, RoomType
from .schemas import SeedResult
from .store import HotelStore

logger = logging.getLogger(__name__)

DEFAULT_HOTEL_COUNT = 50

# Room counts per hotel, indexed by RoomType (single, double, deluxe).
ROOM_DISTRIBUTIONS: Tuple[Tuple[int, int, int], ...] = (
    (3, 2, 1),
    (2, 2, 2),
    (0, 3, 3),
    (3, 3, 0),
    (6, 0, 0),
)

CONSONANTS = (
    "b", "c", "d", "f", "g", "h", "j", "k", "l", "m",
    "ll", "n", "p", "q", "r", "s", "sh", "zh", "sk", "sw",
    "t", "v", "w", "x", "th", "wr", "cr", "tr",
    "vr", "br", "gr", "gh", "kr", "dh", "dr", "ny", "fr",
)
VOWELS = ("a", "e", "i", "o", "u", "ae", "y", "ei", "ou", "oo", "oh", "or", "ar", "eve")


def generate_name(rng: random.Random, max_length: int) -> str:
    """Build a pronounceable name from consonant/vowel syllables, shorter than ``max_length``."""
    name = ""
    if rng.getrandbits(1) == 0:
        name += rng.choice(VOWELS)
    name += rng.choice(CONSONANTS) + rng.choice(VOWELS)
    name = name[0].upper() + name[1:]
    while True:
        part = rng.choice(CONSONANTS) + rng.choice(VOWELS)
        if len(part) + len(name) >= max_length:
            return name
        name += part


def build_rooms(hotel_id: int, distribution: Sequence[int], base_cost: int, addition: int) -> List[Room]:
    rooms = []
    for room_type in RoomType:
        for index in range(1, distribution[room_type] + 1):
            rooms.append(
                Room(
                    hotel_id=hotel_id,
                    room_number=room_type * 10 + index,
                    room_type=room_type,
                    cost=Decimal(base_cost + addition * room_type),
                )
            )
    return rooms


def seed_database(store: HotelStore, rng: random.Random, hotel_count: int = DEFAULT_HOTEL_COUNT) -> SeedResult:
    """Add ``hotel_count`` generated hotels and their rooms to ``store``.

    Any failed write raises :class:`SeedingError`; hotels written before the
    failure are left in place.
    """
    added_rooms = 0
    for _ in range(hotel_count):
        distribution = rng.choice(ROOM_DISTRIBUTIONS)
        name = generate_name(rng, rng.randint(5, 15))
        try:
            hotel = store.add_hotel(Hotel(name=name, address="", post_code="", phone="", email=""))
        except PersistenceFailure as exc:
            raise SeedingError("Adding hotel in database failed!") from exc

        base_cost = rng.randint(1, 14) * 5
        addition = rng.randint(10, 29) * 5
        rooms = build_rooms(hotel.hotel_id, distribution, base_cost, addition)
        try:
            written = store.add_rooms(rooms)
        except PersistenceFailure as exc:
            raise SeedingError("Adding rooms in database failed!") from exc
        if written != len(rooms):
            raise SeedingError("Adding rooms in database failed!")
        added_rooms += written

    logger.info("Seeded %d hotels with %d rooms", hotel_count, added_rooms)
    return SeedResult(added_hotels=hotel_count, added_rooms=added_rooms)
