"""Composite room identity and the half-open interval overlap test."""
from datetime import datetime
from typing import NamedTuple


class RoomKey(NamedTuple):
    hotel_id: int
    room_number: int


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Return True when ``[start_a, end_a)`` and ``[start_b, end_b)`` share an instant.

    Intervals that only touch at a boundary do not overlap.
    """
    return start_a < end_b and start_b < end_a
