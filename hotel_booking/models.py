"""SQLAlchemy models for hotels, rooms and bookings."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import IntEnum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from .availability import RoomKey
from .database import Base

HOTEL_NAME_LENGTH = 20
ADDRESS_LENGTH = 30
POST_CODE_LENGTH = 10
PHONE_LENGTH = 15
EMAIL_LENGTH = 20


class RoomType(IntEnum):
    SINGLE = 0
    DOUBLE = 1
    DELUXE = 2


class UTCDateTime(TypeDecorator):
    """Stores naive UTC and hands back timezone-aware UTC datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:  # type: ignore[no-untyped-def]
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:  # type: ignore[no-untyped-def]
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Hotel(Base):
    __tablename__ = "hotels"

    hotel_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(HOTEL_NAME_LENGTH), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(ADDRESS_LENGTH), default="")
    post_code: Mapped[str] = mapped_column(String(POST_CODE_LENGTH), default="")
    phone: Mapped[str] = mapped_column(String(PHONE_LENGTH), default="")
    email: Mapped[str] = mapped_column(String(EMAIL_LENGTH), default="")


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (CheckConstraint("cost >= 0", name="ck_rooms_cost_non_negative"),)

    hotel_id: Mapped[int] = mapped_column(
        ForeignKey("hotels.hotel_id", ondelete="CASCADE"), primary_key=True
    )
    room_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    room_type: Mapped[RoomType] = mapped_column(SqlEnum(RoomType), nullable=False, index=True)
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    @property
    def key(self) -> RoomKey:
        return RoomKey(self.hotel_id, self.room_number)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        ForeignKeyConstraint(
            ["hotel_id", "room_number"],
            ["rooms.hotel_id", "rooms.room_number"],
            ondelete="CASCADE",
        ),
        Index("ix_bookings_room_period", "hotel_id", "room_number", "start", "end"),
    )

    booking_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hotel_id: Mapped[int] = mapped_column(Integer, nullable=False)
    room_number: Mapped[int] = mapped_column(Integer, nullable=False)
    start: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    @property
    def room_key(self) -> RoomKey:
        return RoomKey(self.hotel_id, self.room_number)
