"""Pydantic request and result schemas."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from .errors import BookingErrorCode
from .models import RoomType


class HotelRead(BaseModel):
    hotel_id: int
    name: str
    address: str = ""
    post_code: str = ""
    phone: str = ""
    email: str = ""

    model_config = {"from_attributes": True}


class RoomRead(BaseModel):
    hotel_id: int
    room_number: int
    room_type: RoomType
    cost: Decimal

    model_config = {"from_attributes": True}

    @field_serializer("cost", when_used="json")
    def cost_as_number(self, cost: Decimal) -> float:
        return float(cost)


class BookingRead(BaseModel):
    booking_id: int
    hotel_id: int
    room_number: int
    start: datetime
    end: datetime

    model_config = {"from_attributes": True}


class SearchRoomInput(BaseModel):
    room_type: RoomType = Field(..., description="0=single, 1=double, 2=deluxe")
    start_date: str = Field(..., examples=["2024-05-01-14"])
    end_date: str = Field(..., examples=["2024-05-03-10"])


class BookRoomInput(BaseModel):
    hotel_id: int
    room_number: int
    start_date: str = Field(..., examples=["2024-05-01-14"])
    end_date: str = Field(..., examples=["2024-05-03-10"])


class CheckBookingInput(BaseModel):
    booking_id: int


class RoomSearchResult(BaseModel):
    success: bool
    message: str
    error: Optional[BookingErrorCode] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    results: Optional[List[RoomRead]] = None


class BookingResult(BaseModel):
    success: bool
    message: str
    error: Optional[BookingErrorCode] = None
    details: Optional[BookingRead] = None


class ResetResult(BaseModel):
    success: bool
    deleted_rows: int


class SeedResult(BaseModel):
    added_hotels: int
    added_rooms: int
