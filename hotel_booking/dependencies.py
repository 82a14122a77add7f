"""Reusable FastAPI dependencies for store access and admin checks."""
from functools import lru_cache
from typing import Generator, List

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from .cache import SimpleTTLCache
from .config import get_settings
from .database import SessionLocal
from .engine import BookingEngine
from .schemas import HotelRead
from .store import HotelStore, InMemoryHotelStore, SqlHotelStore

service_api_key_header = APIKeyHeader(name="X-Service-Key", auto_error=False)


@lru_cache
def get_memory_store() -> InMemoryHotelStore:
    return InMemoryHotelStore()


@lru_cache
def get_hotel_cache() -> SimpleTTLCache[List[HotelRead]]:
    return SimpleTTLCache(ttl=get_settings().hotel_search_cache_ttl)


def get_store() -> Generator[HotelStore, None, None]:
    """Yield the configured adapter; a database session is opened only for the sql backend."""
    if get_settings().store_backend == "memory":
        yield get_memory_store()
        return
    with SessionLocal() as db:
        yield SqlHotelStore(db)


def get_booking_engine(store: HotelStore = Depends(get_store)) -> BookingEngine:
    return BookingEngine(store, hotel_cache=get_hotel_cache())


def require_service_key(api_key: str = Security(service_api_key_header)) -> None:
    if not api_key or api_key != get_settings().service_api_key:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid service key")
