import random
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from hotel_booking.config import get_settings
from hotel_booking.database import Base, engine
from hotel_booking.dependencies import get_booking_engine, require_service_key
from hotel_booking.engine import BookingEngine
from hotel_booking.errors import PersistenceFailure, SeedingError
from hotel_booking.logging_middleware import add_audit_middleware
from hotel_booking.rate_limit import (
    ADMIN_LIMIT,
    BOOKING_LIMIT,
    LOOKUP_LIMIT,
    SEARCH_LIMIT,
    apply_rate_limiter,
    limiter,
)
from hotel_booking.schemas import (
    BookingResult,
    BookRoomInput,
    CheckBookingInput,
    HotelRead,
    ResetResult,
    RoomSearchResult,
    SearchRoomInput,
    SeedResult,
)

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.run_db_migrations and settings.store_backend == "sql":
        Base.metadata.create_all(bind=engine)
    yield


def seeding_error_handler(_: Request, exc: SeedingError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


def persistence_failure_handler(_: Request, exc: PersistenceFailure) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": exc.message})


def create_app() -> FastAPI:
    fastapi_app = FastAPI(title="Hotel Booking Service", version="0.1.0", lifespan=lifespan)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_rate_limiter(fastapi_app)
    add_audit_middleware(fastapi_app, "hotels")
    fastapi_app.add_exception_handler(SeedingError, seeding_error_handler)
    fastapi_app.add_exception_handler(PersistenceFailure, persistence_failure_handler)
    Instrumentator().instrument(fastapi_app).expose(fastapi_app)
    return fastapi_app


app = create_app()


@app.get("/", tags=["health"])
def greet() -> dict[str, str]:
    return {"message": "Hello from the hotel booking service"}


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": "hotels"}


@app.get("/find-hotel/{keyword}", response_model=List[HotelRead], tags=["hotels"])
@limiter.limit(SEARCH_LIMIT)
def find_hotel(
    request: Request,
    keyword: str,
    booking_engine: BookingEngine = Depends(get_booking_engine),
) -> List[HotelRead]:
    return booking_engine.find_hotels(keyword)


# Logical failures (bad dates, conflicts, unknown ids) are reported with
# success=false in a 200 response; clients branch on the body, not the status.
@app.post("/search-room", response_model=RoomSearchResult, tags=["rooms"])
@limiter.limit(SEARCH_LIMIT)
def search_room(
    request: Request,
    data: SearchRoomInput,
    booking_engine: BookingEngine = Depends(get_booking_engine),
) -> RoomSearchResult:
    return booking_engine.search_rooms(data.room_type, data.start_date, data.end_date)


@app.post("/book-room", response_model=BookingResult, tags=["bookings"])
@limiter.limit(BOOKING_LIMIT)
def book_room(
    request: Request,
    data: BookRoomInput,
    booking_engine: BookingEngine = Depends(get_booking_engine),
) -> BookingResult:
    return booking_engine.book_room(data.hotel_id, data.room_number, data.start_date, data.end_date)


@app.post("/check-booking", response_model=BookingResult, tags=["bookings"])
@limiter.limit(LOOKUP_LIMIT)
def check_booking(
    request: Request,
    data: CheckBookingInput,
    booking_engine: BookingEngine = Depends(get_booking_engine),
) -> BookingResult:
    return booking_engine.check_booking(data.booking_id)


@app.get("/seed", response_model=SeedResult, tags=["admin"], dependencies=[Depends(require_service_key)])
@limiter.limit(ADMIN_LIMIT)
def seed(
    request: Request,
    booking_engine: BookingEngine = Depends(get_booking_engine),
) -> SeedResult:
    rng = random.Random(settings.seed_random_seed)
    return booking_engine.seed(rng, settings.seed_hotel_count)


@app.get("/reset", response_model=ResetResult, tags=["admin"], dependencies=[Depends(require_service_key)])
@limiter.limit(ADMIN_LIMIT)
def reset(
    request: Request,
    booking_engine: BookingEngine = Depends(get_booking_engine),
) -> ResetResult:
    return booking_engine.reset()
