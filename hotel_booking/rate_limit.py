"""Request rate limits for the public and admin routes (SlowAPI)."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

SEARCH_LIMIT = "60/minute"
BOOKING_LIMIT = "20/minute"
LOOKUP_LIMIT = "40/minute"
ADMIN_LIMIT = "5/minute"


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.default_rate_limit],
        enabled=settings.rate_limiting_enabled,
    )


limiter = build_limiter(get_settings())


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit by %s on %s", get_remote_address(request), request.url.path)
    # Same envelope as the booking results so clients only parse one shape.
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": f"Rate limit exceeded: {exc.detail}"},
    )


def apply_rate_limiter(app: FastAPI) -> None:
    """Attach the limiter middleware and exception handler to an app."""

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
