"""Parsing and validation of the fixed ``yyyy-MM-dd-HH`` booking date format."""
import re
from datetime import datetime, timezone
from typing import Tuple

from .errors import InvalidDateFormat, InvalidDateRange

DATE_FORMAT = "%Y-%m-%d-%H"
DATE_FORMAT_DISPLAY = "yyyy-MM-dd-HH"

# strptime alone accepts unpadded fields such as "2024-5-1-3".
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}-\d{2}")


def parse_date(value: str, field_name: str = "date") -> datetime:
    """Parse ``value`` as a UTC instant, raising :class:`InvalidDateFormat`."""
    message = f"Invalid {field_name}={value}! Use Format {DATE_FORMAT_DISPLAY} for booking!"
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise InvalidDateFormat(message)
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        raise InvalidDateFormat(message) from exc
    return parsed.replace(tzinfo=timezone.utc)


def format_date(instant: datetime) -> str:
    if instant.tzinfo is not None:
        instant = instant.astimezone(timezone.utc)
    return instant.strftime(DATE_FORMAT)


def validate_date_range(start_date: str, end_date: str) -> Tuple[datetime, datetime]:
    """Return the normalized ``(start, end)`` pair for a booking period.

    Raises :class:`InvalidDateFormat` when either string is malformed and
    :class:`InvalidDateRange` when ``end`` is not strictly after ``start``.
    """
    start = parse_date(start_date, "start_date")
    end = parse_date(end_date, "end_date")
    if end <= start:
        raise InvalidDateRange()
    return start, end
