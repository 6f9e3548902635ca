"""Request checks for the statistics endpoints."""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum

from .errors import ValidationError

VALID_PERIODS = ("7d", "30d", "90d", "180d", "365d", "1y")
DEFAULT_PERIOD = "30d"
DATE_FORMAT = "%Y-%m-%d"
INVALID_DATE_MESSAGE = "Invalid date format. Use YYYY-MM-DD"

_DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}")


class MapLevel(Enum):
    """Which administrative level a report map is aggregated at."""

    ALL_REGENCIES = "regency"
    DISTRICT = "district"
    VILLAGE = "village"


def validate_period(period: str | None) -> str:
    """Return the period (default 30d), raising ValidationError if unsupported."""
    if not period:
        return DEFAULT_PERIOD
    if period not in VALID_PERIODS:
        raise ValidationError(
            "period",
            "Invalid period. Supported periods: " + ", ".join(VALID_PERIODS),
        )
    return period


def parse_optional_date(value: str | None, field: str) -> date | None:
    """Parse a YYYY-MM-DD value; empty gives None, a bad value raises ValidationError."""
    if not value:
        return None
    if not _DATE_SHAPE.fullmatch(value):
        raise ValidationError(field, INVALID_DATE_MESSAGE)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(field, INVALID_DATE_MESSAGE) from None


def summary_range(
    start_date: str | None,
    end_date: str | None,
    is_login: bool | None,
    today: date | None = None,
) -> tuple[date, date]:
    """Resolve the summary date range.

    Missing dates default to today, and a caller known to be logged out
    always gets today only. The end may not precede the start.
    """
    today = today or date.today()
    logged_out = is_login is False
    start = today if logged_out else parse_optional_date(start_date, "start_date") or today
    end = today if logged_out else parse_optional_date(end_date, "end_date") or today
    if start > end:
        raise ValidationError("end_date", "End date must not be before start date")
    return start, end


def map_level(regency_id: str | None, district_id: str | None) -> MapLevel:
    """Pick the map level: a regency wins over a district; neither gives all regencies."""
    if regency_id:
        return MapLevel.DISTRICT
    if district_id:
        return MapLevel.VILLAGE
    return MapLevel.ALL_REGENCIES