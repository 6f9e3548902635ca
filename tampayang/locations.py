"""Administrative locations: types, request checks and list-query parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from .errors import ValidationError

INVALID_TYPE_MESSAGE = "Invalid location type. Use: province, regency, district, village"
TYPE_REQUIRED_MESSAGE = "Location type is required"
ID_REQUIRED_MESSAGE = "Location ID is required"
PARAMETER_REQUIRED_MESSAGE = "A required query parameter is missing"

_INTEGER = re.compile(r"[+-]?[0-9]+")
_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class LocationType(Enum):
    """The four administrative levels, from largest to smallest."""

    PROVINCE = "province"
    REGENCY = "regency"
    DISTRICT = "district"
    VILLAGE = "village"


@dataclass(frozen=True)
class CreateLocationRequest:
    """The fields needed to create a location at any level."""

    type: LocationType
    name: str
    parent_id: str | None = None
    regency_type: str | None = None
    village_type: str | None = None


@dataclass(frozen=True)
class LocationListRequest:
    """Paging, filtering and sorting options for a location listing."""

    page: int = 1
    limit: int = 10
    type: LocationType | None = None
    parent_id: str = ""
    search: str = ""
    sort_by: str = "name"
    sort_order: str = "asc"
    is_active: bool | None = None


def parse_location_type(value: str | None) -> LocationType:
    """Return the location type named by ``value``, raising ValidationError otherwise."""
    if not value:
        raise ValidationError("type", TYPE_REQUIRED_MESSAGE)
    try:
        return LocationType(value)
    except ValueError:
        raise ValidationError("type", INVALID_TYPE_MESSAGE) from None


def validate_location_requirements(request: CreateLocationRequest) -> None:
    """Check the parent and sub-type fields each location level requires."""

    def fail(message: str) -> None:
        raise ValidationError("location_type", message)

    kind = request.type
    if kind is LocationType.PROVINCE:
        if request.parent_id is not None:
            fail("province should not have parent_id")
    elif kind is LocationType.REGENCY:
        if request.parent_id is None:
            fail("regency requires parent_id (province_id)")
        if request.regency_type is None:
            fail("regency requires regency_type (kabupaten or kota)")
    elif kind is LocationType.DISTRICT:
        if request.parent_id is None:
            fail("district requires parent_id (regency_id)")
    elif kind is LocationType.VILLAGE:
        if request.parent_id is None:
            fail("village requires parent_id (district_id)")
        if request.village_type is None:
            fail("village requires village_type (desa or kelurahan)")


def _query(query: Mapping[str, str], key: str, default: str) -> str:
    return query.get(key) or default


def _to_int(text: str) -> int:
    return int(text) if _INTEGER.fullmatch(text) else 0


def _to_bool(text: str) -> bool | None:
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def parse_location_list_query(query: Mapping[str, str]) -> LocationListRequest:
    """Build a listing request from query parameters.

    Missing or empty values take their defaults; a page or limit that is not
    an integer becomes 0, and an unrecognised is_active value is ignored.
    An unknown type raises ValidationError.
    """
    type_text = query.get("type") or ""
    location_type = None
    if type_text:
        try:
            location_type = LocationType(type_text)
        except ValueError:
            raise ValidationError("type", INVALID_TYPE_MESSAGE) from None
    return LocationListRequest(
        page=_to_int(_query(query, "page", "1")),
        limit=_to_int(_query(query, "limit", "10")),
        type=location_type,
        parent_id=_query(query, "parent_id", ""),
        search=_query(query, "search", ""),
        sort_by=_query(query, "sort_by", "name"),
        sort_order=_query(query, "sort_order", "asc"),
        is_active=_to_bool(query.get("is_active") or ""),
    )


def require_location_ref(
    location_id: str | None, type_param: str | None
) -> tuple[str, LocationType]:
    """Check an id and type pair that addresses one location."""
    if not location_id:
        raise ValidationError("id", ID_REQUIRED_MESSAGE)
    return location_id, parse_location_type(type_param)


def require_query_param(value: str | None, code: str) -> str:
    """Return ``value``, raising ValidationError tagged with ``code`` if it is empty."""
    if not value:
        raise ValidationError(code, PARAMETER_REQUIRED_MESSAGE)
    return value


def resolve_province_id(province_id: str | None, default_province_id: str) -> str:
    """Return the requested province, or the default one when none is given."""
    return province_id or default_province_id