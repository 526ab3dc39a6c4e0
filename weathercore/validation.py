"""Input validation for location and unit parameters.

Every check here runs before the cache or the provider is touched. The
reason a location was rejected is kept on ``ValidationError.detail`` for the
logs, while the message shown to callers is always the generic one.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional

from .entities import CityQuery, CoordinateQuery, LocationQuery, Units
from .errors import ValidationError

logger = logging.getLogger(__name__)

MAX_CITY_LENGTH = 100
COORDINATE_PRECISION = 4

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_WHITESPACE = re.compile(r"\s+")

_UNIT_ALIASES = {
    "celsius": Units.CELSIUS,
    "c": Units.CELSIUS,
    "metric": Units.CELSIUS,
    "fahrenheit": Units.FAHRENHEIT,
    "f": Units.FAHRENHEIT,
    "imperial": Units.FAHRENHEIT,
}


def _reject(detail: str) -> ValidationError:
    logger.debug("Rejected location: %s", detail)
    return ValidationError(detail=detail)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_city(value: Any) -> str:
    if not isinstance(value, str):
        raise _reject("city must be a string")
    cleaned = _CONTROL_CHARS.sub(" ", value)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if not cleaned:
        raise _reject("city is empty")
    if len(cleaned) > MAX_CITY_LENGTH:
        raise _reject(f"city longer than {MAX_CITY_LENGTH} characters")
    return cleaned


def _parse_coordinate(value: Any, name: str, bound: float) -> float:
    if isinstance(value, bool):
        raise _reject(f"invalid coordinate format for {name}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise _reject(f"invalid coordinate format for {name}") from None
    if not math.isfinite(number):
        raise _reject(f"invalid coordinate format for {name}")
    if not -bound <= number <= bound:
        raise _reject(f"{name} out of range")
    # adding 0.0 folds -0.0 into 0.0 so both produce the same fingerprint
    return round(number, COORDINATE_PRECISION) + 0.0


def validate_location(
    city: Optional[Any] = None,
    lat: Optional[Any] = None,
    lon: Optional[Any] = None,
) -> LocationQuery:
    has_city = not _is_blank(city)
    has_lat = not _is_blank(lat)
    has_lon = not _is_blank(lon)

    if city is not None and (has_lat or has_lon):
        raise _reject("both city and coordinates supplied")
    if has_city:
        return CityQuery(city=normalize_city(city))
    if city is not None:
        raise _reject("city is empty")
    if not has_lat and not has_lon:
        raise _reject("no location supplied")
    if not (has_lat and has_lon):
        raise _reject("both latitude and longitude are required")
    return CoordinateQuery(
        lat=_parse_coordinate(lat, "latitude", 90.0),
        lon=_parse_coordinate(lon, "longitude", 180.0),
    )


def validate_units(value: Optional[Any]) -> Units:
    if isinstance(value, Units):
        return value
    if _is_blank(value) or not isinstance(value, str):
        return Units.CELSIUS
    units = _UNIT_ALIASES.get(value.strip().lower())
    if units is None:
        logger.debug("Unknown units %r, defaulting to celsius", value)
        return Units.CELSIUS
    return units


__all__ = ["MAX_CITY_LENGTH", "normalize_city", "validate_location", "validate_units"]
