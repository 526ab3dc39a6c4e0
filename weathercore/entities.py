from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class Units(str, Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def temperature_symbol(self) -> str:
        return "C" if self is Units.CELSIUS else "F"

    @property
    def wind_speed_unit(self) -> str:
        return "m/s" if self is Units.CELSIUS else "mph"


@dataclass(frozen=True)
class CityQuery:
    city: str

    def fingerprint(self) -> str:
        return f"city:{self.city.casefold()}"


@dataclass(frozen=True)
class CoordinateQuery:
    lat: float
    lon: float

    def fingerprint(self) -> str:
        return f"coord:{self.lat:.4f}:{self.lon:.4f}"


LocationQuery = Union[CityQuery, CoordinateQuery]


@dataclass(frozen=True)
class Coordinates:
    """Geocoding result; ``name``/``country`` are filled when the provider knows them."""

    lat: float
    lon: float
    name: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"lat": self.lat, "lon": self.lon}
        if self.name is not None:
            payload["name"] = self.name
        if self.country is not None:
            payload["country"] = self.country
        return payload


@dataclass(frozen=True)
class CurrentWeather:
    """Normalized current conditions.

    Temperatures are expressed in ``units`` (Celsius or Fahrenheit), wind
    speed in metres per second for Celsius and miles per hour for Fahrenheit.
    """

    temperature: float
    feels_like: Optional[float]
    condition: str
    icon: str
    humidity: Optional[float]
    wind_speed: Optional[float]
    wind_direction_deg: Optional[float]
    units: Units
    observed_at: datetime
    location: Coordinates

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "feels_like": self.feels_like,
            "condition": self.condition,
            "icon": self.icon,
            "humidity": self.humidity,
            "wind": {
                "speed": self.wind_speed,
                "direction_deg": self.wind_direction_deg,
                "unit": self.units.wind_speed_unit,
            },
            "units": self.units.value,
            "observed_at": _isoformat(self.observed_at),
            "location": self.location.to_dict(),
        }


@dataclass(frozen=True)
class ForecastDay:
    date: str
    label: str
    temp_min: float
    temp_max: float
    condition: str
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "label": self.label,
            "temp_min": self.temp_min,
            "temp_max": self.temp_max,
            "condition": self.condition,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class Forecast:
    days: Tuple[ForecastDay, ...]
    units: Units
    location: Coordinates

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days": [day.to_dict() for day in self.days],
            "units": self.units.value,
            "location": self.location.to_dict(),
        }


WeatherResult = Union[CurrentWeather, Forecast, Coordinates]


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


__all__ = [
    "Units",
    "CityQuery",
    "CoordinateQuery",
    "LocationQuery",
    "Coordinates",
    "CurrentWeather",
    "ForecastDay",
    "Forecast",
    "WeatherResult",
]
