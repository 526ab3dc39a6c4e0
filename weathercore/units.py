from __future__ import annotations

from typing import Optional

from .entities import Units

_MPS_TO_MPH = 2.2369362920544


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32) * 5 / 9


def mps_to_mph(value: float) -> float:
    return value * _MPS_TO_MPH


def temperature_from_celsius(value: Optional[float], units: Units) -> Optional[float]:
    """Express a Celsius reading in ``units``, rounded to one decimal."""
    if value is None:
        return None
    if units is Units.FAHRENHEIT:
        value = celsius_to_fahrenheit(value)
    return round(value, 1)


def wind_from_mps(value: Optional[float], units: Units) -> Optional[float]:
    if value is None:
        return None
    if units is Units.FAHRENHEIT:
        value = mps_to_mph(value)
    return round(value, 1)


__all__ = [
    "celsius_to_fahrenheit",
    "fahrenheit_to_celsius",
    "mps_to_mph",
    "temperature_from_celsius",
    "wind_from_mps",
]
