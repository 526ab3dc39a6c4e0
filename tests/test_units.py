from __future__ import annotations

import pytest

from weathercore.entities import Units
from weathercore.units import (
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
    mps_to_mph,
    temperature_from_celsius,
    wind_from_mps,
)


@pytest.mark.parametrize("celsius", [-273.15, -40.0, -17.5, 0.0, 11.5, 36.6, 100.0, 1e-9])
def test_celsius_fahrenheit_round_trip(celsius) -> None:
    assert fahrenheit_to_celsius(celsius_to_fahrenheit(celsius)) == pytest.approx(celsius, abs=1e-9)


def test_known_points() -> None:
    assert celsius_to_fahrenheit(0) == 32
    assert celsius_to_fahrenheit(100) == 212
    assert celsius_to_fahrenheit(-40) == -40
    assert mps_to_mph(10) == pytest.approx(22.369, rel=1e-4)


def test_output_conversion_follows_units() -> None:
    assert temperature_from_celsius(11.54, Units.CELSIUS) == 11.5
    assert temperature_from_celsius(11.5, Units.FAHRENHEIT) == 52.7
    assert temperature_from_celsius(None, Units.FAHRENHEIT) is None
    assert wind_from_mps(4.1, Units.CELSIUS) == 4.1
    assert wind_from_mps(4.1, Units.FAHRENHEIT) == 9.2
