from __future__ import annotations

import pytest

from weathercore.entities import CityQuery, CoordinateQuery, Units
from weathercore.errors import ErrorKind, ValidationError
from weathercore.validation import MAX_CITY_LENGTH, validate_location, validate_units


@pytest.mark.parametrize(
    "lat, lon",
    [
        (0, 0),
        (90, 180),
        (-90, -180),
        (51.5074, -0.1278),
        ("-33.8688", "151.2093"),
        (" 40.7128 ", "-74.0060"),
    ],
)
def test_accepts_coordinates_in_range(lat, lon) -> None:
    query = validate_location(lat=lat, lon=lon)

    assert isinstance(query, CoordinateQuery)
    assert query.lat == pytest.approx(float(lat), abs=1e-4)
    assert query.lon == pytest.approx(float(lon), abs=1e-4)


@pytest.mark.parametrize(
    "lat, lon, reason",
    [
        (90.0001, 0, "latitude out of range"),
        (-91, 0, "latitude out of range"),
        (0, 180.5, "longitude out of range"),
        (0, -1000, "longitude out of range"),
        ("abc", 0, "invalid coordinate format for latitude"),
        (0, "nan", "invalid coordinate format for longitude"),
        ("inf", 0, "invalid coordinate format for latitude"),
        (True, 0, "invalid coordinate format for latitude"),
    ],
)
def test_rejects_bad_coordinates_with_generic_message(lat, lon, reason) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_location(lat=lat, lon=lon)

    assert excinfo.value.detail == reason
    assert excinfo.value.message == "Invalid location."
    assert excinfo.value.kind is ErrorKind.VALIDATION


def test_requires_both_coordinates() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_location(lat=10)
    assert "both latitude and longitude" in excinfo.value.detail


def test_rejects_missing_location() -> None:
    with pytest.raises(ValidationError):
        validate_location()


def test_city_and_coordinates_are_mutually_exclusive() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_location(city="London", lat=51.5, lon=-0.1)
    assert excinfo.value.detail == "both city and coordinates supplied"


@pytest.mark.parametrize("city", ["", " "])
def test_blank_city_next_to_coordinates_is_rejected(city) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_location(city=city, lat=1, lon=1)
    assert excinfo.value.detail == "both city and coordinates supplied"


@pytest.mark.parametrize("city", ["", " ", "   \t", "\n\r", "\x00\x07 "])
def test_rejects_empty_or_whitespace_city(city) -> None:
    with pytest.raises(ValidationError):
        validate_location(city=city)


def test_rejects_overlong_city() -> None:
    with pytest.raises(ValidationError):
        validate_location(city="x" * (MAX_CITY_LENGTH + 1))

    assert validate_location(city="x" * MAX_CITY_LENGTH) == CityQuery(city="x" * MAX_CITY_LENGTH)


def test_city_is_sanitized() -> None:
    query = validate_location(city="  New\x00 York\t City \n")

    assert query == CityQuery(city="New York City")


def test_equal_queries_share_a_fingerprint() -> None:
    assert validate_location(lat="51.50740", lon="-0.12780").fingerprint() == validate_location(
        lat=51.507401, lon=-0.127799
    ).fingerprint()
    assert validate_location(lat="-0.00001", lon=0).fingerprint() == validate_location(lat=0, lon=0).fingerprint()
    assert validate_location(city="LONDON").fingerprint() == validate_location(city=" london ").fingerprint()


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, Units.CELSIUS),
        ("", Units.CELSIUS),
        ("celsius", Units.CELSIUS),
        ("metric", Units.CELSIUS),
        ("Fahrenheit", Units.FAHRENHEIT),
        ("F", Units.FAHRENHEIT),
        ("imperial", Units.FAHRENHEIT),
        ("kelvin", Units.CELSIUS),
        (Units.FAHRENHEIT, Units.FAHRENHEIT),
    ],
)
def test_units(value, expected) -> None:
    assert validate_units(value) is expected
