from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from weathercore.entities import Coordinates, CurrentWeather, Forecast, ForecastDay, Units
from weathercore.errors import LocationNotFoundError


NOW = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


def wait_for(predicate, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        time.sleep(0.001)


class TimeController:
    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class FakeProvider:
    """In-memory provider recording every upstream call it receives."""

    name = "fake"

    def __init__(self, gate: Optional[threading.Event] = None) -> None:
        self.calls: List[tuple] = []
        self.errors: Dict[str, Exception] = {}
        self.places: Dict[str, Coordinates] = {"london": Coordinates(lat=51.5074, lon=-0.1278, name="London")}
        self._gate = gate
        self._lock = threading.Lock()

    def _record(self, *call: Any) -> None:
        with self._lock:
            self.calls.append(call)
        if self._gate is not None:
            self._gate.wait(timeout=5)
        error = self.errors.get(call[0])
        if error is not None:
            raise error

    def fetch_current(self, coords: Coordinates, units: Units) -> CurrentWeather:
        self._record("current", coords.lat, coords.lon, units)
        return CurrentWeather(
            temperature=11.5 if units is Units.CELSIUS else 52.7,
            feels_like=None,
            condition="light rain",
            icon="10d",
            humidity=81.0,
            wind_speed=4.1,
            wind_direction_deg=240.0,
            units=units,
            observed_at=NOW,
            location=coords,
        )

    def fetch_forecast(self, coords: Coordinates, units: Units) -> Forecast:
        self._record("forecast", coords.lat, coords.lon, units)
        days = tuple(
            ForecastDay(
                date=f"2024-01-1{offset}",
                label=label,
                temp_min=2.0 + offset,
                temp_max=8.0 + offset,
                condition="overcast clouds",
                icon="04d",
            )
            for offset, label in ((1, "Thu"), (2, "Fri"), (3, "Sat"))
        )
        return Forecast(days=days, units=units, location=coords)

    def geocode(self, city: str) -> Coordinates:
        self._record("geocode", city)
        try:
            return self.places[city.casefold()]
        except KeyError:
            raise LocationNotFoundError(detail=f"unknown city {city}") from None


def current_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "coord": {"lon": -0.1278, "lat": 51.5074},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "main": {"temp": 11.5, "feels_like": 10.9, "humidity": 81},
        "wind": {"speed": 4.1, "deg": 240},
        "dt": int(NOW.timestamp()),
        "sys": {"country": "GB"},
        "timezone": 0,
        "name": "London",
        "cod": 200,
    }
    payload.update(overrides)
    return payload


def forecast_payload(start: datetime = NOW + timedelta(hours=3), count: int = 40, tz_offset: int = 0) -> Dict[str, Any]:
    entries = []
    for index in range(count):
        moment = start + timedelta(hours=3 * index)
        local_hour = (moment + timedelta(seconds=tz_offset)).hour
        midday = local_hour == 12
        entries.append(
            {
                "dt": int(moment.timestamp()),
                "main": {
                    "temp": 5.0 + local_hour / 3,
                    "temp_min": 4.0 + local_hour / 3,
                    "temp_max": 6.0 + local_hour / 3,
                },
                "weather": [
                    {
                        "description": "clear sky" if midday else "scattered clouds",
                        "icon": "01d" if midday else "03n",
                    }
                ],
                "dt_txt": moment.strftime("%Y-%m-%d %H:%M:%S"),
            }
        )
    return {
        "cod": "200",
        "list": entries,
        "city": {"name": "London", "country": "GB", "timezone": tz_offset, "coord": {"lat": 51.5074, "lon": -0.1278}},
    }
