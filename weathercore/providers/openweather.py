from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .base import WeatherProvider
from ..entities import Coordinates, CurrentWeather, Forecast, ForecastDay, Units
from ..errors import LocationNotFoundError, UpstreamError
from ..units import temperature_from_celsius, wind_from_mps

FORECAST_DAYS = 3
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MIDDAY_MINUTES = 12 * 60


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class OpenWeatherProvider(WeatherProvider):
    """Adapter for the OpenWeather current, 5 day / 3 hour and geocoding APIs.

    Requests are always made in metric units; conversion to Fahrenheit and
    miles per hour happens locally so one upstream payload shape is parsed.
    """

    name = "openweather"
    base_url = "https://api.openweathermap.org"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        now_func: Callable[[], datetime] = _utcnow,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = (base_url or self.base_url).rstrip("/")
        self._now = now_func
        self._log = logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def fetch_current(self, coords: Coordinates, units: Units) -> CurrentWeather:
        data = self._get("/data/2.5/weather", {"lat": coords.lat, "lon": coords.lon})
        self._check_found(data)
        main = _mapping(data.get("main"))
        wind = _mapping(data.get("wind"))
        temperature = _safe_float(main.get("temp"))
        if temperature is None:
            raise UpstreamError(detail="missing temperature")
        condition, icon = self._condition(data)
        sys_info = _mapping(data.get("sys"))
        return CurrentWeather(
            temperature=temperature_from_celsius(temperature, units),
            feels_like=temperature_from_celsius(_safe_float(main.get("feels_like")), units),
            condition=condition,
            icon=icon,
            humidity=_safe_float(main.get("humidity")),
            wind_speed=wind_from_mps(_safe_float(wind.get("speed")), units),
            wind_direction_deg=_safe_float(wind.get("deg")),
            units=units,
            observed_at=self._parse_timestamp(data.get("dt")),
            location=Coordinates(
                lat=coords.lat,
                lon=coords.lon,
                name=data.get("name") or coords.name,
                country=sys_info.get("country") or coords.country,
            ),
        )

    def fetch_forecast(self, coords: Coordinates, units: Units) -> Forecast:
        data = self._get("/data/2.5/forecast", {"lat": coords.lat, "lon": coords.lon})
        self._check_found(data)
        entries = data.get("list")
        if not isinstance(entries, list) or not entries:
            raise UpstreamError(detail="missing forecast list")
        city = _mapping(data.get("city"))
        offset = timedelta(seconds=int(_safe_float(city.get("timezone")) or 0))
        days = self._aggregate_days(entries, offset, units)
        return Forecast(
            days=tuple(days),
            units=units,
            location=Coordinates(
                lat=coords.lat,
                lon=coords.lon,
                name=city.get("name") or coords.name,
                country=city.get("country") or coords.country,
            ),
        )

    def geocode(self, city: str) -> Coordinates:
        data = self._get("/geo/1.0/direct", {"q": city, "limit": 1})
        if not isinstance(data, list):
            raise UpstreamError(detail="unexpected geocoding payload")
        if not data:
            raise LocationNotFoundError(detail=f"no geocoding match for {city!r}")
        match = _mapping(data[0])
        lat = _safe_float(match.get("lat"))
        lon = _safe_float(match.get("lon"))
        if lat is None or lon is None:
            raise UpstreamError(detail="geocoding result without coordinates")
        return Coordinates(lat=lat, lon=lon, name=match.get("name"), country=match.get("country"))

    # helpers ------------------------------------------------------------
    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        query = dict(params, appid=self.api_key)
        if path.startswith("/data/"):
            query["units"] = "metric"
        response = self._request("GET", f"{self.base_url}{path}", params=query)
        return self._json(response)

    def _check_found(self, data: Any) -> None:
        if not isinstance(data, dict):
            raise UpstreamError(detail="unexpected payload type")
        cod = str(data.get("cod", "200"))
        message = str(data.get("message", "")).lower()
        if cod == "404" or "city not found" in message:
            raise LocationNotFoundError(detail=message or "cod 404")

    def _condition(self, item: Mapping[str, Any]) -> Tuple[str, str]:
        weather = item.get("weather")
        if not isinstance(weather, list) or not weather:
            raise UpstreamError(detail="missing weather condition")
        first = _mapping(weather[0])
        description = first.get("description") or first.get("main")
        icon = first.get("icon")
        if not description or not icon:
            raise UpstreamError(detail="incomplete weather condition")
        return str(description), str(icon)

    def _aggregate_days(
        self, entries: List[Any], offset: timedelta, units: Units
    ) -> List[ForecastDay]:
        today = (self._now().astimezone(timezone.utc) + offset).date()
        buckets: Dict[date, List[Tuple[datetime, Mapping[str, Any]]]] = defaultdict(list)
        for raw in entries:
            item = _mapping(raw)
            if item.get("dt") is None:
                continue
            local = self._parse_timestamp(item.get("dt")) + offset
            if local.date() <= today:
                continue
            buckets[local.date()].append((local, item))

        selected = sorted(buckets)[:FORECAST_DAYS]
        if len(selected) < FORECAST_DAYS:
            raise UpstreamError(detail=f"forecast covers only {len(selected)} future days")

        days: List[ForecastDay] = []
        for day in selected:
            samples = buckets[day]
            lows: List[float] = []
            highs: List[float] = []
            for _, item in samples:
                main = _mapping(item.get("main"))
                temp = _safe_float(main.get("temp"))
                low = _safe_float(main.get("temp_min"))
                high = _safe_float(main.get("temp_max"))
                low = low if low is not None else temp
                high = high if high is not None else temp
                if low is not None:
                    lows.append(low)
                if high is not None:
                    highs.append(high)
            if not lows or not highs:
                raise UpstreamError(detail=f"no temperatures for {day.isoformat()}")
            low, high = sorted((min(lows), max(highs)))
            _, midday = min(samples, key=lambda sample: (_minutes_from_midday(sample[0]), sample[0]))
            condition, icon = self._condition(midday)
            days.append(
                ForecastDay(
                    date=day.isoformat(),
                    label=_WEEKDAYS[day.weekday()],
                    temp_min=temperature_from_celsius(low, units),
                    temp_max=temperature_from_celsius(high, units),
                    condition=condition,
                    icon=icon,
                )
            )
        return days

    def _parse_timestamp(self, value: Any) -> datetime:
        seconds = _safe_float(value)
        if seconds is None:
            return self._now()
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc)


def _minutes_from_midday(moment: datetime) -> int:
    return abs(moment.hour * 60 + moment.minute - _MIDDAY_MINUTES)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, dict) else {}


def _safe_float(value: Optional[object]) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


__all__ = ["OpenWeatherProvider", "FORECAST_DAYS"]
