from __future__ import annotations

import logging
import math
from typing import Any, Callable, Optional, TypeVar

from ..cache import SingleFlight, WeatherCache
from ..entities import (
    CityQuery,
    CoordinateQuery,
    Coordinates,
    CurrentWeather,
    Forecast,
    LocationQuery,
    Units,
)
from ..errors import RateLimitError, UpstreamError, WeatherError
from ..health import HealthRegistry
from ..ratelimit import RateLimiter
from ..validation import normalize_city, validate_location, validate_units

T = TypeVar("T")


class WeatherService:
    """Validate, cache, coalesce and rate-limit calls to the weather provider.

    The cache, limiter and health registry are plain collaborators so that
    each instance (and each test) owns its own state.
    """

    CURRENT_TTL = 5 * 60
    FORECAST_TTL = 15 * 60
    GEOCODE_TTL = 24 * 60 * 60

    def __init__(
        self,
        *,
        provider: Any,
        cache: Optional[WeatherCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        health: Optional[HealthRegistry] = None,
        current_ttl: Optional[float] = None,
        forecast_ttl: Optional[float] = None,
        geocode_ttl: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.cache = cache if cache is not None else WeatherCache()
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self.health = health if health is not None else HealthRegistry()
        self.current_ttl = self.CURRENT_TTL if current_ttl is None else current_ttl
        self.forecast_ttl = self.FORECAST_TTL if forecast_ttl is None else forecast_ttl
        self.geocode_ttl = self.GEOCODE_TTL if geocode_ttl is None else geocode_ttl
        self._flights = SingleFlight()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def get_current(
        self,
        city: Optional[Any] = None,
        lat: Optional[Any] = None,
        lon: Optional[Any] = None,
        units: Optional[Any] = None,
    ) -> CurrentWeather:
        query = validate_location(city=city, lat=lat, lon=lon)
        unit = validate_units(units)
        key = self._cache_key("current", query, unit)
        return self._cached(
            key,
            self.current_ttl,
            "current",
            lambda coords: self.provider.fetch_current(coords, unit),
            query,
        )

    def get_forecast(
        self,
        city: Optional[Any] = None,
        lat: Optional[Any] = None,
        lon: Optional[Any] = None,
        units: Optional[Any] = None,
    ) -> Forecast:
        query = validate_location(city=city, lat=lat, lon=lon)
        unit = validate_units(units)
        key = self._cache_key("forecast", query, unit)
        return self._cached(
            key,
            self.forecast_ttl,
            "forecast",
            lambda coords: self.provider.fetch_forecast(coords, unit),
            query,
        )

    def geocode(self, city: Any) -> Coordinates:
        name = normalize_city(city)
        key = f"weather:geocode:{name.casefold()}"
        return self._cached(key, self.geocode_ttl, "geocode", self.provider.geocode, name)

    def stats(self) -> dict:
        self.health.set_cache_stats(self.cache.stats())
        payload = self.health.snapshot()
        payload["rate_limit"] = self.rate_limiter.snapshot()
        payload["in_flight"] = self._flights.in_flight()
        return payload

    # Helpers ------------------------------------------------------------
    def _resolve(self, target: Any) -> Any:
        if isinstance(target, CityQuery):
            return self.geocode(target.city)
        if isinstance(target, CoordinateQuery):
            return Coordinates(lat=target.lat, lon=target.lon)
        return target

    def _cached(
        self, key: str, ttl: float, operation: str, fetch: Callable[[Any], T], target: Any
    ) -> T:
        cached = self.cache.get(key)
        if cached is not None:
            self._log.debug("Cache hit for %s", key)
            return cached
        self._log.debug("Cache miss for %s", key)
        return self._flights.do(key, lambda: self._load(key, ttl, operation, fetch, target))

    def _load(
        self, key: str, ttl: float, operation: str, fetch: Callable[[Any], T], target: Any
    ) -> T:
        # a previous leader may have stored the value between our miss and now
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        # city queries go through the cached geocode lookup before taking a slot
        target = self._resolve(target)
        if not self.rate_limiter.try_acquire():
            self._log.warning("Upstream rate limit reached, rejecting %s", key)
            self.health.record_error(RateLimitError.kind)
            raise RateLimitError(
                detail="local upstream quota exhausted",
                retry_after=math.ceil(self.rate_limiter.retry_after()),
            )
        self.health.record_upstream_call(operation)
        try:
            result = fetch(target)
        except WeatherError as exc:
            self._log.warning("%s failed for %s: %s (%s)", operation, key, exc.kind.value, exc.detail)
            self.health.record_error(exc.kind)
            raise
        except Exception as exc:
            self._log.exception("Unexpected provider failure for %s", key)
            self.health.record_error(UpstreamError.kind)
            raise UpstreamError(detail=str(exc)) from exc
        self.cache.put(key, result, ttl)
        return result

    def _cache_key(self, operation: str, query: LocationQuery, units: Units) -> str:
        return f"weather:{operation}:{query.fingerprint()}:{units.value}"


__all__ = ["WeatherService"]
