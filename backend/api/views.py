"""REST API views for weather information."""
from __future__ import annotations

from functools import lru_cache

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from weathercore.cache import WeatherCache
from weathercore.providers.base import RequestConfig
from weathercore.providers.openweather import OpenWeatherProvider
from weathercore.ratelimit import RateLimiter
from weathercore.services.weather import WeatherService


@lru_cache(maxsize=1)
def get_weather_service() -> WeatherService:
    provider = OpenWeatherProvider(
        api_key=settings.OPENWEATHER_API_KEY,
        base_url=settings.OPENWEATHER_BASE_URL,
        request_config=RequestConfig(timeout=settings.OPENWEATHER_TIMEOUT),
    )
    return WeatherService(
        provider=provider,
        cache=WeatherCache(max_entries=settings.WEATHER_CACHE_MAX_ENTRIES),
        rate_limiter=RateLimiter(
            limit=settings.UPSTREAM_RATE_LIMIT,
            window=settings.UPSTREAM_RATE_WINDOW,
        ),
        current_ttl=settings.WEATHER_CURRENT_TTL,
        forecast_ttl=settings.WEATHER_FORECAST_TTL,
        geocode_ttl=settings.WEATHER_GEOCODE_TTL,
    )


def _location_params(request) -> dict:
    params = request.query_params
    return {
        "city": params.get("city"),
        "lat": params.get("lat"),
        "lon": params.get("lon"),
        "units": params.get("units"),
    }


class CurrentWeatherView(APIView):
    """Current conditions for ``lat``/``lon`` or ``city``."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        result = get_weather_service().get_current(**_location_params(request))
        return Response(result.to_dict(), status=status.HTTP_200_OK)


class ForecastView(APIView):
    """Three day forecast for ``lat``/``lon`` or ``city``."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        result = get_weather_service().get_forecast(**_location_params(request))
        return Response(result.to_dict(), status=status.HTTP_200_OK)


class GeocodeView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        result = get_weather_service().geocode(request.query_params.get("city"))
        return Response(result.to_dict(), status=status.HTTP_200_OK)


class StatsView(APIView):
    """Cache, rate-limit and upstream error counters for operators."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        return Response(get_weather_service().stats(), status=status.HTTP_200_OK)


class HealthView(APIView):
    """Liveness probe; never touches the provider or the cache."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        return Response({"status": "ok"}, status=status.HTTP_200_OK)
