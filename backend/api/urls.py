"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import CurrentWeatherView, ForecastView, GeocodeView, StatsView

urlpatterns = [
    path("weather/current", CurrentWeatherView.as_view(), name="weather-current"),
    path("weather/forecast", ForecastView.as_view(), name="weather-forecast"),
    path("weather/geocode", GeocodeView.as_view(), name="weather-geocode"),
    path("admin/stats", StatsView.as_view(), name="admin-stats"),
]
