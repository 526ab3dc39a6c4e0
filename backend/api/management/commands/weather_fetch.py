"""Management command to fetch weather using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from backend.api import views
from weathercore.errors import WeatherError


class Command(BaseCommand):
    help = "Fetch current weather (or the 3 day forecast) for a city or coordinates"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--lat", type=float, help="Latitude")
        parser.add_argument("--lon", type=float, help="Longitude")
        parser.add_argument("--city", type=str, help="City name")
        parser.add_argument("--units", type=str, default="celsius", help="celsius or fahrenheit")
        parser.add_argument("--forecast", action="store_true", help="Print the 3 day forecast")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        service = views.get_weather_service()
        fetch = service.get_forecast if options.get("forecast") else service.get_current
        try:
            result = fetch(
                city=options.get("city"),
                lat=options.get("lat"),
                lon=options.get("lon"),
                units=options.get("units"),
            )
        except WeatherError as exc:
            raise CommandError(f"{exc.kind.value}: {exc.message}") from exc

        self.stdout.write(json.dumps(result.to_dict()))
