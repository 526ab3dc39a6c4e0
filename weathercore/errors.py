from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    LOCATION_NOT_FOUND = "LocationNotFoundError"
    RATE_LIMIT = "RateLimitError"
    SERVICE_AUTH = "ServiceAuthError"
    NETWORK = "NetworkError"
    UPSTREAM = "UpstreamError"


class WeatherError(RuntimeError):
    """Base error for every failure the pipeline can report.

    ``message`` is safe to show to end users. ``detail`` holds the internal
    reason (upstream status, parser complaint, ...) and is only meant for logs.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM
    status_code: int = 502
    default_message = "The weather service returned an unexpected response."

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.detail = detail or self.message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


class ValidationError(WeatherError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "Invalid location."


class LocationNotFoundError(WeatherError):
    kind = ErrorKind.LOCATION_NOT_FOUND
    status_code = 404
    default_message = "Location not found."


class RateLimitError(WeatherError):
    kind = ErrorKind.RATE_LIMIT
    status_code = 429
    default_message = "Too many requests to the weather service, please try again shortly."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        detail: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.retry_after = retry_after


class ServiceAuthError(WeatherError):
    kind = ErrorKind.SERVICE_AUTH
    status_code = 502
    default_message = "The weather service is temporarily unavailable."


class NetworkError(WeatherError):
    kind = ErrorKind.NETWORK
    status_code = 504
    default_message = "Could not reach the weather service, please try again later."


class UpstreamError(WeatherError):
    kind = ErrorKind.UPSTREAM
    status_code = 502


__all__ = [
    "ErrorKind",
    "WeatherError",
    "ValidationError",
    "LocationNotFoundError",
    "RateLimitError",
    "ServiceAuthError",
    "NetworkError",
    "UpstreamError",
]
