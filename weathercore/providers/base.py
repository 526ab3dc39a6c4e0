from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from requests import Response

from ..errors import (
    LocationNotFoundError,
    NetworkError,
    RateLimitError,
    ServiceAuthError,
    UpstreamError,
)


@dataclass
class RequestConfig:
    timeout: float = 5.0
    retries: int = 1
    backoff: float = 0.3


class WeatherProvider:
    """Base class for HTTP providers: timeouts, one network retry, error mapping.

    Subclasses only ever see a decoded JSON payload or one of the
    :mod:`weathercore.errors` exceptions; ``requests`` exceptions and raw
    upstream bodies never leave this class.
    """

    name = "provider"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._sleep = sleep
        self._log = logging.getLogger(self.__class__.__name__)

    def _handle_response(self, response: Response) -> Response:
        status = response.status_code
        if status < 400:
            return response
        body = response.text[:200]
        if status in (401, 403):
            self._log.error("Provider rejected credentials (%s): %s", status, body)
            raise ServiceAuthError(detail=f"HTTP {status}")
        if status == 404:
            self._log.info("Provider reported location not found: %s", body)
            raise LocationNotFoundError(detail=f"HTTP {status}")
        if status == 429:
            self._log.warning("Quota exceeded: %s", body)
            raise RateLimitError(detail=f"HTTP {status}")
        if status >= 500:
            self._log.warning("Provider returned %s: %s", status, body)
            raise NetworkError(detail=f"HTTP {status}")
        self._log.error("Provider returned unexpected %s: %s", status, body)
        raise UpstreamError(detail=f"HTTP {status}")

    def _request(self, method: str, url: str, **kwargs) -> Response:
        attempt = 0
        while True:
            attempt += 1
            try:
                return self._send(method, url, **kwargs)
            except NetworkError as exc:
                if attempt > self.request_config.retries:
                    raise
                delay = self.request_config.backoff * attempt
                self._log.info("Retrying after network failure (%s) in %.2fs", exc.detail, delay)
                self._sleep(delay)

    def _send(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.warning("Request timed out", exc_info=exc)
            raise NetworkError(detail="timeout") from exc
        except requests.ConnectionError as exc:
            self._log.warning("Connection failed", exc_info=exc)
            raise NetworkError(detail="connection failed") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise UpstreamError(detail="request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise UpstreamError(detail="invalid json") from exc


__all__ = ["WeatherProvider", "RequestConfig"]
