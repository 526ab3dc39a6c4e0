"""In-memory counters for the operator stats endpoint.

Nothing here is persisted; the registry lives as long as the process and is
owned by the :class:`~weathercore.services.weather.WeatherService` instance.
"""
from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, Mapping, Optional

from .errors import ErrorKind


@dataclass(frozen=True)
class CacheStats:
    """Simple container for cache related counters."""

    hits: int = 0
    misses: int = 0
    keys: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "keys": self.keys}


class HealthRegistry:
    """Stores upstream call counters, error counters and cache stats."""

    def __init__(self) -> None:
        self._upstream_calls: Dict[str, int] = {}
        self._errors: Dict[str, int] = {}
        self._cache_stats: CacheStats = CacheStats()
        self._lock = Lock()

    # -- Upstream calls -----------------------------------------------------
    def record_upstream_call(self, operation: str) -> None:
        if not operation:
            raise ValueError("operation must be provided")
        with self._lock:
            self._upstream_calls[operation] = self._upstream_calls.get(operation, 0) + 1

    # -- Errors -------------------------------------------------------------
    def record_error(self, kind: ErrorKind, increment: int = 1) -> None:
        if increment <= 0:
            raise ValueError("increment must be positive")
        with self._lock:
            self._errors[kind.value] = self._errors.get(kind.value, 0) + increment

    # -- Cache stats --------------------------------------------------------
    def set_cache_stats(self, stats: Optional[Mapping[str, int]]) -> None:
        if not stats:
            self._cache_stats = CacheStats()
            return
        hits = int(stats.get("hits", 0))
        misses = int(stats.get("misses", 0))
        keys = int(stats.get("keys", 0))
        self._cache_stats = CacheStats(hits=hits, misses=misses, keys=keys)

    # -- Snapshot -----------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            calls = dict(self._upstream_calls)
            errors = dict(self._errors)
            cache = self._cache_stats.as_dict()
        return {"upstream_calls": calls, "errors": errors, "cache": cache}


__all__ = ["CacheStats", "HealthRegistry"]
