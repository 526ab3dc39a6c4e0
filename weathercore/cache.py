from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    inserted_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.inserted_at > self.ttl

    @property
    def expires_at(self) -> float:
        return self.inserted_at + self.ttl


class WeatherCache:
    """Thread-safe in-memory TTL cache.

    Expired entries are dropped lazily on read. When ``max_entries`` is set
    and the cache is full, expired entries are purged first and then the
    entry closest to expiry is evicted.
    """

    def __init__(self, time_func=time.monotonic, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._time_func = time_func
        self._max_entries = max_entries
        self._storage: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._storage.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.expired(self._time_func()):
                self._storage.pop(key, None)
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def put(self, key: str, value: Any, ttl: float) -> None:
        with self._lock:
            now = self._time_func()
            if self._max_entries is not None and key not in self._storage:
                self._make_room(now)
            self._storage[key] = CacheEntry(value=value, inserted_at=now, ttl=ttl)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "keys": len(self._storage)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def _make_room(self, now: float) -> None:
        if len(self._storage) < self._max_entries:
            return
        for key in [k for k, entry in self._storage.items() if entry.expired(now)]:
            del self._storage[key]
        while len(self._storage) >= self._max_entries:
            victim = min(self._storage, key=lambda k: self._storage[k].expires_at)
            logger.debug("Cache full, evicting %s", victim)
            del self._storage[victim]


@dataclass
class _Call:
    future: Future
    waiters: int = 0


class SingleFlight:
    """Coalesce concurrent calls for the same key into one execution.

    The first caller for a key runs ``fn``; callers arriving while it is in
    flight wait on the same future and get the same value or exception.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: Dict[str, _Call] = {}

    def do(self, key: str, fn: Callable[[], T]) -> T:
        with self._lock:
            call = self._calls.get(key)
            leader = call is None
            if leader:
                call = self._calls[key] = _Call(future=Future())
            else:
                call.waiters += 1
        if not leader:
            logger.debug("Joining in-flight call for %s", key)
            return call.future.result()

        try:
            result = fn()
        except BaseException as exc:
            self._finish(key)
            call.future.set_exception(exc)
            raise
        self._finish(key)
        call.future.set_result(result)
        return result

    def in_flight(self) -> int:
        with self._lock:
            return len(self._calls)

    def waiters(self, key: str) -> int:
        """Number of callers currently parked on the in-flight call for ``key``."""
        with self._lock:
            call = self._calls.get(key)
            return call.waiters if call is not None else 0

    def _finish(self, key: str) -> None:
        with self._lock:
            self._calls.pop(key, None)


__all__ = ["CacheEntry", "WeatherCache", "SingleFlight"]
