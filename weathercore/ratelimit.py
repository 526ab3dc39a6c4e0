from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class RateLimitWindow:
    window_start: float
    count: int
    limit: int
    window: float

    def elapsed(self, now: float) -> bool:
        return now - self.window_start >= self.window


class RateLimiter:
    """Fixed-window counter bounding outbound calls to the provider."""

    def __init__(self, limit: int = 60, window: float = 60.0, time_func=time.monotonic) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window <= 0:
            raise ValueError("window must be positive")
        self._time_func = time_func
        self._lock = threading.Lock()
        self._window = RateLimitWindow(window_start=time_func(), count=0, limit=limit, window=window)
        self._denied = 0

    def try_acquire(self) -> bool:
        with self._lock:
            self._roll(self._time_func())
            if self._window.count >= self._window.limit:
                self._denied += 1
                return False
            self._window.count += 1
            return True

    def remaining(self) -> int:
        with self._lock:
            self._roll(self._time_func())
            return self._window.limit - self._window.count

    def retry_after(self) -> float:
        """Seconds until the current window resets."""
        with self._lock:
            now = self._time_func()
            self._roll(now)
            return max(0.0, self._window.window_start + self._window.window - now)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            self._roll(self._time_func())
            return {
                "limit": self._window.limit,
                "window_seconds": self._window.window,
                "used": self._window.count,
                "denied": self._denied,
            }

    def _roll(self, now: float) -> None:
        if self._window.elapsed(now):
            self._window.window_start = now
            self._window.count = 0


__all__ = ["RateLimitWindow", "RateLimiter"]
