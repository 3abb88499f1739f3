"""
Crudforge Rate Limit - Fixed-window request counter

Counts requests per client address and path inside one process. The table
is bounded: expired windows are dropped and, past capacity, the oldest
window is evicted first. Counts are not shared between processes.
"""

from __future__ import annotations

import math
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_LIMIT = 100
DEFAULT_WINDOW = 60.0
DEFAULT_CAPACITY = 10_000


@dataclass(frozen=True)
class RateLimitExceeded:
    """Returned instead of None once a key passes its limit."""

    key: str
    limit: int
    retry_after: int  # whole seconds until the window resets

    status: int = 429
    error: str = "Too many requests"

    def to_dict(self) -> dict:
        return {"error": self.error, "retryAfter": self.retry_after}


@dataclass
class _Window:
    count: int
    reset_at: float


def client_address(forwarded_for: str | None) -> str:
    """First hop of an X-Forwarded-For header, 'unknown' when absent."""
    if not forwarded_for:
        return "unknown"
    first = forwarded_for.split(",")[0].strip()
    return first or "unknown"


class RateLimiter:
    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        window: float = DEFAULT_WINDOW,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.limit = limit
        self.window = window
        self.capacity = capacity
        self._clock = clock
        self._windows: OrderedDict[str, _Window] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    @staticmethod
    def key(address: str, path: str) -> str:
        return f"{address}:{path}"

    def _evict(self, now: float) -> None:
        # Windows are kept in creation order, so expired ones sit at the front
        while self._windows:
            oldest_key, oldest = next(iter(self._windows.items()))
            if oldest.reset_at <= now or len(self._windows) >= self.capacity:
                del self._windows[oldest_key]
            else:
                break

    def hit(self, address: str, path: str) -> RateLimitExceeded | None:
        """Count one request; None while under the limit."""
        key = self.key(address, path)
        with self._lock:
            now = self._clock()
            current = self._windows.get(key)

            if current is None or current.reset_at <= now:
                if current is not None:
                    del self._windows[key]
                self._evict(now)
                self._windows[key] = _Window(count=1, reset_at=now + self.window)
                return None

            current.count += 1
            if current.count > self.limit:
                retry_after = max(1, math.ceil(current.reset_at - now))
                return RateLimitExceeded(key=key, limit=self.limit, retry_after=retry_after)
            return None

    def hit_request(self, forwarded_for: str | None, path: str) -> RateLimitExceeded | None:
        return self.hit(client_address(forwarded_for), path)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
