# app/core/rate_limit.py
"""Sliding-window rate limiter.

One instance per process, keyed by client address. Each key keeps the
timestamps of its requests inside the current window; a request is allowed
while fewer than `max_requests` timestamps remain after dropping the
expired ones. Nothing is persisted, so a restart resets every window.

Usage:
    limiter = SlidingWindowLimiter(max_requests=100, window_seconds=900)
    allowed, retry_after = limiter.hit("203.0.113.7")
"""

import math
import threading
import time
from collections import deque


class SlidingWindowLimiter:
    """In-memory sliding window log, safe to share across requests."""

    def __init__(self, max_requests: int, window_seconds: float) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._next_sweep = 0.0

    def hit(self, key: str, now: float | None = None) -> tuple[bool, int]:
        """Record a request for `key`.

        Returns (allowed, retry_after_seconds). Rejected requests are not
        recorded, so a client that keeps retrying is not locked out longer.
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            window = self._hits.setdefault(key, deque())
            self._evict(window, now)
            if len(window) >= self.max_requests:
                retry_after = window[0] + self.window_seconds - now
                return False, max(1, math.ceil(retry_after))
            window.append(now)
            return True, 0

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._hits)

    def remaining(self, key: str, now: float | None = None) -> int:
        now = time.monotonic() if now is None else now
        with self._lock:
            window = self._hits.get(key)
            if window is None:
                return self.max_requests
            self._evict(window, now)
            if not window:
                del self._hits[key]
            return max(0, self.max_requests - len(window))

    def _sweep(self, now: float) -> None:
        # Drop keys whose whole window has expired, at most once per window.
        for key in list(self._hits):
            window = self._hits[key]
            self._evict(window, now)
            if not window:
                del self._hits[key]
        self._next_sweep = now + self.window_seconds

    def _evict(self, window: deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while window and window[0] <= cutoff:
            window.popleft()
