"""
Thread-safe sliding-window rate limiter.

The Battle.net limit is per API key, not per thread, so a single
``RateLimiter`` instance is shared by every executor that uses the same key.
It is passed in explicitly; there is no module-level limiter.

``acquire()`` never fails.  It blocks until fewer than ``capacity``
acquisitions fall inside the trailing ``window_seconds``, records the new
acquisition, and returns.  Waiters are woken in no particular order.

The window is half-open: a stamp exactly ``window_seconds`` old no longer
counts.  So any ``capacity + 1`` consecutive acquisitions span at least
``window_seconds``, and a permit freed at ``t + window_seconds`` can be
taken at that same instant.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from wow_ah_client.config import RateLimitConfig

logger = logging.getLogger(__name__)


class RateLimiter:
    """At most ``capacity`` permits per trailing ``window_seconds``.

    Args:
        capacity:       Permits per window (original client: 100).
        window_seconds: Window length in seconds (original client: 1.0).
        clock:          Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        capacity: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}.")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0, got {window_seconds}.")
        self.capacity       = capacity
        self.window_seconds = window_seconds
        self._clock         = clock
        self._stamps: deque[float] = deque()
        self._cond          = threading.Condition()

    @classmethod
    def from_config(cls, config: "RateLimitConfig") -> "RateLimiter":
        return cls(capacity=config.capacity, window_seconds=config.window_seconds)

    def _evict(self, now: float) -> None:
        horizon = now - self.window_seconds
        while self._stamps and self._stamps[0] <= horizon:
            self._stamps.popleft()

    def acquire(self) -> None:
        """Block until a permit is free, then take it."""
        with self._cond:
            while True:
                now = self._clock()
                self._evict(now)
                if len(self._stamps) < self.capacity:
                    self._stamps.append(now)
                    # Another waiter may also fit now that old stamps are gone.
                    self._cond.notify()
                    return
                wait = self._stamps[0] + self.window_seconds - now
                logger.debug("Rate limit reached; waiting %.3fs for a permit", wait)
                self._cond.wait(timeout=max(wait, 0.0))

    @property
    def available(self) -> int:
        """Permits that could be acquired right now without blocking."""
        with self._cond:
            self._evict(self._clock())
            return self.capacity - len(self._stamps)
