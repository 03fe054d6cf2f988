"""
In-memory decay-window rate limiter - Implements RateLimiter protocol.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: every read-modify-write on a key happens under one lock.
"""

import heapq
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Counter:
    attempts: int
    expires_at: float


class InMemoryRateLimiter:
    """
    Keyed attempt counters whose window starts at the first hit.

    Once decay_seconds have elapsed since the window began, the counter
    reads as zero and the next hit opens a fresh window. Every hit also
    sweeps counters whose window has passed, so keys that are never seen
    again do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize the in-memory rate limiter.

        Args:
            clock: Time source returning seconds as a float
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: dict[str, _Counter] = {}
        # (expires_at, key) for every window opened, soonest first
        self._expiries: list[tuple[float, str]] = []

    def _live_counter(self, key: str, now: float) -> _Counter | None:
        """Return the counter for key, discarding it if its window has passed."""
        counter = self._counters.get(key)
        if counter is not None and counter.expires_at <= now:
            del self._counters[key]
            return None
        return counter

    def _sweep(self, now: float) -> None:
        """Drop every counter whose window has passed."""
        while self._expiries and self._expiries[0][0] <= now:
            _, key = heapq.heappop(self._expiries)
            counter = self._counters.get(key)
            # Entries left behind by clear() or a reopened window are skipped
            if counter is not None and counter.expires_at <= now:
                del self._counters[key]

    def too_many_attempts(self, key: str, max_attempts: int) -> bool:
        with self._lock:
            counter = self._live_counter(key, self._clock())
            return counter is not None and counter.attempts >= max_attempts

    def hit(self, key: str, decay_seconds: int) -> int:
        if decay_seconds < 1:
            raise ValueError("decay_seconds must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            now = self._clock()
            self._sweep(now)
            counter = self._live_counter(key, now)
            if counter is None:
                counter = _Counter(attempts=0, expires_at=now + decay_seconds)
                self._counters[key] = counter
                heapq.heappush(self._expiries, (counter.expires_at, key))
            counter.attempts += 1
            return counter.attempts

    def clear(self, key: str) -> None:
        with self._lock:
            self._counters.pop(key, None)

    def attempts(self, key: str) -> int:
        """Current attempt count for key (0 if there is no live counter)."""
        with self._lock:
            counter = self._live_counter(key, self._clock())
            return counter.attempts if counter is not None else 0

    def available_in(self, key: str) -> int:
        with self._lock:
            now = self._clock()
            counter = self._live_counter(key, now)
            if counter is None:
                return 0
            return max(0, int(math.ceil(counter.expires_at - now)))
