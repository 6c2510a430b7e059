"""In-memory interval rate limiters.

Notes:
- Per-process only: running multiple workers multiplies the effective rate.
- Thread-safe: the elapsed-time check and the timestamp update share one lock.
"""

from __future__ import annotations

import threading
import time

from taskgate.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult, TimeSource
from taskgate.core.errors import RateLimitedAppError

DEFAULT_INTERVAL_SECONDS = 60.0


class IntervalRateLimiter:
    """Gate that permits an action at most once per fixed interval.

    The gate is READY once a full interval has elapsed since the last permit
    and COOLING otherwise. There is no explicit transition: the state is a
    function of the injected clock alone.
    """

    def __init__(
        self,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: TimeSource = time.monotonic,
    ) -> None:
        """Initialize the gate in the READY state.

        Args:
            interval_seconds: Minimum number of seconds between two permits.
            clock: Time source returning seconds as a float.

        Raises:
            ValueError: If interval_seconds is not positive.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._interval = float(interval_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        # Backdate by one interval so the very first call is permitted.
        self._last_execution = clock() - self._interval

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def last_execution(self) -> float:
        with self._lock:
            return self._last_execution

    def can_execute(self) -> RateLimitResult:
        """Check the gate and, when open, record a new execution.

        A rejected call leaves ``last_execution`` unchanged. An accepted call
        re-reads the clock and stores that reading as the new
        ``last_execution``.

        Returns:
            RateLimitResult with ``error`` set to a RateLimitedAppError when
            the interval has not elapsed yet.
        """
        with self._lock:
            now = self._clock()
            elapsed = now - self._last_execution
            if elapsed < self._interval:
                retry_after = self._interval - elapsed
                return RateLimitResult(
                    allowed=False,
                    interval_seconds=self._interval,
                    retry_after_seconds=retry_after,
                    error=RateLimitedAppError(
                        code="rate_limited",
                        message="Too early, try a little later.",
                        details={
                            "retry_after": retry_after,
                            "interval_seconds": self._interval,
                        },
                    ),
                )

            self._last_execution = self._clock()
            return RateLimitResult(allowed=True, interval_seconds=self._interval)


class InMemoryIntervalRateLimiter(AbstractRateLimiter):
    """Keyed limiter holding one IntervalRateLimiter per caller key.

    Gates are created lazily on first use and share the same clock and
    interval. A gate whose interval has fully elapsed behaves exactly like a
    fresh one, so such gates are dropped whenever a new key is admitted; the
    map only holds keys seen within the last interval.
    """

    def __init__(
        self,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: TimeSource = time.monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._interval = float(interval_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._gates: dict[str, IntervalRateLimiter] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._gates)

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def _prune_ready_gates_locked(self) -> None:
        now = self._clock()
        ready = [
            key
            for key, gate in self._gates.items()
            if now - gate.last_execution >= self._interval
        ]
        for key in ready:
            del self._gates[key]

    def consume(self, key: str) -> RateLimitResult:
        """Pass the gate for ``key``.

        The keyed lock is held for the whole call so a gate is never pruned
        while another caller is using it.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            gate = self._gates.get(key)
            if gate is None:
                self._prune_ready_gates_locked()
                gate = IntervalRateLimiter(interval_seconds=self._interval, clock=self._clock)
                self._gates[key] = gate
            return gate.can_execute()
