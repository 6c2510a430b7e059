"""Thread-safe integer counter."""

from __future__ import annotations

import threading


class SafeCounter:
    """Monotonic counter guarded by a single lock.

    Both ``increment`` and ``value`` take the lock, so a read always reflects
    every increment that returned before it started.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")

        self._count = start
        self._lock = threading.Lock()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"SafeCounter(value={self.value()})"

    def increment(self) -> int:
        """Add one to the counter and return the new value."""

        with self._lock:
            self._count += 1
            return self._count

    def value(self) -> int:
        with self._lock:
            return self._count
