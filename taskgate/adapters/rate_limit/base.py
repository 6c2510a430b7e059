"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
storage backend can be swapped later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from taskgate.core.errors import RateLimitedAppError

# Zero-argument callable returning the current time in seconds.
TimeSource = Callable[[], float]


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the guarded action may proceed.
        interval_seconds: Minimum spacing between two permitted actions.
        retry_after_seconds: Time left until the gate reopens (None when allowed).
        error: The rejection reason when blocked, None when allowed.
    """

    allowed: bool
    interval_seconds: float
    retry_after_seconds: float | None = None
    error: RateLimitedAppError | None = None


class AbstractRateLimiter(ABC):
    """Interface for keyed rate limiters."""

    @abstractmethod
    def consume(self, key: str) -> RateLimitResult:
        """Try to pass the gate for a given key.

        Args:
            key: Unique caller identifier (e.g., client address).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
