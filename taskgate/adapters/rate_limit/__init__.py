"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory gate and later migrate to a shared store without changing the
API layer.
"""

from taskgate.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult, TimeSource
from taskgate.adapters.rate_limit.in_memory import (
    DEFAULT_INTERVAL_SECONDS,
    InMemoryIntervalRateLimiter,
    IntervalRateLimiter,
)

__all__ = [
    "AbstractRateLimiter",
    "DEFAULT_INTERVAL_SECONDS",
    "InMemoryIntervalRateLimiter",
    "IntervalRateLimiter",
    "RateLimitResult",
    "TimeSource",
]
