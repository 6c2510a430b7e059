"""Rate limiting dependency for FastAPI routes.

Wires the interval rate limiter adapter into the HTTP layer. The limiter
instance lives on ``app.state`` so every application built by the factory
has its own gate state.

Strategy: one interval gate per client address. A rejected request gets a
429 (via the RateLimitedAppError handler) with a Retry-After header.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from taskgate.adapters.rate_limit.base import AbstractRateLimiter
from taskgate.adapters.rate_limit.in_memory import InMemoryIntervalRateLimiter
from taskgate.core.config import settings

logger = logging.getLogger(__name__)


def build_rate_limiter() -> AbstractRateLimiter:
    """Create a limiter from the current settings."""

    return InMemoryIntervalRateLimiter(
        interval_seconds=settings.app.rate_limit_interval_seconds,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter attached to the running application."""

    return request.app.state.rate_limiter


def _build_rate_limit_key(request: Request) -> str:
    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency gating the guarded route.

    Does nothing unless APP_RATE_LIMIT_ENABLED is set.

    Raises:
        RateLimitedAppError: When the caller's gate is still cooling down.
    """

    if not settings.app.rate_limit_enabled:
        return

    limiter = get_rate_limiter(request)
    key = _build_rate_limit_key(request)
    key_hash = _hash_limiter_key(key)

    result = limiter.consume(key)
    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={"key_hash": key_hash, "interval_s": result.interval_seconds},
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "interval_s": result.interval_seconds,
            "retry_after_s": result.retry_after_seconds,
        },
    )
    raise result.error
