"""Application-level exception types.

This module defines domain errors raised by the registry and the rate
limiter, enabling consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    field: str
    task_id: int
    retry_after: float
    interval_seconds: float
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when caller-supplied input is missing or malformed."""


class NotFoundAppError(AppError):
    """Raised when a referenced task id does not exist."""


class RateLimitedAppError(AppError):
    """Raised (or returned) when the rate limiter gate is not yet open."""
