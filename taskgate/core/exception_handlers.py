"""Global exception handlers for consistent error responses.

Design:
- AppError subclasses -> 4xx status (400 validation/not found, 429 rate limited)
- FastAPI request validation (bad JSON, non-integer ids) -> 400
- Unexpected Exception -> generic 500 (safety net)
- All responses include request_id for tracing
"""

from __future__ import annotations

import logging
import math
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskgate.core.config import settings
from taskgate.core.errors import AppError, RateLimitedAppError
from taskgate.core.logging import get_request_id

logger = logging.getLogger(__name__)


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""

    if isinstance(exc, RateLimitedAppError):
        return status.HTTP_429_TOO_MANY_REQUESTS
    # Unknown ids (NotFoundAppError) are reported as 400, like malformed ids.
    return status.HTTP_400_BAD_REQUEST


def _error_body(code: str, message: str, details: Any = None) -> dict[str, Any]:
    error_content: dict[str, Any] = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details:
        error_content["details"] = details
    return {"error": error_content}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render domain errors as ``{"error": {...}}`` with a 4xx status.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code and error details.
    """
    status_code = status_code_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_path": request.url.path,
        },
    )

    headers: dict[str, str] | None = None
    if (
        isinstance(exc, RateLimitedAppError)
        and settings.app.rate_limit_include_headers
        and exc.details
        and "retry_after" in exc.details
    ):
        headers = {"Retry-After": str(max(1, math.ceil(exc.details["retry_after"])))}

    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.code, exc.message, exc.details),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map FastAPI's 422 validation failures onto 400 responses."""

    errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    logger.warning(
        "request_validation_failed",
        extra={
            "request_path": request.url.path,
            "request_method": request.method,
            "error_count": len(errors),
        },
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            "validation_error",
            "Request could not be decoded or validated.",
            {"errors": errors},
        ),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure and returns a generic message; no stack traces or
    exception text reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with a FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
