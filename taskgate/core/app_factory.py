from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (state, middleware, handlers, routers). Each call
returns an application with its own task registry and rate limiter.
"""

from fastapi import FastAPI

from taskgate.api.routes import health_router, items_router
from taskgate.core.config import settings
from taskgate.core.exception_handlers import setup_exception_handlers
from taskgate.core.logging import configure_logging
from taskgate.core.middleware import request_id_middleware
from taskgate.core.rate_limit import build_rate_limiter
from taskgate.services.task_registry import SEED_TASKS, TaskRegistry

OPENAPI_TAGS = [
    {
        "name": "Items",
        "description": "Create, list, complete and delete tasks.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]


def create_app(registry: TaskRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        registry: Registry to serve; a new one (seeded per settings) is
            created when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Taskgate",
        description=(
            "In-memory task registry with strictly increasing ids and an "
            "interval rate limiter guarding task creation."
        ),
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
    )

    if registry is None:
        registry = TaskRegistry(seed=SEED_TASKS if settings.app.seed_tasks else None)
    app.state.task_registry = registry
    app.state.rate_limiter = build_rate_limiter()

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(items_router)
    app.include_router(health_router)

    return app
