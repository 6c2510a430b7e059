from __future__ import annotations

from taskgate.api.routes.health import router as health_router
from taskgate.api.routes.items import router as items_router

__all__ = ["health_router", "items_router"]
