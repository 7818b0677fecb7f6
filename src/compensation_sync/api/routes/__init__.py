"""API routes."""

from compensation_sync.api.routes.employees import router as employees_router
from compensation_sync.api.routes.health import router as health_router

__all__ = ["employees_router", "health_router"]
