"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from compensation_sync.api.routes import employees_router, health_router
from compensation_sync.database import init_db
from compensation_sync.errors import InvalidCompensationInput, StoreUnavailable

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Compensation Sync API",
        description="Compensation history and salary slip reconciliation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Exception handlers
    @app.exception_handler(InvalidCompensationInput)
    async def invalid_compensation_handler(
        request: Request, exc: InvalidCompensationInput
    ) -> JSONResponse:
        """Reject bad compensation input before anything was written."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": str(exc),
                "code": "INVALID_COMPENSATION",
                "context": {"value": str(exc.value), "reason": exc.reason},
            },
        )

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(
        request: Request, exc: StoreUnavailable
    ) -> JSONResponse:
        """Record store could not be reached for a blocking read."""
        logger.error("Store unavailable: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": "Record store unavailable",
                "code": "STORE_UNAVAILABLE",
                "context": {"operation": exc.operation},
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(employees_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
