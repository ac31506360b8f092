"""FastAPI application for the content service.

This module provides the application factory with a health endpoint, the
v1 API routes, and lifecycle management of the storage backends.

Run with:
    uvicorn content_service.main:app --reload

Tests:
    - tests/unit/test_main.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from content_service import __version__
from content_service.api.v1 import router as v1_router
from content_service.config import Settings, get_settings
from content_service.dependencies import Services, build_services
from content_service.errors import ContentServiceError

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    index: bool
    storage_provider: str


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use (defaults to get_settings()).
        services: Prebuilt services; when omitted they are built from
            settings on startup and closed on shutdown.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting content service v{__version__}")
        owned = services is None
        app.state.services = services if services is not None else await build_services(settings)

        yield

        logger.info("Shutting down content service")
        if owned:
            await app.state.services.close()

    app = FastAPI(
        title="Content Service",
        description="Envelope storage, search indexing and asset publishing",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.include_router(v1_router)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc: HTTPException):
        """Handle HTTP exceptions with consistent response format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ContentServiceError)
    async def content_service_error_handler(request, exc: ContentServiceError):
        """Map core errors that escaped a route to their status code."""
        logger.error(f"Unhandled content service error: {exc}")
        message = "Not found" if exc.status_code == 404 else "Internal server error"
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Check application health."""
        index_ok = await app.state.services.check_index()
        return HealthResponse(
            status="healthy" if index_ok else "degraded",
            version=__version__,
            index=index_ok,
            storage_provider=settings.STORAGE_PROVIDER.value,
        )

    return app


configure_logging(get_settings())
app = create_app()
