"""
FastAPI Application Entry Point.

This is the main application file for the Global Track API.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from globaltrack.app.core.config import settings
from globaltrack.app.api.router import router as api_router
from globaltrack.app.core.dependencies import AdminCredentials
from globaltrack.app.core.observability import ObservabilityMiddleware, configure_logging
from globaltrack.app.core.token_revocation import ping_redis
from globaltrack.app.db.session import engine, Base
from globaltrack.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from globaltrack.app.models.shipment import Shipment
from globaltrack.app.models.user_settings import UserSettings

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates database tables on startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Shipment tracking API: shipments, status history and dashboard stats",
    lifespan=lifespan,
)

# The single admin identity, resolved once from configuration
app.state.admin_credentials = AdminCredentials.from_settings(settings)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/", tags=["Root"])
async def root():
    """Welcome message and documentation links."""
    return {
        "message": "Welcome to Global Track API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/api", tags=["Root"])
async def api_root():
    """Connection check for API clients."""
    return {"message": "API is running"}


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status, version and whether Redis (token revocation) answers
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "redis": "connected" if await ping_redis() else "unavailable",
    }


app.include_router(api_router, prefix="/api")
