"""
FastAPI Application Factory

Creates and configures the dashboard analytics API.
"""

from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from grocery_analytics.config import get_settings
from grocery_analytics.serving.service import DashboardAnalyticsService
from .middleware import RequestLoggingMiddleware
from .routes import analytics_router, health_router


def create_api_app(
    service: Optional[DashboardAnalyticsService] = None,
    lifespan: Optional[Any] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        service: Analytics service; may also be attached later by the lifespan
        lifespan: Optional lifespan context manager

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()
    app = FastAPI(
        title="Grocery Dashboard Analytics API",
        description="Revenue, order, customer and catalog analytics for the operations dashboard",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.analytics_service = service

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])

    return app
