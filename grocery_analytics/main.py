"""
ASGI entry point: `uvicorn grocery_analytics.main:app`
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from grocery_analytics.analytics.engine import AnalyticsEngine
from grocery_analytics.config import get_settings
from grocery_analytics.config.logging import configure_logging
from grocery_analytics.database.connection import close_database, get_session_factory, init_database
from grocery_analytics.repository.sql import SqlAlchemyAnalyticsRepository
from grocery_analytics.serving.api.main import create_api_app
from grocery_analytics.serving.cache import SnapshotCache, close_redis, init_redis
from grocery_analytics.serving.service import DashboardAnalyticsService

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Wire the database, the optional snapshot cache and the analytics service.

    The service is detached before the database closes so no request starts a
    recompute against a disposed engine.
    """
    configure_logging()
    settings = get_settings()
    logger.info("service_starting", environment=settings.app_env, version=settings.version)

    await init_database()

    cache = None
    try:
        await init_redis()
        cache = SnapshotCache()
    except Exception:
        logger.warning("snapshot_cache_disabled")

    engine = AnalyticsEngine(SqlAlchemyAnalyticsRepository(get_session_factory()), settings.analytics)
    app.state.analytics_service = DashboardAnalyticsService(engine, cache=cache)

    yield

    logger.info("service_stopping")
    app.state.analytics_service = None
    await close_redis()
    await close_database()


app = create_api_app(lifespan=lifespan)
