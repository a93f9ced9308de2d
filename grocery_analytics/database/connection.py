"""
Database Connection Management

One process-wide async engine over the operational database. The analytics
repository opens a short-lived read session per collection, so the six
reads of a recompute never share a connection.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from grocery_analytics.config import get_settings

logger = structlog.get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


async def init_database(url: Optional[str] = None) -> AsyncEngine:
    """
    Create the engine and verify the database answers.

    Args:
        url: SQLAlchemy async URL; defaults to the configured one
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    settings = get_settings()
    target = make_url(url or settings.database.async_url)

    engine = create_async_engine(
        target,
        echo=settings.database.echo,
        pool_pre_ping=True,
        # connections are not held between recomputes
        poolclass=NullPool,
    )
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        await engine.dispose()
        logger.error("database_unreachable", backend=target.get_backend_name(), error=str(e))
        raise

    _engine = engine
    _session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    logger.info(
        "database_connected",
        backend=target.get_backend_name(),
        host=target.host,
        database=target.database,
    )
    return engine


async def close_database() -> None:
    global _engine, _session_factory

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("database_closed")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Raises:
        RuntimeError: init_database() has not run
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _session_factory


@asynccontextmanager
async def read_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """
    Session for reads only; whatever happens inside is rolled back.

    Example:
        async with read_session(factory) as db:
            rows = (await db.execute(select(Order))).scalars().all()
    """
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def check_database_health() -> dict:
    """Round-trip latency of a trivial query, or the error that prevented it."""
    try:
        factory = get_session_factory()
        started = time.perf_counter()
        async with read_session(factory) as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy", "latency_ms": round((time.perf_counter() - started) * 1000, 2)}
