"""
Integration Tests - Database Lifecycle
"""
import pytest

from grocery_analytics.database.connection import (
    check_database_health,
    close_database,
    get_session_factory,
    init_database,
)


@pytest.fixture
async def database_url(tmp_path):
    yield f"sqlite+aiosqlite:///{tmp_path / 'lifecycle.db'}"
    await close_database()


async def test_health_before_init():
    health = await check_database_health()

    assert health["status"] == "unhealthy"
    assert "not initialized" in health["error"]


async def test_init_and_health(database_url):
    engine = await init_database(database_url)

    assert await init_database(database_url) is engine
    health = await check_database_health()
    assert health["status"] == "healthy"
    assert health["latency_ms"] >= 0


async def test_close_forgets_session_factory(database_url):
    await init_database(database_url)
    await close_database()

    with pytest.raises(RuntimeError):
        get_session_factory()

