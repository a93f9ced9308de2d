"""
Redis Snapshot Cache

Latest snapshot per reporting range, stored as JSON under
`analytics:snapshot:<range>` with a TTL. The cache belongs to the serving
layer; the engine never reads or writes it, and the service keeps working
when redis is unreachable.
"""

import json
from datetime import timedelta
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from grocery_analytics.analytics.snapshot import AnalyticsSnapshot
from grocery_analytics.analytics.windows import RangeSelector
from grocery_analytics.config import get_settings

logger = structlog.get_logger(__name__)

_client: Optional[Redis] = None


async def init_redis(url: Optional[str] = None) -> Redis:
    """
    Connect the process-wide client and check it answers.

    Raises:
        redis.exceptions.ConnectionError: redis is unreachable; no client is kept
    """
    global _client

    if _client is not None:
        return _client

    settings = get_settings()
    client = Redis.from_url(
        url or settings.redis.get_url(),
        max_connections=settings.redis.max_connections,
        socket_timeout=settings.redis.socket_timeout,
        decode_responses=True,
    )
    try:
        await client.ping()
    except Exception as e:
        await client.aclose()
        logger.warning("cache_unreachable", error=str(e))
        raise

    _client = client
    logger.info("cache_connected")
    return client


async def close_redis() -> None:
    global _client

    if _client is None:
        return
    await _client.aclose()
    _client = None
    logger.info("cache_closed")


def get_redis() -> Redis:
    """
    Raises:
        RuntimeError: init_redis() has not succeeded
    """
    if _client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _client


class CacheManager:
    """
    JSON values under one key namespace.

    Uses the process-wide client unless one is passed in.

    Example:
        cache = CacheManager("analytics", default_ttl=300)
        await cache.set("snapshot:month", payload)
        payload = await cache.get("snapshot:month")
    """

    def __init__(self, namespace: str, default_ttl: int = 3600, client: Optional[Redis] = None):
        self.namespace = namespace
        self.default_ttl = default_ttl
        self._client = client

    @property
    def client(self) -> Redis:
        return self._client if self._client is not None else get_redis()

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        value = await self.client.get(self._key(key))
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("cache_entry_undecodable", key=self._key(key))
            return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[Union[int, timedelta]] = None,
    ) -> bool:
        """
        Store `value` as JSON with a TTL (seconds or timedelta).

        Returns:
            False when the value is not JSON-serializable; nothing is written
        """
        try:
            serialized = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.warning("cache_value_unserializable", key=self._key(key), error=str(e))
            return False

        ttl = ttl or self.default_ttl
        if isinstance(ttl, timedelta):
            ttl = int(ttl.total_seconds())
        await self.client.setex(self._key(key), ttl, serialized)
        return True


class SnapshotCache:
    """
    Latest snapshot per reporting range.

    Redis failures and payloads that no longer validate are logged and
    treated as misses.
    """

    def __init__(self, manager: Optional[CacheManager] = None):
        if manager is None:
            settings = get_settings()
            manager = CacheManager("analytics", default_ttl=settings.analytics.snapshot_ttl_seconds)
        self.manager = manager

    async def get(self, range_selector: Union[str, RangeSelector]) -> Optional[AnalyticsSnapshot]:
        selected = RangeSelector.parse(range_selector)
        try:
            data = await self.manager.get(f"snapshot:{selected.value}")
            if data is None:
                return None
            return AnalyticsSnapshot.model_validate(data)
        except RedisError as e:
            logger.warning("snapshot_cache_read_failed", range=selected.value, error=str(e))
        except ValidationError:
            logger.warning("snapshot_cache_entry_invalid", range=selected.value)
        return None

    async def put(self, snapshot: AnalyticsSnapshot) -> bool:
        try:
            return await self.manager.set(
                f"snapshot:{snapshot.range.value}",
                snapshot.model_dump(mode="json"),
            )
        except RedisError as e:
            logger.warning("snapshot_cache_write_failed", range=snapshot.range.value, error=str(e))
            return False
