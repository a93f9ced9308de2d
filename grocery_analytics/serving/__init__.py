"""
Serving Module
"""
from .cache import CacheManager, SnapshotCache, init_redis, close_redis, get_redis
from .service import DashboardAnalyticsService

__all__ = [
    "CacheManager",
    "SnapshotCache",
    "DashboardAnalyticsService",
    "init_redis",
    "close_redis",
    "get_redis",
]
