"""
Repository Module
"""
from .base import AnalyticsRepository, RawCollections
from .memory import InMemoryAnalyticsRepository, decode_rows
from .records import (
    CategoryRecord,
    FavoriteRecord,
    JoinedProduct,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    UserRecord,
)
from .sql import SqlAlchemyAnalyticsRepository

__all__ = [
    "AnalyticsRepository",
    "RawCollections",
    "InMemoryAnalyticsRepository",
    "SqlAlchemyAnalyticsRepository",
    "decode_rows",
    "CategoryRecord",
    "FavoriteRecord",
    "JoinedProduct",
    "OrderItemRecord",
    "OrderRecord",
    "ProductRecord",
    "UserRecord",
]
