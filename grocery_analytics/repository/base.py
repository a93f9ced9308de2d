"""
Repository contract for the analytics engine.

The engine depends on the data store only through `AnalyticsRepository`;
concrete repositories decode rows into the typed records before returning.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

from .records import (
    CategoryRecord,
    FavoriteRecord,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    UserRecord,
)


class AnalyticsRepository(ABC):
    """Read-only access to the raw collections the engine aggregates."""

    @abstractmethod
    async def fetch_orders(self) -> Tuple[OrderRecord, ...]:
        ...

    @abstractmethod
    async def fetch_users(self) -> Tuple[UserRecord, ...]:
        ...

    @abstractmethod
    async def fetch_products(self) -> Tuple[ProductRecord, ...]:
        ...

    @abstractmethod
    async def fetch_order_items(self) -> Tuple[OrderItemRecord, ...]:
        """Line items joined to their product (id, name, images, category_id)."""

    @abstractmethod
    async def fetch_categories(self) -> Tuple[CategoryRecord, ...]:
        ...

    @abstractmethod
    async def fetch_favorites(self) -> Tuple[FavoriteRecord, ...]:
        """Favorites joined to their product (id, name, images)."""


@dataclass(frozen=True)
class RawCollections:
    """Immutable in-memory copy of everything one aggregation reads"""
    orders: Tuple[OrderRecord, ...] = ()
    users: Tuple[UserRecord, ...] = ()
    products: Tuple[ProductRecord, ...] = ()
    order_items: Tuple[OrderItemRecord, ...] = ()
    categories: Tuple[CategoryRecord, ...] = ()
    favorites: Tuple[FavoriteRecord, ...] = ()

    def counts(self) -> dict:
        return {
            "orders": len(self.orders),
            "users": len(self.users),
            "products": len(self.products),
            "order_items": len(self.order_items),
            "categories": len(self.categories),
            "favorites": len(self.favorites),
        }
