"""
In-memory analytics repository.

Serves fixed fixtures through the same record decoding the SQL repository
uses, so the engine can be exercised without a live data store.
"""

from typing import Any, Iterable, Optional, Tuple, Type, TypeVar

from .base import AnalyticsRepository
from .records import (
    CategoryRecord,
    FavoriteRecord,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    Record,
    UserRecord,
)

R = TypeVar("R", bound=Record)


def decode_rows(rows: Optional[Iterable[Any]], record_type: Type[R]) -> Tuple[R, ...]:
    """Validate raw rows (dicts, ORM objects or records) into records."""
    if not rows:
        return ()
    return tuple(
        row if isinstance(row, record_type) else record_type.model_validate(row)
        for row in rows
    )


class InMemoryAnalyticsRepository(AnalyticsRepository):
    """
    Repository over in-memory rows.

    Example:
        repo = InMemoryAnalyticsRepository(orders=[{"id": "o1", ...}])
    """

    def __init__(
        self,
        orders: Optional[Iterable[Any]] = None,
        users: Optional[Iterable[Any]] = None,
        products: Optional[Iterable[Any]] = None,
        order_items: Optional[Iterable[Any]] = None,
        categories: Optional[Iterable[Any]] = None,
        favorites: Optional[Iterable[Any]] = None,
    ):
        self.orders = decode_rows(orders, OrderRecord)
        self.users = decode_rows(users, UserRecord)
        self.products = decode_rows(products, ProductRecord)
        self.order_items = decode_rows(order_items, OrderItemRecord)
        self.categories = decode_rows(categories, CategoryRecord)
        self.favorites = decode_rows(favorites, FavoriteRecord)

    async def fetch_orders(self) -> Tuple[OrderRecord, ...]:
        return self.orders

    async def fetch_users(self) -> Tuple[UserRecord, ...]:
        return self.users

    async def fetch_products(self) -> Tuple[ProductRecord, ...]:
        return self.products

    async def fetch_order_items(self) -> Tuple[OrderItemRecord, ...]:
        return self.order_items

    async def fetch_categories(self) -> Tuple[CategoryRecord, ...]:
        return self.categories

    async def fetch_favorites(self) -> Tuple[FavoriteRecord, ...]:
        return self.favorites
