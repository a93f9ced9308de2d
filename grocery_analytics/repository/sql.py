"""
SQLAlchemy-backed analytics repository.

Each fetch opens its own short-lived session so the engine can issue all
six reads concurrently.
"""

from typing import Tuple, Type, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from grocery_analytics.database.connection import read_session
from grocery_analytics.database.models import (
    Category,
    Favorite,
    Order,
    OrderItem,
    Product,
    User,
)
from .base import AnalyticsRepository
from .records import (
    CategoryRecord,
    FavoriteRecord,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    UserRecord,
    Record,
)

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=Record)


class SqlAlchemyAnalyticsRepository(AnalyticsRepository):
    """
    Reads the operational tables through an async session factory.

    Example:
        repo = SqlAlchemyAnalyticsRepository(get_session_factory())
        orders = await repo.fetch_orders()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _fetch(self, query, record_type: Type[R]) -> Tuple[R, ...]:
        async with read_session(self.session_factory) as db:
            result = await db.execute(query)
            rows = result.scalars().all()
            records = tuple(record_type.model_validate(row) for row in rows)
        logger.debug("collection_fetched", record_type=record_type.__name__, rows=len(records))
        return records

    async def fetch_orders(self) -> Tuple[OrderRecord, ...]:
        return await self._fetch(select(Order).order_by(Order.created_at, Order.id), OrderRecord)

    async def fetch_users(self) -> Tuple[UserRecord, ...]:
        return await self._fetch(select(User).order_by(User.id), UserRecord)

    async def fetch_products(self) -> Tuple[ProductRecord, ...]:
        return await self._fetch(select(Product).order_by(Product.id), ProductRecord)

    async def fetch_order_items(self) -> Tuple[OrderItemRecord, ...]:
        query = select(OrderItem).options(selectinload(OrderItem.product)).order_by(OrderItem.id)
        return await self._fetch(query, OrderItemRecord)

    async def fetch_categories(self) -> Tuple[CategoryRecord, ...]:
        return await self._fetch(select(Category).order_by(Category.id), CategoryRecord)

    async def fetch_favorites(self) -> Tuple[FavoriteRecord, ...]:
        query = select(Favorite).options(selectinload(Favorite.product)).order_by(Favorite.id)
        return await self._fetch(query, FavoriteRecord)
