"""
Analytics Aggregation Engine

Fetches the raw collections concurrently, then runs every aggregation over
the in-memory copy and assembles one immutable snapshot. The engine keeps no
state between calls; caching and scheduling belong to the caller.
"""

import asyncio
import time
from datetime import datetime
from typing import Awaitable, Callable, Optional, Union

import structlog

from grocery_analytics.config import AnalyticsSettings
from grocery_analytics.exceptions import RetrievalError
from grocery_analytics.repository.base import AnalyticsRepository, RawCollections
from .aggregator import (
    summarize_customers,
    summarize_favorites,
    summarize_orders,
    summarize_products,
    summarize_revenue,
)
from .cancellation import CancellationToken
from .ranking import (
    count_statuses,
    rank_categories,
    rank_favorites,
    rank_payment_methods,
    rank_products,
)
from .snapshot import AnalyticsSnapshot, assemble_snapshot
from .timeseries import build_daily_series, build_hourly_series
from .windows import RangeSelector, compute_windows

logger = structlog.get_logger(__name__)


class AnalyticsEngine:
    """
    Recomputes dashboard analytics from a fresh read of the data store.

    Example:
        engine = AnalyticsEngine(SqlAlchemyAnalyticsRepository(factory))
        snapshot = await engine.recompute(datetime.now(), "month")
    """

    def __init__(
        self,
        repository: AnalyticsRepository,
        settings: Optional[AnalyticsSettings] = None,
    ):
        self.repository = repository
        self.settings = settings or AnalyticsSettings()

    async def _read(self, collection: str, fetcher: Callable[[], Awaitable[tuple]]) -> tuple:
        try:
            return await fetcher()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise RetrievalError(collection, str(e)) from e

    async def fetch(self) -> RawCollections:
        """
        Read all six collections concurrently.

        Raises:
            RetrievalError: If any read fails; the other reads are cancelled
                and nothing is returned
        """
        repo = self.repository
        readers = [
            ("orders", repo.fetch_orders),
            ("users", repo.fetch_users),
            ("products", repo.fetch_products),
            ("order_items", repo.fetch_order_items),
            ("categories", repo.fetch_categories),
            ("favorites", repo.fetch_favorites),
        ]
        tasks = [asyncio.ensure_future(self._read(name, fetcher)) for name, fetcher in readers]

        try:
            results = await asyncio.gather(*tasks)
        except BaseException as e:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if isinstance(e, RetrievalError):
                logger.error(
                    "analytics_fetch_failed",
                    collection=e.collection,
                    error=e.detail,
                )
            raise

        raw = RawCollections(**{name: result for (name, _), result in zip(readers, results)})
        logger.debug("analytics_fetch_completed", **raw.counts())
        return raw

    def compute(
        self,
        raw: RawCollections,
        reference_time: datetime,
        range_selector: Union[str, RangeSelector],
    ) -> AnalyticsSnapshot:
        """Pure aggregation of already-fetched collections."""
        selected = RangeSelector.parse(range_selector)
        windows = compute_windows(reference_time, selected)
        top_n = self.settings.top_n

        return assemble_snapshot(
            reference_time,
            selected,
            revenue=summarize_revenue(raw.orders, windows),
            orders=summarize_orders(raw.orders, windows),
            customers=summarize_customers(raw.users, raw.orders, windows),
            products=summarize_products(raw.products, self.settings.low_stock_threshold),
            favorites=summarize_favorites(raw.favorites, rank_favorites(raw.favorites, top_n)),
            daily_sales=build_daily_series(raw.orders, windows),
            hourly_distribution=build_hourly_series(raw.orders, windows),
            category_breakdown=rank_categories(raw.order_items, raw.categories, top_n),
            top_products=rank_products(raw.order_items, top_n),
            payment_method_breakdown=rank_payment_methods(raw.orders, top_n),
            order_status_breakdown=count_statuses(raw.orders),
        )

    async def recompute(
        self,
        reference_time: datetime,
        range_selector: Union[str, RangeSelector],
        token: Optional[CancellationToken] = None,
    ) -> AnalyticsSnapshot:
        """
        Fetch and aggregate a full snapshot.

        Args:
            reference_time: Instant all windows are relative to
            range_selector: week, month or year
            token: Cancellation token; a cancelled token discards the result

        Raises:
            InvalidRangeError: Unknown range selector
            RetrievalError: A collection could not be read
            RecomputeCancelled: The token was cancelled before completion
        """
        selected = RangeSelector.parse(range_selector)
        token = token or CancellationToken()
        token.raise_if_cancelled()

        start = time.perf_counter()
        logger.info(
            "analytics_fetch_started",
            range=selected.value,
            reference_time=reference_time.isoformat(),
            generation=token.generation,
        )

        raw = await self.fetch()
        token.raise_if_cancelled()

        snapshot = self.compute(raw, reference_time, selected)
        token.raise_if_cancelled()

        logger.info(
            "analytics_snapshot_computed",
            range=selected.value,
            generation=token.generation,
            orders=len(raw.orders),
            daily_buckets=len(snapshot.daily_sales),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return snapshot
