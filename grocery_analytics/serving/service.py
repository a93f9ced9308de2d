"""
Dashboard Analytics Service

Caller-side owner of the recompute trigger. Each reporting range has its own
coordinator, so a newer refresh of a range supersedes an older one of the
same range still in flight while other ranges are left alone. Reads that
miss the cache join the recompute already running for their range instead
of starting a competing one. The service remembers the last good snapshot
per range and optionally mirrors snapshots into the redis cache.
"""

import asyncio
from datetime import datetime
from typing import Callable, Dict, Optional, Union

import structlog

from grocery_analytics.analytics.cancellation import CancellationToken, RecomputeCoordinator
from grocery_analytics.analytics.engine import AnalyticsEngine
from grocery_analytics.analytics.snapshot import AnalyticsSnapshot
from grocery_analytics.analytics.windows import RangeSelector
from grocery_analytics.exceptions import RecomputeCancelled, RetrievalError
from .cache import SnapshotCache

logger = structlog.get_logger(__name__)


class DashboardAnalyticsService:
    """
    Explicit recompute trigger for the dashboard.

    Example:
        service = DashboardAnalyticsService(engine)
        snapshot = await service.refresh("week")
    """

    def __init__(
        self,
        engine: AnalyticsEngine,
        cache: Optional[SnapshotCache] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.engine = engine
        self.cache = cache
        self.clock = clock
        self._coordinators: Dict[RangeSelector, RecomputeCoordinator] = {}
        self._pending: Dict[RangeSelector, asyncio.Task] = {}
        self._snapshots: Dict[RangeSelector, AnalyticsSnapshot] = {}

    def last_snapshot(self, range_selector: Union[str, RangeSelector]) -> Optional[AnalyticsSnapshot]:
        """Most recent successful snapshot for a range, possibly stale."""
        return self._snapshots.get(RangeSelector.parse(range_selector))

    def coordinator(self, range_selector: Union[str, RangeSelector]) -> RecomputeCoordinator:
        selected = RangeSelector.parse(range_selector)
        if selected not in self._coordinators:
            self._coordinators[selected] = RecomputeCoordinator()
        return self._coordinators[selected]

    async def refresh(
        self,
        range_selector: Union[str, RangeSelector],
        reference_time: Optional[datetime] = None,
    ) -> AnalyticsSnapshot:
        """
        Recompute the snapshot for a range.

        Raises:
            RecomputeCancelled: A later refresh of the same range started
                before this one finished
            RetrievalError: The fetch failed; the previous snapshot is kept
        """
        selected = RangeSelector.parse(range_selector)
        token = self.coordinator(selected).issue()

        task = asyncio.create_task(self._recompute(selected, reference_time, token))
        if reference_time is None:
            self._pending[selected] = task
        try:
            return await asyncio.shield(task)
        finally:
            if self._pending.get(selected) is task:
                del self._pending[selected]

    async def _recompute(
        self,
        selected: RangeSelector,
        reference_time: Optional[datetime],
        token: CancellationToken,
    ) -> AnalyticsSnapshot:
        try:
            snapshot = await self.engine.recompute(
                reference_time or self.clock(),
                selected,
                token,
            )
        except RetrievalError:
            logger.warning(
                "snapshot_refresh_failed",
                range=selected.value,
                has_previous=selected in self._snapshots,
            )
            raise

        if not self.coordinator(selected).is_current(token):
            logger.info("snapshot_superseded", range=selected.value, generation=token.generation)
            raise RecomputeCancelled(token.generation)

        self._snapshots[selected] = snapshot
        if self.cache is not None:
            await self.cache.put(snapshot)
        return snapshot

    async def get(
        self,
        range_selector: Union[str, RangeSelector],
        reference_time: Optional[datetime] = None,
    ) -> AnalyticsSnapshot:
        """
        Cached snapshot for a range.

        On a miss the call waits for a recompute of the range already in
        flight, or starts one. An explicit reference time always recomputes.
        """
        selected = RangeSelector.parse(range_selector)
        if reference_time is not None:
            return await self.refresh(selected, reference_time)

        if self.cache is not None:
            cached = await self.cache.get(selected)
            if cached is not None:
                return cached

        while True:
            pending = self._pending.get(selected)
            try:
                if pending is None or pending.done():
                    return await self.refresh(selected)
                return await asyncio.shield(pending)
            except RecomputeCancelled:
                # a newer refresh of the range took over; follow it
                logger.debug("snapshot_read_retried", range=selected.value)
