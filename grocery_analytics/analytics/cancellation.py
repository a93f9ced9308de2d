"""
Cancellation tokens for recompute cycles.

A caller that re-triggers the engine before the previous cycle finishes
issues a new token; the coordinator cancels the older one so its result is
discarded instead of overwriting the newer snapshot.
"""

import itertools
from typing import Optional

from grocery_analytics.exceptions import RecomputeCancelled


class CancellationToken:
    """Cooperative cancellation flag tagged with a generation number"""

    def __init__(self, generation: int = 0):
        self.generation = generation
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RecomputeCancelled(self.generation)

    def __repr__(self) -> str:
        return f"CancellationToken(generation={self.generation}, cancelled={self._cancelled})"


class RecomputeCoordinator:
    """
    Issues one token per recompute; only the most recent one is current.

    Example:
        coordinator = RecomputeCoordinator()
        token = coordinator.issue()
        snapshot = await engine.recompute(now, "week", token)
    """

    def __init__(self):
        self._generations = itertools.count(1)
        self._current: Optional[CancellationToken] = None

    def issue(self) -> CancellationToken:
        if self._current is not None:
            self._current.cancel()
        self._current = CancellationToken(next(self._generations))
        return self._current

    def is_current(self, token: CancellationToken) -> bool:
        return token is self._current and not token.cancelled

    @property
    def current(self) -> Optional[CancellationToken]:
        return self._current
