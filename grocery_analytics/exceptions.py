"""
Analytics error taxonomy.

Retrieval failures abort a recompute cycle; cancellation marks a superseded
cycle whose result must be discarded. Shape problems in the raw data (deleted
products, missing categories) are not errors and never raise.
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base exception for the analytics engine"""


class RetrievalError(AnalyticsError):
    """A raw collection could not be read from the data store"""

    def __init__(self, collection: str, detail: Optional[str] = None):
        self.collection = collection
        self.detail = detail
        message = f"Failed to fetch {collection}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RecomputeCancelled(AnalyticsError):
    """The recompute cycle was cancelled or superseded by a newer one"""

    def __init__(self, generation: int):
        self.generation = generation
        super().__init__(f"Recompute generation {generation} was superseded")


class InvalidRangeError(AnalyticsError, ValueError):
    """Unknown reporting range selector"""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown reporting range: {value!r} (expected week, month or year)")
