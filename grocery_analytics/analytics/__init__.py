"""
Analytics Aggregation Module
"""
from .cancellation import CancellationToken, RecomputeCoordinator
from .engine import AnalyticsEngine
from .snapshot import AnalyticsSnapshot
from .windows import RangeSelector, ReportingWindows, Window, compute_windows

__all__ = [
    "AnalyticsEngine",
    "AnalyticsSnapshot",
    "CancellationToken",
    "RecomputeCoordinator",
    "RangeSelector",
    "ReportingWindows",
    "Window",
    "compute_windows",
]
