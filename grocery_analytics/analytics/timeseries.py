"""
Time-Series Builder

Gap-free daily buckets over the chart range and 24 hourly buckets for today.
Buckets are seeded with zeros before any order is accumulated, so every
date and every hour is present even when nothing was sold.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from grocery_analytics.repository.records import OrderRecord
from .aggregator import is_valid_order
from .snapshot import DailyBucket, HourlyBucket
from .windows import ReportingWindows, to_local

HOURS_PER_DAY = 24


def date_range(start: date, end: date) -> List[date]:
    """Every calendar date from start to end inclusive."""
    days = (end - start).days
    return [start + timedelta(days=offset) for offset in range(days + 1)]


def build_daily_series(
    orders: Iterable[OrderRecord],
    windows: ReportingWindows,
) -> Tuple[DailyBucket, ...]:
    """
    Daily order count and revenue from the chart start to now.

    Only valid orders created inside [chart_start, now] are counted.
    """
    chart = windows.chart
    buckets: Dict[date, List[float]] = {
        day: [0, 0.0] for day in date_range(chart.start.date(), chart.end.date())
    }

    for order in orders:
        if not is_valid_order(order):
            continue
        created = to_local(order.created_at, windows.now)
        if not chart.contains(created):
            continue
        bucket = buckets[created.date()]
        bucket[0] += 1
        bucket[1] += order.total_amount

    return tuple(
        DailyBucket(date=day, orders=count, revenue=revenue)
        for day, (count, revenue) in sorted(buckets.items())
    )


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00"


def build_hourly_series(
    orders: Iterable[OrderRecord],
    windows: ReportingWindows,
) -> Tuple[HourlyBucket, ...]:
    """Valid orders placed today, bucketed by hour of day (00:00 to 23:00)."""
    counts = [0] * HOURS_PER_DAY
    revenue = [0.0] * HOURS_PER_DAY

    for order in orders:
        if not is_valid_order(order):
            continue
        created = to_local(order.created_at, windows.now)
        if windows.today.contains(created):
            counts[created.hour] += 1
            revenue[created.hour] += order.total_amount

    return tuple(
        HourlyBucket(hour=hour, label=hour_label(hour), orders=counts[hour], revenue=revenue[hour])
        for hour in range(HOURS_PER_DAY)
    )
