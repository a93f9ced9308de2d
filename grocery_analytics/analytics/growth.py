"""
Period-over-period growth with a zero baseline.
"""

import math


def growth_rate(current: float, previous: float) -> float:
    """
    Percentage change from `previous` to `current`.

    Returns 0 when there is no positive previous value to compare against,
    so the result is always a finite number.
    """
    if not (math.isfinite(current) and math.isfinite(previous)) or previous <= 0:
        return 0.0
    rate = ((current - previous) / previous) * 100
    return rate if math.isfinite(rate) else 0.0


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 for an empty denominator"""
    if denominator == 0:
        return 0.0
    return numerator / denominator
