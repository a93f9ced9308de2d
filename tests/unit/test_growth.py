"""
Unit Tests - Growth Rate
"""
import math

import pytest

from grocery_analytics.analytics.growth import growth_rate, safe_ratio


class TestGrowthRate:
    """Tests for growth_rate"""

    @pytest.mark.parametrize("current", [0.0, 500.0, 12.5])
    def test_zero_previous_month_gives_zero(self, current):
        assert growth_rate(current, 0.0) == 0

    def test_increase(self):
        assert growth_rate(150.0, 100.0) == pytest.approx(50.0)

    def test_decrease(self):
        assert growth_rate(50.0, 200.0) == pytest.approx(-75.0)

    def test_non_finite_inputs_resolve_to_zero(self):
        assert growth_rate(math.inf, 100.0) == 0
        assert growth_rate(100.0, math.nan) == 0

    def test_result_always_finite(self):
        for current, previous in [(0, 0), (1e308, 1e-308), (500, 0)]:
            assert math.isfinite(growth_rate(current, previous))


class TestSafeRatio:
    """Tests for safe_ratio"""

    def test_empty_denominator(self):
        assert safe_ratio(100.0, 0) == 0

    def test_ratio(self):
        assert safe_ratio(300.0, 4) == 75.0
