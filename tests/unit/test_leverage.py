"""
Unit tests for dynamic leverage sizing.
"""

import math

import pytest

from backtester.engine.leverage import calculate_leverage


class TestCalculateLeverage:
    """Test suite for calculate_leverage."""

    def test_should_return_minimum_at_lowest_risk_reward(self) -> None:
        """Test that rr 2.5 maps to leverage 2."""
        assert calculate_leverage(2.5, 20) == 2

    def test_should_return_maximum_at_highest_risk_reward(self) -> None:
        """Test that rr 5.0 maps to the asset class cap."""
        assert calculate_leverage(5.0, 10) == 10
        assert calculate_leverage(5.0, 20) == 20

    def test_should_interpolate_linearly_between_bounds(self) -> None:
        """Test midpoint interpolation."""
        assert calculate_leverage(3.75, 10) == 6

    def test_should_round_halves_up(self) -> None:
        """Test that x.5 leverage rounds up."""
        # 2 + (3.125 - 2.5) / 2.5 * 2 = 2.5
        assert calculate_leverage(3.125, 4) == 3

    @pytest.mark.parametrize("rr", [0.0, 1.0, 2.4])
    def test_should_clamp_low_risk_reward(self, rr: float) -> None:
        """Test that rr below 2.5 is treated as 2.5."""
        assert calculate_leverage(rr, 30) == 2

    @pytest.mark.parametrize("rr", [5.01, 10.0, math.inf])
    def test_should_clamp_high_risk_reward(self, rr: float) -> None:
        """Test that rr above 5.0 is treated as 5.0."""
        assert calculate_leverage(rr, 30) == 30

    @pytest.mark.parametrize("max_leverage", [0, 1, 2])
    def test_should_return_two_when_cap_leaves_no_range(self, max_leverage: int) -> None:
        """Test degenerate asset class caps."""
        assert calculate_leverage(4.0, max_leverage) == 2

    def test_should_treat_nan_as_minimum_risk_reward(self) -> None:
        """Test NaN handling."""
        assert calculate_leverage(math.nan, 10) == 2

    def test_should_stay_within_bounds_for_any_risk_reward(self) -> None:
        """Test leverage bounds over a sweep of rr values."""
        for step in range(0, 80):
            leverage = calculate_leverage(step / 10, 5)
            assert 2 <= leverage <= 5
            assert isinstance(leverage, int)
