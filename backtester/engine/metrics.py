"""
Risk and trade metrics calculator.

Numeric degeneracy (empty inputs, zero denominators, NaN, infinity) is
resolved here by substituting 0; nothing in this module raises for it.
"""

import math
from collections.abc import Sequence

import numpy as np

from backtester.core.constants import RISK_FREE_RATE
from backtester.core.models.backtest import BacktestSummary, RiskMetrics
from backtester.core.models.performance import PerformanceDataPoint
from backtester.core.models.trade import Trade
from backtester.core.types.financial import finite_or_zero, safe_divide, safe_mean


class RiskMetricsCalculator:
    """Annualized risk/return metrics for an equity curve.

    Args:
        bars_per_year: Periods per year of the curve's sampling granularity
        risk_free_rate: Annual risk-free rate subtracted in the Sortino ratio
    """

    def __init__(self, bars_per_year: int, risk_free_rate: float = RISK_FREE_RATE):
        self.bars_per_year = bars_per_year
        self.risk_free_rate = risk_free_rate

    @staticmethod
    def period_returns(curve: Sequence[PerformanceDataPoint]) -> np.ndarray:
        """Simple returns between consecutive points; 0 where the prior value is not positive."""
        if len(curve) < 2:
            return np.zeros(0)
        values = np.array([point.strategy_value for point in curve], dtype=float)
        previous = values[:-1]
        changes = values[1:] - previous
        safe_previous = np.where(previous > 0, previous, 1.0)
        return np.where(previous > 0, changes / safe_previous, 0.0)

    @staticmethod
    def max_drawdown(curve: Sequence[PerformanceDataPoint]) -> float:
        """Largest per-point drawdown (0 for an empty curve)."""
        return max((point.drawdown for point in curve), default=0.0)

    def annualized_return(self, curve: Sequence[PerformanceDataPoint]) -> float:
        """Compound growth from the first to the last point, scaled to a year.

        A curve that ends at or below zero has lost everything: -1.0.
        """
        num_returns = len(curve) - 1
        if num_returns < 1:
            return 0.0
        initial_value = curve[0].strategy_value
        final_value = curve[-1].strategy_value
        if initial_value <= 0:
            return 0.0
        growth = final_value / initial_value
        if growth <= 0:
            return -1.0
        try:
            return math.pow(growth, self.bars_per_year / num_returns) - 1
        except OverflowError:
            return math.inf

    def downside_deviation(self, returns: np.ndarray) -> float:
        """Annualized root-mean-square of strictly negative returns (0 if none)."""
        negative = returns[returns < 0]
        if negative.size == 0:
            return 0.0
        return float(np.sqrt(np.mean(negative**2)) * math.sqrt(self.bars_per_year))

    def sortino_ratio(self, annualized_return: float, downside_deviation: float) -> float:
        """Excess return per unit of downside deviation; 0 when undefined."""
        if downside_deviation == 0:
            return 0.0
        return finite_or_zero(
            safe_divide(annualized_return - self.risk_free_rate, downside_deviation)
        )

    @staticmethod
    def calmar_ratio(annualized_return: float, max_drawdown: float) -> float:
        """Annualized return per unit of maximum drawdown; 0 when undefined."""
        if max_drawdown == 0:
            return 0.0
        return finite_or_zero(safe_divide(annualized_return, max_drawdown))

    def calculate(
        self, curve: Sequence[PerformanceDataPoint], initial_capital: float
    ) -> RiskMetrics:
        """Compute every curve-level metric.

        Args:
            curve: Equity curve sorted by date
            initial_capital: Starting capital used for total P&L and return

        Returns:
            RiskMetrics with all ratios finite
        """
        final_value = curve[-1].strategy_value if curve else initial_capital
        total_pnl = final_value - initial_capital

        returns = self.period_returns(curve)
        annualized = self.annualized_return(curve)
        downside = self.downside_deviation(returns)
        max_dd = self.max_drawdown(curve)

        return RiskMetrics(
            total_pnl=total_pnl,
            total_return_percent=safe_divide(total_pnl, initial_capital) * 100,
            annualized_return=annualized,
            downside_deviation=downside,
            max_drawdown=max_dd,
            sortino_ratio=self.sortino_ratio(annualized, downside),
            calmar_ratio=self.calmar_ratio(annualized, max_dd),
        )


def summarize_trades(trades: Sequence[Trade]) -> BacktestSummary:
    """Trade counts, win rate and per-trade averages. All zeros for no trades."""
    wins = [trade for trade in trades if trade.is_win]
    losses = [trade for trade in trades if not trade.is_win]

    return BacktestSummary(
        trades=len(trades),
        wins=len(wins),
        losses=len(losses),
        win_rate=safe_divide(len(wins), len(trades)) * 100,
        avg_win=safe_mean(trade.pnl for trade in wins),
        avg_loss=safe_mean(trade.pnl for trade in losses),
        avg_rr=safe_mean(trade.risk_reward for trade in trades),
        avg_position_size=safe_mean(trade.notional_value for trade in trades),
        avg_leverage=safe_mean(trade.leverage for trade in trades),
    )
