"""
Equity curve reconstruction from aggregated daily P&L.
"""

from collections.abc import Mapping, Sequence
from datetime import date

from backtester.core.models.bar import HistoricalBar
from backtester.core.models.performance import PerformanceDataPoint


def benchmark_closes(bars: Sequence[HistoricalBar]) -> dict[date, float]:
    """Map each date to the last close seen on it."""
    closes: dict[date, float] = {}
    for bar in bars:
        closes[bar.date] = bar.close
    return closes


def calculate_drawdown(peak: float, value: float) -> float:
    """Fractional decline from peak, bounded to [0, 1] and 0 for a zero peak."""
    if peak <= 0:
        return 0.0
    return min(max((peak - value) / peak, 0.0), 1.0)


def build_equity_curve(
    daily_pnl: Mapping[date, float],
    initial_capital: float,
    benchmark_bars: Sequence[HistoricalBar] = (),
) -> list[PerformanceDataPoint]:
    """Walk dates in ascending order and build one data point per date.

    The portfolio starts at ``initial_capital`` and the running peak starts
    there too, so the first point can only show a drawdown if its own P&L
    is negative. The benchmark is rebased to ``initial_capital`` from the
    first benchmark close; dates without a benchmark close keep the last
    known value.

    Args:
        daily_pnl: Net P&L per date
        initial_capital: Starting portfolio value
        benchmark_bars: Price series of the benchmark symbol

    Returns:
        Performance data points sorted by date
    """
    closes = benchmark_closes(benchmark_bars)
    first_price = benchmark_bars[0].close if benchmark_bars else None

    portfolio_value = initial_capital
    peak_value = initial_capital
    benchmark_value = initial_capital
    curve: list[PerformanceDataPoint] = []

    for day in sorted(daily_pnl):
        portfolio_value += daily_pnl[day]
        peak_value = max(peak_value, portfolio_value)

        price = closes.get(day)
        if price is not None and first_price:
            benchmark_value = initial_capital * price / first_price

        curve.append(
            PerformanceDataPoint(
                date=day,
                strategy_value=portfolio_value,
                benchmark_value=benchmark_value,
                drawdown=calculate_drawdown(peak_value, portfolio_value),
            )
        )

    return curve
