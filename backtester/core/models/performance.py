"""
Equity curve data point model.
"""

from dataclasses import dataclass
from datetime import date

from backtester.core.exceptions.backtest import ValidationError


@dataclass(frozen=True, slots=True)
class PerformanceDataPoint:
    """Portfolio and benchmark value at the close of one date.

    Points are only meaningful as an ascending, duplicate-free sequence:
    the drawdown of each point depends on every point before it.
    """

    date: date
    strategy_value: float
    benchmark_value: float
    drawdown: float

    def __post_init__(self) -> None:
        """Validate drawdown bounds."""
        if not 0.0 <= self.drawdown <= 1.0:
            raise ValidationError(f"Drawdown must be within [0, 1], got {self.drawdown}")

    def to_dict(self) -> dict:
        """Convert data point to dictionary."""
        return {
            "date": self.date.isoformat(),
            "strategy": self.strategy_value,
            "benchmark": self.benchmark_value,
            "drawdown": self.drawdown,
        }
