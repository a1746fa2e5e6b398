"""
Backtest configuration and results models.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date, timedelta

from backtester.core.constants import (
    BENCHMARK_SYMBOL,
    DEFAULT_COMMISSION,
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_SLIPPAGE_PERCENT,
    POSITION_FRACTION,
    RISK_FREE_RATE,
    TREND_LOOKBACK_BARS,
)
from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import ValidationError

from .performance import PerformanceDataPoint
from .strategy import StrategyConfig
from .trade import Trade


@dataclass(frozen=True)
class BacktestConfig:
    """Configuration for a backtest execution."""

    strategies: tuple[StrategyConfig, ...]
    start_date: date
    end_date: date
    initial_capital: float = DEFAULT_INITIAL_CAPITAL
    commission: float = DEFAULT_COMMISSION
    slippage_percent: float = DEFAULT_SLIPPAGE_PERCENT
    timeframe: Timeframe = Timeframe.D1
    use_trend_bias: bool = True
    benchmark_symbol: str = BENCHMARK_SYMBOL
    risk_free_rate: float = RISK_FREE_RATE
    position_fraction: float = POSITION_FRACTION
    lookback_bars: int = TREND_LOOKBACK_BARS
    max_workers: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategies", tuple(self.strategies))

    def is_valid_date_range(self) -> bool:
        """Validate that end_date is not before start_date."""
        return self.end_date >= self.start_date

    def duration_days(self) -> int:
        """Calculate duration of backtest in days."""
        return (self.end_date - self.start_date).days

    def is_valid_capital(self) -> bool:
        """Validate initial capital is a positive finite amount."""
        return math.isfinite(self.initial_capital) and self.initial_capital > 0

    def is_valid_costs(self) -> bool:
        """Validate commission and slippage are non-negative."""
        return self.commission >= 0 and self.slippage_percent >= 0

    def is_valid_sizing(self) -> bool:
        """Validate the position fraction and indicator lookback."""
        return 0 < self.position_fraction <= 1 and self.lookback_bars >= 1

    def validate(self) -> "BacktestConfig":
        """Validate all numeric and date fields.

        Strategy/symbol selection is checked by the engine, which reports it
        as an InputError instead.

        Raises:
            ValidationError: If any field is out of range
        """
        if not self.is_valid_date_range():
            raise ValidationError(
                f"end_date {self.end_date.isoformat()} is before start_date "
                f"{self.start_date.isoformat()}"
            )
        if not self.is_valid_capital():
            raise ValidationError(f"initial_capital must be positive, got {self.initial_capital}")
        if not self.is_valid_costs():
            raise ValidationError(
                f"Invalid costs: commission={self.commission}, "
                f"slippage_percent={self.slippage_percent}"
            )
        if not self.is_valid_sizing():
            raise ValidationError(
                f"Invalid sizing: position_fraction={self.position_fraction}, "
                f"lookback_bars={self.lookback_bars}"
            )
        if self.max_workers < 1:
            raise ValidationError(f"max_workers must be at least 1, got {self.max_workers}")
        return self

    def all_symbols(self) -> list[str]:
        """Union of every strategy's symbols, in first-seen order."""
        return list(dict.fromkeys(s for strategy in self.strategies for s in strategy.symbols))

    def symbols_to_fetch(self) -> list[str]:
        """Benchmark first, then every strategy symbol."""
        return list(dict.fromkeys([self.benchmark_symbol, *self.all_symbols()]))

    def clamp_intraday_range(self, today: date) -> "BacktestConfig":
        """Limit intraday runs to the data vendors' history window.

        Args:
            today: Reference date (usually the current date)

        Returns:
            Self if no clamping is needed, otherwise a copy with the range
            reset to the last ``max_lookback_days`` days ending today
        """
        max_days = self.timeframe.max_lookback_days
        if max_days is None or self.duration_days() <= max_days + 1:
            return self
        return replace(self, start_date=today - timedelta(days=max_days), end_date=today)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "strategies": [strategy.to_dict() for strategy in self.strategies],
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "initial_capital": self.initial_capital,
            "commission": self.commission,
            "slippage": self.slippage_percent,
            "timeframe": self.timeframe.value,
            "use_trend_bias": self.use_trend_bias,
            "benchmark_symbol": self.benchmark_symbol,
        }


@dataclass(frozen=True)
class RunConfiguration:
    """Echo of the run parameters shown alongside results."""

    start_date: date
    end_date: date
    initial_capital: float
    commission: float
    slippage_percent: float

    @classmethod
    def from_config(cls, config: BacktestConfig) -> "RunConfiguration":
        return cls(
            start_date=config.start_date,
            end_date=config.end_date,
            initial_capital=config.initial_capital,
            commission=config.commission,
            slippage_percent=config.slippage_percent,
        )

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "initial_capital": self.initial_capital,
            "commission": self.commission,
            "slippage": self.slippage_percent,
        }


@dataclass(frozen=True)
class MetricItem:
    """Headline metric as a display label/value pair."""

    label: str
    value: str
    change_type: str | None = None  # "positive" | "negative"


@dataclass(frozen=True)
class BacktestSummary:
    """Trade statistics of a run. Every average is 0.0 when there are no trades."""

    trades: int
    wins: int
    losses: int
    win_rate: float  # percent, unrounded
    avg_win: float
    avg_loss: float
    avg_rr: float
    avg_position_size: float  # mean notional value
    avg_leverage: float

    @property
    def win_rate_display(self) -> str:
        """Win rate formatted with two decimals."""
        return f"{self.win_rate:.2f}"

    def to_dict(self) -> dict:
        return {
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": self.win_rate_display,
            "avg_win": self.avg_win,
            "avg_loss": self.avg_loss,
            "avg_rr": self.avg_rr,
            "avg_position_size": self.avg_position_size,
            "avg_leverage": self.avg_leverage,
        }


@dataclass(frozen=True)
class RiskMetrics:
    """Annualized risk/return figures derived from the equity curve."""

    total_pnl: float
    total_return_percent: float
    annualized_return: float
    downside_deviation: float
    max_drawdown: float
    sortino_ratio: float
    calmar_ratio: float


@dataclass(frozen=True)
class PnlBucket:
    """One histogram bin of per-trade P&L."""

    name: str
    count: int
    bucket: float  # lower edge of the bin


@dataclass(frozen=True)
class AllocationSlice:
    """Share of traded notional attributed to one asset class."""

    name: str
    value: float  # percent of total notional
    fill: str


@dataclass(frozen=True)
class BacktestResult:
    """Results from a backtest execution. Built once per run, never mutated."""

    metrics: tuple[MetricItem, ...]
    performance_data: tuple[PerformanceDataPoint, ...]
    trades: tuple[Trade, ...]
    summary: BacktestSummary
    risk: RiskMetrics
    config: RunConfiguration
    pnl_distribution: tuple[PnlBucket, ...] = field(default_factory=tuple)
    allocation: tuple[AllocationSlice, ...] = field(default_factory=tuple)
    stop_loss_feedback: str = ""
    optimizations: tuple[str, ...] = field(default_factory=tuple)

    def performance_summary(self) -> dict:
        """Get a summary of key performance metrics."""
        if not self.performance_data:
            return {}

        return {
            "initial_value": self.config.initial_capital,
            "final_value": self.performance_data[-1].strategy_value,
            "total_return": self.risk.total_return_percent,
            "duration_days": (self.config.end_date - self.config.start_date).days,
        }

    def is_profitable(self) -> bool:
        """Check if the backtest was profitable."""
        return self.risk.total_pnl > 0.0

    def to_dict(self) -> dict:
        """Convert results to dictionary."""
        return {
            "metrics": [
                {"label": m.label, "value": m.value, "change_type": m.change_type}
                for m in self.metrics
            ],
            "performance_data": [point.to_dict() for point in self.performance_data],
            "trades": [trade.to_dict() for trade in self.trades],
            "summary": self.summary.to_dict(),
            "pnl_distribution": [
                {"name": b.name, "count": b.count, "bucket": b.bucket}
                for b in self.pnl_distribution
            ],
            "allocation": [
                {"name": a.name, "value": a.value, "fill": a.fill} for a in self.allocation
            ],
            "stop_loss_feedback": self.stop_loss_feedback,
            "optimizations": list(self.optimizations),
            "config": self.config.to_dict(),
        }
