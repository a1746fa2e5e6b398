"""
Result assembly.

Packages the outputs of a run into one immutable BacktestResult.
"""

from collections.abc import Sequence

from backtester.core.exceptions.backtest import EmptyResultError
from backtester.core.interfaces.data import AdvisoryFeedback
from backtester.core.models.backtest import (
    AllocationSlice,
    BacktestConfig,
    BacktestResult,
    BacktestSummary,
    MetricItem,
    PnlBucket,
    RiskMetrics,
    RunConfiguration,
)
from backtester.core.models.performance import PerformanceDataPoint
from backtester.core.models.trade import Trade


def _change_type(value: float) -> str:
    return "positive" if value > 0 else "negative"


def headline_metrics(risk: RiskMetrics) -> list[MetricItem]:
    """Display labels for the headline KPIs."""
    return [
        MetricItem("Total P&L", f"${risk.total_pnl:,.2f}", _change_type(risk.total_pnl)),
        MetricItem(
            "Total Return", f"{risk.total_return_percent:.2f}%", _change_type(risk.total_pnl)
        ),
        MetricItem("Max Drawdown", f"{risk.max_drawdown * 100:.2f}%"),
        MetricItem("Sortino Ratio", f"{risk.sortino_ratio:.2f}"),
        MetricItem("Calmar Ratio", f"{risk.calmar_ratio:.2f}"),
    ]


def assemble_result(
    config: BacktestConfig,
    performance_data: Sequence[PerformanceDataPoint],
    trades: Sequence[Trade],
    risk: RiskMetrics,
    summary: BacktestSummary,
    pnl_distribution: Sequence[PnlBucket] = (),
    allocation: Sequence[AllocationSlice] = (),
    feedback: AdvisoryFeedback | None = None,
) -> BacktestResult:
    """Build the final result of a run.

    Raises:
        EmptyResultError: If the equity curve is empty
    """
    if not performance_data:
        raise EmptyResultError(symbols_simulated=0, bars_evaluated=0)

    feedback = feedback or AdvisoryFeedback()
    return BacktestResult(
        metrics=tuple(headline_metrics(risk)),
        performance_data=tuple(performance_data),
        trades=tuple(trades),
        summary=summary,
        risk=risk,
        config=RunConfiguration.from_config(config),
        pnl_distribution=tuple(pnl_distribution),
        allocation=tuple(allocation),
        stop_loss_feedback=feedback.stop_loss_feedback,
        optimizations=tuple(feedback.optimizations),
    )
