"""
Backtest simulation engine.

Leverage sizing, trade simulation, P&L aggregation, equity curve
reconstruction, risk metrics and result assembly.
"""

from .backtest_engine import BacktestEngine, default_signal_factory, run_backtest
from .leverage import calculate_leverage
from .signals import ProbabilisticSignal, ScheduledSignal, TrendBiasFilter
from .simulator import SimulationSettings, TradeSimulator

__all__ = [
    "BacktestEngine",
    "run_backtest",
    "default_signal_factory",
    "calculate_leverage",
    "ProbabilisticSignal",
    "ScheduledSignal",
    "TrendBiasFilter",
    "SimulationSettings",
    "TradeSimulator",
]
