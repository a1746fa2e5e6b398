"""
Entry signal sources and filters.

Implements the Strategy Pattern for entry decisions: the simulator only
depends on ISignalSource, so these can be swapped for real models.
"""

import random
from collections.abc import Mapping, Sequence
from datetime import datetime

from backtester.core.constants import MAX_RISK_REWARD, MIN_RISK_REWARD, TREND_LOOKBACK_BARS
from backtester.core.exceptions.backtest import ValidationError
from backtester.core.interfaces.signal import EntryIntent, ISignalSource
from backtester.core.models.bar import HistoricalBar
from backtester.core.utils.validation import validate_probability


class ProbabilisticSignal(ISignalSource):
    """Placeholder signal that enters with a fixed per-bar probability.

    The risk/reward target is drawn uniformly from [min_rr, max_rr).
    Pass a seed (or a shared ``random.Random``) for reproducible runs.
    """

    def __init__(
        self,
        trade_probability: float,
        seed: int | None = None,
        rng: random.Random | None = None,
        min_rr: float = MIN_RISK_REWARD,
        max_rr: float = MAX_RISK_REWARD,
    ):
        self.trade_probability = validate_probability(trade_probability, "trade_probability")
        if not 0 < min_rr <= max_rr:
            raise ValidationError(f"Invalid risk/reward range: [{min_rr}, {max_rr})")
        self.min_rr = min_rr
        self.max_rr = max_rr
        self._rng = rng if rng is not None else random.Random(seed)

    def evaluate(
        self, symbol: str, bar: HistoricalBar, history: Sequence[HistoricalBar]
    ) -> EntryIntent | None:
        if self._rng.random() >= self.trade_probability:
            return None
        rr = self.min_rr + self._rng.random() * (self.max_rr - self.min_rr)
        return EntryIntent(risk_reward=rr)


class ScheduledSignal(ISignalSource):
    """Replays externally supplied entries keyed by (symbol, bar timestamp).

    Useful for simulating P&L of a known list of trade events.
    """

    def __init__(self, entries: Mapping[tuple[str, datetime], float]):
        self._entries = {key: EntryIntent(risk_reward=rr) for key, rr in entries.items()}

    def evaluate(
        self, symbol: str, bar: HistoricalBar, history: Sequence[HistoricalBar]
    ) -> EntryIntent | None:
        return self._entries.get((symbol, bar.timestamp))


class TrendBiasFilter:
    """Long-only trend gate: the bar must close above the mean of the prior closes."""

    def __init__(self, lookback: int = TREND_LOOKBACK_BARS):
        if lookback < 1:
            raise ValidationError(f"Trend lookback must be at least 1, got {lookback}")
        self.lookback = lookback

    def moving_average(self, history: Sequence[HistoricalBar]) -> float | None:
        """Simple moving average of the last ``lookback`` closes, None if too short."""
        if len(history) < self.lookback:
            return None
        window = history[len(history) - self.lookback :]
        return sum(bar.close for bar in window) / self.lookback

    def allows(self, bar: HistoricalBar, history: Sequence[HistoricalBar]) -> bool:
        """Check whether a long entry is permitted on ``bar``."""
        sma = self.moving_average(history)
        return sma is not None and bar.close > sma
