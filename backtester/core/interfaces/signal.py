"""
Signal source interface.

The simulator asks a signal source whether to open a position on each bar.
Real signal logic plugs in here without touching the simulator.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from backtester.core.exceptions.backtest import ValidationError
from backtester.core.models.bar import HistoricalBar


@dataclass(frozen=True)
class EntryIntent:
    """Request to open a long position on the current bar.

    Attributes:
        risk_reward: Target distance divided by stop distance
    """

    risk_reward: float

    def __post_init__(self) -> None:
        if not self.risk_reward > 0:
            raise ValidationError(f"Risk/reward must be positive, got {self.risk_reward}")


class ISignalSource(ABC):
    """Abstract interface for entry signal generation."""

    @abstractmethod
    def evaluate(
        self, symbol: str, bar: HistoricalBar, history: Sequence[HistoricalBar]
    ) -> EntryIntent | None:
        """Decide whether to enter on ``bar``.

        Args:
            symbol: Symbol being simulated
            bar: Current bar
            history: Bars strictly before ``bar``, oldest first

        Returns:
            EntryIntent to open a position, or None to stay idle
        """
        pass

    def reset(self, symbol: str) -> None:
        """Called before a symbol's bars are replayed. No-op by default."""
        return None
