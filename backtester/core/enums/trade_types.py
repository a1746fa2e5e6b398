"""
Trade exit and outcome enumerations.
"""

from enum import StrEnum


class ExitReason(StrEnum):
    """
    Reason a simulated position was closed.

    Stop-loss is always evaluated before take-profit on the same bar.
    """

    TAKE_PROFIT = "TakeProfit"
    STOP_LOSS = "StopLoss"
    END_OF_PERIOD = "EndOfPeriod"

    @property
    def short_code(self) -> str:
        """Abbreviation shown in trade logs (TP, SL, EOD)."""
        codes = {
            ExitReason.TAKE_PROFIT: "TP",
            ExitReason.STOP_LOSS: "SL",
            ExitReason.END_OF_PERIOD: "EOD",
        }
        return codes[self]


class TradeOutcome(StrEnum):
    """Win/loss tag of a completed trade."""

    WIN = "Win"
    LOSS = "Loss"

    @classmethod
    def from_pnl(cls, pnl: float) -> "TradeOutcome":
        """A trade is a win only if its net P&L is strictly positive."""
        return cls.WIN if pnl > 0 else cls.LOSS
