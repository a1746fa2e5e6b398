"""
Historical bar domain model.
"""

from dataclasses import dataclass
from datetime import date, datetime

from backtester.core.exceptions.backtest import ValidationError


@dataclass(frozen=True, slots=True)
class HistoricalBar:
    """One OHLCV observation for a symbol at a timestamp.

    Invariant: low <= min(open, close) <= max(open, close) <= high.
    """

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        """Validate bar data after initialization."""
        for name in ("open", "high", "low", "close"):
            value = getattr(self, name)
            if not value > 0:
                raise ValidationError(f"Bar {name} must be positive, got {value}")
        if self.volume < 0:
            raise ValidationError(f"Bar volume must be non-negative, got {self.volume}")
        body_low = min(self.open, self.close)
        body_high = max(self.open, self.close)
        if self.low > body_low or body_high > self.high:
            raise ValidationError(
                f"Invalid OHLC relationship at {self.timestamp.isoformat()}: "
                f"open={self.open}, high={self.high}, low={self.low}, close={self.close}"
            )

    @property
    def date(self) -> date:
        """Calendar date the bar belongs to (P&L aggregation key)."""
        return self.timestamp.date()

    def to_dict(self) -> dict:
        """Convert bar to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
