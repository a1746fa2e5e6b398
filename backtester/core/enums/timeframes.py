"""
Sampling granularity enumerations.

This module defines the bar granularities the engine can simulate and the
per-granularity simulation parameters derived from them.
"""

from enum import StrEnum

from backtester.core.constants import (
    INTRADAY_MAX_LOOKBACK_DAYS,
    TRADING_DAYS_PER_YEAR,
    TRADING_HOURS_PER_DAY,
)


class Timeframe(StrEnum):
    """
    Allowed bar granularities.

    Values follow the market-data vendor naming (Alpaca style).
    """

    M5 = "5Min"  # 5 minutes
    M15 = "15Min"  # 15 minutes
    H1 = "1Hour"  # 1 hour
    D1 = "1Day"  # 1 day

    @classmethod
    def bars_per_year(cls, timeframe: "Timeframe") -> int:
        """
        Get the number of bars in a trading year.

        Args:
            timeframe: Timeframe enum value

        Returns:
            Bars per year used to annualize returns
        """
        hourly = TRADING_DAYS_PER_YEAR * TRADING_HOURS_PER_DAY
        conversions = {
            cls.M5: hourly * 12,
            cls.M15: hourly * 4,
            cls.H1: hourly,
            cls.D1: TRADING_DAYS_PER_YEAR,
        }
        return conversions[timeframe]

    @classmethod
    def trade_probability(cls, timeframe: "Timeframe") -> float:
        """
        Get the default per-bar entry probability.

        Args:
            timeframe: Timeframe enum value

        Returns:
            Probability that the default signal proposes an entry on a bar
        """
        probabilities = {
            cls.M5: 0.002,
            cls.M15: 0.007,
            cls.H1: 0.03,
            cls.D1: 0.2,
        }
        return probabilities[timeframe]

    @classmethod
    def holding_time(cls, timeframe: "Timeframe") -> str:
        """Get the display label for the typical holding time."""
        labels = {
            cls.M5: "5-60m",
            cls.M15: "15-180m",
            cls.H1: "1-8h",
            cls.D1: "1-5d",
        }
        return labels[timeframe]

    @classmethod
    def from_string(cls, value: str) -> "Timeframe":
        """
        Convert string to Timeframe enum, with case-insensitive matching.

        Args:
            value: String representation of timeframe

        Returns:
            Corresponding Timeframe enum value

        Raises:
            ValueError: If timeframe is not supported
        """
        value_lower = value.lower()

        for tf in cls:
            if tf.value.lower() == value_lower:
                return tf

        raise ValueError(
            f"Unsupported timeframe: {value}. "
            f"Supported timeframes: {', '.join([tf.value for tf in cls])}"
        )

    @property
    def is_intraday(self) -> bool:
        """Check if timeframe is intraday (less than 1 day)."""
        return self in [self.M5, self.M15, self.H1]

    @property
    def max_lookback_days(self) -> int | None:
        """Maximum history window available for this timeframe (None if unlimited)."""
        return INTRADAY_MAX_LOOKBACK_DAYS if self.is_intraday else None
