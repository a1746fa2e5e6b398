"""
External collaborator interfaces.

The engine never talks to market-data vendors, AI services or reference
data directly; it depends on these abstractions instead.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from backtester.core.enums import AssetClass, Timeframe
from backtester.core.models.bar import HistoricalBar


class IPriceBarProvider(ABC):
    """Abstract interface for historical bar retrieval."""

    @abstractmethod
    async def fetch(
        self, symbols: Sequence[str], start: date, end: date, timeframe: Timeframe
    ) -> dict[str, list[HistoricalBar]]:
        """Load bars for every symbol, ascending by timestamp.

        A symbol the provider cannot serve maps to an empty list (or is
        absent); that is not an error.
        """
        pass

    def available_symbols(self) -> list[str]:
        """Symbols the provider can serve, if it can enumerate them."""
        return []


class IAssetClassLookup(ABC):
    """Abstract interface for symbol reference data."""

    @abstractmethod
    def lookup(self, symbol: str) -> tuple[AssetClass, int]:
        """Return the asset class of a symbol and its maximum leverage."""
        pass


@dataclass(frozen=True)
class AdvisoryFeedback:
    """Free-form advisory text embedded verbatim in results."""

    stop_loss_feedback: str = ""
    optimizations: tuple[str, ...] = field(default_factory=tuple)


class IAdvisoryProvider(ABC):
    """Abstract interface for natural-language strategy feedback."""

    @abstractmethod
    async def get_feedback(
        self, models: Sequence[str], training_period_years: int, stop_loss_percentage: float
    ) -> AdvisoryFeedback:
        """Produce feedback strings; the engine never parses them."""
        pass
