"""
In-memory price bar provider.
"""

from collections.abc import Mapping, Sequence
from datetime import date

from backtester.core.enums import Timeframe
from backtester.core.interfaces.data import IPriceBarProvider
from backtester.core.models.bar import HistoricalBar


class InMemoryPriceBarProvider(IPriceBarProvider):
    """Serves bars held in memory, filtered to the requested date range.

    The timeframe is not checked: callers are expected to load bars of the
    granularity they will request.
    """

    def __init__(self, bars_by_symbol: Mapping[str, Sequence[HistoricalBar]]):
        self._bars = {
            symbol: sorted(bars, key=lambda bar: bar.timestamp)
            for symbol, bars in bars_by_symbol.items()
        }

    async def fetch(
        self, symbols: Sequence[str], start: date, end: date, timeframe: Timeframe
    ) -> dict[str, list[HistoricalBar]]:
        return {
            symbol: [bar for bar in self._bars.get(symbol, []) if start <= bar.date <= end]
            for symbol in symbols
        }

    def available_symbols(self) -> list[str]:
        return sorted(symbol for symbol, bars in self._bars.items() if bars)
