"""
Static symbol reference data.

Maps symbols to asset classes from the predefined universes, with crypto
pairs and explicit overrides layered on top.
"""

from collections.abc import Mapping

from loguru import logger

from backtester.core.enums import AssetClass, AssetUniverse
from backtester.core.interfaces.data import IAssetClassLookup

CRYPTO_PAIRS = ("BTC/USD", "ETH/USD", "SOL/USD")


class StaticAssetClassLookup(IAssetClassLookup):
    """
    Symbol to (asset class, max leverage) lookup backed by in-memory tables.

    Unknown symbols fall back to ``default_class`` (US Stocks).
    """

    def __init__(
        self,
        overrides: Mapping[str, AssetClass] | None = None,
        leverage_overrides: Mapping[AssetClass, int] | None = None,
        default_class: AssetClass = AssetClass.US_STOCKS,
    ):
        self.default_class = default_class
        self._classes: dict[str, AssetClass] = {}
        for universe in AssetUniverse:
            asset_class = AssetUniverse.asset_class(universe)
            for symbol in AssetUniverse.tickers(universe):
                self._classes[symbol] = asset_class
        for pair in CRYPTO_PAIRS:
            self._classes[pair] = AssetClass.CRYPTO
        self._classes.update(overrides or {})
        self._leverage_overrides = dict(leverage_overrides or {})

    def asset_class_of(self, symbol: str) -> AssetClass:
        """Asset class of a symbol, or the default for unknown symbols."""
        asset_class = self._classes.get(symbol)
        if asset_class is None:
            logger.debug(f"No asset class for {symbol}, using {self.default_class}")
            return self.default_class
        return asset_class

    def lookup(self, symbol: str) -> tuple[AssetClass, int]:
        asset_class = self.asset_class_of(symbol)
        max_leverage = self._leverage_overrides.get(
            asset_class, AssetClass.max_leverage(asset_class)
        )
        return asset_class, max_leverage
