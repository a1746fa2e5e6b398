"""
Asset class and asset universe enumerations.

This module defines the asset classes the engine sizes leverage for and
the predefined universes strategies draw their symbols from.
"""

from enum import StrEnum


class AssetClass(StrEnum):
    """
    Allowed asset classes.

    Each class carries a maximum leverage used by the dynamic leverage sizer.
    """

    US_STOCKS = "US Stocks"
    GLOBAL_STOCKS = "Global Stocks"
    UK_STOCKS = "UK Stocks"
    EU_STOCKS = "EU Stocks"
    ASIAN_STOCKS = "Asian Stocks"
    CRYPTO = "Crypto"
    COMMODITIES = "Commodities"
    FOREX = "Forex"
    BONDS = "Bonds"
    INDICES = "Indices"

    @classmethod
    def max_leverage(cls, asset_class: "AssetClass") -> int:
        """
        Get maximum allowed leverage for an asset class.

        Args:
            asset_class: Asset class enum value

        Returns:
            Maximum leverage as int
        """
        max_leverages = {
            cls.US_STOCKS: 5,
            cls.GLOBAL_STOCKS: 5,
            cls.UK_STOCKS: 5,
            cls.EU_STOCKS: 5,
            cls.ASIAN_STOCKS: 5,
            cls.CRYPTO: 10,
            cls.COMMODITIES: 20,
            cls.FOREX: 30,
            cls.BONDS: 30,
            cls.INDICES: 20,
        }
        return max_leverages[asset_class]

    @classmethod
    def color(cls, asset_class: "AssetClass") -> str:
        """Get the chart colour used for allocation breakdowns."""
        colors = {
            cls.US_STOCKS: "#3b82f6",
            cls.GLOBAL_STOCKS: "#d946ef",
            cls.CRYPTO: "#f97316",
            cls.COMMODITIES: "#16a34a",
            cls.FOREX: "#ef4444",
            cls.BONDS: "#8b5cf6",
            cls.INDICES: "#eab308",
            cls.UK_STOCKS: "#06b6d4",
            cls.EU_STOCKS: "#6366f1",
            cls.ASIAN_STOCKS: "#f43f5e",
        }
        return colors[asset_class]


class AssetUniverse(StrEnum):
    """
    Predefined symbol universes.

    The ticker lists are representative samples, not full index constituents.
    """

    SP500 = "S&P 500"
    EU50 = "EU50"
    FTSE100 = "FTSE100"
    ASIAN50 = "Asian50"
    BONDS = "Bonds"
    INDICES = "Indices"
    FOREX = "Forex"
    COMMODITIES = "Commodities"

    @classmethod
    def tickers(cls, universe: "AssetUniverse") -> list[str]:
        """
        Get the ticker symbols belonging to a universe.

        Args:
            universe: Asset universe enum value

        Returns:
            List of ticker symbols
        """
        return list(_UNIVERSE_TICKERS[universe])

    @classmethod
    def asset_class(cls, universe: "AssetUniverse") -> AssetClass:
        """Get the asset class every ticker in a universe belongs to."""
        mapping = {
            cls.SP500: AssetClass.US_STOCKS,
            cls.EU50: AssetClass.EU_STOCKS,
            cls.FTSE100: AssetClass.UK_STOCKS,
            cls.ASIAN50: AssetClass.ASIAN_STOCKS,
            cls.BONDS: AssetClass.BONDS,
            cls.INDICES: AssetClass.INDICES,
            cls.FOREX: AssetClass.FOREX,
            cls.COMMODITIES: AssetClass.COMMODITIES,
        }
        return mapping[universe]

    @classmethod
    def from_string(cls, value: str) -> "AssetUniverse":
        """
        Convert string to AssetUniverse enum, matching value or member name.

        Raises:
            ValueError: If universe is not supported
        """
        for universe in cls:
            if value in (universe.value, universe.name):
                return universe

        raise ValueError(
            f"Unsupported asset universe: {value}. "
            f"Supported universes: {', '.join([u.value for u in cls])}"
        )


_UNIVERSE_TICKERS: dict[AssetUniverse, tuple[str, ...]] = {
    AssetUniverse.SP500: (
        "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "TSLA", "JPM", "JNJ", "V", "UNH",
        "HD", "PG", "BAC", "MA", "XOM", "CVX", "PFE", "KO", "PEP", "DIS",
    ),
    AssetUniverse.EU50: (
        "ASML.AS", "NVO", "LVMH.PA", "MC.PA", "OR.PA", "SAP.DE", "SIE.DE", "AIR.PA", "TTE",
        "IDEXY",
    ),
    AssetUniverse.FTSE100: (
        "SHEL", "AZN.L", "HSBA.L", "ULVR.L", "DGE.L", "BP.L", "BATS.L", "GLEN.L", "RIO.L",
        "BARC.L",
    ),
    AssetUniverse.ASIAN50: (
        "BABA", "TM", "SONY", "600519.SS", "TSM", "TCEHY", "HDB", "SMFG", "MUFG", "INFY",
    ),
    AssetUniverse.BONDS: ("TLT", "IEF", "SHY", "LQD", "HYG", "BND", "AGG", "TIP", "JNK", "VCSH"),
    AssetUniverse.INDICES: ("^GSPC", "^GDAXI", "^FTSE", "^N225", "^HSI", "EEM"),
    AssetUniverse.FOREX: (
        "EURUSD=X", "USDJPY=X", "GBPUSD=X", "AUDUSD=X", "USDCAD=X", "USDCHF=X", "NZDUSD=X",
        "EURJPY=X", "GBPJPY=X", "EURGBP=X", "AUDJPY=X", "CADJPY=X", "CHFJPY=X", "EURAUD=X",
        "EURCAD=X",
    ),
    AssetUniverse.COMMODITIES: (
        "GLD", "SLV", "USO", "UNG", "CORN", "WEAT", "SOYB", "DBA", "USCI", "PPLT", "PALL",
        "CPER", "NIB", "JO", "SGG",
    ),
}
