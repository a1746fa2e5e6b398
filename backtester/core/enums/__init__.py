"""
Core enumerations for the backtesting engine.

This module provides centralized enumerations for domain concepts
like bar granularities, asset classes and trade outcomes.
"""

from .asset_classes import AssetClass, AssetUniverse
from .timeframes import Timeframe
from .trade_types import ExitReason, TradeOutcome

__all__ = ["AssetClass", "AssetUniverse", "Timeframe", "ExitReason", "TradeOutcome"]
