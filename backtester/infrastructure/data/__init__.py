"""
Price bar providers.

This module provides the market-data collaborators the engine reads
historical bars from.
"""

from .csv_provider import CSVPriceBarProvider
from .memory_provider import InMemoryPriceBarProvider
from .ohlcv_validator import OHLCVValidator

__all__ = ["CSVPriceBarProvider", "InMemoryPriceBarProvider", "OHLCVValidator"]
