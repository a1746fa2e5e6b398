"""
CSV price bar provider.

Loads historical OHLCV bars from one CSV file per symbol and granularity:

    <data_directory>/<SYMBOL>/<timeframe>.csv

with columns ``timestamp, open, high, low, close, volume``. Timestamps are
either epoch milliseconds or ISO-8601 strings.
"""

import asyncio
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from threading import RLock

import pandas as pd
from cachetools import LRUCache
from loguru import logger

from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import DataError
from backtester.core.interfaces.data import IPriceBarProvider
from backtester.core.models.bar import HistoricalBar

from .ohlcv_validator import REQUIRED_COLUMNS, OHLCVValidator


def symbol_directory_name(symbol: str) -> str:
    """File-system safe directory name for a symbol (``BTC/USD`` -> ``BTC-USD``)."""
    return symbol.replace("/", "-").replace("\\", "-")


def frame_to_bars(frame: pd.DataFrame) -> list[HistoricalBar]:
    """Convert a validated OHLCV frame into bars sorted by timestamp."""
    if frame.empty:
        return []
    timestamps = frame["timestamp"]
    if pd.api.types.is_numeric_dtype(timestamps):
        parsed = pd.to_datetime(timestamps, unit="ms", utc=True)
    else:
        parsed = pd.to_datetime(timestamps, utc=True)

    ordered = frame.assign(timestamp=parsed).sort_values("timestamp")
    return [
        HistoricalBar(
            timestamp=row.timestamp.to_pydatetime(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for row in ordered.itertuples(index=False)
    ]


class CSVPriceBarProvider(IPriceBarProvider):
    """
    CSV-based price bar provider with caching.

    Features:
    - One file per (symbol, timeframe)
    - LRU caching of parsed bars
    - Validation of every file before use
    - Missing files yield an empty series, not an error
    """

    DEFAULT_CACHE_SIZE = 100

    def __init__(self, data_directory: str | Path = "data", cache_size: int = DEFAULT_CACHE_SIZE):
        """
        Initialize the CSV provider.

        Args:
            data_directory: Root directory containing one sub-directory per symbol
            cache_size: Maximum number of cached (symbol, timeframe) series

        Raises:
            DataError: If the data directory does not exist
        """
        if cache_size <= 0:
            raise ValueError("Cache size must be positive")
        self.data_dir = Path(data_directory)
        if not self.data_dir.is_dir():
            raise DataError(f"Data directory not found: {self.data_dir}")

        self._cache: LRUCache[tuple[str, Timeframe], list[HistoricalBar]] = LRUCache(
            maxsize=cache_size
        )
        self._cache_lock = RLock()
        self._validator = OHLCVValidator()

    def file_path(self, symbol: str, timeframe: Timeframe) -> Path:
        return self.data_dir / symbol_directory_name(symbol) / f"{timeframe.value}.csv"

    def available_symbols(self) -> list[str]:
        """Directory names that hold at least one CSV file."""
        return sorted(
            entry.name
            for entry in self.data_dir.iterdir()
            if entry.is_dir() and any(entry.glob("*.csv"))
        )

    async def fetch(
        self, symbols: Sequence[str], start: date, end: date, timeframe: Timeframe
    ) -> dict[str, list[HistoricalBar]]:
        """Load every symbol concurrently and filter to [start, end]."""
        series = await asyncio.gather(*(self._load_series(s, timeframe) for s in symbols))
        result = {
            symbol: [bar for bar in bars if start <= bar.date <= end]
            for symbol, bars in zip(symbols, series, strict=True)
        }
        logger.info(
            f"Loaded {sum(len(bars) for bars in result.values())} {timeframe} bars "
            f"for {len(symbols)} symbol(s)"
        )
        return result

    async def _load_series(self, symbol: str, timeframe: Timeframe) -> list[HistoricalBar]:
        key = (symbol, timeframe)
        with self._cache_lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        path = self.file_path(symbol, timeframe)
        if not path.exists():
            logger.warning(f"Missing data file for {symbol}: {path}")
            return []

        loop = asyncio.get_running_loop()
        bars = await loop.run_in_executor(None, self._read_bars, path, symbol)
        with self._cache_lock:
            self._cache[key] = bars
        return bars

    def _read_bars(self, path: Path, symbol: str) -> list[HistoricalBar]:
        """Read, validate and convert one CSV file."""
        try:
            logger.debug(f"Loading file: {path}")
            frame = pd.read_csv(path)
        except pd.errors.EmptyDataError:
            return []
        except OSError as e:
            logger.error(f"File system error loading {path.name}: {e}")
            raise DataError(f"File system error loading {path.name}") from e
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            logger.error(f"CSV parsing error ({type(e).__name__}) in {path.name}: {e}")
            raise DataError(f"Failed to parse CSV file: {path.name}") from e

        missing = set(REQUIRED_COLUMNS) - set(frame.columns)
        if missing:
            raise DataError(f"{path.name} is missing columns: {sorted(missing)}")

        self._validator.validate_data(frame, source=symbol)
        return frame_to_bars(frame)

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()
