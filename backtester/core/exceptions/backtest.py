"""
Custom exception hierarchy for the backtesting engine.

This module defines domain-specific exceptions for better error handling.
Structural absence of data is fatal to a run; numeric degeneracy inside the
metrics calculator is recovered locally and never surfaces here.
"""


class BacktestException(Exception):
    """Base exception for all backtesting-related errors."""

    pass


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class DataError(BacktestException):
    """Raised when data access or processing fails."""

    pass


class EngineError(BacktestException):
    """Base exception for failures that abort a backtest run."""

    pass


class InputError(EngineError):
    """Raised when a run cannot start because of its input selection.

    Not retryable without changing the input.
    """

    def __init__(self, message: str, strategy_ids: list[str] | None = None):
        self.strategy_ids = list(strategy_ids or [])
        super().__init__(message)


class DataUnavailableError(EngineError):
    """Raised when no requested symbol has enough bars to simulate."""

    def __init__(self, symbols: list[str], min_bars: int):
        self.symbols = list(symbols)
        self.min_bars = min_bars
        super().__init__(
            f"No usable price data for any of {len(self.symbols)} symbol(s): "
            f"every series was empty or had at most {min_bars} bars"
        )


class EmptyResultError(EngineError):
    """Raised when data existed but the simulation produced no trades."""

    def __init__(self, symbols_simulated: int, bars_evaluated: int):
        self.symbols_simulated = symbols_simulated
        self.bars_evaluated = bars_evaluated
        super().__init__(
            "Could not generate performance data: no trades were executed "
            f"({bars_evaluated} bars evaluated across {symbols_simulated} symbol(s))"
        )
