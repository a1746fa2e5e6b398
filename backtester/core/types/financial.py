"""
Financial arithmetic helpers for backtest calculations.

The engine works in plain float64. Values are never rounded inside the
simulation; rounding is left to presentation.

Precision Considerations:
- Float64 provides ~15-16 significant decimal digits
- Per-date P&L sums use math.fsum so that many small trades on one date
  do not lose precision
- Ratios that can degenerate (zero denominators, NaN, infinity) are
  resolved with safe_divide/finite_or_zero instead of raising
"""

import math
from collections.abc import Iterable

# Common financial values as float constants
ZERO = 0.0
HUNDRED = 100.0


def percent_to_fraction(percentage: float) -> float:
    """Convert a percentage (0.05 meaning 0.05%) to a fraction."""
    return percentage / HUNDRED


def finite_or_zero(value: float) -> float:
    """Replace NaN and infinities with zero.

    Args:
        value: Result of a ratio computation

    Returns:
        The value itself if finite, otherwise 0.0
    """
    return value if math.isfinite(value) else ZERO


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 for a zero denominator or a non-finite result.

    Examples:
        >>> safe_divide(1.0, 0.0)
        0.0
        >>> safe_divide(3.0, 2.0)
        1.5
    """
    if denominator == ZERO:
        return ZERO
    return finite_or_zero(numerator / denominator)


def safe_mean(values: Iterable[float]) -> float:
    """Arithmetic mean that is 0.0 for an empty input.

    Uses math.fsum for an exactly rounded sum.
    """
    items = list(values)
    if not items:
        return ZERO
    return math.fsum(items) / len(items)


def calculate_long_pnl(entry_price: float, exit_price: float, size: float) -> float:
    """Calculate gross P&L of a long position.

    Args:
        entry_price: Fill price at entry
        exit_price: Fill price at exit
        size: Position size in units (absolute value)

    Returns:
        Gross P&L before commission
    """
    return (exit_price - entry_price) * abs(size)
