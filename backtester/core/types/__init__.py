"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    HUNDRED,
    ZERO,
    calculate_long_pnl,
    finite_or_zero,
    percent_to_fraction,
    safe_divide,
    safe_mean,
)

__all__ = [
    # Utility functions
    "percent_to_fraction",
    "finite_or_zero",
    "safe_divide",
    "safe_mean",
    "calculate_long_pnl",
    # Constants
    "ZERO",
    "HUNDRED",
]
