"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

import math

from backtester.core.exceptions.backtest import ValidationError


def validate_finite(value: float, param_name: str) -> float:
    """Validate that a numeric value is a finite number.

    Raises:
        ValidationError: If value is NaN or infinite
    """
    if not math.isfinite(value):
        raise ValidationError(f"{param_name} must be finite, got {value}")
    return value


def validate_percentage(value: float, param_name: str = "percentage") -> float:
    """Validate that a value is a valid percentage (0-100, exclusive of 0).

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated percentage

    Raises:
        ValidationError: If value is not between 0 and 100
    """
    validate_finite(value, param_name)
    if value <= 0 or value > 100:
        raise ValidationError(f"{param_name} must be between 0 and 100, got {value}")
    return value


def validate_probability(value: float, param_name: str = "probability") -> float:
    """Validate that a value lies in [0, 1].

    Raises:
        ValidationError: If value is outside [0, 1]
    """
    validate_finite(value, param_name)
    if value < 0 or value > 1:
        raise ValidationError(f"{param_name} must be between 0 and 1, got {value}")
    return value
