"""
Dynamic leverage sizing.

Higher risk/reward setups receive more leverage, up to the asset class cap.
"""

import math

from backtester.core.constants import MAX_RISK_REWARD, MIN_DYNAMIC_LEVERAGE, MIN_RISK_REWARD


def calculate_leverage(rr: float, max_leverage: int) -> int:
    """Map a trade's risk/reward ratio to an integer leverage multiplier.

    The ratio is clamped to [2.5, 5.0] and leverage is interpolated linearly
    from 2 (at 2.5) to ``max_leverage`` (at 5.0), then rounded to the nearest
    integer with halves rounding up.

    Args:
        rr: Risk/reward ratio of the trade
        max_leverage: Maximum leverage of the symbol's asset class

    Returns:
        Leverage multiplier; 2 when ``max_leverage`` leaves no room to interpolate

    Examples:
        >>> calculate_leverage(2.5, 20)
        2
        >>> calculate_leverage(3.75, 10)
        6
    """
    leverage_range = max_leverage - MIN_DYNAMIC_LEVERAGE
    rr_range = MAX_RISK_REWARD - MIN_RISK_REWARD
    if leverage_range <= 0 or rr_range <= 0:
        return MIN_DYNAMIC_LEVERAGE

    if math.isnan(rr):
        rr = MIN_RISK_REWARD
    clamped_rr = min(max(rr, MIN_RISK_REWARD), MAX_RISK_REWARD)

    leverage = MIN_DYNAMIC_LEVERAGE + ((clamped_rr - MIN_RISK_REWARD) / rr_range) * leverage_range
    rounded = math.floor(leverage + 0.5)
    return int(min(max(rounded, MIN_DYNAMIC_LEVERAGE), max_leverage))
