"""
Daily P&L aggregation.
"""

import math
from collections.abc import Iterable
from datetime import date

from backtester.core.models.trade import Trade


def aggregate_daily_pnl(
    trades: Iterable[Trade], session_dates: Iterable[date] = ()
) -> dict[date, float]:
    """Fold trade P&L into per-date totals.

    Trades are keyed by the calendar date of the bar that resolved them,
    regardless of strategy or symbol. The result does not depend on trade
    order: each date's total is an exactly rounded ``math.fsum``.

    Args:
        trades: Completed trades
        session_dates: Simulated dates to include even without trades (0.0)

    Returns:
        Mapping of date to net P&L, sorted ascending by date
    """
    per_date: dict[date, list[float]] = {day: [] for day in session_dates}
    for trade in trades:
        per_date.setdefault(trade.timestamp.date(), []).append(trade.pnl)

    return {day: math.fsum(per_date[day]) for day in sorted(per_date)}
