"""
Presentation breakdowns of a trade list.
"""

from collections import defaultdict
from collections.abc import Sequence

import numpy as np

from backtester.core.constants import PNL_DISTRIBUTION_BUCKETS
from backtester.core.enums import AssetClass
from backtester.core.models.backtest import AllocationSlice, PnlBucket
from backtester.core.models.trade import Trade
from backtester.core.types.financial import safe_divide


def build_pnl_distribution(
    trades: Sequence[Trade], buckets: int = PNL_DISTRIBUTION_BUCKETS
) -> list[PnlBucket]:
    """Histogram of per-trade net P&L in equal-width bins.

    When every trade has the same P&L a single bin holds them all.
    """
    if not trades:
        return []

    pnls = np.array([trade.pnl for trade in trades], dtype=float)
    low, high = float(pnls.min()), float(pnls.max())
    if low == high:
        return [PnlBucket(name=f"${low:,.2f}", count=len(trades), bucket=low)]

    counts, edges = np.histogram(pnls, bins=buckets, range=(low, high))
    return [
        PnlBucket(
            name=f"${edges[i]:,.2f} to ${edges[i + 1]:,.2f}",
            count=int(counts[i]),
            bucket=float(edges[i]),
        )
        for i in range(len(counts))
    ]


def build_allocation(trades: Sequence[Trade]) -> list[AllocationSlice]:
    """Share of total traded notional per asset class, largest first."""
    notional_by_class: defaultdict[AssetClass, float] = defaultdict(float)
    for trade in trades:
        notional_by_class[trade.asset_class] += trade.notional_value

    total = sum(notional_by_class.values())
    slices = [
        AllocationSlice(
            name=asset_class.value,
            value=safe_divide(notional, total) * 100,
            fill=AssetClass.color(asset_class),
        )
        for asset_class, notional in notional_by_class.items()
    ]
    return sorted(slices, key=lambda s: s.value, reverse=True)
