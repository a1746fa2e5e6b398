"""
Shared factories for building bars and trades in tests.
"""

from datetime import UTC, datetime, timedelta

import pytest

from backtester.core.enums import AssetClass, ExitReason
from backtester.core.models.bar import HistoricalBar
from backtester.core.models.trade import Trade

START = datetime(2024, 1, 1, tzinfo=UTC)


def make_bar(
    day: int = 0,
    open: float = 100.0,
    high: float | None = None,
    low: float | None = None,
    close: float | None = None,
) -> HistoricalBar:
    """Daily bar ``day`` days after 2024-01-01; missing prices default to ``open``."""
    close = open if close is None else close
    return HistoricalBar(
        timestamp=START + timedelta(days=day),
        open=open,
        high=max(open, close) if high is None else high,
        low=min(open, close) if low is None else low,
        close=close,
        volume=1000.0,
    )


def make_trade(
    pnl: float = 10.0,
    day: int = 0,
    asset_class: AssetClass = AssetClass.US_STOCKS,
    notional: float = 2000.0,
    symbol: str = "AAPL",
    rr: float = 3.0,
) -> Trade:
    return Trade(
        trade_id=f"s1-{symbol}-{day}",
        strategy_id="s1",
        symbol=symbol,
        asset_class=asset_class,
        timestamp=START + timedelta(days=day),
        entry_price=100.0,
        exit_price=101.0,
        stop_loss_price=98.0,
        take_profit_price=106.0,
        position_size=notional / 100.0,
        notional_value=notional,
        leverage=2,
        pnl=pnl,
        pnl_percentage=pnl / notional * 100,
        risk_reward=rr,
        commission=0.5,
        slippage=0.0,
        exit_reason=ExitReason.END_OF_PERIOD,
    )


@pytest.fixture
def flat_bars() -> list[HistoricalBar]:
    """Six flat bars at 100: five lookback bars plus one tradable bar."""
    return [make_bar(day) for day in range(6)]


@pytest.fixture
def rising_bars() -> list[HistoricalBar]:
    """Sixty bars of a steadily rising price."""
    return [make_bar(day, open=100.0 + day, close=100.5 + day) for day in range(60)]
