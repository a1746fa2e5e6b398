"""
Trade domain model.
Optimized for high-performance backtesting with float operations.
"""

import math
from dataclasses import dataclass
from datetime import datetime

from backtester.core.enums import AssetClass, ExitReason, TradeOutcome
from backtester.core.exceptions.backtest import ValidationError


@dataclass(frozen=True)
class Trade:
    """A completed simulated long position.

    Created exactly once by the simulator when a bar resolves the position.
    """

    trade_id: str
    strategy_id: str
    symbol: str
    asset_class: AssetClass
    timestamp: datetime
    entry_price: float
    exit_price: float
    stop_loss_price: float
    take_profit_price: float
    position_size: float
    notional_value: float
    leverage: int
    pnl: float
    pnl_percentage: float
    risk_reward: float
    commission: float
    slippage: float
    exit_reason: ExitReason
    holding_time: str = ""

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        if self.entry_price <= 0:
            raise ValidationError(f"Entry price must be positive, got {self.entry_price}")
        # Slippage of 100% or more can push the exit fill to zero or below
        if not math.isfinite(self.exit_price):
            raise ValidationError(f"Exit price must be finite, got {self.exit_price}")
        if self.position_size <= 0:
            raise ValidationError(f"Position size must be positive, got {self.position_size}")
        if self.leverage < 1:
            raise ValidationError(f"Leverage must be at least 1, got {self.leverage}")
        if self.commission < 0:
            raise ValidationError(f"Commission must be non-negative, got {self.commission}")
        if self.slippage < 0:
            raise ValidationError(f"Slippage must be non-negative, got {self.slippage}")
        if not self.stop_loss_price < self.entry_price < self.take_profit_price:
            raise ValidationError(
                f"Expected stop < entry < target, got stop={self.stop_loss_price}, "
                f"entry={self.entry_price}, target={self.take_profit_price}"
            )

    @property
    def outcome(self) -> TradeOutcome:
        """Win iff net P&L is strictly positive."""
        return TradeOutcome.from_pnl(self.pnl)

    @property
    def is_win(self) -> bool:
        return self.outcome == TradeOutcome.WIN

    @property
    def gross_pnl(self) -> float:
        """P&L before commission."""
        return self.pnl + self.commission

    def to_dict(self) -> dict:
        """Convert trade to dictionary."""
        return {
            "id": self.trade_id,
            "strategy_id": self.strategy_id,
            "symbol": self.symbol,
            "asset_class": self.asset_class.value,
            "timestamp": self.timestamp.isoformat(),
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "stop_loss_price": self.stop_loss_price,
            "take_profit_price": self.take_profit_price,
            "position_size": self.position_size,
            "value": self.notional_value,
            "leverage": self.leverage,
            "pnl": self.pnl,
            "pnl_percentage": self.pnl_percentage,
            "rr": self.risk_reward,
            "commission": self.commission,
            "slippage": self.slippage,
            "exit_reason": self.exit_reason.value,
            "type": self.outcome.value,
            "holding_time": self.holding_time,
        }
