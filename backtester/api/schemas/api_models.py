"""
Pydantic schemas for API request/response models.
"""

from datetime import date

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from backtester.core.constants import (
    DEFAULT_COMMISSION,
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_SLIPPAGE_PERCENT,
)
from backtester.core.enums import AssetUniverse, Timeframe
from backtester.core.models.backtest import BacktestConfig
from backtester.core.models.strategy import StrategyConfig


class StrategyRequest(BaseModel):
    """A saved strategy selected for backtesting."""

    strategy_id: str = Field(..., min_length=1)
    name: str = ""
    models: list[str] = Field(default_factory=list, description="Opaque model tags")
    asset_universes: list[AssetUniverse] = Field(default_factory=list)
    custom_symbols: list[str] = Field(default_factory=list)
    stop_loss_percentage: float = Field(..., gt=0, le=100, description="Stop distance (%)")
    training_period_years: int = Field(default=5, ge=1)

    def to_strategy(self) -> StrategyConfig:
        return StrategyConfig.from_universes(
            strategy_id=self.strategy_id,
            stop_loss_percentage=self.stop_loss_percentage,
            asset_universes=self.asset_universes,
            custom_symbols=self.custom_symbols,
            name=self.name,
            models=tuple(self.models),
            training_period_years=self.training_period_years,
        )


class BacktestRequest(BaseModel):
    """Request model for backtest submission."""

    strategies: list[StrategyRequest] = Field(default_factory=list)
    start_date: date = Field(..., description="Backtest start date")
    end_date: date = Field(..., description="Backtest end date")
    initial_capital: float = Field(default=DEFAULT_INITIAL_CAPITAL, gt=0)
    commission: float = Field(default=DEFAULT_COMMISSION, ge=0, description="Per trade")
    slippage_percent: float = Field(
        default=DEFAULT_SLIPPAGE_PERCENT, ge=0, description="Per fill (%)"
    )
    timeframe: Timeframe = Field(default=Timeframe.D1, description="Bar granularity")
    use_trend_bias: bool = True
    seed: int | None = Field(default=None, description="Seed for the placeholder signal")

    @field_validator("end_date")
    @classmethod
    def validate_date_range(cls, v: date, info: ValidationInfo) -> date:
        """Validate that end_date is not before start_date."""
        if "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("end_date must not be before start_date")
        return v

    def to_config(self, today: date | None = None) -> BacktestConfig:
        """Build the engine configuration, clamping intraday ranges to ``today``."""
        config = BacktestConfig(
            strategies=tuple(strategy.to_strategy() for strategy in self.strategies),
            start_date=self.start_date,
            end_date=self.end_date,
            initial_capital=self.initial_capital,
            commission=self.commission,
            slippage_percent=self.slippage_percent,
            timeframe=self.timeframe,
            use_trend_bias=self.use_trend_bias,
        )
        return config.clamp_intraday_range(today or date.today())


class BacktestResultResponse(BaseModel):
    """Response model for backtest results."""

    status: str
    metrics: list[dict]
    performance_data: list[dict]
    trades: list[dict]
    summary: dict
    pnl_distribution: list[dict]
    allocation: list[dict]
    stop_loss_feedback: str
    optimizations: list[str]
    config: dict


class AssetUniverseInfo(BaseModel):
    """Response model for a predefined universe."""

    name: str
    asset_class: str
    tickers: list[str]


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    details: dict | None = None
