"""
Backtest engine.

Runs the full pipeline for a configuration:

    fetch bars + advisory text (concurrently)
      -> simulate trades per (strategy, symbol)
      -> aggregate P&L per date
      -> build the equity curve
      -> compute metrics
      -> assemble the result

Structural absence of data aborts the run with an EngineError subclass;
numeric degeneracy in the metrics is resolved to 0 and never aborts.
"""

import asyncio
from collections.abc import Callable, Sequence
from datetime import date

from loguru import logger

from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import (
    DataUnavailableError,
    EmptyResultError,
    InputError,
)
from backtester.core.interfaces.data import (
    AdvisoryFeedback,
    IAdvisoryProvider,
    IAssetClassLookup,
    IPriceBarProvider,
)
from backtester.core.interfaces.signal import ISignalSource
from backtester.core.models.backtest import BacktestConfig, BacktestResult
from backtester.core.models.bar import HistoricalBar
from backtester.core.models.trade import Trade
from backtester.infrastructure.reference.asset_lookup import StaticAssetClassLookup

from .aggregator import aggregate_daily_pnl
from .analytics import build_allocation, build_pnl_distribution
from .assembler import assemble_result
from .equity_curve import build_equity_curve
from .metrics import RiskMetricsCalculator, summarize_trades
from .signals import ProbabilisticSignal
from .simulator import SimulationSettings, TradeSimulator

SignalFactory = Callable[[BacktestConfig], ISignalSource]


def default_signal_factory(seed: int | None = None) -> SignalFactory:
    """Factory for the probabilistic placeholder signal at the run's granularity."""

    def factory(config: BacktestConfig) -> ISignalSource:
        return ProbabilisticSignal(Timeframe.trade_probability(config.timeframe), seed=seed)

    return factory


class BacktestEngine:
    """
    Portfolio backtesting engine.

    Collaborators are injected; only the price bar provider is required.

    Args:
        price_provider: Source of historical bars
        asset_lookup: Symbol to (asset class, max leverage); static tables by default
        advisory_provider: Optional source of feedback text
        signal_factory: Builds the entry signal for a run; probabilistic by default
    """

    def __init__(
        self,
        price_provider: IPriceBarProvider,
        asset_lookup: IAssetClassLookup | None = None,
        advisory_provider: IAdvisoryProvider | None = None,
        signal_factory: SignalFactory | None = None,
    ):
        self.price_provider = price_provider
        self.asset_lookup = asset_lookup or StaticAssetClassLookup()
        self.advisory_provider = advisory_provider
        self.signal_factory = signal_factory or default_signal_factory()

    async def run(self, config: BacktestConfig) -> BacktestResult:
        """Execute a backtest.

        Args:
            config: Run configuration

        Returns:
            Immutable BacktestResult

        Raises:
            ValidationError: If numeric or date fields are out of range
            InputError: If no strategy or no symbol is selected
            DataUnavailableError: If no symbol has enough bars
            EmptyResultError: If the simulation produced no trades
        """
        config.validate()
        self._check_inputs(config)

        logger.info(
            f"Starting backtest: {len(config.strategies)} strategies, "
            f"{len(config.all_symbols())} symbols, {config.timeframe}, "
            f"{config.start_date} to {config.end_date}"
        )

        bars_by_symbol, feedback = await asyncio.gather(
            self.price_provider.fetch(
                config.symbols_to_fetch(), config.start_date, config.end_date, config.timeframe
            ),
            self._fetch_feedback(config),
        )

        simulator = TradeSimulator(
            settings=SimulationSettings(
                initial_capital=config.initial_capital,
                commission=config.commission,
                slippage_percent=config.slippage_percent,
                position_fraction=config.position_fraction,
                use_trend_bias=config.use_trend_bias,
                lookback_bars=config.lookback_bars,
                holding_time=Timeframe.holding_time(config.timeframe),
            ),
            signal_source=self.signal_factory(config),
            asset_lookup=self.asset_lookup,
            max_workers=config.max_workers,
        )

        pairs = simulator.plan(config.strategies, bars_by_symbol)
        if not pairs:
            raise DataUnavailableError(config.all_symbols(), config.lookback_bars)

        outcome = simulator.run_pairs(pairs, bars_by_symbol)
        if not outcome.trades:
            raise EmptyResultError(outcome.symbols_simulated, outcome.bars_evaluated)

        return self._build_result(
            config, outcome.trades, outcome.session_dates, bars_by_symbol, feedback
        )

    def _check_inputs(self, config: BacktestConfig) -> None:
        if not config.strategies:
            raise InputError("No strategies selected")
        if not config.all_symbols():
            raise InputError(
                "No symbols could be resolved for the selected strategies",
                strategy_ids=[strategy.strategy_id for strategy in config.strategies],
            )

    async def _fetch_feedback(self, config: BacktestConfig) -> AdvisoryFeedback:
        """Ask the advisory provider for feedback; failures degrade to no feedback."""
        if self.advisory_provider is None:
            return AdvisoryFeedback()

        models = [model for strategy in config.strategies for model in strategy.models]
        training_period = max(strategy.training_period_years for strategy in config.strategies)
        stop_loss = min(strategy.stop_loss_percentage for strategy in config.strategies)
        try:
            return await self.advisory_provider.get_feedback(models, training_period, stop_loss)
        except Exception as e:
            logger.warning(f"Advisory provider failed ({type(e).__name__}): {e}")
            return AdvisoryFeedback()

    def _build_result(
        self,
        config: BacktestConfig,
        trades: Sequence[Trade],
        session_dates: Sequence[date],
        bars_by_symbol: dict[str, list[HistoricalBar]],
        feedback: AdvisoryFeedback,
    ) -> BacktestResult:
        daily_pnl = aggregate_daily_pnl(trades, session_dates)
        curve = build_equity_curve(
            daily_pnl, config.initial_capital, bars_by_symbol.get(config.benchmark_symbol, [])
        )

        calculator = RiskMetricsCalculator(
            bars_per_year=Timeframe.bars_per_year(config.timeframe),
            risk_free_rate=config.risk_free_rate,
        )
        risk = calculator.calculate(curve, config.initial_capital)
        summary = summarize_trades(trades)

        logger.info(
            f"Backtest complete: {summary.trades} trades, win rate {summary.win_rate_display}%, "
            f"total P&L {risk.total_pnl:.2f}, max drawdown {risk.max_drawdown:.2%}"
        )
        return assemble_result(
            config=config,
            performance_data=curve,
            trades=trades,
            risk=risk,
            summary=summary,
            pnl_distribution=build_pnl_distribution(trades),
            allocation=build_allocation(trades),
            feedback=feedback,
        )


def run_backtest(
    config: BacktestConfig,
    price_provider: IPriceBarProvider,
    **engine_kwargs,
) -> BacktestResult:
    """Synchronous convenience wrapper around ``BacktestEngine.run``."""
    engine = BacktestEngine(price_provider, **engine_kwargs)
    return asyncio.run(engine.run(config))
