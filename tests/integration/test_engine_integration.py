"""
Integration tests for the end-to-end backtest pipeline.
"""

from datetime import date

import pytest

from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import (
    DataUnavailableError,
    EmptyResultError,
    InputError,
    ValidationError,
)
from backtester.core.interfaces.data import AdvisoryFeedback, IAdvisoryProvider, IPriceBarProvider
from backtester.core.models.backtest import BacktestConfig
from backtester.core.models.strategy import StrategyConfig
from backtester.engine import BacktestEngine, ScheduledSignal, default_signal_factory, run_backtest
from backtester.infrastructure.advisory.static_advisor import StaticAdvisoryProvider
from backtester.infrastructure.data import InMemoryPriceBarProvider

from conftest import make_bar


class UnreachableProvider(IPriceBarProvider):
    """Fails the test if the engine fetches data."""

    async def fetch(self, symbols, start, end, timeframe):
        raise AssertionError("fetch must not be called")


class FailingAdvisor(IAdvisoryProvider):
    async def get_feedback(self, models, training_period_years, stop_loss_percentage):
        raise ConnectionError("advisory service unavailable")


def make_config(symbols: tuple[str, ...] = ("AAPL",), **overrides) -> BacktestConfig:
    values = {
        "strategies": (StrategyConfig("s1", symbols, 2.0, models=("LSTM",)),),
        "start_date": date(2024, 1, 1),
        "end_date": date(2024, 12, 31),
        "use_trend_bias": False,
    }
    values.update(overrides)
    return BacktestConfig(**values)


def scheduled(entries: dict[str, list], rr: float = 3.0):
    signal = ScheduledSignal(
        {(symbol, bar.timestamp): rr for symbol, bars in entries.items() for bar in bars}
    )
    return lambda config: signal


class TestBacktestEngine:
    """End-to-end tests for BacktestEngine."""

    @pytest.fixture
    def provider(self, rising_bars) -> InMemoryPriceBarProvider:
        benchmark = [make_bar(day, open=400.0 + day) for day in range(60)]
        return InMemoryPriceBarProvider(
            {"AAPL": rising_bars, "GLD": rising_bars, "SPY": benchmark}
        )

    @pytest.mark.asyncio
    async def test_should_run_full_pipeline(self, provider, rising_bars) -> None:
        """Test trades, curve and metrics of a scheduled run."""
        engine = BacktestEngine(
            provider,
            advisory_provider=StaticAdvisoryProvider(),
            signal_factory=scheduled({"AAPL": rising_bars[10:40:10], "GLD": rising_bars[20:21]}),
        )

        result = await engine.run(make_config(symbols=("AAPL", "GLD")))

        assert len(result.trades) == 4
        assert result.summary.trades == 4
        # One point per simulated date: 60 bars minus the 5 lookback bars
        assert len(result.performance_data) == 55
        dates = [point.date for point in result.performance_data]
        assert dates == sorted(dates)
        assert all(0.0 <= point.drawdown <= 1.0 for point in result.performance_data)
        final_value = result.performance_data[-1].strategy_value
        assert final_value - 100000.0 == pytest.approx(sum(trade.pnl for trade in result.trades))
        assert result.risk.total_pnl == pytest.approx(final_value - 100000.0)
        assert [m.label for m in result.metrics][0] == "Total P&L"
        assert {a.name for a in result.allocation} == {"US Stocks", "Commodities"}
        assert result.stop_loss_feedback
        assert result.config.initial_capital == 100000.0
        assert result.is_profitable() == (result.risk.total_pnl > 0)
        assert result.performance_summary()["final_value"] == final_value

    @pytest.mark.asyncio
    async def test_should_rebase_benchmark_to_initial_capital(self, provider, rising_bars) -> None:
        engine = BacktestEngine(provider, signal_factory=scheduled({"AAPL": rising_bars[10:11]}))

        result = await engine.run(make_config())

        first = result.performance_data[0]
        assert first.date == rising_bars[5].date
        assert first.benchmark_value == pytest.approx(100000.0 * 405.0 / 400.0)

    @pytest.mark.asyncio
    async def test_should_raise_input_error_without_strategies(self) -> None:
        engine = BacktestEngine(UnreachableProvider())

        with pytest.raises(InputError, match="No strategies"):
            await engine.run(make_config(strategies=()))

    @pytest.mark.asyncio
    async def test_should_raise_input_error_without_symbols(self) -> None:
        engine = BacktestEngine(UnreachableProvider())

        with pytest.raises(InputError) as exc_info:
            await engine.run(make_config(symbols=()))

        assert exc_info.value.strategy_ids == ["s1"]

    @pytest.mark.asyncio
    async def test_should_raise_validation_error_before_fetching(self) -> None:
        engine = BacktestEngine(UnreachableProvider())

        with pytest.raises(ValidationError):
            await engine.run(make_config(start_date=date(2025, 1, 1)))

    @pytest.mark.asyncio
    async def test_should_raise_data_unavailable_when_every_series_is_short(self) -> None:
        provider = InMemoryPriceBarProvider({"AAPL": [make_bar(day) for day in range(5)]})
        engine = BacktestEngine(provider)

        with pytest.raises(DataUnavailableError) as exc_info:
            await engine.run(make_config(symbols=("AAPL", "MSFT")))

        assert exc_info.value.symbols == ["AAPL", "MSFT"]

    @pytest.mark.asyncio
    async def test_should_raise_empty_result_when_no_trade_is_taken(self, provider) -> None:
        engine = BacktestEngine(provider, signal_factory=scheduled({}))

        with pytest.raises(EmptyResultError) as exc_info:
            await engine.run(make_config())

        assert exc_info.value.bars_evaluated == 55

    @pytest.mark.asyncio
    async def test_should_skip_short_symbols_and_run_the_rest(self, provider, rising_bars) -> None:
        engine = BacktestEngine(provider, signal_factory=scheduled({"AAPL": rising_bars[10:11]}))

        result = await engine.run(make_config(symbols=("AAPL", "NODATA")))

        assert [trade.symbol for trade in result.trades] == ["AAPL"]

    @pytest.mark.asyncio
    async def test_should_run_with_small_capital(self, provider, rising_bars) -> None:
        engine = BacktestEngine(provider, signal_factory=scheduled({"AAPL": rising_bars[10:40:10]}))

        result = await engine.run(make_config(initial_capital=50.0))

        assert result.summary.trades == 3
        assert result.config.initial_capital == 50.0
        final_value = result.performance_data[-1].strategy_value
        assert final_value - 50.0 == pytest.approx(sum(trade.pnl for trade in result.trades))

    @pytest.mark.asyncio
    async def test_should_run_with_high_slippage(self, provider, rising_bars) -> None:
        engine = BacktestEngine(provider, signal_factory=scheduled({"AAPL": rising_bars[10:40:10]}))

        result = await engine.run(make_config(slippage_percent=15.0))

        assert result.summary.trades == 3
        assert result.config.slippage_percent == 15.0
        # Slippage is charged on both fills
        assert all(trade.pnl < 0 for trade in result.trades)

    @pytest.mark.asyncio
    async def test_should_degrade_to_empty_feedback_when_advisor_fails(
        self, provider, rising_bars
    ) -> None:
        engine = BacktestEngine(
            provider,
            advisory_provider=FailingAdvisor(),
            signal_factory=scheduled({"AAPL": rising_bars[10:11]}),
        )

        result = await engine.run(make_config())

        assert result.stop_loss_feedback == ""
        assert result.optimizations == ()

    @pytest.mark.asyncio
    async def test_should_reproduce_seeded_probabilistic_runs(self, provider) -> None:
        config = make_config(symbols=("AAPL", "GLD"))

        first = await BacktestEngine(provider, signal_factory=default_signal_factory(7)).run(config)
        second = await BacktestEngine(provider, signal_factory=default_signal_factory(7)).run(
            config
        )

        assert first.trades == second.trades
        assert first.performance_data == second.performance_data

    @pytest.mark.asyncio
    async def test_should_match_serial_run_with_worker_threads(self, provider, rising_bars) -> None:
        factory = scheduled({"AAPL": rising_bars[10::5], "GLD": rising_bars[12::5]})
        serial = await BacktestEngine(provider, signal_factory=factory).run(
            make_config(symbols=("AAPL", "GLD"))
        )
        parallel = await BacktestEngine(provider, signal_factory=factory).run(
            make_config(symbols=("AAPL", "GLD"), max_workers=2)
        )

        assert parallel.trades == serial.trades
        assert parallel.risk == serial.risk

    def test_should_run_synchronously(self, provider, rising_bars) -> None:
        result = run_backtest(
            make_config(timeframe=Timeframe.D1),
            provider,
            signal_factory=scheduled({"AAPL": rising_bars[10:11]}),
        )
        assert result.summary.trades == 1
        assert result.to_dict()["summary"]["trades"] == 1
