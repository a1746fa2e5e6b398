"""
Bar-level trade simulator.

Replays historical bars per (strategy, symbol) pair and resolves each
opened position against the same bar's high/low. Pairs are independent,
so the run is a map over pairs followed by a concatenation of their
trade lists.
"""

from collections.abc import Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import overload

from loguru import logger

from backtester.core.enums import AssetClass, ExitReason
from backtester.core.interfaces.data import IAssetClassLookup
from backtester.core.interfaces.signal import EntryIntent, ISignalSource
from backtester.core.models.bar import HistoricalBar
from backtester.core.models.strategy import StrategyConfig
from backtester.core.models.trade import Trade
from backtester.core.types.financial import calculate_long_pnl, percent_to_fraction, safe_divide

from .leverage import calculate_leverage
from .signals import TrendBiasFilter


class SimulationState(StrEnum):
    """States a (strategy, symbol) replay moves through on every bar."""

    IDLE = "idle"
    EVALUATING_ENTRY = "evaluating_entry"
    POSITION_OPEN = "position_open"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class SimulationSettings:
    """Run-wide parameters the simulator needs."""

    initial_capital: float
    commission: float
    slippage_percent: float
    position_fraction: float
    use_trend_bias: bool
    lookback_bars: int
    holding_time: str = ""

    @property
    def trade_notional(self) -> float:
        """Fixed notional committed to every trade."""
        return self.initial_capital * self.position_fraction


@dataclass(frozen=True)
class OpenPosition:
    """Prices fixed at entry, before the bar resolves them."""

    entry_price: float
    stop_loss_price: float
    take_profit_price: float
    risk_reward: float

    @property
    def is_well_formed(self) -> bool:
        """Stop strictly below entry and target strictly above it."""
        return self.stop_loss_price < self.entry_price < self.take_profit_price


@dataclass(frozen=True)
class SymbolSimulation:
    """Output of replaying one (strategy, symbol) pair."""

    strategy_id: str
    symbol: str
    trades: tuple[Trade, ...]
    session_dates: tuple[date, ...]
    bars_evaluated: int


@dataclass(frozen=True)
class SimulationOutcome:
    """Merged output of every pair in a run."""

    trades: tuple[Trade, ...]
    session_dates: tuple[date, ...]
    symbols_simulated: int
    bars_evaluated: int


class BarHistory(Sequence[HistoricalBar]):
    """Read-only view of ``bars[:end]`` that avoids copying on every bar."""

    def __init__(self, bars: Sequence[HistoricalBar], end: int):
        self._bars = bars
        self._end = end

    def __len__(self) -> int:
        return self._end

    @overload
    def __getitem__(self, index: int) -> HistoricalBar: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[HistoricalBar]: ...

    def __getitem__(self, index: int | slice) -> HistoricalBar | Sequence[HistoricalBar]:
        if isinstance(index, slice):
            start, stop, step = index.indices(self._end)
            return self._bars[start:stop:step]
        if index < 0:
            index += self._end
        if not 0 <= index < self._end:
            raise IndexError("bar history index out of range")
        return self._bars[index]

    def __iter__(self) -> Iterator[HistoricalBar]:
        for i in range(self._end):
            yield self._bars[i]


def open_position(
    bar: HistoricalBar, intent: EntryIntent, stop_loss_percentage: float, slippage_percent: float
) -> OpenPosition:
    """Fill a long entry at the bar's open, worsened by slippage.

    Stop and target are placed around the filled price; the target sits
    ``risk_reward`` stop distances above entry.
    """
    entry_price = bar.open * (1 + percent_to_fraction(slippage_percent))
    stop_loss_price = entry_price * (1 - stop_loss_percentage / 100)
    take_profit_price = entry_price + (entry_price - stop_loss_price) * intent.risk_reward
    return OpenPosition(
        entry_price=entry_price,
        stop_loss_price=stop_loss_price,
        take_profit_price=take_profit_price,
        risk_reward=intent.risk_reward,
    )


def resolve_exit(bar: HistoricalBar, position: OpenPosition) -> tuple[float, ExitReason]:
    """Resolve an open position within a single bar.

    The stop is checked before the target: when the bar's range covers
    both, the position is assumed stopped out.

    Returns:
        Exit price before slippage and the exit reason
    """
    if bar.low <= position.stop_loss_price:
        return position.stop_loss_price, ExitReason.STOP_LOSS
    if bar.high >= position.take_profit_price:
        return position.take_profit_price, ExitReason.TAKE_PROFIT
    return bar.close, ExitReason.END_OF_PERIOD


class TradeSimulator:
    """
    Bar-by-bar trade simulator.

    Features:
    - Injectable entry signal (ISignalSource)
    - Optional trend-bias filter on the prior ``lookback_bars`` closes
    - Single-bar stop-loss/take-profit resolution, stop first
    - Slippage on both fills, flat commission per trade
    - Dynamic leverage from the symbol's asset class cap
    - Optional thread fan-out over (strategy, symbol) pairs

    With ``max_workers > 1`` a stateful signal source (such as a seeded
    ProbabilisticSignal) is consulted in nondeterministic order.
    """

    def __init__(
        self,
        settings: SimulationSettings,
        signal_source: ISignalSource,
        asset_lookup: IAssetClassLookup,
        max_workers: int = 1,
    ):
        self.settings = settings
        self.signal_source = signal_source
        self.asset_lookup = asset_lookup
        self.max_workers = max_workers
        self.trend_filter = TrendBiasFilter(settings.lookback_bars)

    def has_enough_bars(self, bars: Sequence[HistoricalBar] | None) -> bool:
        """A symbol needs more bars than the lookback window to be simulated."""
        return bars is not None and len(bars) > self.settings.lookback_bars

    def plan(
        self,
        strategies: Sequence[StrategyConfig],
        bars_by_symbol: Mapping[str, Sequence[HistoricalBar]],
    ) -> list[tuple[StrategyConfig, str]]:
        """List the (strategy, symbol) pairs that have enough data to replay."""
        pairs: list[tuple[StrategyConfig, str]] = []
        for strategy in strategies:
            for symbol in strategy.symbols:
                if self.has_enough_bars(bars_by_symbol.get(symbol)):
                    pairs.append((strategy, symbol))
                else:
                    logger.warning(
                        f"Skipping {symbol} for strategy {strategy.strategy_id}: "
                        f"fewer than {self.settings.lookback_bars + 1} bars"
                    )
        return pairs

    def simulate(
        self,
        strategies: Sequence[StrategyConfig],
        bars_by_symbol: Mapping[str, Sequence[HistoricalBar]],
    ) -> SimulationOutcome:
        """Replay every usable pair and merge the results."""
        return self.run_pairs(self.plan(strategies, bars_by_symbol), bars_by_symbol)

    def run_pairs(
        self,
        pairs: Sequence[tuple[StrategyConfig, str]],
        bars_by_symbol: Mapping[str, Sequence[HistoricalBar]],
    ) -> SimulationOutcome:
        """Replay planned pairs and merge the results.

        Trades are concatenated in pair order; each pair's own trades stay
        in chronological order.
        """

        def run_pair(pair: tuple[StrategyConfig, str]) -> SymbolSimulation:
            strategy, symbol = pair
            return self.simulate_symbol(strategy, symbol, bars_by_symbol[symbol])

        if self.max_workers > 1 and len(pairs) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(run_pair, pairs))
        else:
            results = [run_pair(pair) for pair in pairs]

        trades = tuple(trade for result in results for trade in result.trades)
        session_dates = tuple(sorted({d for result in results for d in result.session_dates}))
        bars_evaluated = sum(result.bars_evaluated for result in results)

        logger.info(
            f"Simulated {len(results)} strategy/symbol pair(s): "
            f"{bars_evaluated} bars evaluated, {len(trades)} trades"
        )
        return SimulationOutcome(
            trades=trades,
            session_dates=session_dates,
            symbols_simulated=len(results),
            bars_evaluated=bars_evaluated,
        )

    def simulate_symbol(
        self, strategy: StrategyConfig, symbol: str, bars: Sequence[HistoricalBar]
    ) -> SymbolSimulation:
        """Replay one symbol's bars for one strategy.

        Bars before ``lookback_bars`` only feed the trend filter. Symbols
        without enough bars yield an empty simulation.
        """
        lookback = self.settings.lookback_bars
        if not self.has_enough_bars(bars):
            return SymbolSimulation(strategy.strategy_id, symbol, (), (), 0)

        asset_class, max_leverage = self.asset_lookup.lookup(symbol)
        self.signal_source.reset(symbol)

        trades: list[Trade] = []
        session_dates: dict[date, None] = {}
        filtered = 0

        for index in range(lookback, len(bars)):
            session_dates[bars[index].date] = None
            state, trade = self.step(strategy, symbol, bars, index, asset_class, max_leverage)
            if state == SimulationState.RESOLVED and trade is not None:
                trades.append(trade)
            elif state == SimulationState.EVALUATING_ENTRY:
                filtered += 1

        logger.debug(
            f"{strategy.strategy_id}/{symbol}: {len(bars) - lookback} bars, "
            f"{len(trades)} trades, {filtered} entries rejected by trend filter"
        )
        return SymbolSimulation(
            strategy_id=strategy.strategy_id,
            symbol=symbol,
            trades=tuple(trades),
            session_dates=tuple(session_dates),
            bars_evaluated=len(bars) - lookback,
        )

    def step(
        self,
        strategy: StrategyConfig,
        symbol: str,
        bars: Sequence[HistoricalBar],
        index: int,
        asset_class: AssetClass,
        max_leverage: int,
    ) -> tuple[SimulationState, Trade | None]:
        """Advance one bar from Idle.

        Returns:
            The state the bar stopped in and the resolved trade, if any:
            IDLE when no entry was proposed or its levels collapsed,
            EVALUATING_ENTRY when the trend filter rejected the proposal,
            RESOLVED with the completed trade
        """
        bar = bars[index]
        history = BarHistory(bars, index)

        intent = self.signal_source.evaluate(symbol, bar, history)
        if intent is None:
            return SimulationState.IDLE, None
        if self.settings.use_trend_bias and not self.trend_filter.allows(bar, history):
            return SimulationState.EVALUATING_ENTRY, None

        position = open_position(
            bar, intent, strategy.stop_loss_percentage, self.settings.slippage_percent
        )
        if not position.is_well_formed:
            # A stop distance below float resolution collapses the levels onto the entry
            logger.warning(
                f"{strategy.strategy_id}/{symbol}: skipping entry at {bar.timestamp.isoformat()}, "
                f"stop {position.stop_loss_price} not below entry {position.entry_price}"
            )
            return SimulationState.IDLE, None
        raw_exit, exit_reason = resolve_exit(bar, position)
        trade = self._build_trade(
            strategy, symbol, index, bar, position, raw_exit, exit_reason, asset_class, max_leverage
        )
        return SimulationState.RESOLVED, trade

    def _build_trade(
        self,
        strategy: StrategyConfig,
        symbol: str,
        index: int,
        bar: HistoricalBar,
        position: OpenPosition,
        raw_exit: float,
        exit_reason: ExitReason,
        asset_class: AssetClass,
        max_leverage: int,
    ) -> Trade:
        slip = percent_to_fraction(self.settings.slippage_percent)
        exit_price = raw_exit * (1 - slip)

        notional = self.settings.trade_notional
        position_size = notional / position.entry_price
        net_pnl = (
            calculate_long_pnl(position.entry_price, exit_price, position_size)
            - self.settings.commission
        )
        # Currency cost of both fills relative to the unslipped prices
        slippage_cost = position_size * (bar.open * slip + raw_exit * slip)

        return Trade(
            trade_id=f"{strategy.strategy_id}-{symbol}-{index}",
            strategy_id=strategy.strategy_id,
            symbol=symbol,
            asset_class=asset_class,
            timestamp=bar.timestamp,
            entry_price=position.entry_price,
            exit_price=exit_price,
            stop_loss_price=position.stop_loss_price,
            take_profit_price=position.take_profit_price,
            position_size=position_size,
            notional_value=notional,
            leverage=calculate_leverage(position.risk_reward, max_leverage),
            pnl=net_pnl,
            pnl_percentage=safe_divide(net_pnl, notional) * 100,
            risk_reward=position.risk_reward,
            commission=self.settings.commission,
            slippage=slippage_cost,
            exit_reason=exit_reason,
            holding_time=self.settings.holding_time,
        )
