"""
Strategy definition model.

Strategies are authored elsewhere; the engine only reads them.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from backtester.core.enums import AssetUniverse
from backtester.core.exceptions.backtest import ValidationError
from backtester.core.utils.validation import validate_percentage


@dataclass(frozen=True)
class StrategyConfig:
    """Immutable strategy definition consumed by the simulator.

    ``models`` are opaque tags (e.g. "LSTM", "RSI") passed through to the
    advisory provider. ``training_period_years`` is carried as metadata only.
    """

    strategy_id: str
    symbols: tuple[str, ...]
    stop_loss_percentage: float
    name: str = ""
    models: tuple[str, ...] = field(default_factory=tuple)
    training_period_years: int = 5

    def __post_init__(self) -> None:
        """Validate strategy data after initialization."""
        if not self.strategy_id:
            raise ValidationError("Strategy id must not be empty")
        validate_percentage(self.stop_loss_percentage, "stop_loss_percentage")
        # Normalize to tuples and drop duplicate symbols, keeping first occurrence
        object.__setattr__(self, "symbols", tuple(dict.fromkeys(self.symbols)))
        object.__setattr__(self, "models", tuple(self.models))

    @classmethod
    def from_universes(
        cls,
        strategy_id: str,
        stop_loss_percentage: float,
        asset_universes: Iterable[AssetUniverse] = (),
        custom_symbols: Iterable[str] = (),
        **kwargs,
    ) -> "StrategyConfig":
        """Create a strategy whose symbols are resolved from universes plus custom symbols.

        Args:
            strategy_id: Unique strategy identifier
            stop_loss_percentage: Stop distance in percent of entry price
            asset_universes: Predefined universes to include
            custom_symbols: Additional user-supplied tickers
            **kwargs: Remaining StrategyConfig fields

        Returns:
            StrategyConfig with resolved symbols
        """
        return cls(
            strategy_id=strategy_id,
            symbols=resolve_symbols(asset_universes, custom_symbols),
            stop_loss_percentage=stop_loss_percentage,
            **kwargs,
        )

    @property
    def display_name(self) -> str:
        """Name shown in reports, falling back to the id."""
        return self.name or self.strategy_id

    def to_dict(self) -> dict:
        """Convert strategy to dictionary."""
        return {
            "strategy_id": self.strategy_id,
            "name": self.name,
            "models": list(self.models),
            "symbols": list(self.symbols),
            "stop_loss_percentage": self.stop_loss_percentage,
            "training_period_years": self.training_period_years,
        }


def resolve_symbols(
    asset_universes: Iterable[AssetUniverse], custom_symbols: Iterable[str]
) -> tuple[str, ...]:
    """Expand universes into tickers, append custom symbols, de-duplicate in order."""
    tickers: list[str] = []
    for universe in asset_universes:
        tickers.extend(AssetUniverse.tickers(universe))
    tickers.extend(symbol.strip().upper() for symbol in custom_symbols if symbol.strip())
    return tuple(dict.fromkeys(tickers))
