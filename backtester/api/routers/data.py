"""
Reference data API endpoints.
"""

from fastapi import APIRouter, Depends

from backtester.core.enums import AssetClass, AssetUniverse, Timeframe
from backtester.core.interfaces.data import IPriceBarProvider

from ..dependencies import get_price_provider
from ..schemas.api_models import AssetUniverseInfo

router = APIRouter()


@router.get("/symbols")
async def get_available_symbols(
    price_provider: IPriceBarProvider = Depends(get_price_provider),
) -> dict[str, list[str]]:
    """Symbols with locally available price data."""
    return {"symbols": price_provider.available_symbols()}


@router.get("/timeframes")
async def get_timeframes() -> list[dict]:
    """Supported bar granularities with their simulation parameters."""
    return [
        {
            "timeframe": tf.value,
            "bars_per_year": Timeframe.bars_per_year(tf),
            "holding_time": Timeframe.holding_time(tf),
            "max_lookback_days": tf.max_lookback_days,
        }
        for tf in Timeframe
    ]


@router.get("/universes", response_model=list[AssetUniverseInfo])
async def get_universes() -> list[AssetUniverseInfo]:
    """Predefined asset universes."""
    return [
        AssetUniverseInfo(
            name=universe.value,
            asset_class=AssetUniverse.asset_class(universe).value,
            tickers=AssetUniverse.tickers(universe),
        )
        for universe in AssetUniverse
    ]


@router.get("/asset-classes")
async def get_asset_classes() -> list[dict]:
    """Asset classes with their maximum leverage."""
    return [
        {"asset_class": ac.value, "max_leverage": AssetClass.max_leverage(ac)}
        for ac in AssetClass
    ]
