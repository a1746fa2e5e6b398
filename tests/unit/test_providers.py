"""
Unit tests for price bar providers and reference data.
"""

from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from backtester.core.enums import AssetClass, Timeframe
from backtester.core.exceptions.backtest import DataError, ValidationError
from backtester.infrastructure.advisory.static_advisor import StaticAdvisoryProvider
from backtester.infrastructure.data import (
    CSVPriceBarProvider,
    InMemoryPriceBarProvider,
    OHLCVValidator,
)
from backtester.infrastructure.data.csv_provider import symbol_directory_name
from backtester.infrastructure.reference.asset_lookup import StaticAssetClassLookup

from conftest import make_bar


def write_csv(root: Path, symbol: str, rows: list[dict], timeframe: str = "1Day") -> Path:
    directory = root / symbol_directory_name(symbol)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{timeframe}.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def daily_rows(days: int, start: str = "2024-01-01") -> list[dict]:
    timestamps = pd.date_range(start, periods=days, freq="D", tz="UTC")
    return [
        {
            "timestamp": int(ts.timestamp() * 1000),
            "open": 100.0 + i,
            "high": 102.0 + i,
            "low": 99.0 + i,
            "close": 101.0 + i,
            "volume": 10.0,
        }
        for i, ts in enumerate(timestamps)
    ]


class TestCSVPriceBarProvider:
    """Test suite for CSVPriceBarProvider."""

    @pytest.fixture
    def data_dir(self, tmp_path: Path) -> Path:
        write_csv(tmp_path, "AAPL", daily_rows(10))
        write_csv(tmp_path, "BTC/USD", daily_rows(3))
        return tmp_path

    def test_should_raise_for_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(DataError, match="Data directory not found"):
            CSVPriceBarProvider(tmp_path / "missing")

    def test_should_reject_non_positive_cache_size(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            CSVPriceBarProvider(tmp_path, cache_size=0)

    @pytest.mark.asyncio
    async def test_should_load_bars_from_epoch_millisecond_timestamps(self, data_dir: Path) -> None:
        provider = CSVPriceBarProvider(data_dir)

        bars = await provider.fetch(["AAPL"], date(2024, 1, 1), date(2024, 12, 31), Timeframe.D1)

        assert len(bars["AAPL"]) == 10
        assert bars["AAPL"][0].date == date(2024, 1, 1)
        assert bars["AAPL"][0].open == 100.0
        assert bars["AAPL"][-1].close == 110.0

    @pytest.mark.asyncio
    async def test_should_filter_to_date_range(self, data_dir: Path) -> None:
        provider = CSVPriceBarProvider(data_dir)

        bars = await provider.fetch(["AAPL"], date(2024, 1, 3), date(2024, 1, 5), Timeframe.D1)

        assert [bar.date for bar in bars["AAPL"]] == [
            date(2024, 1, 3),
            date(2024, 1, 4),
            date(2024, 1, 5),
        ]

    @pytest.mark.asyncio
    async def test_should_return_empty_series_for_missing_symbol(self, data_dir: Path) -> None:
        provider = CSVPriceBarProvider(data_dir)

        bars = await provider.fetch(
            ["AAPL", "ZZZZ"], date(2024, 1, 1), date(2024, 1, 31), Timeframe.D1
        )

        assert bars["ZZZZ"] == []
        assert len(bars["AAPL"]) == 10

    @pytest.mark.asyncio
    async def test_should_return_empty_series_for_missing_timeframe(self, data_dir: Path) -> None:
        provider = CSVPriceBarProvider(data_dir)
        bars = await provider.fetch(["AAPL"], date(2024, 1, 1), date(2024, 1, 31), Timeframe.H1)
        assert bars["AAPL"] == []

    @pytest.mark.asyncio
    async def test_should_load_pair_symbols_from_safe_directory(self, data_dir: Path) -> None:
        provider = CSVPriceBarProvider(data_dir)
        bars = await provider.fetch(["BTC/USD"], date(2024, 1, 1), date(2024, 1, 31), Timeframe.D1)
        assert len(bars["BTC/USD"]) == 3

    @pytest.mark.asyncio
    async def test_should_parse_iso_timestamps_and_sort(self, tmp_path: Path) -> None:
        rows = [
            {
                "timestamp": ts,
                "open": price,
                "high": price,
                "low": price,
                "close": price,
                "volume": 1,
            }
            for ts, price in [("2024-01-02T00:00:00Z", 2.0), ("2024-01-01T00:00:00Z", 1.0)]
        ]
        write_csv(tmp_path, "SPY", rows)
        provider = CSVPriceBarProvider(tmp_path)

        bars = await provider.fetch(["SPY"], date(2024, 1, 1), date(2024, 1, 31), Timeframe.D1)

        assert [bar.close for bar in bars["SPY"]] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_should_serve_cached_series_until_cleared(self, data_dir: Path) -> None:
        provider = CSVPriceBarProvider(data_dir)
        start, end = date(2024, 1, 1), date(2024, 1, 31)
        await provider.fetch(["AAPL"], start, end, Timeframe.D1)

        provider.file_path("AAPL", Timeframe.D1).unlink()
        cached = await provider.fetch(["AAPL"], start, end, Timeframe.D1)
        provider.clear_cache()
        cleared = await provider.fetch(["AAPL"], start, end, Timeframe.D1)

        assert len(cached["AAPL"]) == 10
        assert cleared["AAPL"] == []

    @pytest.mark.asyncio
    async def test_should_raise_for_missing_columns(self, tmp_path: Path) -> None:
        write_csv(tmp_path, "AAPL", [{"timestamp": 1, "close": 1.0}])
        provider = CSVPriceBarProvider(tmp_path)

        with pytest.raises(DataError, match="missing columns"):
            await provider.fetch(["AAPL"], date(1970, 1, 1), date(2024, 1, 1), Timeframe.D1)

    @pytest.mark.asyncio
    async def test_should_raise_for_invalid_ohlc_rows(self, tmp_path: Path) -> None:
        rows = daily_rows(3)
        rows[1]["high"] = 50.0
        write_csv(tmp_path, "AAPL", rows)
        provider = CSVPriceBarProvider(tmp_path)

        with pytest.raises(ValidationError, match="invalid OHLC"):
            await provider.fetch(["AAPL"], date(2024, 1, 1), date(2024, 1, 31), Timeframe.D1)

    def test_should_list_available_symbols(self, data_dir: Path) -> None:
        (data_dir / "EMPTY").mkdir()
        assert CSVPriceBarProvider(data_dir).available_symbols() == ["AAPL", "BTC-USD"]


class TestOHLCVValidator:
    """Test suite for OHLCVValidator."""

    def test_should_accept_valid_frame(self) -> None:
        assert OHLCVValidator().validate_data(pd.DataFrame(daily_rows(5)))

    def test_should_accept_empty_frame(self) -> None:
        assert OHLCVValidator().validate_data(pd.DataFrame())

    def test_should_reject_duplicate_timestamps(self) -> None:
        rows = daily_rows(2)
        rows[1]["timestamp"] = rows[0]["timestamp"]
        with pytest.raises(ValidationError, match="duplicate timestamps"):
            OHLCVValidator().validate_data(pd.DataFrame(rows), source="AAPL")

    def test_should_reject_non_positive_prices(self) -> None:
        rows = daily_rows(2)
        rows[0]["low"] = 0.0
        with pytest.raises(ValidationError, match="non-positive"):
            OHLCVValidator().validate_data(pd.DataFrame(rows))

    def test_should_reject_nan_values(self) -> None:
        frame = pd.DataFrame(daily_rows(2))
        frame.loc[0, "close"] = float("nan")
        with pytest.raises(ValidationError, match="NaN"):
            OHLCVValidator().validate_data(frame)


class TestInMemoryPriceBarProvider:
    """Test suite for InMemoryPriceBarProvider."""

    @pytest.mark.asyncio
    async def test_should_sort_and_filter_bars(self) -> None:
        provider = InMemoryPriceBarProvider({"AAPL": [make_bar(3), make_bar(0), make_bar(1)]})

        bars = await provider.fetch(
            ["AAPL", "MSFT"], date(2024, 1, 1), date(2024, 1, 2), Timeframe.D1
        )

        assert [bar.date for bar in bars["AAPL"]] == [date(2024, 1, 1), date(2024, 1, 2)]
        assert bars["MSFT"] == []

    def test_should_list_symbols_with_bars(self) -> None:
        provider = InMemoryPriceBarProvider({"SPY": [make_bar(0)], "AAPL": [make_bar(0)], "X": []})
        assert provider.available_symbols() == ["AAPL", "SPY"]


class TestStaticAssetClassLookup:
    """Test suite for StaticAssetClassLookup."""

    def test_should_map_universe_tickers(self) -> None:
        lookup = StaticAssetClassLookup()
        assert lookup.lookup("AAPL") == (AssetClass.US_STOCKS, 5)
        assert lookup.lookup("EURUSD=X") == (AssetClass.FOREX, 30)
        assert lookup.lookup("BTC/USD") == (AssetClass.CRYPTO, 10)

    def test_should_fall_back_to_default_class(self) -> None:
        assert StaticAssetClassLookup().lookup("UNKNOWN") == (AssetClass.US_STOCKS, 5)

    def test_should_apply_overrides(self) -> None:
        lookup = StaticAssetClassLookup(
            overrides={"AAPL": AssetClass.INDICES},
            leverage_overrides={AssetClass.INDICES: 8},
        )
        assert lookup.lookup("AAPL") == (AssetClass.INDICES, 8)


class TestStaticAdvisoryProvider:
    """Test suite for StaticAdvisoryProvider."""

    @pytest.mark.asyncio
    async def test_should_produce_feedback_without_external_calls(self) -> None:
        feedback = await StaticAdvisoryProvider().get_feedback(["LSTM", "LSTM"], 5, 2.0)

        assert "2% stop loss" in feedback.stop_loss_feedback
        assert "4-year training period" in feedback.optimizations[0]
        assert "LSTM" in feedback.optimizations[1]

    @pytest.mark.asyncio
    async def test_should_suggest_longer_period_for_short_training(self) -> None:
        feedback = await StaticAdvisoryProvider().get_feedback([], 2, 5.0)

        assert "4-year training period" in feedback.optimizations[0]
        assert len(feedback.optimizations) == 1
