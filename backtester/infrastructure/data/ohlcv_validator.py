"""
OHLCV frame validation.

Raw frames are checked before they are turned into HistoricalBar objects,
so that a malformed file fails once, with the offending source named,
instead of on the first bad row.
"""

import pandas as pd
from loguru import logger

from backtester.core.exceptions.backtest import ValidationError

REQUIRED_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["open", "high", "low", "close"]


class OHLCVValidator:
    """
    Validator for raw OHLCV frames.

    Hard failures (ValidationError):
    - missing columns or repeated timestamps
    - non-numeric or missing values
    - non-positive prices, negative volume
    - a candle body outside its high/low range

    Soft findings are only logged: bars whose range exceeds
    ``max_bar_range`` of the low, and unsorted timestamps (the provider
    sorts them).
    """

    def __init__(self, max_bar_range: float = 0.5):
        self.max_bar_range = max_bar_range

    def validate_data(self, data: pd.DataFrame, source: str = "data") -> bool:
        """
        Validate an OHLCV frame.

        Args:
            data: Frame with the REQUIRED_COLUMNS
            source: Symbol or file name used in messages

        Returns:
            True if the frame can be converted to bars

        Raises:
            ValidationError: On the first hard failure
        """
        if data.empty:
            return True

        self._check_columns(data, source)
        self._check_values(data, source)
        self._check_candles(data, source)
        self._report_anomalies(data, source)
        return True

    def _check_columns(self, data: pd.DataFrame, source: str) -> None:
        missing = sorted(set(REQUIRED_COLUMNS) - set(data.columns))
        if missing:
            raise ValidationError(f"{source}: missing required columns: {missing}")
        repeated = int(data["timestamp"].duplicated().sum())
        if repeated:
            raise ValidationError(f"{source}: duplicate timestamps found ({repeated} rows)")

    def _check_values(self, data: pd.DataFrame, source: str) -> None:
        numeric = PRICE_COLUMNS + ["volume"]
        non_numeric = [col for col in numeric if not pd.api.types.is_numeric_dtype(data[col])]
        if non_numeric:
            raise ValidationError(f"{source}: columns must be numeric: {non_numeric}")

        with_nan = [col for col in REQUIRED_COLUMNS if data[col].isna().any()]
        if with_nan:
            raise ValidationError(f"{source}: NaN values in columns: {with_nan}")

        non_positive = [col for col in PRICE_COLUMNS if (data[col] <= 0).any()]
        if non_positive:
            raise ValidationError(f"{source}: non-positive prices in columns: {non_positive}")
        if (data["volume"] < 0).any():
            raise ValidationError(f"{source}: volume column contains negative values")

    def _check_candles(self, data: pd.DataFrame, source: str) -> None:
        body_high = data[["open", "close"]].max(axis=1)
        body_low = data[["open", "close"]].min(axis=1)
        broken = (body_high > data["high"]) | (body_low < data["low"])
        if broken.any():
            first = data.loc[broken, "timestamp"].iloc[0]
            raise ValidationError(
                f"{source}: invalid OHLC relationships found in {int(broken.sum())} rows "
                f"(first at {first})"
            )

    def _report_anomalies(self, data: pd.DataFrame, source: str) -> None:
        wide = (data["high"] - data["low"]) / data["low"] > self.max_bar_range
        if wide.any():
            logger.warning(
                f"{source}: {int(wide.sum())} bars range more than "
                f"{self.max_bar_range:.0%} of their low"
            )
        if not data["timestamp"].is_monotonic_increasing:
            logger.warning(f"{source}: timestamps are not in ascending order")
