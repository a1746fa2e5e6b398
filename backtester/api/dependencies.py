"""
FastAPI dependencies.
"""

import os
from functools import lru_cache

from fastapi import HTTPException, status

from backtester.core.exceptions.backtest import DataError
from backtester.core.interfaces.data import IAdvisoryProvider, IPriceBarProvider
from backtester.infrastructure.advisory.static_advisor import StaticAdvisoryProvider
from backtester.infrastructure.data import CSVPriceBarProvider

from .schemas.api_models import ErrorResponse

DATA_DIR_ENV = "BACKTEST_DATA_DIR"


@lru_cache(maxsize=1)
def _csv_provider(data_directory: str) -> CSVPriceBarProvider:
    return CSVPriceBarProvider(data_directory)


def get_price_provider() -> IPriceBarProvider:
    """CSV provider rooted at $BACKTEST_DATA_DIR (default ``data``).

    Raises:
        HTTPException: 503 if the data directory does not exist
    """
    try:
        return _csv_provider(os.environ.get(DATA_DIR_ENV, "data"))
    except DataError as e:
        body = ErrorResponse(error=type(e).__name__, message=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=body.model_dump()
        ) from e


def get_advisory_provider() -> IAdvisoryProvider:
    return StaticAdvisoryProvider()
