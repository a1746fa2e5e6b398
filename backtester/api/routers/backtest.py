"""
Backtest API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from backtester.core.exceptions.backtest import (
    BacktestException,
    DataUnavailableError,
    EmptyResultError,
    InputError,
    ValidationError,
)
from backtester.core.interfaces.data import IAdvisoryProvider, IPriceBarProvider
from backtester.engine import BacktestEngine, default_signal_factory

from ..dependencies import get_advisory_provider, get_price_provider
from ..schemas.api_models import BacktestRequest, BacktestResultResponse, ErrorResponse

router = APIRouter()

_ERROR_STATUS: list[tuple[type[BacktestException], int]] = [
    (InputError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (DataUnavailableError, status.HTTP_404_NOT_FOUND),
    (EmptyResultError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def _to_http_error(error: BacktestException) -> HTTPException:
    status_code = next(
        (code for exc_type, code in _ERROR_STATUS if isinstance(error, exc_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    body = ErrorResponse(error=type(error).__name__, message=str(error))
    return HTTPException(status_code=status_code, detail=body.model_dump())


@router.post("/", response_model=BacktestResultResponse)
async def submit_backtest(
    request: BacktestRequest,
    price_provider: IPriceBarProvider = Depends(get_price_provider),
    advisory_provider: IAdvisoryProvider = Depends(get_advisory_provider),
) -> BacktestResultResponse:
    """Run a backtest and return its full result."""
    engine = BacktestEngine(
        price_provider,
        advisory_provider=advisory_provider,
        signal_factory=default_signal_factory(request.seed),
    )
    try:
        result = await engine.run(request.to_config())
    except BacktestException as e:
        logger.warning(f"Backtest rejected: {type(e).__name__}: {e}")
        raise _to_http_error(e) from e

    return BacktestResultResponse(status="completed", **result.to_dict())
