"""
FastAPI main application for the backtesting engine.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backtester import __version__

from .routers import backtest, data

app = FastAPI(
    title="Strategy Backtesting API",
    version=__version__,
    description="API for portfolio trading strategy backtesting",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Development dashboard
        "http://localhost:8080",
    ],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin"],
)

app.include_router(backtest.router, prefix="/api/backtest", tags=["backtest"])
app.include_router(data.router, prefix="/api/data", tags=["data"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint returning API information."""
    return {"message": "Strategy Backtesting API", "version": __version__, "status": "running"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
