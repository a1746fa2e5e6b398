"""
Core constants and limits.

Defines the simulation defaults used by the backtesting engine and
the bounds applied when validating run configuration.
"""

# Position Sizing
POSITION_FRACTION = 0.02  # 2% of initial capital per trade
MIN_RISK_REWARD = 2.5
MAX_RISK_REWARD = 5.0

# Leverage
MIN_DYNAMIC_LEVERAGE = 2  # Leverage assigned at the minimum risk/reward

# Signal Generation
TREND_LOOKBACK_BARS = 5  # Weekly bias on daily bars

# Risk Metrics
RISK_FREE_RATE = 0.02  # 2% annual
TRADING_DAYS_PER_YEAR = 252
TRADING_HOURS_PER_DAY = 7

# Benchmark
BENCHMARK_SYMBOL = "SPY"

# Cost Defaults
DEFAULT_INITIAL_CAPITAL = 100000.0
DEFAULT_COMMISSION = 0.50  # Currency per trade
DEFAULT_SLIPPAGE_PERCENT = 0.05  # 0.05% per fill

# Data Limits
INTRADAY_MAX_LOOKBACK_DAYS = 59  # Intraday history window of the data vendors

# Presentation
PNL_DISTRIBUTION_BUCKETS = 10
