"""
Portfolio backtesting simulation engine.
"""

__version__ = "1.0.0"
