"""Backtest result input contract."""

from backview.core.results.types import (
    BacktestRequest,
    BacktestResult,
    Candle,
    EquityPoint,
    Metrics,
    StrategyInfo,
    StrategyParameter,
    Trade,
    TradeType,
)

__all__ = [
    "BacktestRequest",
    "BacktestResult",
    "Candle",
    "EquityPoint",
    "Metrics",
    "StrategyInfo",
    "StrategyParameter",
    "Trade",
    "TradeType",
]
