"""Test helpers for deterministic backtest results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from backview.core.results.types import (
    BacktestResult,
    Candle,
    EquityPoint,
    Metrics,
    Trade,
)

DAY_MS = 86_400_000
JAN_1_2020_MS = 1_577_836_800_000


def make_equity_curve(values: Sequence[float], start_ms: int = JAN_1_2020_MS) -> list[EquityPoint]:
    """Build a daily equity curve from portfolio values."""
    return [
        EquityPoint(timestamp=start_ms + offset * DAY_MS, value=float(value))
        for offset, value in enumerate(values)
    ]


def make_candles(close_values: Sequence[float], start_ms: int = JAN_1_2020_MS) -> list[Candle]:
    """Build daily candles with a one-unit range around each close."""
    return [
        Candle(
            time=(start_ms + offset * DAY_MS) // 1000,
            open=float(close),
            high=float(close) + 1.0,
            low=float(close) - 1.0,
            close=float(close),
            volume=1_000.0,
        )
        for offset, close in enumerate(close_values)
    ]


def make_trade(
    entry_date: str = "2020-01-02",
    exit_date: str = "2020-01-05",
    pnl: float = 150.0,
    **overrides: Any,
) -> Trade:
    """Build one closed trade with sensible defaults."""
    fields: dict[str, Any] = {
        "entry_date": entry_date,
        "exit_date": exit_date,
        "entry_price": 100.0,
        "exit_price": 101.5,
        "shares": 100.0,
        "pnl": pnl,
        "commission": 2.0,
    }
    fields.update(overrides)
    return Trade(**fields)


def make_metrics(**overrides: Any) -> Metrics:
    """Build metrics from snake_case overrides on top of zeros."""
    return Metrics(**overrides)


def make_result(
    equity_values: Sequence[float] = (100_000.0, 101_000.0, 102_500.0),
    trades: Sequence[Trade] | None = None,
    metrics: Metrics | None = None,
    close_values: Sequence[float] = (100.0, 101.0, 102.0, 103.0, 104.0),
    result_id: str = "bt-1",
) -> BacktestResult:
    """Build a complete result snapshot."""
    return BacktestResult(
        id=result_id,
        symbol="AAPL",
        strategy="SMA_CROSSOVER",
        metrics=metrics or make_metrics(total_return=0.025, sharpe_ratio=1.2, total_trades=1),
        trades=list(trades) if trades is not None else [make_trade()],
        equity_curve=make_equity_curve(equity_values),
        candles=make_candles(close_values),
    )


def result_payload(**kwargs: Any) -> dict[str, Any]:
    """Serialize :func:`make_result` the way the service sends it (camelCase keys)."""
    return make_result(**kwargs).model_dump(mode="json", by_alias=True)
