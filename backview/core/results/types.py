"""Input contract for backtest results delivered by the remote backtest service."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Immutable model that reads and writes the service's camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class TradeType(str, Enum):
    """Known trade directions; the service may send others (e.g. ``BUY``), which are kept as strings."""

    LONG = "LONG"
    SHORT = "SHORT"
    ROUND_TRIP = "ROUND_TRIP"


class Candle(_CamelModel):
    """One OHLCV bar; ``time`` is unix seconds."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


class EquityPoint(_CamelModel):
    """Portfolio value at ``timestamp`` (unix milliseconds)."""

    timestamp: int
    value: float


class Trade(_CamelModel):
    """One closed trade from the ledger."""

    type: TradeType | str = TradeType.LONG
    entry_date: str
    exit_date: str
    entry_price: float
    exit_price: float
    shares: float
    pnl: float
    commission: float = 0.0


class Metrics(_CamelModel):
    """Summary metrics computed upstream. Ratios are fractions (0.15 == 15%)."""

    total_return: float = 0.0
    annualized_return: float = 0.0
    max_drawdown_percent: float = 0.0
    sharpe_ratio: float = 0.0
    win_rate: float = 0.0
    total_trades: int = 0
    max_drawdown: float = 0.0
    backtest_years: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0


class BacktestResult(_CamelModel):
    """Complete result snapshot for one backtest run."""

    id: str
    symbol: str
    strategy: str
    metrics: Metrics = Field(default_factory=Metrics)
    trades: list[Trade] = Field(default_factory=list)
    equity_curve: list[EquityPoint] = Field(default_factory=list)
    candles: list[Candle] = Field(default_factory=list)


class BacktestRequest(_CamelModel):
    """Run request sent to the backtest service."""

    symbol: str = Field(min_length=1)
    strategy: str = Field(min_length=1)
    parameters: dict[str, Any] = Field(default_factory=dict)
    start_date: date
    end_date: date
    initial_capital: float = Field(default=100_000.0, gt=0)
    commission_rate: float = Field(default=0.001, ge=0)


class StrategyParameter(_CamelModel):
    """Tunable parameter of a catalog strategy."""

    name: str
    type: str = "INTEGER"
    default_value: Any = None
    min_value: Any = None
    max_value: Any = None
    description: str = ""


class StrategyInfo(_CamelModel):
    """Strategy catalog entry."""

    id: str
    name: str
    description: str = ""
    parameters: list[StrategyParameter] = Field(default_factory=list)
