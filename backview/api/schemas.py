"""Pydantic schemas for Backview API endpoints."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backview.core.analytics.formatting import MetricFormatter
from backview.core.analytics.types import (
    CandlePoint,
    ChartMarker,
    EquitySummary,
    Insight,
    LinePoint,
    MetricCard,
    Rating,
    TradeRow,
)
from backview.core.results.types import Candle, Trade


class HealthResponse(BaseModel):
    """Health endpoint response."""

    status: str = "ok"
    service: str = "backview-api"


class ErrorResponse(BaseModel):
    """Error payload for typed API failures."""

    error_code: str
    message: str


class ChartRequest(BaseModel):
    """Trades and candles for the price chart endpoint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    trades: list[Trade] = Field(default_factory=list)
    candles: list[Candle] = Field(default_factory=list)


class LinePointResponse(BaseModel):
    """Equity series point keyed by unix seconds."""

    time: int
    value: float

    @classmethod
    def from_point(cls, point: LinePoint) -> LinePointResponse:
        return cls(time=point.time, value=point.value)


class EquitySummaryResponse(BaseModel):
    """Equity framing; ``percent_change`` is null when it is not a finite number."""

    start: float
    end: float
    gain: float
    percent_change: float | None
    percent_change_display: str
    is_profit: bool

    @classmethod
    def from_summary(
        cls,
        summary: EquitySummary,
        formatter: MetricFormatter,
    ) -> EquitySummaryResponse:
        finite = math.isfinite(summary.percent_change)
        return cls(
            start=summary.start,
            end=summary.end,
            gain=summary.gain,
            percent_change=summary.percent_change if finite else None,
            percent_change_display=formatter.percent_change(summary.percent_change),
            is_profit=summary.is_profit,
        )


class EquityResponse(BaseModel):
    """Downsampled equity series plus summary on the full series."""

    total_points: int
    sampled_points: int
    stride: int
    series: list[LinePointResponse]
    summary: EquitySummaryResponse


class CandlePointResponse(BaseModel):
    """Candlestick renderer point."""

    time: int
    open: float
    high: float
    low: float
    close: float

    @classmethod
    def from_point(cls, point: CandlePoint) -> CandlePointResponse:
        return cls(
            time=point.time,
            open=point.open,
            high=point.high,
            low=point.low,
            close=point.close,
        )


class MarkerResponse(BaseModel):
    """Trade marker; ``time`` is null when the trade date could not be parsed."""

    time: int | None
    position: str
    kind: str
    label: str
    color_class: str

    @classmethod
    def from_marker(cls, marker: ChartMarker) -> MarkerResponse:
        return cls(
            time=marker.time,
            position=marker.position.value,
            kind=marker.kind.value,
            label=marker.label,
            color_class=marker.color_class.value,
        )


class ChartResponse(BaseModel):
    """Candles and markers in ledger order."""

    candles: list[CandlePointResponse]
    markers: list[MarkerResponse]


class InsightResponse(BaseModel):
    """One generated insight."""

    kind: str
    text: str

    @classmethod
    def from_insight(cls, insight: Insight) -> InsightResponse:
        return cls(kind=insight.kind.value, text=insight.text)


class RatingResponse(BaseModel):
    """Rating, per-metric score breakdown and insights."""

    label: str
    score: int
    breakdown: dict[str, int]
    insights: list[InsightResponse]
    show_insights: bool

    @classmethod
    def build(
        cls,
        rating: Rating,
        breakdown: dict[str, int],
        insights: list[Insight],
    ) -> RatingResponse:
        return cls(
            label=rating.label.value,
            score=rating.score,
            breakdown=breakdown,
            insights=[InsightResponse.from_insight(insight) for insight in insights],
            show_insights=bool(insights),
        )


class MetricCardResponse(BaseModel):
    """Formatted headline metric."""

    label: str
    value: str
    trend: str

    @classmethod
    def from_card(cls, card: MetricCard) -> MetricCardResponse:
        return cls(label=card.label, value=card.value, trend=card.trend.value)


class TradeRowResponse(BaseModel):
    """Formatted trade ledger row."""

    index: int
    entry_date: str
    entry_price: str
    exit_date: str
    exit_price: str
    shares: str
    pnl: str
    commission: str
    is_profit: bool

    @classmethod
    def from_row(cls, row: TradeRow) -> TradeRowResponse:
        return cls(
            index=row.index,
            entry_date=row.entry_date,
            entry_price=row.entry_price,
            exit_date=row.exit_date,
            exit_price=row.exit_price,
            shares=row.shares,
            pnl=row.pnl,
            commission=row.commission,
            is_profit=row.is_profit,
        )


class DashboardResponse(BaseModel):
    """Complete dashboard payload for one result."""

    result_id: str
    symbol: str
    strategy: str
    equity: EquityResponse
    chart: ChartResponse
    rating: RatingResponse
    metric_cards: list[MetricCardResponse]
    trade_rows: list[TradeRowResponse]
    final_value: float
    final_value_display: str
