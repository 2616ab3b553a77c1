"""Value objects produced by the analytics transforms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from backview.core.results.types import EquityPoint


class RatingLabel(str, Enum):
    """Qualitative performance band."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"


class InsightKind(str, Enum):
    """Tone of a generated insight."""

    POSITIVE = "Positive"
    WARNING = "Warning"


class MarkerPosition(str, Enum):
    """Where a marker is painted relative to its price bar."""

    ABOVE_BAR = "AboveBar"
    BELOW_BAR = "BelowBar"


class MarkerKind(str, Enum):
    """Trade event represented by a marker."""

    BUY = "Buy"
    SELL = "Sell"


class MarkerColor(str, Enum):
    """Color class of a marker."""

    UP = "Up"
    DOWN = "Down"


class Trend(str, Enum):
    """Color trend of a metric card."""

    UP = "Up"
    DOWN = "Down"
    NEUTRAL = "Neutral"


@dataclass(frozen=True)
class EquitySummary:
    """Start/end framing of an equity curve."""

    start: float
    end: float
    gain: float
    percent_change: float
    is_profit: bool


@dataclass(frozen=True)
class LinePoint:
    """Area/line series point keyed by unix seconds."""

    time: int
    value: float


@dataclass(frozen=True)
class CandlePoint:
    """Candlestick series point keyed by unix seconds."""

    time: int
    open: float
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class ChartMarker:
    """Trade annotation anchored to a bar time. ``time`` is ``None`` for unparseable dates."""

    time: int | None
    position: MarkerPosition
    kind: MarkerKind
    label: str
    color_class: MarkerColor


@dataclass(frozen=True)
class Rating:
    """Categorical rating and the score it was derived from."""

    label: RatingLabel
    score: int


@dataclass(frozen=True)
class Insight:
    """One human-readable observation about a result."""

    kind: InsightKind
    text: str


@dataclass(frozen=True)
class MetricCard:
    """Formatted headline metric."""

    label: str
    value: str
    trend: Trend


@dataclass(frozen=True)
class TradeRow:
    """Display strings for one trade ledger row."""

    index: int
    entry_date: str
    entry_price: str
    exit_date: str
    exit_price: str
    shares: str
    pnl: str
    commission: str
    is_profit: bool


@dataclass(frozen=True)
class DashboardView:
    """Everything a renderer needs for one result snapshot."""

    result_id: str
    symbol: str
    strategy: str
    equity_points: tuple[EquityPoint, ...]
    equity_series: tuple[LinePoint, ...]
    equity_summary: EquitySummary
    candles: tuple[CandlePoint, ...]
    markers: tuple[ChartMarker, ...]
    rating: Rating
    insights: tuple[Insight, ...]
    metric_cards: tuple[MetricCard, ...]
    trade_rows: tuple[TradeRow, ...]
    final_value: float

    @property
    def show_insights(self) -> bool:
        """Whether the insights panel should be rendered at all."""
        return bool(self.insights)
