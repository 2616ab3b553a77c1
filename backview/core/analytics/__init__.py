"""Analytics transforms for backtest result display."""

from backview.core.analytics.dashboard import DashboardSettings, build_dashboard
from backview.core.analytics.equity import downsample, summarize, to_line_series
from backview.core.analytics.formatting import FormatConfig, MetricFormatter
from backview.core.analytics.markers import build_markers, sort_markers, to_candle_series
from backview.core.analytics.rating import derive_insights, rate, score
from backview.core.analytics.types import (
    ChartMarker,
    DashboardView,
    EquitySummary,
    Insight,
    InsightKind,
    MarkerColor,
    MarkerKind,
    MarkerPosition,
    Rating,
    RatingLabel,
)

__all__ = [
    "ChartMarker",
    "DashboardSettings",
    "DashboardView",
    "EquitySummary",
    "FormatConfig",
    "Insight",
    "InsightKind",
    "MarkerColor",
    "MarkerKind",
    "MarkerPosition",
    "MetricFormatter",
    "Rating",
    "RatingLabel",
    "build_dashboard",
    "build_markers",
    "derive_insights",
    "downsample",
    "rate",
    "score",
    "sort_markers",
    "summarize",
    "to_candle_series",
    "to_line_series",
]
