"""Equity curve downsampling and summary statistics."""

from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd

from backview.core.analytics.dates import millis_to_seconds
from backview.core.analytics.types import EquitySummary, LinePoint
from backview.core.results.types import EquityPoint

DEFAULT_MAX_POINTS = 500
DEFAULT_INITIAL_CAPITAL = 100_000.0


def sampling_stride(total_points: int, max_points: int = DEFAULT_MAX_POINTS) -> int:
    """Index step used by :func:`downsample`; 1 when no sampling is needed."""
    budget = max(int(max_points), 1)
    if total_points <= budget:
        return 1
    return math.ceil(total_points / budget)


def downsample(
    points: Sequence[EquityPoint],
    max_points: int = DEFAULT_MAX_POINTS,
) -> list[EquityPoint]:
    """
    Reduce an equity curve to at most ``max_points`` points for rendering.

    Keeps every point whose index is a multiple of ``ceil(len / max_points)``.
    The first point is always kept. The last point is kept only when its index
    lands on the stride, so the rendered endpoint can differ from the true final
    value; read that from the full curve (see :func:`summarize`).

    Args:
        points: Equity points in ascending timestamp order.
        max_points: Point budget. Values below 1 are treated as 1.

    Returns:
        Sampled points in input order.
    """
    stride = sampling_stride(len(points), max_points)
    if stride == 1:
        return list(points)
    return list(points[::stride])


def _percent_change(start: float, end: float) -> float:
    """Percent change that stays non-finite instead of raising when ``start`` is zero."""
    if start == 0:
        gain = end - start
        return math.nan if gain == 0 else math.copysign(math.inf, gain)
    return (end - start) / start * 100


def summarize(
    points: Sequence[EquityPoint],
    initial_capital: float = DEFAULT_INITIAL_CAPITAL,
) -> EquitySummary:
    """
    Compute start/end framing on the full, un-sampled curve.

    ``initial_capital`` stands in for both ends of an empty curve. When ``start``
    is zero the percent change is ``nan`` or infinite; display it with
    :meth:`MetricFormatter.percent_change`, which renders ``N/A``.
    """
    start = float(points[0].value) if points else float(initial_capital)
    end = float(points[-1].value) if points else float(initial_capital)
    gain = end - start
    return EquitySummary(
        start=start,
        end=end,
        gain=gain,
        percent_change=_percent_change(start, end),
        is_profit=gain >= 0,
    )


def to_line_series(points: Sequence[EquityPoint]) -> list[LinePoint]:
    """Re-key equity points to the area renderer's seconds-based time field."""
    return [
        LinePoint(time=millis_to_seconds(point.timestamp), value=float(point.value))
        for point in points
    ]


def to_series(points: Sequence[EquityPoint]) -> pd.Series:
    """Return the curve as a float series indexed by UTC datetimes."""
    if not points:
        return pd.Series([], index=pd.DatetimeIndex([], tz="UTC", name="date"), dtype=float)
    index = pd.to_datetime([point.timestamp for point in points], unit="ms", utc=True)
    index.name = "date"
    return pd.Series([float(point.value) for point in points], index=index, dtype=float)
