"""Trade markers and candle series for the price chart."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from backview.core.analytics.dates import date_to_epoch_seconds
from backview.core.analytics.types import (
    CandlePoint,
    ChartMarker,
    MarkerColor,
    MarkerKind,
    MarkerPosition,
)
from backview.core.results.types import Candle, Trade

BUY_LABEL = "BUY"
SELL_PROFIT_LABEL = "SELL +"
SELL_LOSS_LABEL = "SELL -"


def entry_marker(trade: Trade) -> ChartMarker:
    """Marker painted below the bar at the trade's entry."""
    return ChartMarker(
        time=date_to_epoch_seconds(trade.entry_date),
        position=MarkerPosition.BELOW_BAR,
        kind=MarkerKind.BUY,
        label=BUY_LABEL,
        color_class=MarkerColor.UP,
    )


def exit_marker(trade: Trade) -> ChartMarker:
    """Marker painted above the bar at the trade's exit, colored by PnL sign."""
    is_profit = trade.pnl >= 0
    return ChartMarker(
        time=date_to_epoch_seconds(trade.exit_date),
        position=MarkerPosition.ABOVE_BAR,
        kind=MarkerKind.SELL,
        label=SELL_PROFIT_LABEL if is_profit else SELL_LOSS_LABEL,
        color_class=MarkerColor.UP if is_profit else MarkerColor.DOWN,
    )


def build_markers(trades: Iterable[Trade]) -> list[ChartMarker]:
    """
    Map a trade ledger to chart markers.

    Each trade yields its entry marker immediately followed by its exit marker,
    in ledger order. The result is not sorted by time when trades overlap; use
    :func:`sort_markers` for renderers that require ascending times. An empty
    ledger yields an empty list, which callers apply to clear stale markers.
    """
    markers: list[ChartMarker] = []
    for trade in trades:
        markers.append(entry_marker(trade))
        markers.append(exit_marker(trade))
    return markers


def sort_markers(markers: Sequence[ChartMarker]) -> list[ChartMarker]:
    """Stable sort by time; markers without a time go last."""
    return sorted(
        markers,
        key=lambda marker: (marker.time is None, marker.time if marker.time is not None else 0),
    )


def to_candle_series(candles: Sequence[Candle]) -> list[CandlePoint]:
    """Re-key candles to the candlestick renderer's shape (volume is not plotted)."""
    return [
        CandlePoint(
            time=int(candle.time),
            open=float(candle.open),
            high=float(candle.high),
            low=float(candle.low),
            close=float(candle.close),
        )
        for candle in candles
    ]
