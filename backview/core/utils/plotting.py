"""Static chart artifacts for dashboard views."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pandas as pd

from backview.core.analytics.equity import to_series
from backview.core.analytics.types import DashboardView, MarkerColor, MarkerKind
from backview.core.utils.errors import ArtifactError

PROFIT_COLOR = "#22c55e"
LOSS_COLOR = "#ef4444"
_MARKER_COLORS = {MarkerColor.UP: PROFIT_COLOR, MarkerColor.DOWN: LOSS_COLOR}


def get_matplotlib_pyplot() -> Any:
    """
    Import and return ``matplotlib.pyplot`` with a writable config directory.

    Returns:
        Imported pyplot module.
    """
    if "MPLCONFIGDIR" not in os.environ:
        mpl_config_dir = Path("/tmp/backview-mplconfig")
        mpl_config_dir.mkdir(parents=True, exist_ok=True)
        os.environ["MPLCONFIGDIR"] = str(mpl_config_dir)

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    return plt


def candle_frame(view: DashboardView) -> pd.DataFrame:
    """Candles as a dataframe indexed by bar time in unix seconds."""
    frame = pd.DataFrame(
        [(c.time, c.open, c.high, c.low, c.close) for c in view.candles],
        columns=["time", "open", "high", "low", "close"],
    )
    return frame.set_index("time").sort_index()


def marker_frame(view: DashboardView) -> pd.DataFrame:
    """
    Markers joined to the candle they sit on.

    Buy markers are anchored at the bar low and sell markers at the bar high.
    Markers without a time, or whose time has no candle, are dropped.
    """
    candles = candle_frame(view)
    rows = []
    for marker in view.markers:
        if marker.time is None or marker.time not in candles.index:
            continue
        bar = candles.loc[marker.time]
        price = bar["low"] if marker.kind is MarkerKind.BUY else bar["high"]
        rows.append(
            {
                "date": pd.Timestamp(marker.time, unit="s", tz="UTC"),
                "price": float(price),
                "kind": marker.kind,
                "color": _MARKER_COLORS[marker.color_class],
            }
        )
    return pd.DataFrame(rows, columns=["date", "price", "kind", "color"])


def save_dashboard_chart(
    view: DashboardView,
    output_dir: Path,
    filename: str = "dashboard.png",
) -> Path:
    """
    Save a two-panel chart: equity area on top, closes with trade markers below.

    Args:
        view: Dashboard view to draw.
        output_dir: Artifact directory.
        filename: Output image filename.

    Returns:
        Saved plot path.
    """
    plt = get_matplotlib_pyplot()
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        plot_path = output_dir / filename
        color = PROFIT_COLOR if view.equity_summary.is_profit else LOSS_COLOR

        figure, (equity_axis, price_axis) = plt.subplots(2, 1, figsize=(10, 7))

        equity = to_series(view.equity_points)
        if not equity.empty:
            equity_axis.plot(equity.index, equity.values, linewidth=1.5, color=color)
            equity_axis.fill_between(equity.index, equity.values, alpha=0.2, color=color)
        equity_axis.set_title(f"{view.strategy} on {view.symbol}: Equity Curve")
        equity_axis.set_ylabel("Equity")
        equity_axis.grid(alpha=0.25, linestyle="--", linewidth=0.7)

        candles = candle_frame(view)
        if not candles.empty:
            dates = pd.to_datetime(candles.index, unit="s", utc=True)
            price_axis.plot(dates, candles["close"].values, linewidth=1.0, color="#0f3d3e")
        markers = marker_frame(view)
        for kind, symbol in ((MarkerKind.BUY, "^"), (MarkerKind.SELL, "v")):
            subset = markers[markers["kind"] == kind]
            if not subset.empty:
                price_axis.scatter(
                    subset["date"],
                    subset["price"],
                    marker=symbol,
                    c=list(subset["color"]),
                    s=40,
                    zorder=3,
                )
        price_axis.set_title("Price & Trade Signals")
        price_axis.set_xlabel("Date")
        price_axis.set_ylabel("Price")
        price_axis.grid(alpha=0.25, linestyle="--", linewidth=0.7)

        figure.tight_layout()
        figure.savefig(plot_path, dpi=150)
        plt.close(figure)
        return plot_path
    except Exception as exc:
        raise ArtifactError(
            f"Failed to save dashboard chart to {output_dir / filename}: {exc}"
        ) from exc
