"""Assemble every derived display structure for one backtest result."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from backview.core.analytics.equity import (
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_MAX_POINTS,
    downsample,
    summarize,
    to_line_series,
)
from backview.core.analytics.formatting import FormatConfig, MetricFormatter
from backview.core.analytics.markers import build_markers, to_candle_series
from backview.core.analytics.rating import derive_insights, rate
from backview.core.analytics.types import DashboardView, MetricCard, TradeRow, Trend
from backview.core.results.types import BacktestResult, Metrics, Trade


@dataclass(frozen=True)
class DashboardSettings:
    """Display knobs applied to every result."""

    max_points: int = DEFAULT_MAX_POINTS
    initial_capital: float = DEFAULT_INITIAL_CAPITAL
    format: FormatConfig = field(default_factory=FormatConfig)


def _trend(is_up: bool, otherwise: Trend = Trend.DOWN) -> Trend:
    return Trend.UP if is_up else otherwise


def build_metric_cards(metrics: Metrics, formatter: MetricFormatter) -> list[MetricCard]:
    """Headline metric cards in display order."""
    return [
        MetricCard(
            label="Total Return",
            value=formatter.percent(metrics.total_return, 2),
            trend=_trend(metrics.total_return >= 0),
        ),
        MetricCard(
            label="Annual Return",
            value=formatter.percent(metrics.annualized_return, 2),
            trend=_trend(metrics.annualized_return >= 0),
        ),
        MetricCard(
            label="Max Drawdown",
            value=formatter.percent(metrics.max_drawdown_percent, 2),
            trend=Trend.DOWN,
        ),
        MetricCard(
            label="Sharpe Ratio",
            value=formatter.ratio(metrics.sharpe_ratio, 3),
            trend=_trend(metrics.sharpe_ratio >= 1, otherwise=Trend.NEUTRAL),
        ),
        MetricCard(
            label="Win Rate",
            value=formatter.percent(metrics.win_rate, 1),
            trend=_trend(metrics.win_rate >= 0.5),
        ),
        MetricCard(
            label="Total Trades",
            value=str(metrics.total_trades),
            trend=Trend.NEUTRAL,
        ),
    ]


def build_trade_rows(trades: Sequence[Trade], formatter: MetricFormatter) -> list[TradeRow]:
    """Trade ledger rows numbered from 1."""
    return [
        TradeRow(
            index=position,
            entry_date=formatter.date(trade.entry_date),
            entry_price=formatter.currency(trade.entry_price),
            exit_date=formatter.date(trade.exit_date),
            exit_price=formatter.currency(trade.exit_price),
            shares=formatter.ratio(trade.shares, 2),
            pnl=formatter.signed_currency(trade.pnl),
            commission=formatter.currency(trade.commission),
            is_profit=trade.pnl >= 0,
        )
        for position, trade in enumerate(trades, start=1)
    ]


def build_dashboard(
    result: BacktestResult,
    settings: DashboardSettings | None = None,
) -> DashboardView:
    """
    Run the equity, marker and rating transforms on one result snapshot.

    The branches share no state. The returned view is complete before it is
    handed out, so a renderer never mixes outputs from two results.

    Args:
        result: Backtest result snapshot.
        settings: Display settings; defaults to 500 points and 100,000 capital.

    Returns:
        Immutable dashboard view.
    """
    resolved = settings or DashboardSettings()
    formatter = MetricFormatter(resolved.format)

    sampled = downsample(result.equity_curve, resolved.max_points)
    summary = summarize(result.equity_curve, resolved.initial_capital)

    return DashboardView(
        result_id=result.id,
        symbol=result.symbol,
        strategy=result.strategy,
        equity_points=tuple(sampled),
        equity_series=tuple(to_line_series(sampled)),
        equity_summary=summary,
        candles=tuple(to_candle_series(result.candles)),
        markers=tuple(build_markers(result.trades)),
        rating=rate(result.metrics),
        insights=tuple(derive_insights(result.metrics)),
        metric_cards=tuple(build_metric_cards(result.metrics, formatter)),
        trade_rows=tuple(build_trade_rows(result.trades, formatter)),
        final_value=resolved.initial_capital * (1 + result.metrics.total_return),
    )
