"""Rule-based performance rating and insight generation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from backview.core.analytics.types import Insight, InsightKind, Rating, RatingLabel
from backview.core.results.types import Metrics


@dataclass(frozen=True)
class ScoreRule:
    """
    Score contribution of one metric.

    The first matching band wins, so each metric adds at most one delta. A band
    is ``(predicate, delta)``.
    """

    name: str
    value: Callable[[Metrics], float]
    bands: tuple[tuple[Callable[[float], bool], int], ...]

    def delta(self, metrics: Metrics) -> int:
        """Return the delta of the first matching band, or 0."""
        observed = self.value(metrics)
        for predicate, delta in self.bands:
            if predicate(observed):
                return delta
        return 0


SCORE_RULES: tuple[ScoreRule, ...] = (
    ScoreRule(
        name="total_return",
        value=lambda metrics: metrics.total_return,
        bands=((lambda v: v > 0.5, 2), (lambda v: v > 0.2, 1), (lambda v: v < 0, -1)),
    ),
    ScoreRule(
        name="sharpe_ratio",
        value=lambda metrics: metrics.sharpe_ratio,
        bands=((lambda v: v > 1.5, 2), (lambda v: v > 1.0, 1), (lambda v: v < 0.5, -1)),
    ),
    ScoreRule(
        name="max_drawdown_percent",
        value=lambda metrics: metrics.max_drawdown_percent,
        bands=((lambda v: v < 0.15, 1), (lambda v: v > 0.30, -1)),
    ),
    ScoreRule(
        name="win_rate",
        value=lambda metrics: metrics.win_rate,
        bands=((lambda v: v > 0.6, 1), (lambda v: v < 0.4, -1)),
    ),
)

# Minimum score per label, highest first. Boundary scores belong to the higher band.
LABEL_THRESHOLDS: tuple[tuple[int, RatingLabel], ...] = (
    (4, RatingLabel.EXCELLENT),
    (2, RatingLabel.GOOD),
    (0, RatingLabel.MODERATE),
)


def score_breakdown(metrics: Metrics) -> dict[str, int]:
    """Return each rule's delta keyed by metric name, in evaluation order."""
    return {rule.name: rule.delta(metrics) for rule in SCORE_RULES}


def score(metrics: Metrics) -> int:
    """Sum of all rule deltas."""
    return sum(score_breakdown(metrics).values())


def label_for_score(total: int) -> RatingLabel:
    """Map a score to its label."""
    for minimum, label in LABEL_THRESHOLDS:
        if total >= minimum:
            return label
    return RatingLabel.POOR


def rate(metrics: Metrics) -> Rating:
    """Score ``metrics`` and return the categorical rating."""
    total = score(metrics)
    return Rating(label=label_for_score(total), score=total)


def derive_insights(metrics: Metrics) -> list[Insight]:
    """
    Generate insights in rule order (not severity order).

    The two Sharpe rules are an if/else pair; the others fire independently.
    An empty list means the insights panel is hidden.
    """
    insights: list[Insight] = []

    if metrics.sharpe_ratio > 1.0:
        insights.append(
            Insight(
                kind=InsightKind.POSITIVE,
                text=(
                    "Strong risk-adjusted returns with Sharpe ratio of "
                    f"{metrics.sharpe_ratio:.2f}"
                ),
            )
        )
    elif metrics.sharpe_ratio < 0.5:
        insights.append(
            Insight(
                kind=InsightKind.WARNING,
                text="Low Sharpe ratio suggests poor risk-adjusted returns",
            )
        )

    if metrics.max_drawdown_percent > 0.25:
        insights.append(
            Insight(
                kind=InsightKind.WARNING,
                text=(
                    f"High max drawdown of {metrics.max_drawdown_percent * 100:.1f}% "
                    "may indicate volatility risk"
                ),
            )
        )

    if metrics.win_rate > 0.6 and metrics.total_trades > 2:
        insights.append(
            Insight(
                kind=InsightKind.POSITIVE,
                text=f"{metrics.win_rate * 100:.0f}% win rate over {metrics.total_trades} trades",
            )
        )

    if metrics.annualized_return > 0.15:
        insights.append(
            Insight(
                kind=InsightKind.POSITIVE,
                text=(
                    "Outperformed typical market returns with "
                    f"{metrics.annualized_return * 100:.1f}% annual"
                ),
            )
        )

    return insights
