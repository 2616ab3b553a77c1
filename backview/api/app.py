"""FastAPI application serving dashboard transforms."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from backview.api.schemas import (
    CandlePointResponse,
    ChartRequest,
    ChartResponse,
    DashboardResponse,
    EquityResponse,
    EquitySummaryResponse,
    ErrorResponse,
    HealthResponse,
    LinePointResponse,
    MarkerResponse,
    MetricCardResponse,
    RatingResponse,
    TradeRowResponse,
)
from backview.core.analytics.dashboard import DashboardSettings, build_dashboard
from backview.core.analytics.equity import (
    downsample,
    sampling_stride,
    summarize,
    to_line_series,
)
from backview.core.analytics.formatting import MetricFormatter
from backview.core.analytics.markers import build_markers, to_candle_series
from backview.core.analytics.rating import derive_insights, rate, score_breakdown
from backview.core.analytics.types import DashboardView
from backview.core.config import AppConfig, load_config_or_default
from backview.core.results.types import BacktestResult, EquityPoint, Metrics
from backview.core.utils.env import env_setting, load_dotenv
from backview.core.utils.errors import (
    ArtifactError,
    BackviewError,
    ConfigLoadError,
    ResultFetchError,
    ResultValidationError,
)
from backview.core.utils.logging import configure_logging, get_logger

MAX_POINTS_QUERY = Query(default=None, ge=1, le=100_000)
INITIAL_CAPITAL_QUERY = Query(default=None)
_LOGGER_NAME = "backview.api.app"


def _http_status_for_backview_error(exc: BackviewError) -> int:
    """Map typed domain exceptions to HTTP status codes."""
    if isinstance(exc, ConfigLoadError):
        return 400
    if isinstance(exc, ResultFetchError):
        return 502
    if isinstance(exc, ResultValidationError):
        return 422
    if isinstance(exc, ArtifactError):
        return 500
    return 500


def _settings_for_request(
    app_config: AppConfig,
    max_points: int | None,
    initial_capital: float | None,
) -> DashboardSettings:
    """Apply per-request overrides on top of configured display settings."""
    base = app_config.display.to_dashboard_settings()
    return DashboardSettings(
        max_points=base.max_points if max_points is None else max_points,
        initial_capital=base.initial_capital if initial_capital is None else initial_capital,
        format=base.format,
    )


def _equity_response(
    points: list[EquityPoint],
    settings: DashboardSettings,
    formatter: MetricFormatter,
) -> EquityResponse:
    sampled = downsample(points, settings.max_points)
    return EquityResponse(
        total_points=len(points),
        sampled_points=len(sampled),
        stride=sampling_stride(len(points), settings.max_points),
        series=[LinePointResponse.from_point(point) for point in to_line_series(sampled)],
        summary=EquitySummaryResponse.from_summary(
            summarize(points, settings.initial_capital),
            formatter,
        ),
    )


def _dashboard_response(
    result: BacktestResult,
    view: DashboardView,
    settings: DashboardSettings,
    formatter: MetricFormatter,
) -> DashboardResponse:
    return DashboardResponse(
        result_id=view.result_id,
        symbol=view.symbol,
        strategy=view.strategy,
        equity=EquityResponse(
            total_points=len(result.equity_curve),
            sampled_points=len(view.equity_points),
            stride=sampling_stride(len(result.equity_curve), settings.max_points),
            series=[LinePointResponse.from_point(point) for point in view.equity_series],
            summary=EquitySummaryResponse.from_summary(view.equity_summary, formatter),
        ),
        chart=ChartResponse(
            candles=[CandlePointResponse.from_point(point) for point in view.candles],
            markers=[MarkerResponse.from_marker(marker) for marker in view.markers],
        ),
        rating=RatingResponse.build(
            view.rating,
            score_breakdown(result.metrics),
            list(view.insights),
        ),
        metric_cards=[MetricCardResponse.from_card(card) for card in view.metric_cards],
        trade_rows=[TradeRowResponse.from_row(row) for row in view.trade_rows],
        final_value=view.final_value,
        final_value_display=formatter.whole_currency(view.final_value),
    )


def create_app(app_config: AppConfig | None = None) -> FastAPI:
    """
    Build and return the Backview FastAPI app.

    Args:
        app_config: Explicit config; otherwise read from ``BACKVIEW_CONFIG`` or defaults.

    Returns:
        Configured FastAPI instance.
    """
    load_dotenv(Path(".env"))
    if app_config is None:
        config_path = env_setting("CONFIG")
        app_config = load_config_or_default(Path(config_path) if config_path else None)
    configure_logging(app_config.logging.level)
    resolved_config = app_config

    app = FastAPI(
        title="Backview API",
        version="0.1.0",
        description="Chart-ready views of backtest results.",
    )
    logger = get_logger(_LOGGER_NAME)
    logger.info("Backview API startup complete.")

    @app.exception_handler(BackviewError)
    async def _handle_backview_error(_: Any, exc: BackviewError) -> JSONResponse:
        """Render typed domain errors as JSON responses."""
        logger = get_logger(_LOGGER_NAME)
        logger.error("Backview API error: %s", exc)
        payload = ErrorResponse(error_code=exc.error_code, message=str(exc))
        return JSONResponse(
            status_code=_http_status_for_backview_error(exc),
            content=payload.model_dump(),
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected_error(_: Any, exc: Exception) -> JSONResponse:
        """Render unknown errors as deterministic API payloads."""
        logger = get_logger(_LOGGER_NAME)
        logger.exception("Unhandled API error: %s", exc)
        payload = ErrorResponse(error_code="internal_error", message="Internal server error.")
        return JSONResponse(status_code=500, content=payload.model_dump())

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Return API health metadata."""
        return HealthResponse()

    @app.post("/dashboard", response_model=DashboardResponse)
    async def dashboard(
        result: BacktestResult,
        max_points: int | None = MAX_POINTS_QUERY,
        initial_capital: float | None = INITIAL_CAPITAL_QUERY,
    ) -> DashboardResponse:
        """Build the full dashboard view for one backtest result."""
        settings = _settings_for_request(resolved_config, max_points, initial_capital)
        view = build_dashboard(result, settings)
        logger.info(
            "Dashboard %s: %d/%d equity points, %d markers, rating=%s",
            result.id,
            len(view.equity_points),
            len(result.equity_curve),
            len(view.markers),
            view.rating.label.value,
        )
        return _dashboard_response(result, view, settings, MetricFormatter(settings.format))

    @app.post("/downsample", response_model=EquityResponse)
    async def equity(
        points: list[EquityPoint],
        max_points: int | None = MAX_POINTS_QUERY,
        initial_capital: float | None = INITIAL_CAPITAL_QUERY,
    ) -> EquityResponse:
        """Downsample an equity curve and summarize the full curve."""
        settings = _settings_for_request(resolved_config, max_points, initial_capital)
        return _equity_response(points, settings, MetricFormatter(settings.format))

    @app.post("/markers", response_model=ChartResponse)
    async def markers(request: ChartRequest) -> ChartResponse:
        """Return candle series and trade markers for the price chart."""
        return ChartResponse(
            candles=[
                CandlePointResponse.from_point(point)
                for point in to_candle_series(request.candles)
            ],
            markers=[MarkerResponse.from_marker(marker) for marker in build_markers(request.trades)],
        )

    @app.post("/rating", response_model=RatingResponse)
    async def rating(metrics: Metrics) -> RatingResponse:
        """Rate a metrics bundle and derive its insights."""
        return RatingResponse.build(rate(metrics), score_breakdown(metrics), derive_insights(metrics))

    return app
