"""Programmatic workflows shared by the CLI and the API."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from backview.core.analytics.dashboard import build_dashboard
from backview.core.analytics.formatting import FormatConfig
from backview.core.analytics.types import DashboardView
from backview.core.config import AppConfig, ServiceConfig
from backview.core.data.base import ResultSource
from backview.core.data.file_source import JsonFileSource
from backview.core.data.service_client import BacktestServiceClient, ServiceRunSource
from backview.core.results.types import BacktestRequest, BacktestResult, StrategyInfo
from backview.core.utils.logging import get_logger
from backview.core.utils.plotting import save_dashboard_chart

ProgressCallback = Callable[[str], None]
_LOGGER_NAME = "backview.core.services.dashboard_service"
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class DashboardOutcome:
    """One rendered result and the artifacts written for it."""

    result: BacktestResult
    view: DashboardView
    artifact_paths: tuple[str, ...]
    format: FormatConfig


def _emit_progress(callback: ProgressCallback | None, message: str) -> None:
    """Emit optional progress messages."""
    if callback is not None:
        callback(message)


def artifact_dir_name(result_id: str) -> str:
    """
    Single path component for the artifacts of ``result_id``.

    Characters outside ``[A-Za-z0-9._-]`` become ``_``. Ids that reduce to an empty,
    dot-only name fall back to a short hash of the raw id.
    """
    name = _UNSAFE_NAME_CHARS.sub("_", result_id).strip("_")
    if not name.strip("."):
        digest = hashlib.sha256(result_id.encode("utf-8")).hexdigest()[:16]
        return f"result-{digest}"
    return name


def build_service_client(service: ServiceConfig) -> BacktestServiceClient:
    """Create a service client from config."""
    return BacktestServiceClient(
        base_url=service.base_url,
        timeout_seconds=service.timeout_seconds,
        max_retries=service.max_retries,
        retry_backoff_seconds=service.retry_backoff_seconds,
    )


def render_result(
    result: BacktestResult,
    app_config: AppConfig,
    save_chart: bool | None = None,
    progress_callback: ProgressCallback | None = None,
) -> DashboardOutcome:
    """
    Build the dashboard view for ``result`` and write the chart artifact if enabled.

    Args:
        result: Backtest result snapshot.
        app_config: Application config.
        save_chart: Overrides ``output.save_chart`` when not ``None``.
        progress_callback: Optional progress sink.

    Returns:
        Dashboard outcome.
    """
    logger = get_logger(_LOGGER_NAME)
    settings = app_config.display.to_dashboard_settings()
    view = build_dashboard(result, settings)
    logger.info(
        "Built dashboard for %s: %d/%d equity points, %d markers, rating=%s (%d)",
        result.id,
        len(view.equity_points),
        len(result.equity_curve),
        len(view.markers),
        view.rating.label.value,
        view.rating.score,
    )

    artifact_paths: list[str] = []
    should_save = app_config.output.save_chart if save_chart is None else save_chart
    if should_save:
        _emit_progress(progress_callback, "Writing dashboard chart.")
        chart_path = save_dashboard_chart(
            view=view,
            output_dir=app_config.output.artifacts_dir / artifact_dir_name(result.id),
            filename=app_config.output.chart_filename,
        )
        artifact_paths.append(str(chart_path))
    return DashboardOutcome(
        result=result,
        view=view,
        artifact_paths=tuple(artifact_paths),
        format=settings.format,
    )


def render_from_source(
    source: ResultSource,
    app_config: AppConfig,
    save_chart: bool | None = None,
    progress_callback: ProgressCallback | None = None,
) -> DashboardOutcome:
    """Load one result from ``source`` and render it."""
    _emit_progress(progress_callback, "Loading backtest result.")
    result = source.load_result()
    return render_result(
        result,
        app_config,
        save_chart=save_chart,
        progress_callback=progress_callback,
    )


def render_result_file(
    result_path: Path,
    app_config: AppConfig,
    save_chart: bool | None = None,
    progress_callback: ProgressCallback | None = None,
) -> DashboardOutcome:
    """Render a result saved as JSON."""
    return render_from_source(
        JsonFileSource(result_path),
        app_config,
        save_chart=save_chart,
        progress_callback=progress_callback,
    )


def run_and_render(
    request: BacktestRequest,
    app_config: AppConfig,
    save_chart: bool | None = None,
    progress_callback: ProgressCallback | None = None,
) -> DashboardOutcome:
    """Run ``request`` on the backtest service and render the returned result."""
    client = build_service_client(app_config.service)
    _emit_progress(
        progress_callback,
        f"Running {request.strategy} on {request.symbol} via {app_config.service.base_url}.",
    )
    return render_from_source(
        ServiceRunSource(client, request),
        app_config,
        save_chart=save_chart,
        progress_callback=progress_callback,
    )


def list_strategies(app_config: AppConfig) -> list[StrategyInfo]:
    """Return the service's strategy catalog."""
    return build_service_client(app_config.service).list_strategies()


def list_symbols(app_config: AppConfig) -> list[str]:
    """Return the service's symbol catalog."""
    return build_service_client(app_config.service).list_symbols()
