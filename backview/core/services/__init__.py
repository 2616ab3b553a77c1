"""Service-layer workflows for CLI and API orchestration."""

from backview.core.services.dashboard_service import (
    DashboardOutcome,
    build_service_client,
    list_strategies,
    list_symbols,
    render_from_source,
    render_result,
    render_result_file,
    run_and_render,
)

__all__ = [
    "DashboardOutcome",
    "build_service_client",
    "list_strategies",
    "list_symbols",
    "render_from_source",
    "render_result",
    "render_result_file",
    "run_and_render",
]
