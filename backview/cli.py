"""Backview command-line interface."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from backview.core.analytics.formatting import MetricFormatter
from backview.core.analytics.types import DashboardView, InsightKind
from backview.core.config import AppConfig, load_config_or_default
from backview.core.results.types import BacktestRequest
from backview.core.services import (
    DashboardOutcome,
    list_strategies,
    list_symbols,
    render_result_file,
    run_and_render,
)
from backview.core.utils.env import load_dotenv
from backview.core.utils.errors import ConfigLoadError, exit_code_for_exception
from backview.core.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Backview CLI", no_args_is_help=True)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    file_okay=True,
    dir_okay=False,
    resolve_path=True,
    help="Path to YAML configuration file.",
)
CHART_OPTION = typer.Option(
    None,
    "--chart/--no-chart",
    help="Write the PNG dashboard chart (default: output.save_chart).",
)
RESULT_OPTION = typer.Option(
    ...,
    "--result",
    file_okay=True,
    dir_okay=False,
    resolve_path=True,
    help="Backtest result JSON document.",
)
SYMBOL_OPTION = typer.Option(..., "--symbol", help="Symbol to backtest.")
STRATEGY_OPTION = typer.Option(..., "--strategy", help="Strategy id, e.g. SMA_CROSSOVER.")
START_OPTION = typer.Option(..., "--start", help="Inclusive start date (YYYY-MM-DD).")
END_OPTION = typer.Option(..., "--end", help="Inclusive end date (YYYY-MM-DD).")
PARAM_OPTION = typer.Option(
    None,
    "--param",
    help="Strategy parameter as key=value; repeat for several.",
)
CAPITAL_OPTION = typer.Option(100_000.0, "--capital", help="Initial capital.")
COMMISSION_OPTION = typer.Option(0.001, "--commission", help="Commission rate per fill.")


@app.callback()
def callback() -> None:
    """Backview CLI commands."""


def _handle_cli_exception(logger_name: str, context: str, exc: Exception) -> None:
    """Log diagnostics and exit with the typed exit code."""
    get_logger(logger_name).exception("%s failed: %s", context, exc)
    raise typer.Exit(code=exit_code_for_exception(exc)) from None


def _load_app_config(config_path: Path | None) -> AppConfig:
    """Load config (or defaults) and apply its logging level."""
    app_config = load_config_or_default(config_path)
    configure_logging(app_config.logging.level)
    return app_config


def _coerce_param_value(raw_value: str) -> int | float | str:
    """Interpret a CLI parameter value as int, then float, then string."""
    for caster in (int, float):
        try:
            return caster(raw_value)
        except ValueError:
            continue
    return raw_value


def _parse_params(raw_params: list[str] | None) -> dict[str, int | float | str]:
    """Parse repeated ``key=value`` options."""
    params: dict[str, int | float | str] = {}
    for raw in raw_params or []:
        if "=" not in raw:
            raise ConfigLoadError(f"Invalid --param '{raw}'; expected key=value.")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise ConfigLoadError(f"Invalid --param '{raw}'; key must be non-empty.")
        params[key] = _coerce_param_value(value.strip())
    return params


def _print_view(view: DashboardView, formatter: MetricFormatter) -> None:
    """Print the dashboard view in deterministic order."""
    summary = view.equity_summary
    typer.echo(f"result={view.result_id}")
    typer.echo(f"strategy={view.strategy}")
    typer.echo(f"symbol={view.symbol}")
    typer.echo(f"rating={view.rating.label.value} (score={view.rating.score})")
    typer.echo(f"final_value={formatter.whole_currency(view.final_value)}")
    typer.echo(
        f"equity: start={formatter.whole_currency(summary.start)} "
        f"end={formatter.whole_currency(summary.end)} "
        f"pnl={formatter.signed_currency(summary.gain)} "
        f"({formatter.percent_change(summary.percent_change)})"
    )
    typer.echo(f"equity_points={len(view.equity_points)}")
    typer.echo(f"candles={len(view.candles)}")
    typer.echo(f"markers={len(view.markers)}")
    typer.echo("metrics:")
    for card in view.metric_cards:
        typer.echo(f"{card.label}={card.value}")
    if view.show_insights:
        typer.echo("insights:")
        for insight in view.insights:
            prefix = "+" if insight.kind is InsightKind.POSITIVE else "!"
            typer.echo(f"[{prefix}] {insight.text}")
    if view.trade_rows:
        typer.echo("trades:")
        for row in view.trade_rows:
            typer.echo(
                f"{row.index} | {row.entry_date} {row.entry_price} -> "
                f"{row.exit_date} {row.exit_price} | shares={row.shares} | pnl={row.pnl}"
            )
    else:
        typer.echo("No trades executed during this backtest period.")


def _print_outcome(outcome: DashboardOutcome) -> None:
    _print_view(outcome.view, MetricFormatter(outcome.format))
    for path in outcome.artifact_paths:
        typer.echo(f"artifact={path}")


@app.command("render")
def render(
    result: Path = RESULT_OPTION,
    config: Path | None = CONFIG_OPTION,
    chart: bool | None = CHART_OPTION,
) -> None:
    """Render a saved backtest result: summary, rating, insights and chart."""
    load_dotenv(Path(".env"))
    configure_logging()
    logger_name = __name__

    try:
        app_config = _load_app_config(config)
        outcome = render_result_file(
            result_path=result,
            app_config=app_config,
            save_chart=chart,
            progress_callback=get_logger(logger_name).info,
        )
    except Exception as exc:
        _handle_cli_exception(logger_name=logger_name, context="Render command", exc=exc)

    _print_outcome(outcome)


@app.command("run")
def run(
    symbol: str = SYMBOL_OPTION,
    strategy: str = STRATEGY_OPTION,
    start: str = START_OPTION,
    end: str = END_OPTION,
    param: list[str] | None = PARAM_OPTION,
    capital: float = CAPITAL_OPTION,
    commission: float = COMMISSION_OPTION,
    config: Path | None = CONFIG_OPTION,
    chart: bool | None = CHART_OPTION,
) -> None:
    """Run a backtest on the remote service and render the result."""
    load_dotenv(Path(".env"))
    configure_logging()
    logger_name = __name__

    try:
        app_config = _load_app_config(config)
        try:
            request = BacktestRequest(
                symbol=symbol,
                strategy=strategy,
                parameters=_parse_params(param),
                start_date=start,
                end_date=end,
                initial_capital=capital,
                commission_rate=commission,
            )
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid run request: {exc}") from exc
        outcome = run_and_render(
            request=request,
            app_config=app_config,
            save_chart=chart,
            progress_callback=get_logger(logger_name).info,
        )
    except Exception as exc:
        _handle_cli_exception(logger_name=logger_name, context="Run command", exc=exc)

    _print_outcome(outcome)


@app.command("strategies")
def strategies(config: Path | None = CONFIG_OPTION) -> None:
    """List strategies offered by the backtest service."""
    load_dotenv(Path(".env"))
    configure_logging()
    logger_name = __name__

    try:
        app_config = _load_app_config(config)
        catalog = list_strategies(app_config)
    except Exception as exc:
        _handle_cli_exception(logger_name=logger_name, context="Strategies command", exc=exc)

    if not catalog:
        typer.echo("No strategies available.")
        return
    typer.echo("id | name | parameters")
    for entry in catalog:
        names = ",".join(parameter.name for parameter in entry.parameters) or "-"
        typer.echo(f"{entry.id} | {entry.name} | {names}")


@app.command("symbols")
def symbols(config: Path | None = CONFIG_OPTION) -> None:
    """List symbols the backtest service has data for."""
    load_dotenv(Path(".env"))
    configure_logging()
    logger_name = __name__

    try:
        app_config = _load_app_config(config)
        catalog = list_symbols(app_config)
    except Exception as exc:
        _handle_cli_exception(logger_name=logger_name, context="Symbols command", exc=exc)

    if not catalog:
        typer.echo("No symbols available.")
        return
    for entry in catalog:
        typer.echo(entry)


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
