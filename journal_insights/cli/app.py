"""Typer CLI application for Journal Insights."""

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from config.settings import AppSettings, get_settings
from journal_insights.analytics.engine import AnalyticsEngine
from journal_insights.analytics.journal_models import DateRange
from journal_insights.cli.report import (
    render_analytics,
    render_correlations,
    render_patterns,
    render_strategy_report,
)
from journal_insights.errors import DataLoadError, InsightsError
from journal_insights.logging_config import LoggingConfig, configure_logging
from journal_insights.storage.json_store import JsonFileStore, load_market_series
from journal_insights.strategy.service import create_strategy_insights_service

app = typer.Typer(
    name="journal-insights",
    help="Trading journal analytics: consistency, emotions, process trends and strategy insights",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    """Options shared by every command."""

    settings: AppSettings
    data_file: Optional[Path]
    as_json: bool

    def load_store(self) -> JsonFileStore:
        """Open the configured data file."""
        if self.data_file is None:
            raise DataLoadError("no data file given; use --data or JOURNAL_INSIGHTS_DATA_FILE")
        return JsonFileStore(self.data_file)


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str, allow_nan=False))


def _fail(error: Exception) -> None:
    err_console.print(f"[red]Error: {escape(str(error))}[/red]", soft_wrap=True)
    raise typer.Exit(1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    data: Optional[Path] = typer.Option(
        None,
        "--data", "-d",
        help="JSON file with journal entries, strategies, trades and market conditions",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print raw JSON instead of tables",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override log level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Journal Insights command line."""
    settings = get_settings()
    logging_config = LoggingConfig.from_settings(settings)
    if log_level:
        try:
            logging_config = LoggingConfig.from_settings(settings.model_copy(update={"log_level": log_level}))
        except ValueError:
            _fail(InsightsError(f"Invalid log level: {log_level}"))
    configure_logging(logging_config)

    ctx.obj = CliState(
        settings=settings,
        data_file=data or settings.data_file,
        as_json=as_json,
    )


@app.command()
def analytics(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="Journal owner"),
    start: Optional[datetime] = typer.Option(
        None,
        "--start",
        formats=["%Y-%m-%d"],
        help="First day (defaults to the lookback window)",
    ),
    end: Optional[datetime] = typer.Option(
        None,
        "--end",
        formats=["%Y-%m-%d"],
        help="Last day (defaults to today)",
    ),
):
    """Consistency, emotional patterns, process trends and insights for a user."""
    state = _state(ctx)
    try:
        store = state.load_store()
        engine = AnalyticsEngine(store, config=state.settings.insights)

        date_range = None
        if start or end:
            today = engine.clock().date()
            end_day = end.date() if end else today
            start_day = start.date() if start else DateRange.ending(end_day, state.settings.insights.default_lookback_days).start
            date_range = DateRange(start_day, end_day)

        data = asyncio.run(engine.get_analytics_data(user_id, date_range))
    except (InsightsError, ValueError) as e:
        _fail(e)

    if state.as_json:
        _emit_json(data.to_dict())
        return
    render_analytics(console, data, user_id)


@app.command()
def strategy(
    ctx: typer.Context,
    strategy_id: str = typer.Argument(..., help="Strategy to analyse"),
):
    """Performance insights and optimization suggestions for one strategy."""
    state = _state(ctx)
    try:
        store = state.load_store()
        service = create_strategy_insights_service(state.settings.insights, store)
        report = service.analyze_strategy(strategy_id)
    except InsightsError as e:
        _fail(e)

    if state.as_json:
        _emit_json(report.to_dict())
        return
    render_strategy_report(console, report)


@app.command()
def patterns(ctx: typer.Context):
    """Time, weekday, timeframe and asset-class patterns across all strategies."""
    state = _state(ctx)
    try:
        store = state.load_store()
        service = create_strategy_insights_service(state.settings.insights, store)
        found = service.identify_performance_patterns(store.get_strategies())
    except InsightsError as e:
        _fail(e)

    if state.as_json:
        _emit_json([p.to_dict() for p in found])
        return
    render_patterns(console, found)


@app.command()
def correlations(
    ctx: typer.Context,
    strategy_id: str = typer.Argument(..., help="Strategy to correlate"),
    market: Optional[Path] = typer.Option(
        None,
        "--market", "-m",
        help="JSON file with market_conditions series (defaults to the data file)",
    ),
):
    """Market conditions correlated with a strategy's trade results."""
    state = _state(ctx)
    try:
        store = state.load_store()
        store.get_strategy(strategy_id)
        series = load_market_series(market) if market else store.market_series
        service = create_strategy_insights_service(state.settings.insights, store)
        found = service.detect_market_condition_correlations(strategy_id, series)
    except InsightsError as e:
        _fail(e)

    if state.as_json:
        _emit_json([c.to_dict() for c in found])
        return
    render_correlations(console, found, strategy_id)


@app.command()
def version():
    """Show version information."""
    from journal_insights import __version__

    console.print(f"Journal Insights v{__version__}")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
