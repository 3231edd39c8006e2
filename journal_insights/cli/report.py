"""Rich rendering of analytics and strategy results."""

from typing import List, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from journal_insights.analytics.engine import AnalyticsData
from journal_insights.analytics.statistics import TrendDirection
from journal_insights.strategy.market_correlation import MarketCorrelation
from journal_insights.strategy.pattern_miner import PerformancePattern
from journal_insights.strategy.service import StrategyReport

PRIORITY_STYLES = {
    "high": "bold red",
    "medium": "yellow",
    "low": "dim",
}

TREND_STYLES = {
    TrendDirection.IMPROVING: "green",
    TrendDirection.DECLINING: "red",
    TrendDirection.STABLE: "dim",
}


def _priority(value: str) -> str:
    style = PRIORITY_STYLES.get(value.lower(), "")
    return f"[{style}]{value}[/{style}]" if style else value


def _trend(trend: TrendDirection) -> str:
    style = TREND_STYLES[trend]
    return f"[{style}]{trend.value}[/{style}]"


def render_analytics(console: Console, data: AnalyticsData, user_id: str) -> None:
    """Print consistency, emotion, process and insight sections."""
    metrics = data.consistency_metrics
    period = f" ({data.date_range.start} to {data.date_range.end})" if data.date_range else ""
    console.print(Panel(
        f"Current Streak:  {metrics.current_streak} days\n"
        f"Longest Streak:  {metrics.longest_streak} days\n"
        f"Total Entries:   {metrics.total_entries}\n"
        f"Completion Rate: {metrics.completion_rate:.2f}%\n"
        f"Weekly:          {metrics.weekly_consistency:.0f}%\n"
        f"Monthly:         {metrics.monthly_consistency:.0f}%",
        title=f"Consistency - {user_id}{period}",
        border_style="green",
    ))

    if data.emotional_patterns:
        table = Table(title="Emotional Patterns", header_style="bold cyan")
        table.add_column("Emotion", style="cyan")
        table.add_column("Avg Process", justify="right")
        table.add_column("Avg P&L", justify="right")
        table.add_column("Freq", justify="right")
        table.add_column("Corr", justify="right")
        table.add_column("Trend", justify="center")
        for pattern in data.emotional_patterns:
            table.add_row(
                pattern.emotion,
                f"{pattern.average_process_score:.1f}",
                f"${pattern.average_pnl:,.2f}",
                str(pattern.frequency),
                f"{pattern.correlation_strength:.2f}",
                _trend(pattern.trend),
            )
        console.print(table)

    if data.process_trends:
        table = Table(title="Process Trends", header_style="bold cyan")
        table.add_column("Metric", style="cyan")
        table.add_column("Current", justify="right")
        table.add_column("Previous", justify="right")
        table.add_column("Change", justify="right")
        table.add_column("Trend", justify="center")
        for trend in data.process_trends:
            table.add_row(
                trend.metric,
                f"{trend.current_value:.2f}",
                f"{trend.previous_value:.2f}",
                f"{trend.change_percentage:+.2f}%",
                _trend(trend.trend),
            )
        console.print(table)

    render_insight_list(
        console,
        "Insights",
        [
            (i.priority.value, i.title, f"{i.description}\n[dim]{i.recommendation}[/dim]")
            for i in data.personalized_insights
        ],
    )


def render_insight_list(console: Console, title: str, rows: List[tuple]) -> None:
    """Print (priority, heading, body) rows as a table."""
    if not rows:
        console.print(f"[yellow]No {title.lower()} generated.[/yellow]")
        return

    table = Table(title=title, header_style="bold cyan", show_lines=True)
    table.add_column("Priority", justify="center")
    table.add_column("Insight", style="bold")
    table.add_column("Details")
    for priority, heading, body in rows:
        table.add_row(_priority(priority), heading, body)
    console.print(table)


def render_strategy_report(console: Console, report: StrategyReport) -> None:
    """Print strategy performance, insights and optimizations."""
    strategy = report.strategy
    perf = strategy.performance
    profit_factor = "inf" if perf.profit_factor == float("inf") else f"{perf.profit_factor:.2f}"

    console.print(Panel(
        f"Trades:        {report.trade_count}\n"
        f"Win Rate:      {perf.win_rate:.1f}%\n"
        f"Profit Factor: {profit_factor}\n"
        f"Expectancy:    ${perf.expectancy:,.2f}\n"
        f"Max Drawdown:  {perf.max_drawdown:.1f}%\n"
        f"Risk/Reward:   {perf.risk_reward_ratio:.2f}\n"
        f"Trend:         {perf.performance_trend.value}",
        title=f"{strategy.title} ({strategy.id})",
        border_style="blue",
    ))

    render_insight_list(
        console,
        "Insights",
        [
            (i.priority.value, i.type.value, f"{i.message}\n[dim]confidence {i.confidence:.0%}[/dim]")
            for i in report.insights
        ],
    )

    if report.optimizations:
        table = Table(title="Optimization Suggestions", header_style="bold cyan")
        table.add_column("Category", style="cyan")
        table.add_column("Suggestion")
        table.add_column("Gain", justify="right")
        table.add_column("Conf.", justify="right")
        table.add_column("Effort", justify="center")
        for suggestion in report.optimizations:
            table.add_row(
                suggestion.category.value,
                suggestion.suggestion,
                f"+{suggestion.expected_improvement:g}%",
                str(suggestion.confidence),
                suggestion.implementation_difficulty.value,
            )
        console.print(table)


def render_patterns(console: Console, patterns: Sequence[PerformancePattern]) -> None:
    """Print mined performance patterns."""
    if not patterns:
        console.print("[yellow]No significant patterns found.[/yellow]")
        return

    table = Table(title="Performance Patterns", header_style="bold cyan")
    table.add_column("Type", style="cyan")
    table.add_column("Pattern")
    table.add_column("Impact", justify="right")
    table.add_column("Conf.", justify="right")
    for pattern in patterns:
        color = "green" if pattern.impact >= 0 else "red"
        table.add_row(
            pattern.type.value,
            pattern.description,
            f"[{color}]{pattern.impact:+.1f}[/{color}]",
            str(pattern.confidence),
        )
    console.print(table)


def render_correlations(console: Console, correlations: Sequence[MarketCorrelation], strategy_id: str) -> None:
    """Print market-condition correlations of a strategy."""
    if not correlations:
        console.print(f"[yellow]No market conditions correlated with {strategy_id}.[/yellow]")
        return

    table = Table(title=f"Market Correlations - {strategy_id}", header_style="bold cyan", show_lines=True)
    table.add_column("Condition", style="cyan")
    table.add_column("r", justify="right")
    table.add_column("Significance", justify="right")
    table.add_column("Recommendations")
    for corr in correlations:
        color = "green" if corr.correlation > 0 else "red"
        table.add_row(
            corr.condition,
            f"[{color}]{corr.correlation:+.2f}[/{color}]",
            f"{corr.significance:.1f}%",
            "\n".join(corr.recommendations),
        )
    console.print(table)
