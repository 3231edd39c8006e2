"""Derive StrategyPerformance statistics from a strategy's trades."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence

from journal_insights.analytics.statistics import mean, percent, round2
from journal_insights.strategy.models import (
    MonthlyReturn,
    PerformanceTrend,
    StrategyPerformance,
    Trade,
    TradeStatus,
)

logger = logging.getLogger(__name__)


DEFAULT_INITIAL_BALANCE = Decimal("10000")
TREND_PERIODS = 6
MIN_TREND_MONTHS = 3
TREND_SLOPE_THRESHOLD = 0.5


def closed_trades(trades: Sequence[Trade]) -> List[Trade]:
    """Closed trades in entry order."""
    return sorted(
        (t for t in trades if t.status == TradeStatus.CLOSED),
        key=lambda t: t.entry_time,
    )


def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage of trades with positive P&L."""
    return percent(sum(1 for t in trades if t.is_win), len(trades))


def max_drawdown_pct(trades: Sequence[Trade], initial_balance: Decimal = DEFAULT_INITIAL_BALANCE) -> float:
    """Largest peak-to-trough decline of the equity curve, in percent."""
    equity = initial_balance
    peak = initial_balance
    max_dd_pct = Decimal("0")

    for trade in trades:
        equity += trade.pnl
        if equity > peak:
            peak = equity
            continue
        if peak > 0:
            max_dd_pct = max(max_dd_pct, (peak - equity) / peak * 100)

    return float(max_dd_pct)


def monthly_returns(trades: Sequence[Trade]) -> List[MonthlyReturn]:
    """Group trades by calendar month of entry (UTC)."""
    by_month: Dict[str, List[Trade]] = defaultdict(list)
    for trade in trades:
        by_month[trade.entry_time.strftime("%Y-%m")].append(trade)

    return [
        MonthlyReturn(
            month=month,
            pnl=round2(sum(t.pnl_value for t in month_trades)),
            trades=len(month_trades),
            win_rate=round2(win_rate(month_trades)),
        )
        for month, month_trades in sorted(by_month.items())
    ]


def trend_slope(values: Sequence[float]) -> float:
    """Least-squares slope of values against their index."""
    n = len(values)
    if n < 2:
        return 0.0
    x_mean = (n - 1) / 2
    y_mean = mean(values)
    numerator = sum((i - x_mean) * (v - y_mean) for i, v in enumerate(values))
    denominator = sum((i - x_mean) ** 2 for i in range(n))
    return numerator / denominator if denominator else 0.0


def performance_trend(returns: Sequence[MonthlyReturn], periods: int = TREND_PERIODS) -> PerformanceTrend:
    """Classify recent monthly P&L as improving, declining or stable."""
    recent = sorted(returns, key=lambda m: m.month)[-periods:]
    if len(recent) < MIN_TREND_MONTHS:
        return PerformanceTrend.INSUFFICIENT_DATA

    slope = trend_slope([m.pnl for m in recent])
    if abs(slope) < TREND_SLOPE_THRESHOLD:
        return PerformanceTrend.STABLE
    return PerformanceTrend.IMPROVING if slope > 0 else PerformanceTrend.DECLINING


def calculate_strategy_performance(
    trades: Sequence[Trade],
    initial_balance: Decimal = DEFAULT_INITIAL_BALANCE,
) -> StrategyPerformance:
    """Calculate aggregate statistics for a strategy's closed trades.

    Args:
        trades: Trades of one strategy; open trades are ignored.
        initial_balance: Starting equity for the drawdown curve.

    Returns:
        StrategyPerformance; all zeros when there are no closed trades.
    """
    closed = closed_trades(trades)
    if not closed:
        return StrategyPerformance()

    wins = [t.pnl_value for t in closed if t.pnl_value > 0]
    losses = [abs(t.pnl_value) for t in closed if t.pnl_value < 0]

    gross_profit = sum(wins)
    gross_loss = sum(losses)
    if gross_loss > 0:
        profit_factor = gross_profit / gross_loss
    else:
        profit_factor = float("inf") if gross_profit > 0 else 0.0

    avg_win = mean(wins)
    avg_loss = mean(losses)
    total_pnl = sum(t.pnl_value for t in closed)
    months = monthly_returns(closed)

    performance = StrategyPerformance(
        total_trades=len(closed),
        win_rate=round2(win_rate(closed)),
        profit_factor=round2(profit_factor) if profit_factor != float("inf") else profit_factor,
        expectancy=round2(total_pnl / len(closed)),
        max_drawdown=round2(max_drawdown_pct(closed, initial_balance)),
        risk_reward_ratio=round2(avg_win / avg_loss) if avg_loss else 0.0,
        total_pnl=round2(total_pnl),
        performance_trend=performance_trend(months),
        monthly_returns=months,
    )

    logger.debug(
        f"Performance over {performance.total_trades} trades: "
        f"win_rate={performance.win_rate} pf={performance.profit_factor}"
    )
    return performance
