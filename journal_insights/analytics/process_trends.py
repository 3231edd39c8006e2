"""Windowed trend classification for process metrics."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from journal_insights.analytics.journal_models import JournalEntry
from journal_insights.analytics.statistics import (
    TrendDirection,
    classify_change,
    mean,
    round2,
)

logger = logging.getLogger(__name__)


TRACKED_METRICS = (
    "plan_adherence",
    "risk_management",
    "entry_timing",
    "exit_timing",
    "overall_discipline",
    "process_score",
)

WEEK_WINDOW = 7
MONTH_WINDOW = 30
CHANGE_THRESHOLD = 5.0
MIN_HISTORY = 2


@dataclass
class ProcessTrend:
    """Recent movement of one process metric."""

    metric: str
    current_value: float
    previous_value: float
    trend: TrendDirection
    change_percentage: float
    weekly_average: float
    monthly_average: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "metric": self.metric,
            "current_value": self.current_value,
            "previous_value": self.previous_value,
            "trend": self.trend.value,
            "change_percentage": self.change_percentage,
            "weekly_average": self.weekly_average,
            "monthly_average": self.monthly_average,
        }


class ProcessTrendAnalyzer:
    """Compare the latest week of process metrics with the week before."""

    def __init__(self, metrics: Iterable[str] = TRACKED_METRICS):
        self.metrics = tuple(metrics)

    def analyze(self, entries: Iterable[JournalEntry]) -> List[ProcessTrend]:
        """Calculate one trend per tracked metric.

        Returns:
            Trends in tracked-metric order; empty with fewer than two entries
            carrying process metrics.
        """
        history = sorted(
            (e for e in entries if e.process_metrics is not None),
            key=lambda e: e.date,
        )
        if len(history) < MIN_HISTORY:
            return []

        trends = []
        for metric in self.metrics:
            values = [float(e.process_metrics.get(metric) or 0) for e in history]
            trend = self.metric_trend(metric, values)
            if trend is not None:
                trends.append(trend)

        logger.debug(f"Process trends over {len(history)} entries: {len(trends)} metrics")
        return trends

    @staticmethod
    def change_percentage(current: float, previous: float) -> float:
        """Relative change in percent, 0.0 when ``previous`` is zero."""
        if previous == 0:
            return 0.0
        return (current - previous) / previous * 100

    @classmethod
    def metric_trend(cls, metric: str, values: List[float]) -> Optional[ProcessTrend]:
        """Trend for one metric's chronological values, or None without data."""
        recent = values[-WEEK_WINDOW:]
        previous = values[-2 * WEEK_WINDOW:-WEEK_WINDOW]
        if not recent:
            return None

        current_value = recent[-1]
        previous_value = previous[-1] if previous else current_value
        change = cls.change_percentage(current_value, previous_value)

        return ProcessTrend(
            metric=metric,
            current_value=round2(current_value),
            previous_value=round2(previous_value),
            trend=classify_change(change, CHANGE_THRESHOLD),
            change_percentage=round2(change),
            weekly_average=round2(mean(recent)),
            monthly_average=round2(mean(values[-MONTH_WINDOW:])),
        )
