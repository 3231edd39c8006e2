"""Journaling consistency: streaks and completion rates.

All date arithmetic is on calendar dates; "today" is supplied by the caller
(UTC by default) so results never drift with the host's local time zone.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from itertools import groupby
from typing import Iterable, List, Optional

from journal_insights.analytics.journal_models import JournalEntry
from journal_insights.analytics.statistics import percent, round2

logger = logging.getLogger(__name__)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def days_between(start: date, end: date) -> int:
    """Inclusive number of calendar days between two dates."""
    return abs((end - start).days) + 1


@dataclass(frozen=True)
class StreakRecord:
    """A run of consecutive journaling days."""

    start_date: date
    end_date: date
    length: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "length": self.length,
        }


@dataclass
class ConsistencyMetrics:
    """Streak and completion statistics."""

    current_streak: int = 0
    longest_streak: int = 0
    total_entries: int = 0
    completion_rate: float = 0.0
    weekly_consistency: int = 0
    monthly_consistency: int = 0
    streak_history: List[StreakRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_entries": self.total_entries,
            "completion_rate": self.completion_rate,
            "weekly_consistency": self.weekly_consistency,
            "monthly_consistency": self.monthly_consistency,
            "streak_history": [s.to_dict() for s in self.streak_history],
        }


class ConsistencyAnalyzer:
    """Compute streaks and completion statistics from completed entries."""

    def __init__(self, include_single_day_streaks: bool = False):
        """Initialize analyzer.

        Args:
            include_single_day_streaks: Record one-day runs in streak history.
                Off by default; ``longest_streak`` counts them either way.
        """
        self.include_single_day_streaks = include_single_day_streaks

    def analyze(
        self,
        entries: Iterable[JournalEntry],
        today: Optional[date] = None,
    ) -> ConsistencyMetrics:
        """Calculate consistency metrics.

        Args:
            entries: Journal entries in any order; incomplete ones are ignored.
            today: Anchor for current streak and rolling windows.

        Returns:
            ConsistencyMetrics for the completed entries.
        """
        today = today or utc_today()
        dates = self.completed_dates(entries)

        runs = self.find_runs(dates)
        min_length = 1 if self.include_single_day_streaks else 2
        history = [run for run in runs if run.length >= min_length]

        metrics = ConsistencyMetrics(
            current_streak=self.current_streak(dates, today),
            longest_streak=max((run.length for run in runs), default=0),
            total_entries=len(dates),
            completion_rate=self.completion_rate(dates),
            weekly_consistency=self.window_consistency(dates, today, 7),
            monthly_consistency=self.window_consistency(dates, today, 30),
            streak_history=history,
        )

        logger.debug(
            f"Consistency: {metrics.total_entries} entries, "
            f"current={metrics.current_streak} longest={metrics.longest_streak}"
        )
        return metrics

    @staticmethod
    def completed_dates(entries: Iterable[JournalEntry]) -> List[date]:
        """Sorted, de-duplicated dates of completed entries."""
        return sorted({entry.date for entry in entries if entry.is_complete})

    @staticmethod
    def find_runs(dates: List[date]) -> List[StreakRecord]:
        """Split sorted unique dates into runs of consecutive days.

        Consecutive days share ``ordinal - position``, so grouping on that
        key yields each run in one pass.
        """
        runs = []
        for _, group in groupby(enumerate(dates), key=lambda p: p[1].toordinal() - p[0]):
            days = [d for _, d in group]
            runs.append(StreakRecord(start_date=days[0], end_date=days[-1], length=len(days)))
        return runs

    @staticmethod
    def current_streak(dates: List[date], today: date) -> int:
        """Length of the run ending today or yesterday, else 0."""
        if not dates:
            return 0

        latest = dates[-1]
        if latest not in (today, today - timedelta(days=1)):
            return 0

        streak = 1
        expected = latest - timedelta(days=1)
        for day in reversed(dates[:-1]):
            if day != expected:
                break
            streak += 1
            expected -= timedelta(days=1)
        return streak

    @staticmethod
    def completion_rate(dates: List[date]) -> float:
        """Entries per calendar day spanned, as a percentage."""
        if len(dates) < 2:
            return 0.0
        return round2(percent(len(dates), days_between(dates[0], dates[-1])))

    @staticmethod
    def window_consistency(dates: List[date], today: date, window_days: int) -> int:
        """Entries dated on or after ``today - window_days``, per day of window."""
        cutoff = today - timedelta(days=window_days)
        recent = sum(1 for d in dates if d >= cutoff)
        return round(recent / window_days * 100)
