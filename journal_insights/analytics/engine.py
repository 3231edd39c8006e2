"""Analytics engine: fetch a user's journal entries and run every analyzer.

The single await is the gateway fetch; the analyzers that follow are pure
and synchronous, so concurrent calls share no state.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Protocol, Sequence, runtime_checkable

from config.settings import InsightsConfig, default_config
from journal_insights.analytics.consistency import ConsistencyAnalyzer, ConsistencyMetrics
from journal_insights.analytics.emotional import EmotionalCorrelationAnalyzer, EmotionalPattern
from journal_insights.analytics.insights import InsightGenerator, PersonalizedInsight
from journal_insights.analytics.journal_models import DateRange, JournalEntry
from journal_insights.analytics.process_trends import ProcessTrend, ProcessTrendAnalyzer
from journal_insights.logging_config import get_context_logger

logger = logging.getLogger(__name__)


@runtime_checkable
class JournalDataGateway(Protocol):
    """Source of journal entries, owned by the journal subsystem."""

    async def get_entries_for_range(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> Sequence[JournalEntry]:
        ...


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


@dataclass
class AnalyticsData:
    """Combined analytics result for one user and date range."""

    consistency_metrics: ConsistencyMetrics
    emotional_patterns: List[EmotionalPattern] = field(default_factory=list)
    process_trends: List[ProcessTrend] = field(default_factory=list)
    personalized_insights: List[PersonalizedInsight] = field(default_factory=list)
    date_range: Optional[DateRange] = None
    last_updated: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "consistency_metrics": self.consistency_metrics.to_dict(),
            "emotional_patterns": [p.to_dict() for p in self.emotional_patterns],
            "process_trends": [t.to_dict() for t in self.process_trends],
            "personalized_insights": [i.to_dict() for i in self.personalized_insights],
            "date_range": self.date_range.to_dict() if self.date_range else None,
            "last_updated": self.last_updated.isoformat(),
        }


class AnalyticsEngine:
    """Orchestrates the journal analyzers for one user at a time."""

    def __init__(
        self,
        gateway: JournalDataGateway,
        config: Optional[InsightsConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize engine.

        Args:
            gateway: Journal entry source.
            config: Insight thresholds; defaults when omitted.
            clock: Returns the current UTC time; "today" is its date.
        """
        self.gateway = gateway
        self.config = config or default_config()
        self.clock = clock

        self.consistency_analyzer = ConsistencyAnalyzer(
            include_single_day_streaks=self.config.include_single_day_streaks,
        )
        self.emotional_analyzer = EmotionalCorrelationAnalyzer()
        self.process_analyzer = ProcessTrendAnalyzer()
        self.insight_generator = InsightGenerator()

    def resolve_range(self, date_range: Optional[DateRange], today: date) -> DateRange:
        """Use the given range or the default lookback ending today."""
        if date_range is not None:
            return date_range
        return DateRange.ending(today, self.config.default_lookback_days)

    async def get_analytics_data(
        self,
        user_id: str,
        date_range: Optional[DateRange] = None,
    ) -> AnalyticsData:
        """Fetch entries and compute the combined analytics.

        Gateway errors propagate unchanged.
        """
        now = self.clock()
        today = now.date()
        resolved = self.resolve_range(date_range, today)
        log = get_context_logger(__name__, user_id=user_id, start=resolved.start, end=resolved.end)

        entries = await self.gateway.get_entries_for_range(user_id, resolved.start, resolved.end)
        entries = list(entries)
        log.info(f"Running analytics over {len(entries)} entries")

        result = self.analyze(entries, today=today, now=now)
        result.date_range = resolved
        return result

    def analyze(
        self,
        entries: Sequence[JournalEntry],
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsData:
        """Run all analyzers over already-fetched entries."""
        now = now or self.clock()
        today = today or now.date()

        consistency = self.consistency_analyzer.analyze(entries, today=today)
        emotional = self.emotional_analyzer.analyze(entries)
        trends = self.process_analyzer.analyze(entries)
        insights = self.insight_generator.generate(consistency, emotional, trends, created_at=now)

        return AnalyticsData(
            consistency_metrics=consistency,
            emotional_patterns=emotional,
            process_trends=trends,
            personalized_insights=insights,
            last_updated=now,
        )
