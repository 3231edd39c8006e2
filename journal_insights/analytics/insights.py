"""Rule-based personalized insights from the journal analyzers."""

import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from journal_insights.analytics.consistency import ConsistencyMetrics
from journal_insights.analytics.emotional import EmotionalPattern
from journal_insights.analytics.process_trends import ProcessTrend
from journal_insights.analytics.statistics import TrendDirection

logger = logging.getLogger(__name__)


class InsightType(str, Enum):
    """Area an insight is about."""

    CONSISTENCY = "consistency"
    EMOTIONAL = "emotional"
    PROCESS = "process"
    PERFORMANCE = "performance"


class InsightPriority(str, Enum):
    """Insight priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        """Sort weight, higher first."""
        return PRIORITY_WEIGHTS[self]


PRIORITY_WEIGHTS = {
    InsightPriority.HIGH: 3,
    InsightPriority.MEDIUM: 2,
    InsightPriority.LOW: 1,
}

STREAK_THRESHOLD = 7
LOW_COMPLETION_RATE = 50
EMOTIONAL_CORRELATION_THRESHOLD = 0.4

STREAK_CONFIDENCE = 0.95
LOW_COMPLETION_CONFIDENCE = 0.85
EMOTIONAL_CONFIDENCE = 0.8
IMPROVING_CONFIDENCE = 0.75
DECLINING_CONFIDENCE = 0.8


@dataclass
class PersonalizedInsight:
    """A ranked, human-readable finding."""

    id: str
    type: InsightType
    priority: InsightPriority
    title: str
    description: str
    recommendation: str
    data_points: List[Any] = field(default_factory=list)
    confidence: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation,
            "data_points": list(self.data_points),
            "confidence": self.confidence,
            "created_at": self.created_at.isoformat(),
        }


def sort_by_priority(insights: List[PersonalizedInsight]) -> List[PersonalizedInsight]:
    """Stable sort, high priority first; ties keep rule order."""
    return sorted(insights, key=lambda i: i.priority.weight, reverse=True)


class InsightGenerator:
    """Turn consistency, emotional and process results into insights."""

    def generate(
        self,
        consistency: ConsistencyMetrics,
        emotional_patterns: List[EmotionalPattern],
        process_trends: List[ProcessTrend],
        created_at: Optional[datetime] = None,
    ) -> List[PersonalizedInsight]:
        """Evaluate every rule and rank the results.

        Args:
            consistency: Streak and completion metrics.
            emotional_patterns: Mood patterns in any order.
            process_trends: Per-metric trends.
            created_at: Timestamp stamped on every insight.

        Returns:
            Insights sorted by priority.
        """
        created_at = created_at or datetime.now(timezone.utc)

        insights: List[PersonalizedInsight] = []
        insights.extend(self._consistency_insights(consistency, created_at))
        insights.extend(self._emotional_insights(emotional_patterns, created_at))
        insights.extend(self._process_insights(process_trends, created_at))

        logger.debug(f"Generated {len(insights)} personalized insights")
        return sort_by_priority(insights)

    def _consistency_insights(
        self,
        consistency: ConsistencyMetrics,
        created_at: datetime,
    ) -> List[PersonalizedInsight]:
        insights = []

        if consistency.current_streak >= STREAK_THRESHOLD:
            insights.append(self._insight(
                "consistency-streak",
                InsightType.CONSISTENCY,
                InsightPriority.HIGH,
                title="Excellent Journaling Streak!",
                description=f"You've maintained a {consistency.current_streak}-day journaling streak.",
                recommendation="Keep up the momentum! Consistent reflection is key to trading improvement.",
                data_points=[consistency.current_streak, consistency.longest_streak],
                confidence=STREAK_CONFIDENCE,
                created_at=created_at,
            ))

        if consistency.completion_rate < LOW_COMPLETION_RATE:
            insights.append(self._insight(
                "consistency-low",
                InsightType.CONSISTENCY,
                InsightPriority.HIGH,
                title="Journaling Consistency Needs Attention",
                description=(
                    f"Your completion rate is {consistency.completion_rate}%, "
                    f"which may limit learning opportunities."
                ),
                recommendation="Try setting a daily reminder or using templates to make journaling easier.",
                data_points=[consistency.completion_rate, consistency.weekly_consistency],
                confidence=LOW_COMPLETION_CONFIDENCE,
                created_at=created_at,
            ))

        return insights

    def _emotional_insights(
        self,
        patterns: List[EmotionalPattern],
        created_at: datetime,
    ) -> List[PersonalizedInsight]:
        if not patterns:
            return []

        # First of equal strengths wins, matching the analyzer's ordering
        strongest = max(patterns, key=lambda p: p.correlation_strength)
        if strongest.correlation_strength <= EMOTIONAL_CORRELATION_THRESHOLD:
            return []

        recommendation = (
            strongest.recommendations[0]
            if strongest.recommendations
            else "Monitor this emotional state closely."
        )
        return [self._insight(
            "emotional-pattern",
            InsightType.EMOTIONAL,
            InsightPriority.MEDIUM,
            title=f"Strong {strongest.emotion} Pattern Detected",
            description=(
                f"Your {strongest.emotion} state shows a "
                f"{strongest.correlation_strength:.2f} correlation with performance."
            ),
            recommendation=recommendation,
            data_points=[strongest.correlation_strength, strongest.average_process_score],
            confidence=EMOTIONAL_CONFIDENCE,
            created_at=created_at,
        )]

    def _process_insights(
        self,
        trends: List[ProcessTrend],
        created_at: datetime,
    ) -> List[PersonalizedInsight]:
        insights = []
        improving = [t for t in trends if t.trend == TrendDirection.IMPROVING]
        declining = [t for t in trends if t.trend == TrendDirection.DECLINING]

        if improving:
            insights.append(self._insight(
                "process-improving",
                InsightType.PROCESS,
                InsightPriority.MEDIUM,
                title="Process Improvements Detected",
                description=f"Your {', '.join(t.metric for t in improving)} metrics are improving.",
                recommendation="Continue your current approach and document what's working well.",
                data_points=[t.change_percentage for t in improving],
                confidence=IMPROVING_CONFIDENCE,
                created_at=created_at,
            ))

        if declining:
            insights.append(self._insight(
                "process-declining",
                InsightType.PROCESS,
                InsightPriority.HIGH,
                title="Process Metrics Need Attention",
                description=f"Your {', '.join(t.metric for t in declining)} metrics are declining.",
                recommendation="Review recent trades and identify what might be causing the decline.",
                data_points=[t.change_percentage for t in declining],
                confidence=DECLINING_CONFIDENCE,
                created_at=created_at,
            ))

        return insights

    @staticmethod
    def _insight(
        rule: str,
        insight_type: InsightType,
        priority: InsightPriority,
        created_at: datetime,
        **fields: Any,
    ) -> PersonalizedInsight:
        digest = hashlib.md5(f"{rule}:{created_at.isoformat()}".encode()).hexdigest()[:12]
        return PersonalizedInsight(
            id=f"{rule}-{digest}",
            type=insight_type,
            priority=priority,
            created_at=created_at,
            **fields,
        )
