"""Journal analytics: consistency, emotional patterns, process trends, insights."""

from journal_insights.analytics.consistency import (
    ConsistencyAnalyzer,
    ConsistencyMetrics,
    StreakRecord,
)
from journal_insights.analytics.emotional import EmotionalCorrelationAnalyzer, EmotionalPattern
from journal_insights.analytics.engine import AnalyticsData, AnalyticsEngine, JournalDataGateway
from journal_insights.analytics.insights import (
    InsightGenerator,
    InsightPriority,
    InsightType,
    PersonalizedInsight,
)
from journal_insights.analytics.journal_models import (
    DateRange,
    EmotionalMood,
    EmotionalState,
    JournalEntry,
    PostMarketEmotions,
    PreMarketEmotions,
    ProcessMetrics,
)
from journal_insights.analytics.process_trends import ProcessTrend, ProcessTrendAnalyzer
from journal_insights.analytics.statistics import TrendDirection

__all__ = [
    "AnalyticsData",
    "AnalyticsEngine",
    "ConsistencyAnalyzer",
    "ConsistencyMetrics",
    "DateRange",
    "EmotionalCorrelationAnalyzer",
    "EmotionalMood",
    "EmotionalPattern",
    "EmotionalState",
    "InsightGenerator",
    "InsightPriority",
    "InsightType",
    "JournalDataGateway",
    "JournalEntry",
    "PersonalizedInsight",
    "PostMarketEmotions",
    "PreMarketEmotions",
    "ProcessMetrics",
    "ProcessTrend",
    "ProcessTrendAnalyzer",
    "StreakRecord",
    "TrendDirection",
]
