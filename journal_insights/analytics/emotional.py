"""Mood versus process-performance correlation analysis."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List

from journal_insights.analytics.journal_models import EmotionalMood, JournalEntry
from journal_insights.analytics.statistics import (
    TrendDirection,
    classify_change,
    mean,
    pearson_correlation,
    round2,
)

logger = logging.getLogger(__name__)


EMOTION_INTENSITY: Dict[str, int] = {
    EmotionalMood.EXCITED.value: 5,
    EmotionalMood.CONFIDENT.value: 4,
    EmotionalMood.CALM.value: 3,
    EmotionalMood.NEUTRAL.value: 2,
    EmotionalMood.NERVOUS.value: 4,
    EmotionalMood.FRUSTRATED.value: 5,
    EmotionalMood.SATISFIED.value: 4,
    EmotionalMood.DISAPPOINTED.value: 4,
}
DEFAULT_INTENSITY = 3

# Moods whose correlation is framed as something to cultivate
REINFORCING_MOODS = {EmotionalMood.CONFIDENT.value, EmotionalMood.CALM.value}

MIN_TREND_SAMPLE = 4
TREND_THRESHOLD = 0.2
RECOMMENDATION_CORRELATION = 0.3


@dataclass
class MoodObservation:
    """One entry's contribution to the mood groups."""

    moods: List[str]
    process_score: float
    pnl: float


@dataclass
class EmotionalPattern:
    """Performance profile of one mood label."""

    emotion: str
    average_process_score: float
    average_pnl: float
    frequency: int
    correlation_strength: float
    trend: TrendDirection
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "emotion": self.emotion,
            "average_process_score": self.average_process_score,
            "average_pnl": self.average_pnl,
            "frequency": self.frequency,
            "correlation_strength": self.correlation_strength,
            "trend": self.trend.value,
            "recommendations": list(self.recommendations),
        }


def emotion_intensity(moods: List[str], target: str) -> int:
    """Intensity of ``target`` in an observation; 0 when it was not recorded."""
    if target not in moods:
        return 0
    return EMOTION_INTENSITY.get(target, DEFAULT_INTENSITY)


class EmotionalCorrelationAnalyzer:
    """Group entries by reported mood and relate each mood to process scores."""

    def analyze(self, entries: Iterable[JournalEntry]) -> List[EmotionalPattern]:
        """Build one pattern per observed mood, strongest correlation first.

        Entries need both an emotional state and process metrics.
        """
        observations = self._observations(entries)
        groups = self.group_by_mood(observations)

        patterns = [self._build_pattern(mood, group) for mood, group in groups.items()]
        patterns.sort(key=lambda p: p.correlation_strength, reverse=True)

        logger.debug(f"Emotional analysis: {len(observations)} entries, {len(patterns)} moods")
        return patterns

    def _observations(self, entries: Iterable[JournalEntry]) -> List[MoodObservation]:
        observations = []
        for entry in sorted(entries, key=lambda e: e.date):
            if entry.emotional_state is None:
                continue
            if entry.process_metrics is None:
                logger.debug(f"Skipping {entry.date} in emotional analysis: no process metrics")
                continue
            moods = entry.emotional_state.moods()
            if not moods:
                continue
            observations.append(MoodObservation(
                moods=moods,
                process_score=float(entry.process_metrics.process_score),
                pnl=float(entry.daily_pnl or Decimal("0")),
            ))
        return observations

    @staticmethod
    def group_by_mood(observations: List[MoodObservation]) -> Dict[str, List[MoodObservation]]:
        """Group observations by mood label, keeping chronological order.

        An observation with two moods lands in both groups.
        """
        groups: Dict[str, List[MoodObservation]] = {}
        for obs in observations:
            for mood in dict.fromkeys(obs.moods):
                groups.setdefault(mood, []).append(obs)
        return groups

    def _build_pattern(self, mood: str, group: List[MoodObservation]) -> EmotionalPattern:
        scores = [obs.process_score for obs in group]
        intensities = [emotion_intensity(obs.moods, mood) for obs in group]

        correlation = pearson_correlation(scores, intensities)
        trend = self.mood_trend(scores)

        return EmotionalPattern(
            emotion=mood,
            average_process_score=round2(mean(scores)),
            average_pnl=round2(mean([obs.pnl for obs in group])),
            frequency=len(group),
            correlation_strength=abs(correlation),
            trend=trend,
            recommendations=self.recommendations(mood, abs(correlation), trend),
        )

    @staticmethod
    def mood_trend(scores: List[float]) -> TrendDirection:
        """Compare the later half of a mood's scores with the earlier half.

        With an odd count the middle score belongs to the later half.
        """
        if len(scores) < MIN_TREND_SAMPLE:
            return TrendDirection.STABLE

        half = len(scores) // 2
        earlier = scores[:half]
        recent = scores[half:]
        return classify_change(mean(recent) - mean(earlier), TREND_THRESHOLD)

    @staticmethod
    def recommendations(mood: str, correlation: float, trend: TrendDirection) -> List[str]:
        """Rule-based coaching prompts for a mood."""
        recs = []

        if correlation > RECOMMENDATION_CORRELATION:
            if mood in REINFORCING_MOODS:
                recs.append(
                    f"Your {mood} state correlates with better performance. "
                    f"Try to cultivate this mindset before trading."
                )
            else:
                recs.append(
                    f"{mood.capitalize()} emotions may be impacting your trading negatively. "
                    f"Consider mindfulness techniques."
                )

        if trend == TrendDirection.DECLINING:
            recs.append(f"Your performance when {mood} has been declining. Review recent trades for patterns.")
        elif trend == TrendDirection.IMPROVING:
            recs.append(f"Great progress managing {mood} states! Continue your current approach.")

        return recs
