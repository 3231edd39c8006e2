"""Tests for emotional correlation analysis."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from journal_insights.analytics.emotional import (
    EmotionalCorrelationAnalyzer,
    MoodObservation,
    emotion_intensity,
)
from journal_insights.analytics.journal_models import (
    EmotionalState,
    JournalEntry,
    PostMarketEmotions,
    PreMarketEmotions,
    ProcessMetrics,
)
from journal_insights.analytics.statistics import TrendDirection

START = date(2024, 3, 1)


def make_entry(day, pre=None, post=None, score=60, pnl="0", with_metrics=True):
    metrics = None
    if with_metrics:
        metrics = ProcessMetrics(3, 3, 3, 3, 3, 3.0, score)
    return JournalEntry(
        date=START + timedelta(days=day),
        is_complete=True,
        emotional_state=EmotionalState(
            pre_market=PreMarketEmotions(mood=pre) if pre else None,
            post_market=PostMarketEmotions(overall_mood=post) if post else None,
        ),
        process_metrics=metrics,
        daily_pnl=Decimal(pnl),
    )


class TestEmotionIntensity:
    """Test intensity lookup."""

    def test_known_moods(self):
        """Test fixed intensities."""
        assert emotion_intensity(["excited"], "excited") == 5
        assert emotion_intensity(["calm"], "calm") == 3
        assert emotion_intensity(["neutral"], "neutral") == 2

    def test_absent_mood(self):
        """Absent mood has intensity 0."""
        assert emotion_intensity(["calm"], "nervous") == 0

    def test_unmapped_mood(self):
        """Unmapped moods fall back to the default."""
        assert emotion_intensity(["optimistic"], "optimistic") == 3


class TestEmotionalCorrelationAnalyzer:
    """Test EmotionalCorrelationAnalyzer."""

    @pytest.fixture
    def analyzer(self):
        """Create analyzer."""
        return EmotionalCorrelationAnalyzer()

    def test_empty(self, analyzer):
        """No entries gives no patterns."""
        assert analyzer.analyze([]) == []

    def test_groups_by_pre_and_post_mood(self, analyzer):
        """An entry contributes to both of its mood groups."""
        entries = [
            make_entry(0, pre="calm", post="satisfied", score=80, pnl="100"),
            make_entry(1, pre="calm", score=70, pnl="50"),
        ]

        patterns = {p.emotion: p for p in analyzer.analyze(entries)}

        assert set(patterns) == {"calm", "satisfied"}
        assert patterns["calm"].frequency == 2
        assert patterns["calm"].average_process_score == 75.0
        assert patterns["calm"].average_pnl == 75.0
        assert patterns["satisfied"].frequency == 1

    def test_same_mood_twice_counts_once(self, analyzer):
        """Same pre and post mood counts the entry once."""
        patterns = analyzer.analyze([make_entry(0, pre="calm", post="calm")])

        assert patterns[0].frequency == 1

    def test_entries_without_metrics_skipped(self, analyzer):
        """Entries lacking process metrics are excluded."""
        entries = [
            make_entry(0, pre="calm", score=80),
            make_entry(1, pre="calm", with_metrics=False),
        ]

        patterns = analyzer.analyze(entries)

        assert patterns[0].frequency == 1

    def test_entries_without_moods_skipped(self, analyzer):
        """Entries without mood labels contribute nothing."""
        assert analyzer.analyze([make_entry(0)]) == []

    def test_correlation_in_range(self, analyzer):
        """Correlation strength is within [0, 1]."""
        entries = [make_entry(i, pre="nervous", score=50 + i * 5) for i in range(6)]

        for pattern in analyzer.analyze(entries):
            assert 0.0 <= pattern.correlation_strength <= 1.0

    def test_sorted_by_correlation(self, analyzer):
        """Patterns come strongest first."""
        entries = [make_entry(i, pre="calm", post="nervous", score=60 + i) for i in range(5)]

        patterns = analyzer.analyze(entries)
        strengths = [p.correlation_strength for p in patterns]

        assert strengths == sorted(strengths, reverse=True)

    def test_to_dict(self, analyzer):
        """Test serialisation."""
        d = analyzer.analyze([make_entry(0, pre="calm")])[0].to_dict()

        assert d["emotion"] == "calm"
        assert d["trend"] == "stable"


class TestMoodTrend:
    """Test the half-split trend rule."""

    def test_small_group_is_stable(self):
        """Fewer than four scores is stable."""
        assert EmotionalCorrelationAnalyzer.mood_trend([10, 90, 90]) == TrendDirection.STABLE

    def test_improving(self):
        """Later half higher by more than 0.2."""
        assert EmotionalCorrelationAnalyzer.mood_trend([60, 60, 70, 70]) == TrendDirection.IMPROVING

    def test_declining(self):
        """Later half lower by more than 0.2."""
        assert EmotionalCorrelationAnalyzer.mood_trend([70, 70, 60, 60]) == TrendDirection.DECLINING

    def test_small_change_is_stable(self):
        """Change within 0.2 is stable."""
        assert EmotionalCorrelationAnalyzer.mood_trend([60, 60, 60.1, 60.1]) == TrendDirection.STABLE

    def test_odd_count_middle_in_later_half(self):
        """Middle score of an odd group belongs to the later half."""
        # earlier [50, 50] mean 50, later [80, 20, 50] mean 50
        assert EmotionalCorrelationAnalyzer.mood_trend([50, 50, 80, 20, 50]) == TrendDirection.STABLE

    def test_trend_follows_entry_dates(self):
        """Entries are ordered by date before splitting."""
        analyzer = EmotionalCorrelationAnalyzer()
        entries = [
            make_entry(3, pre="calm", score=90),
            make_entry(2, pre="calm", score=90),
            make_entry(1, pre="calm", score=50),
            make_entry(0, pre="calm", score=50),
        ]

        assert analyzer.analyze(entries)[0].trend == TrendDirection.IMPROVING


class TestRecommendations:
    """Test recommendation rules."""

    def test_reinforcing_mood(self):
        """Calm and confident get reinforcement language."""
        recs = EmotionalCorrelationAnalyzer.recommendations("confident", 0.5, TrendDirection.STABLE)

        assert len(recs) == 1
        assert "cultivate" in recs[0]

    def test_caution_mood(self):
        """Other moods get caution language."""
        recs = EmotionalCorrelationAnalyzer.recommendations("frustrated", 0.5, TrendDirection.STABLE)

        assert recs[0].startswith("Frustrated emotions may be impacting")

    def test_weak_correlation_no_mood_advice(self):
        """Correlation of 0.3 or less adds no mood advice."""
        assert EmotionalCorrelationAnalyzer.recommendations("calm", 0.3, TrendDirection.STABLE) == []

    def test_trend_prompts(self):
        """Declining and improving trends add prompts."""
        declining = EmotionalCorrelationAnalyzer.recommendations("nervous", 0.0, TrendDirection.DECLINING)
        improving = EmotionalCorrelationAnalyzer.recommendations("nervous", 0.0, TrendDirection.IMPROVING)

        assert "declining" in declining[0]
        assert "Great progress" in improving[0]

    def test_group_by_mood_keeps_order(self):
        """Groups preserve observation order."""
        first = MoodObservation(moods=["calm"], process_score=1, pnl=0)
        second = MoodObservation(moods=["calm", "nervous"], process_score=2, pnl=0)

        groups = EmotionalCorrelationAnalyzer.group_by_mood([first, second])

        assert groups["calm"] == [first, second]
        assert groups["nervous"] == [second]
