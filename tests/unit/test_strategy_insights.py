"""Tests for per-strategy insight rules."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from config.settings import InsightsConfig
from journal_insights.strategy.buckets import TradeBucket
from journal_insights.strategy.models import (
    PerformanceTrend,
    ProfessionalStrategy,
    StrategyPerformance,
    Trade,
    TradeSide,
)
from journal_insights.strategy.strategy_insights import (
    STRATEGY_PRIORITY_WEIGHTS,
    InsightCategory,
    StrategyInsight,
    StrategyInsightGenerator,
    StrategyPriority,
    best_bucket,
)

# Monday
BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_trade(win, day, hour, n=0):
    return Trade(
        id=f"t-{day}-{hour}-{n}",
        symbol="ETH-USD-PERP",
        side=TradeSide.LONG,
        entry_price=Decimal("3000"),
        entry_time=BASE + timedelta(days=day, hours=hour),
        pnl=Decimal("100") if win else Decimal("-50"),
        strategy="s1",
    )


def spread_trades(count=20):
    """Alternating wins on distinct hours so no timing or slump rule fires."""
    return [make_trade(i % 2 == 0, day=i, hour=i) for i in range(count)]


def make_strategy(**performance):
    defaults = dict(
        total_trades=20,
        win_rate=50.0,
        profit_factor=1.5,
        expectancy=0.0,
        max_drawdown=5.0,
        risk_reward_ratio=2.0,
        performance_trend=PerformanceTrend.STABLE,
    )
    defaults.update(performance)
    return ProfessionalStrategy(id="s1", title="Breakout", performance=StrategyPerformance(**defaults))


class TestStrategyPriority:
    """Test priority weights."""

    def test_weights(self):
        """High outranks medium outranks low."""
        assert StrategyPriority.HIGH.weight > StrategyPriority.MEDIUM.weight > StrategyPriority.LOW.weight

    def test_weight_table_covers_every_priority(self):
        """Every priority has a weight."""
        assert set(STRATEGY_PRIORITY_WEIGHTS) == set(StrategyPriority)


class TestBestBucket:
    """Test best_bucket selection."""

    def test_skips_small_buckets(self):
        """Buckets under the minimum sample are ignored."""
        buckets = {
            9: TradeBucket(key=9, wins=2, total=2),
            10: TradeBucket(key=10, wins=2, total=4),
        }

        analysis = best_bucket(buckets, 50.0, lambda n: n * 10)

        assert analysis.best == "10"
        assert analysis.sample_size == 4
        assert analysis.confidence == 40

    def test_ties_keep_first(self):
        """Equal win rates keep the earliest key."""
        buckets = {
            9: TradeBucket(key=9, wins=3, total=4),
            10: TradeBucket(key=10, wins=3, total=4),
        }

        assert best_bucket(buckets, 50.0, lambda n: n).best == "9"

    def test_zero_win_rate_is_never_best(self):
        """Buckets without wins are not reported."""
        buckets = {
            9: TradeBucket(key=9, wins=0, total=10),
            10: TradeBucket(key=10, wins=0, total=5),
        }

        analysis = best_bucket(buckets, 0.0, lambda n: n * 10)

        assert analysis.best is None
        assert analysis.confidence == 0

    def test_no_eligible_bucket(self):
        """No eligible bucket gives an empty analysis."""
        analysis = best_bucket({}, 50.0, lambda n: n)

        assert analysis.best is None
        assert analysis.confidence == 0


class TestStrategyInsightGenerator:
    """Test StrategyInsightGenerator."""

    @pytest.fixture
    def generator(self):
        """Create generator with default thresholds."""
        return StrategyInsightGenerator(InsightsConfig())

    def test_insufficient_trades(self, generator):
        """Too few trades gives one sample-size insight."""
        insights = generator.generate(make_strategy(win_rate=80), spread_trades(19))

        assert len(insights) == 1
        insight = insights[0]
        assert insight.type == InsightCategory.PERFORMANCE
        assert insight.confidence == 0.95
        assert insight.priority == StrategyPriority.MEDIUM
        assert insight.message.startswith("Strategy needs 1 more trades")
        assert insight.supporting_data == {"current_trades": 19, "required_trades": 20}

    def test_strong_strategy(self, generator):
        """High win rate and profit factor give high-priority insights first."""
        strategy = make_strategy(win_rate=65, profit_factor=2.1, expectancy=50)

        insights = generator.generate(strategy, spread_trades())

        assert [i.priority for i in insights] == [
            StrategyPriority.HIGH,
            StrategyPriority.HIGH,
            StrategyPriority.MEDIUM,
        ]
        assert insights[0].message.startswith("Excellent win rate of 65.0%")
        assert insights[1].message.startswith("Outstanding profit factor of 2.10")
        assert "$1000.00 monthly profit" in insights[2].message

    def test_confidence_threshold(self):
        """Insights below the threshold are dropped."""
        generator = StrategyInsightGenerator(InsightsConfig(confidence_threshold=85))
        strategy = make_strategy(win_rate=65, profit_factor=2.1, expectancy=50)

        insights = generator.generate(strategy, spread_trades())

        assert [i.confidence for i in insights] == [0.85, 0.90]

    def test_weak_strategy(self, generator):
        """Low win rate and marginal profit factor."""
        insights = generator.performance_insights(make_strategy(win_rate=35, profit_factor=1.0))

        assert [i.confidence for i in insights] == [0.80, 0.85]
        assert insights[0].message.startswith("Low win rate of 35.0%")
        assert insights[1].message.startswith("Marginal profit factor of 1.00")

    def test_middle_of_the_road(self, generator):
        """No performance rule fires between the thresholds."""
        assert generator.performance_insights(make_strategy()) == []

    def test_declining_trend(self, generator):
        """Declining trend is high priority."""
        insights = generator.performance_insights(make_strategy(performance_trend=PerformanceTrend.DECLINING))

        assert len(insights) == 1
        assert insights[0].priority == StrategyPriority.HIGH
        assert insights[0].confidence == 0.75

    def test_improving_trend(self, generator):
        """Improving trend is medium priority."""
        insights = generator.performance_insights(make_strategy(performance_trend=PerformanceTrend.IMPROVING))

        assert insights[0].priority == StrategyPriority.MEDIUM
        assert insights[0].confidence == 0.80

    def test_timing_insights(self, generator):
        """Best hour and weekday with enough samples are reported."""
        strong = [make_trade(i < 8, day=7 * i, hour=10, n=i) for i in range(10)]
        weak = [make_trade(i < 2, day=7 * i + 1, hour=11 + i, n=i) for i in range(10)]

        insights = generator.timing_insights(strong + weak)

        assert [i.type for i in insights] == [InsightCategory.TIMING, InsightCategory.TIMING]
        hour, day = insights
        assert hour.message == "Best performance occurs around 10:00. Win rate is 80.0% vs 50.0% average."
        assert hour.confidence == 0.8
        assert day.message.startswith("Monday shows strongest performance with 80.0%")
        assert day.confidence == 0.85

    def test_timing_ignores_losing_buckets(self, generator):
        """A strategy that always loses gets no best hour or day."""
        trades = [make_trade(False, day=7 * i, hour=9, n=i) for i in range(25)]

        assert generator.timing_insights(trades) == []

    def test_infinite_profit_factor_serialises_as_null(self):
        """Supporting data stays valid JSON."""
        insight = StrategyInsight(
            type=InsightCategory.PERFORMANCE,
            message="m",
            confidence=0.9,
            priority=StrategyPriority.HIGH,
            supporting_data={"profit_factor": float("inf"), "win_rate": 100.0},
        )

        assert insight.to_dict()["supporting_data"] == {"profit_factor": None, "win_rate": 100.0}

    def test_timing_needs_confidence(self, generator):
        """Small timing samples do not produce insights."""
        assert generator.timing_insights(spread_trades()) == []

    def test_recent_slump(self, generator):
        """Recent win rate far below overall is flagged."""
        trades = [make_trade(True, day=i, hour=0) for i in range(10)]
        trades += [make_trade(i < 2, day=10 + i, hour=0) for i in range(10)]

        insights = generator.market_condition_insights(trades)

        assert len(insights) == 1
        assert insights[0].type == InsightCategory.MARKET_CONDITION
        assert insights[0].supporting_data["recent_win_rate"] == 20.0
        assert insights[0].supporting_data["overall_win_rate"] == 60.0

    def test_slump_boundary(self, generator):
        """Exactly fifteen points below is not flagged."""
        trades = [make_trade(True, day=i, hour=0) for i in range(10)]
        trades += [make_trade(i < 7, day=10 + i, hour=0) for i in range(10)]

        assert generator.market_condition_insights(trades) == []

    def test_slump_uses_chronological_order(self, generator):
        """generate orders trades by entry time before the slump check."""
        trades = [make_trade(True, day=i, hour=0) for i in range(10)]
        trades += [make_trade(False, day=10 + i, hour=0) for i in range(10)]
        strategy = make_strategy()

        insights = generator.generate(strategy, list(reversed(trades)))

        assert InsightCategory.MARKET_CONDITION in [i.type for i in insights]

    def test_risk_insights(self, generator):
        """High drawdown and poor risk-reward are flagged."""
        strategy = make_strategy(max_drawdown=25.0, risk_reward_ratio=1.2, win_rate=50)

        insights = generator.risk_management_insights(strategy)

        assert [i.type for i in insights] == [InsightCategory.RISK_MANAGEMENT] * 2
        assert insights[0].message.startswith("High maximum drawdown of 25.0%")
        assert insights[1].supporting_data["risk_reward_ratio"] == 1.2

    def test_low_risk_reward_with_high_win_rate(self, generator):
        """Low risk-reward is fine with a high win rate."""
        strategy = make_strategy(risk_reward_ratio=1.0, win_rate=70)

        assert generator.risk_management_insights(strategy) == []

    def test_to_dict(self, generator):
        """Test serialisation."""
        d = generator.generate(make_strategy(), spread_trades(5))[0].to_dict()

        assert d["type"] == "Performance"
        assert d["priority"] == "Medium"
        assert d["actionable"] is True
