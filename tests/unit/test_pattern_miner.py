"""Tests for cross-strategy pattern mining."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from config.settings import InsightsConfig
from journal_insights.strategy.buckets import TradeBucket
from journal_insights.strategy.models import ProfessionalStrategy, Trade, TradeSide
from journal_insights.strategy.pattern_miner import (
    PATTERN_RULES,
    PatternMiner,
    PatternType,
)
from journal_insights.storage.memory import InMemoryTradeRepository

# Monday
BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_trade(pnl, day, hour, strategy="s1", n=0):
    return Trade(
        id=f"{strategy}-{day}-{hour}-{n}",
        symbol="BTC-USD-PERP",
        side=TradeSide.LONG,
        entry_price=Decimal("50000"),
        entry_time=BASE + timedelta(days=day, hours=hour),
        pnl=Decimal(str(pnl)),
        strategy=strategy,
    )


def strong_mondays():
    """Ten Monday 9:00 trades at 80% and ten weak Tuesday 15:00 trades."""
    mondays = [make_trade(100 if i < 8 else -50, day=7 * i, hour=9) for i in range(10)]
    tuesdays = [make_trade(20 if i < 2 else -10, day=7 * i + 1, hour=15) for i in range(10)]
    return mondays + tuesdays


class TestPatternRule:
    """Test PatternRule thresholds."""

    def test_too_few_trades(self):
        """Small buckets never match."""
        bucket = TradeBucket(key=9, wins=4, total=4, pnl=400)

        assert PATTERN_RULES[PatternType.TIME_OF_DAY].matches(bucket) is False

    def test_win_rate_match(self):
        """Win rate above the minimum matches."""
        bucket = TradeBucket(key=9, wins=4, total=5, pnl=0)

        assert PATTERN_RULES[PatternType.TIME_OF_DAY].matches(bucket) is True

    def test_avg_pnl_match(self):
        """High average P&L matches despite a modest win rate."""
        bucket = TradeBucket(key=9, wins=3, total=5, pnl=580)

        assert PATTERN_RULES[PatternType.TIME_OF_DAY].matches(bucket) is True

    def test_timeframe_ignores_avg_pnl(self):
        """Timeframe rule only looks at win rate."""
        bucket = TradeBucket(key="1h", wins=5, total=10, pnl=10000)

        assert PATTERN_RULES[PatternType.TIMEFRAME].matches(bucket) is False

    def test_confidence_capped(self):
        """Confidence grows with sample size up to the cap."""
        rule = PATTERN_RULES[PatternType.TIME_OF_DAY]

        assert rule.confidence(10) == 70
        assert rule.confidence(100) == 95


class TestPatternMiner:
    """Test PatternMiner."""

    @pytest.fixture
    def strategies(self):
        """One crypto strategy on the hourly chart."""
        return [ProfessionalStrategy(id="s1", title="Breakout", primary_timeframe="1h", asset_classes=["crypto"])]

    @pytest.fixture
    def miner(self):
        """Create miner with default thresholds."""
        return PatternMiner(config=InsightsConfig())

    def test_too_few_trades(self, miner, strategies):
        """Fewer than the minimum gives no patterns."""
        assert miner.identify_performance_patterns(strategies, strong_mondays()[:19]) == []

    def test_finds_hour_and_weekday(self, miner, strategies):
        """Strong hour and weekday are found, weak ones are not."""
        patterns = miner.identify_performance_patterns(strategies, strong_mondays())

        assert [p.type for p in patterns] == [PatternType.TIME_OF_DAY, PatternType.DAY_OF_WEEK]
        hour, day = patterns
        assert hour.pattern == "9:00 hour shows strong performance"
        assert hour.confidence == 70
        assert hour.impact == 30.0
        assert hour.supporting_data["hour"] == 9
        assert day.pattern == "Monday shows strong performance"
        assert day.confidence == 70
        assert day.supporting_data["trades"] == 10

    def test_significance_threshold(self, strategies):
        """Patterns below the impact threshold are dropped."""
        miner = PatternMiner(config=InsightsConfig(pattern_significance_threshold=0.5))

        assert miner.identify_performance_patterns(strategies, strong_mondays()) == []

    def test_fetches_from_repository(self, strategies):
        """Trades come from the repository when not supplied."""
        repository = InMemoryTradeRepository(strategies, strong_mondays())
        miner = PatternMiner(config=InsightsConfig(), trade_repository=repository)

        patterns = miner.identify_performance_patterns(strategies)

        assert len(patterns) == 2

    def test_no_trades_and_no_repository(self, miner, strategies):
        """Nothing to analyse gives no patterns."""
        assert miner.identify_performance_patterns(strategies) == []

    def test_timeframe_patterns(self, miner):
        """Timeframes with more than 60% wins over ten trades."""
        strategies = [ProfessionalStrategy(id="s2", title="Swing", primary_timeframe="4h")]
        trades = [make_trade(10 if i < 7 else -10, day=i, hour=12, strategy="s2") for i in range(10)]

        patterns = miner.timeframe_patterns(strategies, trades)

        assert len(patterns) == 1
        assert patterns[0].pattern == "4h timeframe shows strong performance"
        assert patterns[0].confidence == 40
        assert patterns[0].impact == pytest.approx(20.0)

    def test_asset_class_patterns(self, miner):
        """Asset classes with more than 65% wins over eight trades."""
        strategies = [ProfessionalStrategy(id="s3", title="Carry", asset_classes=["fx"])]
        trades = [make_trade(10 if i < 6 else -10, day=i, hour=12, strategy="s3") for i in range(8)]

        patterns = miner.asset_class_patterns(strategies, trades)

        assert len(patterns) == 1
        assert patterns[0].confidence == 33
        assert patterns[0].supporting_data["asset_class"] == "fx"

    def test_to_dict(self, miner, strategies):
        """Test serialisation."""
        d = miner.identify_performance_patterns(strategies, strong_mondays())[0].to_dict()

        assert d["type"] == "TimeOfDay"
        assert d["impact"] == 30.0
