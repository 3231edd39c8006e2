"""Cross-strategy performance pattern mining.

Detects hours, weekdays, timeframes and asset classes whose trades beat a
50% win-rate baseline by a configurable margin.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from config.settings import InsightsConfig, default_config
from journal_insights.strategy.buckets import (
    TradeBucket,
    by_asset_class,
    by_hour,
    by_timeframe,
    by_weekday,
)
from journal_insights.strategy.models import ProfessionalStrategy, Trade
from journal_insights.strategy.repository import TradeRepository, trades_for_strategies

logger = logging.getLogger(__name__)


BASELINE_WIN_RATE = 50.0


class PatternType(Enum):
    """Dimension a pattern was found in."""

    TIME_OF_DAY = "TimeOfDay"
    DAY_OF_WEEK = "DayOfWeek"
    TIMEFRAME = "Timeframe"
    ASSET_CLASS = "AssetClass"


@dataclass(frozen=True)
class PatternRule:
    """Thresholds for flagging a bucket as a pattern."""

    min_trades: int
    min_win_rate: float
    min_avg_pnl: Optional[float]
    base_confidence: int
    confidence_per_trade: int
    max_confidence: int

    def matches(self, bucket: TradeBucket) -> bool:
        """Whether the bucket is large and strong enough."""
        if bucket.total < self.min_trades:
            return False
        if bucket.win_rate > self.min_win_rate:
            return True
        return self.min_avg_pnl is not None and bucket.avg_pnl > self.min_avg_pnl

    def confidence(self, sample_size: int) -> int:
        """Confidence (0-100) growing with sample size up to a cap."""
        return min(self.max_confidence, self.base_confidence + sample_size * self.confidence_per_trade)


PATTERN_RULES: Dict[PatternType, PatternRule] = {
    PatternType.TIME_OF_DAY: PatternRule(5, 70.0, 50.0, 50, 2, 95),
    PatternType.DAY_OF_WEEK: PatternRule(3, 65.0, 40.0, 40, 3, 90),
    PatternType.TIMEFRAME: PatternRule(10, 60.0, None, 30, 1, 85),
    PatternType.ASSET_CLASS: PatternRule(8, 65.0, None, 25, 1, 80),
}


@dataclass
class PerformancePattern:
    """A bucket of trades that performs notably well."""

    type: PatternType
    pattern: str
    description: str
    confidence: int
    impact: float  # win-rate points above the 50% baseline
    supporting_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "pattern": self.pattern,
            "description": self.description,
            "confidence": self.confidence,
            "impact": round(self.impact, 2),
            "supporting_data": dict(self.supporting_data),
        }


class PatternMiner:
    """Mine trade history for time and attribute based patterns."""

    def __init__(
        self,
        config: Optional[InsightsConfig] = None,
        trade_repository: Optional[TradeRepository] = None,
    ):
        """Initialize miner.

        Args:
            config: Thresholds; defaults when omitted.
            trade_repository: Source of trades when none are passed in.
        """
        self.config = config or default_config()
        self.trade_repository = trade_repository

    def identify_performance_patterns(
        self,
        strategies: Sequence[ProfessionalStrategy],
        trades: Optional[Sequence[Trade]] = None,
    ) -> List[PerformancePattern]:
        """Find significant patterns across the strategies' trades.

        Args:
            strategies: Strategies whose trades are analysed together.
            trades: Trades to analyse; fetched from the repository when omitted.

        Returns:
            Patterns whose |impact| reaches the significance threshold.
        """
        if trades is None:
            if self.trade_repository is None:
                logger.warning("No trades supplied and no trade repository configured")
                return []
            trades = trades_for_strategies(self.trade_repository, strategies)

        if len(trades) < self.config.minimum_trades_for_insights:
            logger.debug(
                f"Pattern mining skipped: {len(trades)} trades "
                f"< {self.config.minimum_trades_for_insights}"
            )
            return []

        patterns: List[PerformancePattern] = []
        patterns.extend(self.time_of_day_patterns(trades))
        patterns.extend(self.day_of_week_patterns(trades))
        patterns.extend(self.timeframe_patterns(strategies, trades))
        patterns.extend(self.asset_class_patterns(strategies, trades))

        min_impact = self.config.pattern_significance_threshold * 100
        significant = [p for p in patterns if abs(p.impact) >= min_impact]

        logger.debug(f"Pattern mining: {len(patterns)} candidates, {len(significant)} significant")
        return significant

    def time_of_day_patterns(self, trades: Sequence[Trade]) -> List[PerformancePattern]:
        """Hours with a high win rate or average P&L."""
        return [
            self._pattern(
                PatternType.TIME_OF_DAY,
                bucket,
                pattern=f"{hour}:00 hour shows strong performance",
                description=(
                    f"Trading at {hour}:00 shows {bucket.win_rate:.1f}% win rate "
                    f"with average P&L of ${bucket.avg_pnl:.2f}"
                ),
                supporting_key="hour",
            )
            for hour, bucket in by_hour(trades).items()
            if PATTERN_RULES[PatternType.TIME_OF_DAY].matches(bucket)
        ]

    def day_of_week_patterns(self, trades: Sequence[Trade]) -> List[PerformancePattern]:
        """Weekdays with a high win rate or average P&L."""
        return [
            self._pattern(
                PatternType.DAY_OF_WEEK,
                bucket,
                pattern=f"{day} shows strong performance",
                description=(
                    f"{day} trading shows {bucket.win_rate:.1f}% win rate "
                    f"with average P&L of ${bucket.avg_pnl:.2f}"
                ),
                supporting_key="day",
            )
            for day, bucket in by_weekday(trades).items()
            if PATTERN_RULES[PatternType.DAY_OF_WEEK].matches(bucket)
        ]

    def timeframe_patterns(
        self,
        strategies: Sequence[ProfessionalStrategy],
        trades: Sequence[Trade],
    ) -> List[PerformancePattern]:
        """Strategy timeframes with a high win rate."""
        return [
            self._pattern(
                PatternType.TIMEFRAME,
                bucket,
                pattern=f"{timeframe} timeframe shows strong performance",
                description=f"{timeframe} strategies show {bucket.win_rate:.1f}% win rate",
                supporting_key="timeframe",
            )
            for timeframe, bucket in by_timeframe(strategies, trades).items()
            if PATTERN_RULES[PatternType.TIMEFRAME].matches(bucket)
        ]

    def asset_class_patterns(
        self,
        strategies: Sequence[ProfessionalStrategy],
        trades: Sequence[Trade],
    ) -> List[PerformancePattern]:
        """Asset classes with a high win rate."""
        return [
            self._pattern(
                PatternType.ASSET_CLASS,
                bucket,
                pattern=f"{asset_class} shows strong performance",
                description=f"{asset_class} strategies show {bucket.win_rate:.1f}% win rate",
                supporting_key="asset_class",
            )
            for asset_class, bucket in by_asset_class(strategies, trades).items()
            if PATTERN_RULES[PatternType.ASSET_CLASS].matches(bucket)
        ]

    @staticmethod
    def _pattern(
        pattern_type: PatternType,
        bucket: TradeBucket,
        pattern: str,
        description: str,
        supporting_key: str,
    ) -> PerformancePattern:
        return PerformancePattern(
            type=pattern_type,
            pattern=pattern,
            description=description,
            confidence=PATTERN_RULES[pattern_type].confidence(bucket.total),
            impact=bucket.win_rate - BASELINE_WIN_RATE,
            supporting_data={
                supporting_key: bucket.key,
                "win_rate": round(bucket.win_rate, 2),
                "avg_pnl": round(bucket.avg_pnl, 2),
                "trades": bucket.total,
            },
        )
