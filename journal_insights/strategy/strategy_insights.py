"""
Per-strategy insight rules.

Insights fall into four independent groups: performance, timing, market
condition and risk management. Confidences are fractions in [0, 1].
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from config.settings import InsightsConfig, default_config
from journal_insights.analytics.statistics import percent
from journal_insights.strategy.buckets import TradeBucket, by_hour, by_weekday
from journal_insights.strategy.models import PerformanceTrend, ProfessionalStrategy, Trade, json_float

logger = logging.getLogger(__name__)


RECENT_TRADES = 10
RECENT_UNDERPERFORMANCE_POINTS = 15.0
MIN_TIMING_SAMPLE = 3
TIMING_CONFIDENCE_FLOOR = 70


class InsightCategory(Enum):
    """Rule group an insight came from."""

    PERFORMANCE = "Performance"
    TIMING = "Timing"
    MARKET_CONDITION = "MarketCondition"
    RISK_MANAGEMENT = "RiskManagement"


class StrategyPriority(Enum):
    """Insight priority with sort weight."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def weight(self) -> int:
        """Sort weight, higher first."""
        return STRATEGY_PRIORITY_WEIGHTS[self]


STRATEGY_PRIORITY_WEIGHTS = {
    StrategyPriority.HIGH: 3,
    StrategyPriority.MEDIUM: 2,
    StrategyPriority.LOW: 1,
}


@dataclass
class StrategyInsight:
    """Actionable observation about one strategy."""

    type: InsightCategory
    message: str
    confidence: float
    priority: StrategyPriority
    actionable: bool = True
    supporting_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "message": self.message,
            "confidence": self.confidence,
            "actionable": self.actionable,
            "supporting_data": {k: json_float(v) for k, v in self.supporting_data.items()},
            "priority": self.priority.value,
        }


@dataclass
class TimingAnalysis:
    """Best-performing bucket of a timing dimension."""

    best: Optional[str]
    best_win_rate: float
    average_win_rate: float
    sample_size: int
    confidence: int  # 0-100

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "best": self.best,
            "best_win_rate": round(self.best_win_rate, 2),
            "average_win_rate": round(self.average_win_rate, 2),
            "sample_size": self.sample_size,
            "confidence": self.confidence,
        }


def best_bucket(
    buckets: Dict[Any, TradeBucket],
    average_win_rate: float,
    confidence: Callable[[int], int],
    min_sample: int = MIN_TIMING_SAMPLE,
) -> TimingAnalysis:
    """Bucket with the highest win rate among those with enough trades.

    Ties keep the earliest key. A bucket with no wins is never the best.
    """
    best: Optional[TradeBucket] = None
    for bucket in buckets.values():
        if bucket.total < min_sample:
            continue
        if bucket.win_rate > (best.win_rate if best else 0.0):
            best = bucket

    if best is None:
        return TimingAnalysis(None, 0.0, average_win_rate, 0, 0)
    return TimingAnalysis(
        best=str(best.key),
        best_win_rate=best.win_rate,
        average_win_rate=average_win_rate,
        sample_size=best.total,
        confidence=confidence(best.total),
    )


class StrategyInsightGenerator:
    """Rule engine producing insights for a single strategy."""

    def __init__(self, config: Optional[InsightsConfig] = None):
        self.config = config or default_config()

    def generate(self, strategy: ProfessionalStrategy, trades: Sequence[Trade]) -> List[StrategyInsight]:
        """Generate ranked insights for a strategy.

        Args:
            strategy: Strategy with its aggregate performance.
            trades: The strategy's trades.

        Returns:
            Insights with confidence at or above the configured threshold,
            highest priority first. With too few trades, a single insight
            stating how many more are needed.
        """
        required = self.config.minimum_trades_for_insights
        if len(trades) < required:
            logger.debug(f"Strategy {strategy.id}: {len(trades)} trades < {required}")
            return [
                StrategyInsight(
                    type=InsightCategory.PERFORMANCE,
                    message=(
                        f"Strategy needs {required - len(trades)} more trades for reliable insights. "
                        f"Current sample size ({len(trades)}) may not provide statistically "
                        f"significant patterns."
                    ),
                    confidence=0.95,
                    priority=StrategyPriority.MEDIUM,
                    supporting_data={"current_trades": len(trades), "required_trades": required},
                )
            ]

        ordered = sorted(trades, key=lambda t: t.entry_time)
        insights: List[StrategyInsight] = []
        insights.extend(self.performance_insights(strategy))
        insights.extend(self.timing_insights(ordered))
        insights.extend(self.market_condition_insights(ordered))
        insights.extend(self.risk_management_insights(strategy))

        min_confidence = self.config.confidence_threshold / 100
        kept = [i for i in insights if i.confidence >= min_confidence]
        kept.sort(key=lambda i: i.priority.weight, reverse=True)

        logger.debug(f"Strategy {strategy.id}: {len(kept)}/{len(insights)} insights above threshold")
        return kept

    def performance_insights(self, strategy: ProfessionalStrategy) -> List[StrategyInsight]:
        """Win rate, profit factor, expectancy and trend rules."""
        perf = strategy.performance
        insights: List[StrategyInsight] = []

        if perf.win_rate > 60:
            insights.append(StrategyInsight(
                type=InsightCategory.PERFORMANCE,
                message=(
                    f"Excellent win rate of {perf.win_rate:.1f}%. "
                    f"Consider increasing position size to capitalize on this edge."
                ),
                confidence=0.85,
                priority=StrategyPriority.HIGH,
                supporting_data={"win_rate": perf.win_rate, "trades": perf.total_trades},
            ))
        elif perf.win_rate < 40:
            insights.append(StrategyInsight(
                type=InsightCategory.PERFORMANCE,
                message=(
                    f"Low win rate of {perf.win_rate:.1f}%. Focus on improving entry criteria "
                    f"or consider if this is a valid low-frequency, high-reward strategy."
                ),
                confidence=0.80,
                priority=StrategyPriority.HIGH,
                supporting_data={"win_rate": perf.win_rate, "profit_factor": perf.profit_factor},
            ))

        if perf.profit_factor >= 2.0:
            insights.append(StrategyInsight(
                type=InsightCategory.PERFORMANCE,
                message=(
                    f"Outstanding profit factor of {perf.profit_factor:.2f}. This strategy shows "
                    f"strong edge - consider it a core component of your trading plan."
                ),
                confidence=0.90,
                priority=StrategyPriority.HIGH,
                supporting_data={"profit_factor": perf.profit_factor},
            ))
        elif perf.profit_factor < 1.2:
            insights.append(StrategyInsight(
                type=InsightCategory.PERFORMANCE,
                message=(
                    f"Marginal profit factor of {perf.profit_factor:.2f}. "
                    f"Strategy needs optimization or should be discontinued."
                ),
                confidence=0.85,
                priority=StrategyPriority.HIGH,
                supporting_data={"profit_factor": perf.profit_factor},
            ))

        if perf.expectancy > 0:
            monthly = perf.expectancy * self.config.trades_per_month
            insights.append(StrategyInsight(
                type=InsightCategory.PERFORMANCE,
                message=(
                    f"Positive expectancy of ${perf.expectancy:.2f} per trade. At current frequency, "
                    f"expect approximately ${monthly:.2f} monthly profit."
                ),
                confidence=0.80,
                priority=StrategyPriority.MEDIUM,
                supporting_data={"expectancy": perf.expectancy, "monthly_projection": round(monthly, 2)},
            ))

        if perf.performance_trend == PerformanceTrend.DECLINING:
            insights.append(StrategyInsight(
                type=InsightCategory.PERFORMANCE,
                message=(
                    "Performance trend is declining. Review recent market conditions and "
                    "consider strategy adjustments or temporary suspension."
                ),
                confidence=0.75,
                priority=StrategyPriority.HIGH,
                supporting_data={
                    "trend": perf.performance_trend.value,
                    "monthly_returns": [m.to_dict() for m in perf.monthly_returns[-3:]],
                },
            ))
        elif perf.performance_trend == PerformanceTrend.IMPROVING:
            insights.append(StrategyInsight(
                type=InsightCategory.PERFORMANCE,
                message="Performance trend is improving. Consider increasing allocation to this strategy.",
                confidence=0.80,
                priority=StrategyPriority.MEDIUM,
                supporting_data={"trend": perf.performance_trend.value},
            ))

        return insights

    def timing_insights(self, trades: Sequence[Trade]) -> List[StrategyInsight]:
        """Best hour and best weekday of this strategy's trades."""
        insights: List[StrategyInsight] = []
        if not trades:
            return insights

        average = percent(sum(1 for t in trades if t.is_win), len(trades))

        hour = best_bucket(by_hour(trades), average, lambda n: min(90, 30 + n * 5))
        if hour.best is not None and hour.confidence > TIMING_CONFIDENCE_FLOOR:
            insights.append(StrategyInsight(
                type=InsightCategory.TIMING,
                message=(
                    f"Best performance occurs around {hour.best}:00. Win rate is "
                    f"{hour.best_win_rate:.1f}% vs {hour.average_win_rate:.1f}% average."
                ),
                confidence=hour.confidence / 100,
                priority=StrategyPriority.MEDIUM,
                supporting_data=hour.to_dict(),
            ))

        day = best_bucket(by_weekday(trades), average, lambda n: min(85, 25 + n * 8))
        if day.best is not None and day.confidence > TIMING_CONFIDENCE_FLOOR:
            insights.append(StrategyInsight(
                type=InsightCategory.TIMING,
                message=(
                    f"{day.best} shows strongest performance with {day.best_win_rate:.1f}% "
                    f"win rate. Consider focusing trades on this day."
                ),
                confidence=day.confidence / 100,
                priority=StrategyPriority.MEDIUM,
                supporting_data=day.to_dict(),
            ))

        return insights

    def market_condition_insights(self, trades: Sequence[Trade]) -> List[StrategyInsight]:
        """Flag a recent slump relative to the overall win rate.

        Trades must be in chronological order.
        """
        if not trades:
            return []

        recent = list(trades)[-RECENT_TRADES:]
        recent_win_rate = percent(sum(1 for t in recent if t.is_win), len(recent))
        overall_win_rate = percent(sum(1 for t in trades if t.is_win), len(trades))

        if recent_win_rate >= overall_win_rate - RECENT_UNDERPERFORMANCE_POINTS:
            return []

        return [StrategyInsight(
            type=InsightCategory.MARKET_CONDITION,
            message=(
                f"Recent performance ({recent_win_rate:.1f}% win rate) is significantly below "
                f"average ({overall_win_rate:.1f}%). Current market conditions may not favor "
                f"this strategy."
            ),
            confidence=0.75,
            priority=StrategyPriority.HIGH,
            supporting_data={
                "recent_win_rate": round(recent_win_rate, 2),
                "overall_win_rate": round(overall_win_rate, 2),
                "recent_trades": len(recent),
            },
        )]

    def risk_management_insights(self, strategy: ProfessionalStrategy) -> List[StrategyInsight]:
        """Drawdown and risk-reward rules."""
        perf = strategy.performance
        insights: List[StrategyInsight] = []

        if perf.max_drawdown > 20:
            insights.append(StrategyInsight(
                type=InsightCategory.RISK_MANAGEMENT,
                message=(
                    f"High maximum drawdown of {perf.max_drawdown:.1f}%. "
                    f"Consider reducing position size or tightening stop losses."
                ),
                confidence=0.85,
                priority=StrategyPriority.HIGH,
                supporting_data={
                    "max_drawdown": perf.max_drawdown,
                    "risk_per_trade": strategy.risk_management.max_risk_per_trade,
                },
            ))

        if perf.risk_reward_ratio < 1.5 and perf.win_rate < 60:
            insights.append(StrategyInsight(
                type=InsightCategory.RISK_MANAGEMENT,
                message=(
                    f"Low risk-reward ratio ({perf.risk_reward_ratio:.2f}) combined with moderate "
                    f"win rate requires improvement. Consider wider profit targets or tighter stops."
                ),
                confidence=0.80,
                priority=StrategyPriority.HIGH,
                supporting_data={"risk_reward_ratio": perf.risk_reward_ratio, "win_rate": perf.win_rate},
            ))

        return insights
