"""
Correlation between externally supplied market conditions and strategy P&L.

Market data is not fetched here. Callers pass one ``MarketConditionSeries``
per condition (for example a daily volatility index or trend-strength
reading), and each trade is matched to the series value on its UTC entry
date.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config.settings import InsightsConfig, default_config
from journal_insights.analytics.statistics import (
    RelationshipDirection,
    RelationshipStrength,
    correlation_with_p_value,
)
from journal_insights.strategy.models import Trade
from journal_insights.strategy.repository import TradeRepository

logger = logging.getLogger(__name__)


@dataclass
class MarketConditionSeries:
    """Daily readings of one market condition."""

    condition: str
    values: Dict[date, float] = field(default_factory=dict)
    description: str = ""

    def value_on(self, day: date) -> Optional[float]:
        """Reading for a calendar day, if any."""
        return self.values.get(day)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "condition": self.condition,
            "description": self.description,
            "values": {d.isoformat(): v for d, v in sorted(self.values.items())},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarketConditionSeries":
        """Create from dictionary with ISO date keys."""
        return cls(
            condition=str(data["condition"]),
            values={date.fromisoformat(k): float(v) for k, v in (data.get("values") or {}).items()},
            description=str(data.get("description", "")),
        )


@dataclass
class MarketCorrelation:
    """Relationship between a market condition and trade P&L."""

    condition: str
    correlation: float
    significance: float  # 0-100
    description: str
    recommendations: List[str] = field(default_factory=list)
    sample_size: int = 0

    @property
    def strength(self) -> RelationshipStrength:
        return RelationshipStrength.from_correlation(self.correlation)

    @property
    def direction(self) -> RelationshipDirection:
        return RelationshipDirection.from_correlation(self.correlation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "condition": self.condition,
            "correlation": round(self.correlation, 4),
            "significance": round(self.significance, 2),
            "strength": self.strength.value,
            "direction": self.direction.value,
            "description": self.description,
            "recommendations": list(self.recommendations),
            "sample_size": self.sample_size,
        }


def align_trades(trades: Sequence[Trade], series: MarketConditionSeries) -> Tuple[List[float], List[float]]:
    """Pair each trade's P&L with the condition reading on its entry date.

    Trades entered on days without a reading are skipped.
    """
    condition_values: List[float] = []
    pnl_values: List[float] = []
    for trade in trades:
        value = series.value_on(trade.entry_time.date())
        if value is None:
            continue
        condition_values.append(value)
        pnl_values.append(trade.pnl_value)
    return condition_values, pnl_values


def recommendations_for(condition: str, correlation: float) -> List[str]:
    """Trading guidance for a correlated condition."""
    if correlation > 0:
        return [
            f"Favor this strategy when {condition} is elevated",
            f"Reduce position size when {condition} is low",
        ]
    return [
        f"Reduce position size or pause this strategy when {condition} is elevated",
        f"Favor this strategy when {condition} is low",
    ]


class MarketCorrelationDetector:
    """Correlate a strategy's trade results with market-condition series."""

    def __init__(
        self,
        config: Optional[InsightsConfig] = None,
        trade_repository: Optional[TradeRepository] = None,
    ):
        """Initialize detector.

        Args:
            config: Correlation threshold and minimum sample size.
            trade_repository: Source of the strategy's trades when none are passed in.
        """
        self.config = config or default_config()
        self.trade_repository = trade_repository

    def detect(
        self,
        strategy_id: str,
        market_series: Sequence[MarketConditionSeries],
        trades: Optional[Sequence[Trade]] = None,
    ) -> List[MarketCorrelation]:
        """Conditions whose |correlation| with trade P&L reaches the threshold.

        Args:
            strategy_id: Strategy whose trades are analysed.
            market_series: One series per market condition.
            trades: The strategy's trades; fetched from the repository when omitted.

        Returns:
            Correlations sorted by absolute strength, strongest first.
        """
        if trades is None:
            if self.trade_repository is None:
                logger.warning(f"No trades for strategy {strategy_id}: no trade repository configured")
                return []
            trades = self.trade_repository.get_trades_for_strategy(strategy_id)

        results: List[MarketCorrelation] = []
        for series in market_series:
            result = self.correlate(series, trades)
            if result is None:
                continue
            if abs(result.correlation) >= self.config.correlation_threshold:
                results.append(result)

        results.sort(key=lambda r: abs(r.correlation), reverse=True)
        logger.debug(
            f"Strategy {strategy_id}: {len(results)}/{len(market_series)} conditions correlated"
        )
        return results

    def correlate(self, series: MarketConditionSeries, trades: Sequence[Trade]) -> Optional[MarketCorrelation]:
        """Correlation of one condition with trade P&L, or None if too few aligned trades."""
        condition_values, pnl_values = align_trades(trades, series)
        n = len(condition_values)
        if n < self.config.min_correlation_samples:
            logger.debug(f"Condition {series.condition}: only {n} aligned trades")
            return None

        correlation, p_value = correlation_with_p_value(condition_values, pnl_values)
        strength = RelationshipStrength.from_correlation(correlation)
        direction = RelationshipDirection.from_correlation(correlation)

        return MarketCorrelation(
            condition=series.condition,
            correlation=correlation,
            significance=(1 - p_value) * 100,
            description=(
                f"{strength.value.replace('_', ' ').capitalize()} {direction.value} relationship "
                f"between {series.condition} and trade P&L across {n} trades"
            ),
            recommendations=recommendations_for(series.condition, correlation),
            sample_size=n,
        )
