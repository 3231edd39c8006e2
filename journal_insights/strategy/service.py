"""
Strategy insights facade.

Bundles the strategy-side components behind one explicitly constructed
service. Each instance holds its own config and collaborators.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence

from config.settings import InsightsConfig, default_config
from journal_insights.errors import ConfigurationError
from journal_insights.strategy.market_correlation import (
    MarketConditionSeries,
    MarketCorrelation,
    MarketCorrelationDetector,
)
from journal_insights.strategy.models import ProfessionalStrategy, Trade
from journal_insights.strategy.optimization import OptimizationAdvisor, OptimizationSuggestion
from journal_insights.strategy.pattern_miner import PatternMiner, PerformancePattern
from journal_insights.strategy.performance import calculate_strategy_performance
from journal_insights.strategy.repository import TradeRepository
from journal_insights.strategy.strategy_insights import StrategyInsight, StrategyInsightGenerator

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of input validation."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.is_valid

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"is_valid": self.is_valid, "errors": list(self.errors)}


def validate_insights_inputs(strategy: Any, trades: Any) -> ValidationResult:
    """Check strategy and trades before generating insights.

    Never raises; problems are reported in the result.
    """
    errors: List[str] = []

    if strategy is None:
        errors.append("Strategy is required")
    elif not getattr(strategy, "id", None):
        errors.append("Strategy ID is required")

    if not isinstance(trades, (list, tuple)):
        errors.append("Trades must be a list")
    elif not trades:
        errors.append("At least one trade is required")

    return ValidationResult(is_valid=not errors, errors=errors)


@dataclass
class StrategyReport:
    """Everything the service knows about one strategy."""

    strategy: ProfessionalStrategy
    insights: List[StrategyInsight]
    optimizations: List[OptimizationSuggestion]
    trade_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "strategy": self.strategy.to_dict(),
            "trade_count": self.trade_count,
            "insights": [i.to_dict() for i in self.insights],
            "optimizations": [o.to_dict() for o in self.optimizations],
        }


class StrategyInsightsService:
    """Strategy insights, pattern mining, optimizations and market correlations."""

    def __init__(
        self,
        config: Optional[InsightsConfig] = None,
        trade_repository: Optional[TradeRepository] = None,
    ):
        """Initialize service.

        Args:
            config: Thresholds shared by every component.
            trade_repository: Source of strategies and trades.
        """
        self.config = config or default_config()
        self.trade_repository = trade_repository

        self.insight_generator = StrategyInsightGenerator(self.config)
        self.pattern_miner = PatternMiner(self.config, trade_repository)
        self.optimization_advisor = OptimizationAdvisor(self.config)
        self.correlation_detector = MarketCorrelationDetector(self.config, trade_repository)

    def generate_strategy_insights(
        self,
        strategy: ProfessionalStrategy,
        trades: Sequence[Trade],
    ) -> List[StrategyInsight]:
        """Ranked insights for one strategy."""
        return self.insight_generator.generate(strategy, trades)

    def identify_performance_patterns(
        self,
        strategies: Sequence[ProfessionalStrategy],
        trades: Optional[Sequence[Trade]] = None,
    ) -> List[PerformancePattern]:
        """Significant cross-strategy patterns."""
        return self.pattern_miner.identify_performance_patterns(strategies, trades)

    def suggest_optimizations(self, strategy: ProfessionalStrategy) -> List[OptimizationSuggestion]:
        """Optimization suggestions, highest expected improvement first."""
        return self.optimization_advisor.suggest(strategy)

    def detect_market_condition_correlations(
        self,
        strategy_id: str,
        market_series: Sequence[MarketConditionSeries],
        trades: Optional[Sequence[Trade]] = None,
    ) -> List[MarketCorrelation]:
        """Market conditions correlated with the strategy's P&L."""
        return self.correlation_detector.detect(strategy_id, market_series, trades)

    def analyze_strategy(self, strategy_id: str) -> StrategyReport:
        """Load a strategy and its trades from the repository and analyse them.

        Performance statistics are computed from the trades when the stored
        strategy carries none. The report holds a copy; the repository's
        strategy is never modified.

        Raises:
            ConfigurationError: No trade repository configured.
            StrategyNotFoundError: Unknown strategy id.
        """
        if self.trade_repository is None:
            raise ConfigurationError("analyze_strategy requires a trade repository")

        strategy = self.trade_repository.get_strategy(strategy_id)
        trades = list(self.trade_repository.get_trades_for_strategy(strategy_id))

        if strategy.performance.total_trades == 0 and trades:
            strategy = replace(strategy, performance=calculate_strategy_performance(trades))

        logger.info(f"Analyzing strategy {strategy_id} with {len(trades)} trades")
        return StrategyReport(
            strategy=strategy,
            insights=self.generate_strategy_insights(strategy, trades),
            optimizations=self.suggest_optimizations(strategy),
            trade_count=len(trades),
        )


def create_strategy_insights_service(
    config: Optional[InsightsConfig] = None,
    trade_repository: Optional[TradeRepository] = None,
) -> StrategyInsightsService:
    """Create a strategy insights service."""
    return StrategyInsightsService(config=config, trade_repository=trade_repository)
