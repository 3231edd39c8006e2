"""Strategy insights: performance stats, patterns, optimizations, market correlations."""

from journal_insights.strategy.market_correlation import (
    MarketConditionSeries,
    MarketCorrelation,
    MarketCorrelationDetector,
)
from journal_insights.strategy.models import (
    MonthlyReturn,
    PerformanceTrend,
    ProfessionalStrategy,
    RiskManagement,
    StrategyPerformance,
    Trade,
    TradeSide,
    TradeStatus,
    TradingSession,
)
from journal_insights.strategy.optimization import (
    Difficulty,
    OptimizationAdvisor,
    OptimizationCategory,
    OptimizationSuggestion,
)
from journal_insights.strategy.pattern_miner import PatternMiner, PatternType, PerformancePattern
from journal_insights.strategy.performance import calculate_strategy_performance
from journal_insights.strategy.repository import TradeRepository
from journal_insights.strategy.service import (
    StrategyInsightsService,
    StrategyReport,
    ValidationResult,
    create_strategy_insights_service,
    validate_insights_inputs,
)
from journal_insights.strategy.strategy_insights import (
    InsightCategory,
    StrategyInsight,
    StrategyInsightGenerator,
    StrategyPriority,
)

__all__ = [
    "Difficulty",
    "InsightCategory",
    "MarketConditionSeries",
    "MarketCorrelation",
    "MarketCorrelationDetector",
    "MonthlyReturn",
    "OptimizationAdvisor",
    "OptimizationCategory",
    "OptimizationSuggestion",
    "PatternMiner",
    "PatternType",
    "PerformancePattern",
    "PerformanceTrend",
    "ProfessionalStrategy",
    "RiskManagement",
    "StrategyInsight",
    "StrategyInsightGenerator",
    "StrategyInsightsService",
    "StrategyPerformance",
    "StrategyPriority",
    "StrategyReport",
    "Trade",
    "TradeRepository",
    "TradeSide",
    "TradeStatus",
    "TradingSession",
    "ValidationResult",
    "calculate_strategy_performance",
    "create_strategy_insights_service",
    "validate_insights_inputs",
]
