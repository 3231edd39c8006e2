"""Rule-based optimization suggestions for a strategy."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from config.settings import InsightsConfig, default_config
from journal_insights.strategy.models import ProfessionalStrategy

logger = logging.getLogger(__name__)


class OptimizationCategory(Enum):
    """Area of the strategy a suggestion changes."""

    RISK_MANAGEMENT = "RiskManagement"
    ENTRY_TIMING = "EntryTiming"
    EXIT_STRATEGY = "ExitStrategy"
    POSITION_SIZING = "PositionSizing"


class Difficulty(Enum):
    """Implementation effort."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


@dataclass
class OptimizationSuggestion:
    """A concrete change expected to improve a strategy."""

    category: OptimizationCategory
    suggestion: str
    expected_improvement: float  # percent
    confidence: int  # 0-100
    implementation_difficulty: Difficulty
    required_data: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "category": self.category.value,
            "suggestion": self.suggestion,
            "expected_improvement": self.expected_improvement,
            "confidence": self.confidence,
            "implementation_difficulty": self.implementation_difficulty.value,
            "required_data": list(self.required_data),
        }


def reduced_risk(current_risk: float) -> float:
    """Per-trade risk after a 30% cut, never below 1%."""
    return max(1.0, current_risk * 0.7)


class OptimizationAdvisor:
    """Suggest risk, entry, exit and sizing changes for a strategy."""

    def __init__(self, config: Optional[InsightsConfig] = None):
        self.config = config or default_config()

    def suggest(self, strategy: ProfessionalStrategy) -> List[OptimizationSuggestion]:
        """Suggestions at or above the confidence threshold, best first."""
        suggestions: List[OptimizationSuggestion] = []
        suggestions.extend(self.risk_management_suggestions(strategy))
        suggestions.extend(self.entry_timing_suggestions(strategy))
        suggestions.extend(self.exit_strategy_suggestions(strategy))
        suggestions.extend(self.position_sizing_suggestions(strategy))

        kept = [s for s in suggestions if s.confidence >= self.config.confidence_threshold]
        kept.sort(key=lambda s: s.expected_improvement, reverse=True)

        logger.debug(f"Strategy {strategy.id}: {len(kept)} optimization suggestions")
        return kept

    def risk_management_suggestions(self, strategy: ProfessionalStrategy) -> List[OptimizationSuggestion]:
        perf = strategy.performance
        suggestions = []

        if perf.max_drawdown > 15:
            current = strategy.risk_management.max_risk_per_trade
            suggestions.append(OptimizationSuggestion(
                category=OptimizationCategory.RISK_MANAGEMENT,
                suggestion=(
                    f"Reduce position size from {current:g}% to {reduced_risk(current):.1f}% "
                    f"to limit drawdown"
                ),
                expected_improvement=25,
                confidence=80,
                implementation_difficulty=Difficulty.EASY,
                required_data=["position_size", "historical_drawdown"],
            ))

        if perf.risk_reward_ratio < 1.5:
            suggestions.append(OptimizationSuggestion(
                category=OptimizationCategory.RISK_MANAGEMENT,
                suggestion="Implement trailing stops or partial profit taking to improve risk-reward ratio",
                expected_improvement=15,
                confidence=75,
                implementation_difficulty=Difficulty.MEDIUM,
                required_data=["exit_rules", "profit_targets"],
            ))

        return suggestions

    def entry_timing_suggestions(self, strategy: ProfessionalStrategy) -> List[OptimizationSuggestion]:
        # Baseline suggestion, emitted for every strategy.
        return [OptimizationSuggestion(
            category=OptimizationCategory.ENTRY_TIMING,
            suggestion="Add volume confirmation to entry criteria to improve trade quality",
            expected_improvement=12,
            confidence=70,
            implementation_difficulty=Difficulty.EASY,
            required_data=["volume_data", "entry_signals"],
        )]

    def exit_strategy_suggestions(self, strategy: ProfessionalStrategy) -> List[OptimizationSuggestion]:
        perf = strategy.performance
        if perf.win_rate < 45 and perf.profit_factor > 1.5:
            return [OptimizationSuggestion(
                category=OptimizationCategory.EXIT_STRATEGY,
                suggestion=(
                    "Implement trailing stops to let winning trades run longer while protecting profits"
                ),
                expected_improvement=20,
                confidence=85,
                implementation_difficulty=Difficulty.MEDIUM,
                required_data=["exit_timing", "profit_targets"],
            )]
        return []

    def position_sizing_suggestions(self, strategy: ProfessionalStrategy) -> List[OptimizationSuggestion]:
        perf = strategy.performance
        if perf.win_rate > 65 and perf.max_drawdown < 10:
            return [OptimizationSuggestion(
                category=OptimizationCategory.POSITION_SIZING,
                suggestion=(
                    "Consider Kelly Criterion position sizing to optimize capital allocation "
                    "for this high-probability strategy"
                ),
                expected_improvement=30,
                confidence=75,
                implementation_difficulty=Difficulty.HARD,
                required_data=["win_rate", "average_win_loss", "historical_performance"],
            )]
        return []
