"""Statistical helpers shared by the analyzers.

Every routine degrades to a neutral value instead of raising on empty or
degenerate input.
"""

import math
from enum import Enum
from typing import Sequence, Tuple


class TrendDirection(str, Enum):
    """Direction of a metric over time."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class RelationshipStrength(Enum):
    """Strength of a correlation."""

    VERY_STRONG = "very_strong"  # |r| > 0.8
    STRONG = "strong"  # |r| > 0.6
    MODERATE = "moderate"  # |r| > 0.4
    WEAK = "weak"  # |r| > 0.2
    NEGLIGIBLE = "negligible"  # |r| <= 0.2

    @classmethod
    def from_correlation(cls, correlation: float) -> "RelationshipStrength":
        """Classify a correlation coefficient."""
        abs_corr = abs(correlation)
        if abs_corr > 0.8:
            return cls.VERY_STRONG
        elif abs_corr > 0.6:
            return cls.STRONG
        elif abs_corr > 0.4:
            return cls.MODERATE
        elif abs_corr > 0.2:
            return cls.WEAK
        return cls.NEGLIGIBLE


class RelationshipDirection(Enum):
    """Direction of a correlation."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @classmethod
    def from_correlation(cls, correlation: float) -> "RelationshipDirection":
        """Classify the sign of a correlation coefficient."""
        if correlation > 0.1:
            return cls.POSITIVE
        elif correlation < -0.1:
            return cls.NEGATIVE
        return cls.NEUTRAL


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def round2(value: float) -> float:
    """Round to two decimals for presentation."""
    return round(value, 2)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient.

    Uses r = (nΣxy - ΣxΣy) / sqrt((nΣx² - (Σx)²)(nΣy² - (Σy)²)).

    Returns:
        r in [-1, 1]; 0.0 for mismatched or empty input or a zero denominator.
    """
    n = len(x)
    if n == 0 or n != len(y):
        return 0.0

    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_x2 = sum(xi * xi for xi in x)
    sum_y2 = sum(yi * yi for yi in y)

    numerator = n * sum_xy - sum_x * sum_y
    variance_term = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if variance_term <= 0:
        return 0.0

    denominator = math.sqrt(variance_term)
    if denominator == 0:
        return 0.0

    # Float error can push |r| a hair past 1
    return max(-1.0, min(1.0, numerator / denominator))


def correlation_with_p_value(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float]:
    """Pearson correlation with an approximate two-sided p-value.

    Returns:
        Tuple of (correlation, p_value); (0.0, 1.0) when fewer than 3 points.
    """
    n = len(x)
    if n < 3 or n != len(y):
        return 0.0, 1.0

    correlation = pearson_correlation(x, y)
    if correlation == 0.0:
        return 0.0, 1.0

    if abs(correlation) >= 0.9999:
        return correlation, 0.0

    t_stat = correlation * math.sqrt(n - 2) / math.sqrt(1 - correlation ** 2)
    # Simplified p-value approximation
    p_value = 2 * (1 - min(0.9999, abs(t_stat) / (abs(t_stat) + n)))
    return correlation, min(1.0, p_value)


def classify_change(change: float, threshold: float) -> TrendDirection:
    """Classify a change against a symmetric, exclusive threshold."""
    if change > threshold:
        return TrendDirection.IMPROVING
    if change < -threshold:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def percent(part: float, whole: float) -> float:
    """``part / whole * 100``, 0.0 when ``whole`` is zero."""
    if whole == 0:
        return 0.0
    return part / whole * 100
