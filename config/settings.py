"""Analytics configuration using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from journal_insights.errors import ConfigurationError


class LogFormatName(str, Enum):
    """Log output formats selectable from the environment."""

    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"
    COMPACT = "compact"


class InsightsConfig(BaseModel):
    """Thresholds shared by the analytics and strategy insight services.

    Plain model: environment overrides are applied only through
    ``AppSettings.insights``.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    minimum_trades_for_insights: int = Field(default=20, ge=1, description="Trades needed before strategy insights")
    confidence_threshold: float = Field(default=70.0, ge=0.0, le=100.0, description="Minimum confidence (0-100)")
    pattern_significance_threshold: float = Field(default=0.3, ge=0.0, le=1.0, description="Minimum pattern impact (0-1)")
    correlation_threshold: float = Field(default=0.5, ge=0.0, le=1.0, description="Minimum |r| for market correlations")

    default_lookback_days: int = Field(default=90, ge=1, description="Range used when no dates are given")
    include_single_day_streaks: bool = Field(default=False, description="Record one-day runs in streak history")
    min_correlation_samples: int = Field(default=3, ge=3, description="Aligned points needed for a correlation")
    trades_per_month: int = Field(default=20, ge=1, description="Trade frequency for monthly projections")


class AppSettings(BaseSettings):
    """Settings for the command line application."""

    model_config = SettingsConfigDict(
        env_prefix="JOURNAL_INSIGHTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    insights: InsightsConfig = Field(default_factory=InsightsConfig)

    # Logging
    log_level: str = Field(default="WARNING", description="Root log level")
    log_format: LogFormatName = LogFormatName.DETAILED
    log_to_file: bool = False
    log_dir: Path = Field(default=Path("logs"))

    # Input
    data_file: Optional[Path] = None


def default_config() -> InsightsConfig:
    """Return the default insights configuration."""
    return InsightsConfig()


def merge_config(base: InsightsConfig, **overrides: Any) -> InsightsConfig:
    """Return a copy of ``base`` with the named fields replaced.

    Raises:
        ConfigurationError: If an override names an unknown field or fails validation.
    """
    unknown = set(overrides) - set(InsightsConfig.model_fields)
    if unknown:
        raise ConfigurationError(f"Unknown config options: {', '.join(sorted(unknown))}")

    values = base.model_dump()
    values.update(overrides)
    try:
        return InsightsConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
