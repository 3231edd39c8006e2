"""Configuration module for Journal Insights."""

from config.settings import (
    AppSettings,
    InsightsConfig,
    default_config,
    get_settings,
    merge_config,
)

__all__ = [
    "AppSettings",
    "InsightsConfig",
    "default_config",
    "get_settings",
    "merge_config",
]
