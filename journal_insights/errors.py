"""Exceptions raised by the insights library."""

from typing import Optional


class InsightsError(Exception):
    """Base exception for the insights library."""


class ConfigurationError(InsightsError, ValueError):
    """Raised when configuration overrides are invalid."""


class DataLoadError(InsightsError):
    """Raised when journal or trade data cannot be loaded."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class StrategyNotFoundError(InsightsError, KeyError):
    """Raised when a strategy id is unknown to the repository."""

    def __init__(self, strategy_id: str):
        self.strategy_id = strategy_id
        super().__init__(f"Strategy not found: {strategy_id}")

    def __str__(self) -> str:
        return self.args[0]
