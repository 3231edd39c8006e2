"""Journal Insights - analytics engine for trading journals and strategies."""

__version__ = "0.1.0"
