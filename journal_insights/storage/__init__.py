"""Data sources for journal entries, strategies and trades."""

from journal_insights.storage.json_store import JsonFileStore, load_market_series, read_json
from journal_insights.storage.memory import InMemoryJournalGateway, InMemoryTradeRepository

__all__ = [
    "InMemoryJournalGateway",
    "InMemoryTradeRepository",
    "JsonFileStore",
    "load_market_series",
    "read_json",
]
