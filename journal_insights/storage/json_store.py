"""
JSON file data source.

Expected layout::

    {
      "journal_entries": [{"date": "2024-03-01", "user_id": "u1", ...}],
      "strategies": [{"id": "s1", "title": "Breakout", ...}],
      "trades": [{"id": "t1", "strategy": "s1", "entry_time": "...", ...}],
      "market_conditions": [{"condition": "volatility", "values": {...}}]
    }

Every section is optional.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, TypeVar, Union

from journal_insights.analytics.journal_models import JournalEntry
from journal_insights.errors import DataLoadError
from journal_insights.storage.memory import InMemoryJournalGateway, InMemoryTradeRepository
from journal_insights.strategy.market_correlation import MarketConditionSeries
from journal_insights.strategy.models import ProfessionalStrategy, Trade

logger = logging.getLogger(__name__)

T = TypeVar("T")


def read_json(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON object from disk.

    Raises:
        DataLoadError: Missing file, invalid JSON, or a non-object document.
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError("file not found", source=str(path))

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"invalid JSON: {e}", source=str(path)) from e
    except OSError as e:
        raise DataLoadError(f"cannot read file: {e}", source=str(path)) from e

    if not isinstance(data, dict):
        raise DataLoadError("top-level JSON value must be an object", source=str(path))
    return data


def parse_records(
    records: Any,
    parser: Callable[[dict], T],
    section: str,
    source: str,
) -> List[T]:
    """Parse a list of records, naming the offending one on failure."""
    if records is None:
        return []
    if not isinstance(records, list):
        raise DataLoadError(f"'{section}' must be a list", source=source)

    parsed = []
    for index, record in enumerate(records):
        try:
            parsed.append(parser(record))
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise DataLoadError(f"invalid {section}[{index}]: {e!r}", source=source) from e
    return parsed


class JsonFileStore:
    """Loads journal entries, strategies, trades and market series from one JSON file.

    Serves both the journal gateway and the trade repository interfaces.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        source = str(self.path)
        data = read_json(self.path)

        self.entries = parse_records(data.get("journal_entries"), JournalEntry.from_dict, "journal_entries", source)
        self.strategies = parse_records(data.get("strategies"), ProfessionalStrategy.from_dict, "strategies", source)
        self.trades = parse_records(data.get("trades"), Trade.from_dict, "trades", source)
        self.market_series = parse_records(
            data.get("market_conditions"), MarketConditionSeries.from_dict, "market_conditions", source
        )

        self.gateway = InMemoryJournalGateway(self.entries)
        self.repository = InMemoryTradeRepository(self.strategies, self.trades)

        logger.info(
            f"Loaded {source}: {len(self.entries)} entries, {len(self.strategies)} strategies, "
            f"{len(self.trades)} trades, {len(self.market_series)} market series"
        )

    async def get_entries_for_range(self, user_id, start_date, end_date) -> List[JournalEntry]:
        """Journal entries of a user within a date range."""
        return await self.gateway.get_entries_for_range(user_id, start_date, end_date)

    def get_strategy(self, strategy_id: str) -> ProfessionalStrategy:
        """Strategy by id; raises StrategyNotFoundError."""
        return self.repository.get_strategy(strategy_id)

    def get_strategies(self) -> List[ProfessionalStrategy]:
        """All strategies."""
        return self.repository.get_strategies()

    def get_trades_for_strategy(self, strategy_id: str) -> List[Trade]:
        """Trades of a strategy in entry order."""
        return self.repository.get_trades_for_strategy(strategy_id)


def load_market_series(path: Union[str, Path]) -> List[MarketConditionSeries]:
    """Load the ``market_conditions`` section of a JSON file."""
    data = read_json(path)
    return parse_records(data.get("market_conditions"), MarketConditionSeries.from_dict, "market_conditions", str(path))
