"""In-memory journal gateway and trade repository."""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from journal_insights.analytics.journal_models import JournalEntry
from journal_insights.errors import StrategyNotFoundError
from journal_insights.strategy.models import ProfessionalStrategy, Trade

logger = logging.getLogger(__name__)


class InMemoryJournalGateway:
    """Journal entries held in memory, keyed by user."""

    def __init__(self, entries: Optional[Iterable[JournalEntry]] = None):
        self._entries: Dict[str, List[JournalEntry]] = {}
        for entry in entries or []:
            self.add_entry(entry)

    def add_entry(self, entry: JournalEntry) -> None:
        """Store an entry under its user id."""
        self._entries.setdefault(entry.user_id, []).append(entry)

    def users(self) -> List[str]:
        """Known user ids."""
        return sorted(self._entries)

    async def get_entries_for_range(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> List[JournalEntry]:
        """Entries of a user dated within [start_date, end_date], oldest first."""
        entries = [
            e for e in self._entries.get(user_id, [])
            if start_date <= e.date <= end_date
        ]
        entries.sort(key=lambda e: e.date)
        logger.debug(f"Gateway: {len(entries)} entries for {user_id} in {start_date}..{end_date}")
        return entries


class InMemoryTradeRepository:
    """Strategies and trades held in memory."""

    def __init__(
        self,
        strategies: Optional[Iterable[ProfessionalStrategy]] = None,
        trades: Optional[Iterable[Trade]] = None,
    ):
        self._strategies: Dict[str, ProfessionalStrategy] = {}
        self._trades: List[Trade] = []
        for strategy in strategies or []:
            self.add_strategy(strategy)
        for trade in trades or []:
            self.add_trade(trade)

    def add_strategy(self, strategy: ProfessionalStrategy) -> None:
        """Store or replace a strategy."""
        self._strategies[strategy.id] = strategy

    def add_trade(self, trade: Trade) -> None:
        """Store a trade."""
        self._trades.append(trade)

    def get_strategy(self, strategy_id: str) -> ProfessionalStrategy:
        """Strategy by id.

        Raises:
            StrategyNotFoundError: Unknown id.
        """
        try:
            return self._strategies[strategy_id]
        except KeyError:
            raise StrategyNotFoundError(strategy_id) from None

    def get_strategies(self) -> List[ProfessionalStrategy]:
        """All strategies in insertion order."""
        return list(self._strategies.values())

    def get_trades_for_strategy(self, strategy_id: str) -> List[Trade]:
        """Trades of a strategy in entry order."""
        return sorted(
            (t for t in self._trades if t.strategy == strategy_id),
            key=lambda t: t.entry_time,
        )
