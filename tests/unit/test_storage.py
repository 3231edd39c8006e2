"""Tests for the in-memory and JSON file data sources."""

import json
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from journal_insights.analytics.journal_models import JournalEntry
from journal_insights.errors import DataLoadError, StrategyNotFoundError
from journal_insights.storage.json_store import (
    JsonFileStore,
    load_market_series,
    parse_records,
    read_json,
)
from journal_insights.storage.memory import InMemoryJournalGateway, InMemoryTradeRepository
from journal_insights.strategy.models import ProfessionalStrategy, Trade, TradeSide


def make_trade(trade_id, strategy, day):
    return Trade(
        id=trade_id,
        symbol="BTC-USD-PERP",
        side=TradeSide.LONG,
        entry_price=Decimal("50000"),
        entry_time=datetime(2024, 1, day, 10, tzinfo=timezone.utc),
        pnl=Decimal("10"),
        strategy=strategy,
    )


SAMPLE = {
    "journal_entries": [
        {
            "date": "2024-03-02",
            "user_id": "u1",
            "is_complete": True,
            "daily_pnl": 120.5,
            "emotional_state": {"pre_market": {"mood": "Calm"}, "post_market": {"overall_mood": "satisfied"}},
            "process_metrics": {
                "plan_adherence": 4,
                "risk_management": 4,
                "entry_timing": 3,
                "exit_timing": 3,
                "emotional_discipline": 5,
            },
        },
        {"date": "2024-03-01", "user_id": "u1", "is_complete": True},
        {"date": "2024-03-01", "user_id": "u2", "is_complete": False},
    ],
    "strategies": [{"id": "s1", "title": "Breakout", "primary_timeframe": "1h"}],
    "trades": [
        {"id": "t2", "strategy": "s1", "entry_time": "2024-03-02T10:00:00Z", "pnl": -5},
        {"id": "t1", "strategy": "s1", "entry_time": "2024-03-01T10:00:00Z", "pnl": 15},
    ],
    "market_conditions": [{"condition": "volatility", "values": {"2024-03-01": 1.2}}],
}


class TestInMemoryJournalGateway:
    """Test InMemoryJournalGateway."""

    @pytest.fixture
    def gateway(self):
        """Gateway with entries for two users."""
        return InMemoryJournalGateway([
            JournalEntry(date=date(2024, 3, 3), user_id="u1"),
            JournalEntry(date=date(2024, 3, 1), user_id="u1"),
            JournalEntry(date=date(2024, 3, 9), user_id="u1"),
            JournalEntry(date=date(2024, 3, 2), user_id="u2"),
        ])

    def test_users(self, gateway):
        """Known users are listed."""
        assert gateway.users() == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_range_is_inclusive_and_sorted(self, gateway):
        """Both ends of the range are included, oldest first."""
        entries = await gateway.get_entries_for_range("u1", date(2024, 3, 1), date(2024, 3, 3))

        assert [e.date for e in entries] == [date(2024, 3, 1), date(2024, 3, 3)]

    @pytest.mark.asyncio
    async def test_unknown_user(self, gateway):
        """Unknown users have no entries."""
        assert await gateway.get_entries_for_range("nobody", date(2024, 1, 1), date(2024, 12, 31)) == []


class TestInMemoryTradeRepository:
    """Test InMemoryTradeRepository."""

    @pytest.fixture
    def repository(self):
        """Repository with two strategies."""
        return InMemoryTradeRepository(
            [ProfessionalStrategy(id="s1", title="a"), ProfessionalStrategy(id="s2", title="b")],
            [make_trade("t2", "s1", 5), make_trade("t1", "s1", 2), make_trade("t3", "s2", 3)],
        )

    def test_get_strategy(self, repository):
        """Strategy looked up by id."""
        assert repository.get_strategy("s2").title == "b"

    def test_get_unknown_strategy(self, repository):
        """Unknown id raises StrategyNotFoundError."""
        with pytest.raises(StrategyNotFoundError) as exc_info:
            repository.get_strategy("s9")

        assert exc_info.value.strategy_id == "s9"
        assert isinstance(exc_info.value, KeyError)

    def test_get_strategies_keeps_order(self, repository):
        """Strategies come in insertion order."""
        assert [s.id for s in repository.get_strategies()] == ["s1", "s2"]

    def test_trades_for_strategy_sorted(self, repository):
        """Trades filtered by strategy, in entry order."""
        assert [t.id for t in repository.get_trades_for_strategy("s1")] == ["t1", "t2"]


class TestReadJson:
    """Test read_json."""

    def test_missing_file(self, tmp_path):
        """Missing file raises DataLoadError naming the path."""
        path = tmp_path / "missing.json"

        with pytest.raises(DataLoadError, match="file not found") as exc_info:
            read_json(path)

        assert exc_info.value.source == str(path)

    def test_invalid_json(self, tmp_path):
        """Malformed JSON raises DataLoadError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(DataLoadError, match="invalid JSON"):
            read_json(path)

    def test_non_object(self, tmp_path):
        """Top-level arrays are rejected."""
        path = tmp_path / "list.json"
        path.write_text("[]")

        with pytest.raises(DataLoadError, match="must be an object"):
            read_json(path)


class TestParseRecords:
    """Test parse_records."""

    def test_none_is_empty(self):
        """Absent section parses to nothing."""
        assert parse_records(None, JournalEntry.from_dict, "journal_entries", "x") == []

    def test_section_must_be_list(self):
        """Non-list sections are rejected."""
        with pytest.raises(DataLoadError, match="'trades' must be a list"):
            parse_records({"id": "t1"}, Trade.from_dict, "trades", "x")

    def test_bad_record_named(self):
        """The failing record's index is reported."""
        records = [
            {"id": "t1", "entry_time": "2024-01-01T00:00:00Z"},
            {"id": "t2"},
        ]

        with pytest.raises(DataLoadError, match=r"invalid trades\[1\]"):
            parse_records(records, Trade.from_dict, "trades", "x")

    def test_bad_decimal(self):
        """Unparseable numbers are reported as load errors."""
        records = [{"id": "t1", "entry_time": "2024-01-01T00:00:00Z", "pnl": "lots"}]

        with pytest.raises(DataLoadError):
            parse_records(records, Trade.from_dict, "trades", "x")


class TestJsonFileStore:
    """Test JsonFileStore."""

    @pytest.fixture
    def data_file(self, tmp_path):
        """Write the sample document."""
        path = tmp_path / "journal.json"
        path.write_text(json.dumps(SAMPLE))
        return path

    def test_loads_sections(self, data_file):
        """Every section is parsed."""
        store = JsonFileStore(data_file)

        assert len(store.entries) == 3
        assert [s.id for s in store.strategies] == ["s1"]
        assert len(store.trades) == 2
        assert store.market_series[0].condition == "volatility"

    def test_entry_fields(self, data_file):
        """Moods are lower-cased and scores derived."""
        entry = JsonFileStore(data_file).entries[0]

        assert entry.emotional_state.moods() == ["calm", "satisfied"]
        assert entry.daily_pnl == Decimal("120.5")
        assert entry.process_metrics.overall_discipline == 3.9
        assert entry.process_metrics.process_score == 78

    @pytest.mark.asyncio
    async def test_gateway_interface(self, data_file):
        """Store serves journal entries by user and range."""
        store = JsonFileStore(data_file)

        entries = await store.get_entries_for_range("u1", date(2024, 3, 1), date(2024, 3, 31))

        assert [e.date for e in entries] == [date(2024, 3, 1), date(2024, 3, 2)]

    def test_repository_interface(self, data_file):
        """Store serves strategies and trades."""
        store = JsonFileStore(data_file)

        assert store.get_strategy("s1").title == "Breakout"
        assert [t.id for t in store.get_trades_for_strategy("s1")] == ["t1", "t2"]
        assert len(store.get_strategies()) == 1

    def test_empty_document(self, tmp_path):
        """All sections are optional."""
        path = tmp_path / "empty.json"
        path.write_text("{}")

        store = JsonFileStore(path)

        assert store.entries == []
        assert store.get_strategies() == []

    def test_load_market_series(self, data_file):
        """Market series can be loaded on their own."""
        series = load_market_series(data_file)

        assert series[0].value_on(date(2024, 3, 1)) == 1.2
