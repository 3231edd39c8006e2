"""Bucket trades by time and strategy attributes."""

from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterable, List, Sequence

from journal_insights.strategy.models import ProfessionalStrategy, Trade

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass
class TradeBucket:
    """Win/loss tally of one bucket."""

    key: Hashable
    wins: int = 0
    total: int = 0
    pnl: float = 0.0

    def add(self, trade: Trade) -> None:
        """Count a trade into the bucket."""
        self.total += 1
        self.pnl += trade.pnl_value
        if trade.is_win:
            self.wins += 1

    @property
    def win_rate(self) -> float:
        """Win rate in percent."""
        if self.total == 0:
            return 0.0
        return self.wins / self.total * 100

    @property
    def avg_pnl(self) -> float:
        """Average P&L per trade."""
        if self.total == 0:
            return 0.0
        return self.pnl / self.total

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "key": self.key,
            "wins": self.wins,
            "trades": self.total,
            "win_rate": round(self.win_rate, 2),
            "avg_pnl": round(self.avg_pnl, 2),
        }


def bucket_trades(trades: Iterable[Trade], key: Callable[[Trade], Hashable]) -> Dict[Hashable, TradeBucket]:
    """Group trades into buckets by an orderable ``key``, sorted by key."""
    buckets: Dict[Hashable, TradeBucket] = {}
    for trade in trades:
        k = key(trade)
        if k not in buckets:
            buckets[k] = TradeBucket(key=k)
        buckets[k].add(trade)
    return dict(sorted(buckets.items(), key=lambda item: item[0]))


def by_hour(trades: Iterable[Trade]) -> Dict[int, TradeBucket]:
    """Buckets keyed by UTC entry hour."""
    return bucket_trades(trades, lambda t: t.entry_time.hour)


def by_weekday(trades: Iterable[Trade]) -> Dict[str, TradeBucket]:
    """Buckets keyed by weekday name, Monday first."""
    named = {}
    for day, bucket in bucket_trades(trades, lambda t: t.entry_time.weekday()).items():
        bucket.key = DAY_NAMES[day]
        named[bucket.key] = bucket
    return named


def by_strategy_attribute(
    strategies: Sequence[ProfessionalStrategy],
    trades: Sequence[Trade],
    keys: Callable[[ProfessionalStrategy], List[str]],
) -> Dict[str, TradeBucket]:
    """Buckets keyed by an attribute of each trade's owning strategy.

    A strategy may map to several keys; its trades count in each.
    """
    trades_by_strategy: Dict[str, List[Trade]] = {}
    for trade in trades:
        trades_by_strategy.setdefault(trade.strategy, []).append(trade)

    buckets: Dict[str, TradeBucket] = {}
    for strategy in strategies:
        strategy_trades = trades_by_strategy.get(strategy.id, [])
        if not strategy_trades:
            continue
        for k in keys(strategy):
            if not k:
                continue
            bucket = buckets.setdefault(k, TradeBucket(key=k))
            for trade in strategy_trades:
                bucket.add(trade)
    return buckets


def by_timeframe(strategies: Sequence[ProfessionalStrategy], trades: Sequence[Trade]) -> Dict[str, TradeBucket]:
    """Buckets keyed by the owning strategy's primary timeframe."""
    return by_strategy_attribute(strategies, trades, lambda s: [s.primary_timeframe])


def by_asset_class(strategies: Sequence[ProfessionalStrategy], trades: Sequence[Trade]) -> Dict[str, TradeBucket]:
    """Buckets keyed by each declared asset class of the owning strategy."""
    return by_strategy_attribute(strategies, trades, lambda s: list(dict.fromkeys(s.asset_classes)))
