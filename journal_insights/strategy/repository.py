"""Interface of the strategy/trade source the strategy services read from."""

from typing import List, Protocol, Sequence, runtime_checkable

from journal_insights.strategy.models import ProfessionalStrategy, Trade


@runtime_checkable
class TradeRepository(Protocol):
    """Supplies strategies and their trades.

    ``get_strategy`` raises ``StrategyNotFoundError`` for unknown ids.
    """

    def get_strategy(self, strategy_id: str) -> ProfessionalStrategy:
        ...

    def get_strategies(self) -> List[ProfessionalStrategy]:
        ...

    def get_trades_for_strategy(self, strategy_id: str) -> Sequence[Trade]:
        ...


def trades_for_strategies(
    repository: TradeRepository,
    strategies: Sequence[ProfessionalStrategy],
) -> List[Trade]:
    """All trades of the given strategies, in strategy order."""
    trades: List[Trade] = []
    for strategy in strategies:
        trades.extend(repository.get_trades_for_strategy(strategy.id))
    return trades
