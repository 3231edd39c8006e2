"""
Trade and strategy records consumed by the strategy insight services.

Strategies and trades belong to the strategy-management subsystem; this
package only reads them.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional


class TradeSide(Enum):
    """Trade direction."""
    LONG = "long"
    SHORT = "short"


class TradeStatus(Enum):
    """Trade status."""
    OPEN = "open"
    CLOSED = "closed"


class TradingSession(Enum):
    """Market session a trade was opened in."""
    ASIAN = "asian"
    EUROPEAN = "european"
    US = "us"
    OVERLAP = "overlap"


class PerformanceTrend(Enum):
    """Direction of a strategy's recent monthly returns."""
    IMPROVING = "Improving"
    DECLINING = "Declining"
    STABLE = "Stable"
    INSUFFICIENT_DATA = "Insufficient Data"


def json_float(value: Any) -> Any:
    """Non-finite floats become None; JSON has no Infinity or NaN."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _profit_factor(value) -> float:
    # Serialised as null when gross loss is zero.
    return float("inf") if value is None else float(value)


def _parse_time(value) -> datetime:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class Trade:
    """Executed trade record."""
    id: str
    symbol: str
    side: TradeSide
    entry_price: Decimal
    entry_time: datetime
    pnl: Decimal = Decimal("0")
    exit_price: Optional[Decimal] = None
    exit_time: Optional[datetime] = None
    strategy: str = ""
    session: Optional[TradingSession] = None
    timeframe: str = ""
    market_conditions: str = ""
    status: TradeStatus = TradeStatus.CLOSED

    def __post_init__(self):
        self.entry_time = _parse_time(self.entry_time)
        if self.exit_time is not None:
            self.exit_time = _parse_time(self.exit_time)

    @property
    def pnl_value(self) -> float:
        """P&L as float for statistics."""
        return float(self.pnl or 0)

    @property
    def is_win(self) -> bool:
        """Positive P&L."""
        return self.pnl_value > 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "side": self.side.value,
            "entry_price": str(self.entry_price),
            "exit_price": str(self.exit_price) if self.exit_price is not None else None,
            "entry_time": self.entry_time.isoformat(),
            "exit_time": self.exit_time.isoformat() if self.exit_time else None,
            "pnl": str(self.pnl),
            "strategy": self.strategy,
            "session": self.session.value if self.session else None,
            "timeframe": self.timeframe,
            "market_conditions": self.market_conditions,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Trade":
        """Create from dictionary."""
        exit_price = data.get("exit_price")
        session = data.get("session")
        return cls(
            id=str(data["id"]),
            symbol=str(data.get("symbol", "")),
            side=TradeSide(data.get("side", "long")),
            entry_price=Decimal(str(data.get("entry_price", 0))),
            exit_price=Decimal(str(exit_price)) if exit_price is not None else None,
            entry_time=_parse_time(data["entry_time"]),
            exit_time=_parse_time(data["exit_time"]) if data.get("exit_time") else None,
            pnl=Decimal(str(data.get("pnl", 0))),
            strategy=str(data.get("strategy", "")),
            session=TradingSession(session) if session else None,
            timeframe=str(data.get("timeframe", "")),
            market_conditions=str(data.get("market_conditions", "")),
            status=TradeStatus(data.get("status", "closed")),
        )


@dataclass
class MonthlyReturn:
    """Aggregated result of one calendar month."""
    month: str  # YYYY-MM
    pnl: float
    trades: int
    win_rate: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "month": self.month,
            "pnl": self.pnl,
            "trades": self.trades,
            "win_rate": self.win_rate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MonthlyReturn":
        """Create from dictionary."""
        return cls(
            month=str(data["month"]),
            pnl=float(data.get("pnl", 0)),
            trades=int(data.get("trades", 0)),
            win_rate=float(data.get("win_rate", 0)),
        )


@dataclass
class StrategyPerformance:
    """Aggregate statistics of a strategy (percentages on a 0-100 scale)."""
    total_trades: int = 0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    max_drawdown: float = 0.0
    risk_reward_ratio: float = 0.0
    total_pnl: float = 0.0
    performance_trend: PerformanceTrend = PerformanceTrend.INSUFFICIENT_DATA
    monthly_returns: List[MonthlyReturn] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total_trades": self.total_trades,
            "win_rate": self.win_rate,
            "profit_factor": json_float(self.profit_factor),  # None when there are no losses
            "expectancy": self.expectancy,
            "max_drawdown": self.max_drawdown,
            "risk_reward_ratio": self.risk_reward_ratio,
            "total_pnl": self.total_pnl,
            "performance_trend": self.performance_trend.value,
            "monthly_returns": [m.to_dict() for m in self.monthly_returns],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StrategyPerformance":
        """Create from dictionary."""
        return cls(
            total_trades=int(data.get("total_trades", 0)),
            win_rate=float(data.get("win_rate", 0)),
            profit_factor=_profit_factor(data.get("profit_factor", 0)),
            expectancy=float(data.get("expectancy", 0)),
            max_drawdown=float(data.get("max_drawdown", 0)),
            risk_reward_ratio=float(data.get("risk_reward_ratio", 0)),
            total_pnl=float(data.get("total_pnl", 0)),
            performance_trend=PerformanceTrend(data.get("performance_trend", "Insufficient Data")),
            monthly_returns=[MonthlyReturn.from_dict(m) for m in data.get("monthly_returns", [])],
        )


@dataclass
class RiskManagement:
    """Risk rules of a strategy."""
    max_risk_per_trade: float = 2.0  # percent of account
    stop_loss_rule: str = ""
    take_profit_rule: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "max_risk_per_trade": self.max_risk_per_trade,
            "stop_loss_rule": self.stop_loss_rule,
            "take_profit_rule": self.take_profit_rule,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RiskManagement":
        """Create from dictionary."""
        return cls(
            max_risk_per_trade=float(data.get("max_risk_per_trade", 2.0)),
            stop_loss_rule=str(data.get("stop_loss_rule", "")),
            take_profit_rule=str(data.get("take_profit_rule", "")),
        )


@dataclass
class ProfessionalStrategy:
    """A documented trading strategy with its performance record."""
    id: str
    title: str
    primary_timeframe: str = ""
    asset_classes: List[str] = field(default_factory=list)
    performance: StrategyPerformance = field(default_factory=StrategyPerformance)
    risk_management: RiskManagement = field(default_factory=RiskManagement)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "primary_timeframe": self.primary_timeframe,
            "asset_classes": list(self.asset_classes),
            "performance": self.performance.to_dict(),
            "risk_management": self.risk_management.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProfessionalStrategy":
        """Create from dictionary; performance may be absent."""
        performance = data.get("performance")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", data["id"])),
            primary_timeframe=str(data.get("primary_timeframe", "")),
            asset_classes=list(data.get("asset_classes", [])),
            performance=StrategyPerformance.from_dict(performance) if performance else StrategyPerformance(),
            risk_management=RiskManagement.from_dict(data.get("risk_management") or {}),
        )
