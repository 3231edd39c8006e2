"""
Journal entry data model consumed by the analytics engine.

Entries are owned by the journal subsystem; the analyzers only read them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional


class EmotionalMood(str, Enum):
    """Mood labels a trader can record before or after the session."""
    EXCITED = "excited"
    CALM = "calm"
    NERVOUS = "nervous"
    FRUSTRATED = "frustrated"
    CONFIDENT = "confident"
    SATISFIED = "satisfied"
    DISAPPOINTED = "disappointed"
    NEUTRAL = "neutral"
    ANXIOUS = "anxious"
    OPTIMISTIC = "optimistic"


# Weights of the five discipline ratings in the composite score
PROCESS_SCORE_WEIGHTS = {
    "plan_adherence": 0.25,
    "risk_management": 0.25,
    "entry_timing": 0.15,
    "exit_timing": 0.15,
    "emotional_discipline": 0.20,
}


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _mood_value(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, EmotionalMood):
        return value.value
    return str(value).lower()


@dataclass
class PreMarketEmotions:
    """Pre-market check-in."""
    mood: Optional[str] = None
    confidence: int = 3
    anxiety: int = 3
    focus: int = 3
    energy: int = 3
    preparedness: int = 3

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "mood": self.mood,
            "confidence": self.confidence,
            "anxiety": self.anxiety,
            "focus": self.focus,
            "energy": self.energy,
            "preparedness": self.preparedness,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PreMarketEmotions":
        """Create from dictionary."""
        return cls(
            mood=_mood_value(data.get("mood")),
            confidence=int(data.get("confidence", 3)),
            anxiety=int(data.get("anxiety", 3)),
            focus=int(data.get("focus", 3)),
            energy=int(data.get("energy", 3)),
            preparedness=int(data.get("preparedness", 3)),
        )


@dataclass
class PostMarketEmotions:
    """Post-market reflection."""
    overall_mood: Optional[str] = None
    satisfaction: int = 3
    learning_value: int = 3
    frustration_level: int = 3
    accomplishment: int = 3

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "overall_mood": self.overall_mood,
            "satisfaction": self.satisfaction,
            "learning_value": self.learning_value,
            "frustration_level": self.frustration_level,
            "accomplishment": self.accomplishment,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PostMarketEmotions":
        """Create from dictionary."""
        return cls(
            overall_mood=_mood_value(data.get("overall_mood")),
            satisfaction=int(data.get("satisfaction", 3)),
            learning_value=int(data.get("learning_value", 3)),
            frustration_level=int(data.get("frustration_level", 3)),
            accomplishment=int(data.get("accomplishment", 3)),
        )


@dataclass
class EmotionalState:
    """Emotional tracking for one journal day."""
    pre_market: Optional[PreMarketEmotions] = None
    post_market: Optional[PostMarketEmotions] = None
    stress_level: int = 3
    confidence_level: int = 3

    def moods(self) -> List[str]:
        """Mood labels recorded for the day, pre-market first."""
        labels = []
        if self.pre_market and self.pre_market.mood:
            labels.append(self.pre_market.mood)
        if self.post_market and self.post_market.overall_mood:
            labels.append(self.post_market.overall_mood)
        return labels

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "pre_market": self.pre_market.to_dict() if self.pre_market else None,
            "post_market": self.post_market.to_dict() if self.post_market else None,
            "stress_level": self.stress_level,
            "confidence_level": self.confidence_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EmotionalState":
        """Create from dictionary."""
        pre = data.get("pre_market")
        post = data.get("post_market")
        return cls(
            pre_market=PreMarketEmotions.from_dict(pre) if pre else None,
            post_market=PostMarketEmotions.from_dict(post) if post else None,
            stress_level=int(data.get("stress_level", 3)),
            confidence_level=int(data.get("confidence_level", 3)),
        )


@dataclass
class ProcessMetrics:
    """Discipline ratings (1-5) and the derived 0-100 process score."""
    plan_adherence: float
    risk_management: float
    entry_timing: float
    exit_timing: float
    emotional_discipline: float
    overall_discipline: float
    process_score: float

    @classmethod
    def from_ratings(
        cls,
        plan_adherence: float = 3,
        risk_management: float = 3,
        entry_timing: float = 3,
        exit_timing: float = 3,
        emotional_discipline: float = 3,
    ) -> "ProcessMetrics":
        """Derive overall discipline and process score from the five ratings."""
        ratings = {
            "plan_adherence": plan_adherence,
            "risk_management": risk_management,
            "entry_timing": entry_timing,
            "exit_timing": exit_timing,
            "emotional_discipline": emotional_discipline,
        }
        overall = sum(ratings[k] * w for k, w in PROCESS_SCORE_WEIGHTS.items())
        return cls(
            **ratings,
            overall_discipline=round(overall, 1),
            process_score=round(overall / 5 * 100),
        )

    def get(self, metric: str) -> float:
        """Value of a metric by field name."""
        return getattr(self, metric)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "plan_adherence": self.plan_adherence,
            "risk_management": self.risk_management,
            "entry_timing": self.entry_timing,
            "exit_timing": self.exit_timing,
            "emotional_discipline": self.emotional_discipline,
            "overall_discipline": self.overall_discipline,
            "process_score": self.process_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProcessMetrics":
        """Create from dictionary; derived scores are computed when absent."""
        if "process_score" not in data or "overall_discipline" not in data:
            return cls.from_ratings(**{
                k: float(data.get(k, 3)) for k in PROCESS_SCORE_WEIGHTS
            })
        return cls(
            plan_adherence=float(data.get("plan_adherence", 3)),
            risk_management=float(data.get("risk_management", 3)),
            entry_timing=float(data.get("entry_timing", 3)),
            exit_timing=float(data.get("exit_timing", 3)),
            emotional_discipline=float(data.get("emotional_discipline", 3)),
            overall_discipline=float(data["overall_discipline"]),
            process_score=float(data["process_score"]),
        )


@dataclass
class JournalEntry:
    """One day's journal entry."""
    date: date
    is_complete: bool = False
    emotional_state: Optional[EmotionalState] = None
    process_metrics: Optional[ProcessMetrics] = None
    daily_pnl: Decimal = Decimal("0")
    user_id: str = ""
    id: str = ""
    trade_count: int = 0
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "is_complete": self.is_complete,
            "emotional_state": self.emotional_state.to_dict() if self.emotional_state else None,
            "process_metrics": self.process_metrics.to_dict() if self.process_metrics else None,
            "daily_pnl": str(self.daily_pnl),
            "trade_count": self.trade_count,
            "tags": self.tags,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JournalEntry":
        """Create from dictionary (ISO date strings, numeric P&L)."""
        emotional = data.get("emotional_state")
        metrics = data.get("process_metrics")
        return cls(
            id=str(data.get("id", "")),
            user_id=str(data.get("user_id", "")),
            date=_parse_date(data["date"]),
            is_complete=bool(data.get("is_complete", False)),
            emotional_state=EmotionalState.from_dict(emotional) if emotional else None,
            process_metrics=ProcessMetrics.from_dict(metrics) if metrics else None,
            daily_pnl=Decimal(str(data.get("daily_pnl", 0))),
            trade_count=int(data.get("trade_count", 0)),
            tags=list(data.get("tags", [])),
        )


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}")

    @classmethod
    def ending(cls, end: date, days: int) -> "DateRange":
        """Range covering ``days`` days before ``end`` through ``end``."""
        return cls(start=end - timedelta(days=days), end=end)

    def contains(self, day: date) -> bool:
        """Whether the day falls inside the range."""
        return self.start <= day <= self.end

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}
