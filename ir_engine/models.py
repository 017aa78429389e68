"""
Core data types for the session engine.

Items are immutable facts supplied by the item store. Memory states are
immutable values that only a Scheduler turns into new values. SessionItem
is the working pairing the SessionManager keeps for one session.

All timestamps are timezone-aware UTC datetimes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from loguru import logger

# =============================================================================
# Enumerations
# =============================================================================


class ItemType(str, Enum):
    """Kind of reviewable unit."""

    TOPIC = "topic"  # Whole note read incrementally
    CLOZE = "cloze"
    BASIC = "basic"
    IMAGE_OCCLUSION = "image_occlusion"


class Status(str, Enum):
    """Learning phase of a memory state."""

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class Rating(int, Enum):
    """Recall quality reported by the learner."""

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4


class StrategyId(str, Enum):
    """Available ranking strategies."""

    JD1 = "JD1"
    ANKI = "Anki"


class SchedulerId(str, Enum):
    """Available schedulers for non-topic items."""

    FSRS = "fsrs"
    SM2 = "sm2"


# =============================================================================
# Time helpers
# =============================================================================


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _coerce(enum_cls: type[Enum], value: Any, default: Enum) -> Enum:
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(f"Unknown {enum_cls.__name__} '{value}', using {default.value}")
        return default


def _parse_dt(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    return as_utc(datetime.fromisoformat(value))


# =============================================================================
# Items and states
# =============================================================================


@dataclass(frozen=True)
class Item:
    """A single reviewable unit (a topic note or a fragment of one)."""

    id: str  # Cloze ids are "<note_id>::c<k>"
    note_id: str
    note_path: str
    type: ItemType = ItemType.TOPIC
    priority: int = 50  # 0-100
    cloze_index: int | None = None
    created: datetime | None = None

    @property
    def is_topic(self) -> bool:
        return self.type is ItemType.TOPIC


@dataclass(frozen=True)
class MemoryState:
    """Spaced repetition record for one item."""

    status: Status = Status.NEW
    due: datetime | None = None
    stability: float = 0.0
    difficulty: float = 0.0
    reps: int = 0  # Successful grades
    lapses: int = 0  # "Again" grades
    last_review: datetime | None = None
    step: int = 0  # Learning/relearning step index (FSRS short-term steps)

    @property
    def is_new(self) -> bool:
        return self.status is Status.NEW

    @property
    def is_learning(self) -> bool:
        return self.status in (Status.LEARNING, Status.RELEARNING)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary (ISO timestamps)."""
        data = asdict(self)
        data["status"] = self.status.value
        data["due"] = self.due.isoformat() if self.due else None
        data["last_review"] = self.last_review.isoformat() if self.last_review else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MemoryState":
        """Create from dictionary produced by to_dict()."""
        return cls(
            status=Status(data.get("status", Status.NEW.value)),
            due=_parse_dt(data.get("due")),
            stability=float(data.get("stability", 0.0)),
            difficulty=float(data.get("difficulty", 0.0)),
            reps=int(data.get("reps", 0)),
            lapses=int(data.get("lapses", 0)),
            last_review=_parse_dt(data.get("last_review")),
            step=int(data.get("step", 0)),
        )


@dataclass
class SessionItem:
    """An item paired with its current memory state for one session."""

    item: Item
    state: MemoryState

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def note_id(self) -> str:
        return self.item.note_id


@dataclass(frozen=True)
class ReviewRecord:
    """A single review event handed to the store's review log."""

    ts: str  # ISO format
    item_id: str
    rating: int
    elapsed_ms: int | None = None
    state_before: str | None = None
    stability_before: float | None = None
    difficulty_before: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Session configuration and counters
# =============================================================================


@dataclass(frozen=True)
class SchedulingParams:
    """Parameters for the FSRS scheduler."""

    maximum_interval: int = 365
    request_retention: float = 0.9
    weights: tuple[float, ...] | None = None


@dataclass(frozen=True)
class SessionConfig:
    """Per-session parameters."""

    strategy: StrategyId = StrategyId.JD1
    scheduler_id: SchedulerId = SchedulerId.FSRS
    scheduling_params: SchedulingParams = field(default_factory=SchedulingParams)
    exam_date: datetime | None = None
    new_cards_limit: int | None = None
    clump_limit: int = 3
    cooldown: int = 5
    deterministic: bool = False
    seed: int | None = None

    def __post_init__(self):
        # Accept plain ids ("JD1", "fsrs"); unknown ids fall back to the defaults
        object.__setattr__(self, "strategy", _coerce(StrategyId, self.strategy, StrategyId.JD1))
        object.__setattr__(
            self, "scheduler_id", _coerce(SchedulerId, self.scheduler_id, SchedulerId.FSRS)
        )
        if self.exam_date is not None:
            object.__setattr__(self, "exam_date", as_utc(self.exam_date))

    @classmethod
    def from_settings(cls, settings) -> "SessionConfig":
        """Build a session config from application Settings."""
        params = settings.get_scheduling_params()
        weights = params["weights"]
        return cls(
            strategy=StrategyId(settings.session_strategy),
            scheduler_id=SchedulerId(settings.session_scheduler),
            scheduling_params=SchedulingParams(
                maximum_interval=params["maximum_interval"],
                request_retention=params["request_retention"],
                weights=tuple(weights) if weights else None,
            ),
            exam_date=as_utc(settings.session_exam_date) if settings.session_exam_date else None,
            new_cards_limit=settings.session_new_cards_limit,
            clump_limit=settings.session_clump_limit,
            cooldown=settings.session_cooldown,
            deterministic=settings.session_deterministic,
            seed=settings.session_seed,
        )


@dataclass
class SessionStats:
    """Grade counters for the current session."""

    reviewed: int = 0
    again: int = 0
    hard: int = 0
    good: int = 0
    easy: int = 0

    def record(self, rating: Rating) -> None:
        self.reviewed += 1
        name = rating.name.lower()
        setattr(self, name, getattr(self, name) + 1)

    @property
    def accuracy(self) -> float:
        """Share of reviews not graded Again."""
        if self.reviewed == 0:
            return 0.0
        return (self.reviewed - self.again) / self.reviewed


@dataclass(frozen=True)
class DeckCounts:
    """Queue counts over the loaded pool."""

    new: int = 0
    learning: int = 0
    due: int = 0

    @property
    def total(self) -> int:
        return self.new + self.learning + self.due
