"""
ir-engine: spaced-repetition session engine for incremental reading.

Components:
- Schedulers: FSRS memory model, fixed-interval topics, SM-2 placeholder
- Ranking strategies: JD1 priority scoring, Anki buckets
- SessionManager: volatile queue, cooldown, clump limit, interleaving
- In-memory collaborators for tests and the developer CLI
"""

from .exceptions import EngineError, InvalidRatingError, SchedulerNotImplementedError
from .memory import InMemoryNotePlatform, InMemoryStore
from .models import (
    DeckCounts,
    Item,
    ItemType,
    MemoryState,
    Rating,
    ReviewRecord,
    SchedulerId,
    SchedulingParams,
    SessionConfig,
    SessionItem,
    SessionStats,
    Status,
    StrategyId,
)
from .ports import ItemStore, NotePlatform
from .scheduling import FSRSScheduler, Scheduler, SM2Scheduler, TopicScheduler, get_scheduler
from .session import SessionManager
from .strategies import AnkiStrategy, JD1Strategy, RankingStrategy, StrategyContext, get_strategy

__all__ = [
    # Data model
    "Item",
    "ItemType",
    "MemoryState",
    "Status",
    "Rating",
    "SessionItem",
    "SessionConfig",
    "SchedulingParams",
    "SessionStats",
    "DeckCounts",
    "ReviewRecord",
    "StrategyId",
    "SchedulerId",
    # Collaborators
    "ItemStore",
    "NotePlatform",
    "InMemoryStore",
    "InMemoryNotePlatform",
    # Scheduling
    "Scheduler",
    "FSRSScheduler",
    "TopicScheduler",
    "SM2Scheduler",
    "get_scheduler",
    # Ranking
    "RankingStrategy",
    "StrategyContext",
    "JD1Strategy",
    "AnkiStrategy",
    "get_strategy",
    # Session
    "SessionManager",
    # Errors
    "EngineError",
    "SchedulerNotImplementedError",
    "InvalidRatingError",
]
