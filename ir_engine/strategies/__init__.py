"""
Ranking strategies for the session engine.

- JD1Strategy: priority/urgency scoring with link affinity (default)
- AnkiStrategy: learning > due > new bucket ordering
"""

from __future__ import annotations

from loguru import logger

from ..models import StrategyId
from .anki import AnkiStrategy
from .base import RankingStrategy, StrategyContext
from .jd1 import JD1Strategy

_STRATEGIES: dict[StrategyId, type[RankingStrategy]] = {
    StrategyId.JD1: JD1Strategy,
    StrategyId.ANKI: AnkiStrategy,
}


def get_strategy(strategy_id: StrategyId | str) -> RankingStrategy:
    """Select a strategy by id, falling back to JD1 for unknown ids."""
    try:
        key = StrategyId(strategy_id)
    except ValueError:
        logger.warning(f"Unknown strategy '{strategy_id}', falling back to JD1")
        key = StrategyId.JD1
    return _STRATEGIES[key]()


__all__ = [
    "RankingStrategy",
    "StrategyContext",
    "JD1Strategy",
    "AnkiStrategy",
    "get_strategy",
]
