"""Ranking strategy interface and the context handed to every ranking call."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from ..models import SessionConfig, SessionItem


@dataclass(frozen=True)
class StrategyContext:
    """Point-in-time inputs for ranking. Strategies read nothing else."""

    now: datetime
    last_note_id: str | None = None
    linked_note_ids: frozenset[str] = field(default_factory=frozenset)
    seed: int = 0


class RankingStrategy(ABC):
    """
    Orders candidate items.

    Implementations are stateless: they return a new list holding the same
    items in a total order, ties broken by item id so the output is stable
    for identical input.
    """

    @abstractmethod
    def rank(
        self,
        candidates: list[SessionItem],
        config: SessionConfig,
        context: StrategyContext,
    ) -> list[SessionItem]:
        ...
