"""
Anki-style bucket strategy.

Bucket order: learning/relearning > due reviews > new > not yet due.
Within a bucket, cloze items come before everything else, then item id.
"""

from __future__ import annotations

from datetime import datetime

from ..models import ItemType, SessionConfig, SessionItem, as_utc
from .base import RankingStrategy, StrategyContext

BUCKET_LEARNING = 3
BUCKET_DUE = 2
BUCKET_NEW = 1
BUCKET_NOT_DUE = 0


def bucket_for(si: SessionItem, now: datetime) -> int:
    state = si.state
    if state.is_learning:
        return BUCKET_LEARNING
    if state.due is not None and as_utc(state.due) <= now:
        return BUCKET_DUE
    if state.is_new:
        return BUCKET_NEW
    return BUCKET_NOT_DUE


class AnkiStrategy(RankingStrategy):
    """Learning, then due, then new; clozes first within a bucket."""

    def rank(
        self,
        candidates: list[SessionItem],
        config: SessionConfig,
        context: StrategyContext,
    ) -> list[SessionItem]:
        now = as_utc(context.now)
        return sorted(
            candidates,
            key=lambda si: (
                -bucket_for(si, now),
                0 if si.item.type is ItemType.CLOZE else 1,
                si.item.id,
            ),
        )
