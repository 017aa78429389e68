"""
JD1 priority strategy.

Scores every candidate and sorts highest first:

    score = priority * 100          (dominant term)
          + 50 if topic
          + 30 if linked from the previously reviewed note
          + urgency                 (0-25, forgetting curve)
          + recency                 (0-10, one point per week unseen)
          + created age bonus       (0-10, new items only, oldest first)
"""

from __future__ import annotations

import math
from datetime import timedelta

from ..models import ItemType, SessionConfig, SessionItem, as_utc
from .base import RankingStrategy, StrategyContext

PRIORITY_WEIGHT = 100
TOPIC_BONUS = 50
LINK_AFFINITY_BONUS = 30
URGENCY_WEIGHT = 25
NEW_ITEM_URGENCY = 25
MAX_RECENCY = 10
MAX_AGE_BONUS = 10
DEFAULT_PRIORITY = 50

ONE_DAY = timedelta(days=1)


class JD1Strategy(RankingStrategy):

    def rank(
        self,
        candidates: list[SessionItem],
        config: SessionConfig,
        context: StrategyContext,
    ) -> list[SessionItem]:
        scored = [(self.score(si, context), si) for si in candidates]
        scored.sort(key=lambda pair: (-pair[0], pair[1].item.id))
        return [si for _, si in scored]

    def score(self, si: SessionItem, context: StrategyContext) -> float:
        """Scalar ranking score for one candidate."""
        item, state = si.item, si.state
        now = as_utc(context.now)

        priority = item.priority if item.priority is not None else DEFAULT_PRIORITY
        score = float(priority * PRIORITY_WEIGHT)

        if item.type is ItemType.TOPIC:
            score += TOPIC_BONUS

        if item.note_id in context.linked_note_ids:
            score += LINK_AFFINITY_BONUS

        if state.last_review is not None:
            days = max(0.0, (now - as_utc(state.last_review)) / ONE_DAY)
            # R = exp(-days / max(1, S))
            retrievability = math.exp(-days / max(1.0, state.stability))
            score += (1 - retrievability) * URGENCY_WEIGHT
            score += min(MAX_RECENCY, math.floor(days / 7))
        else:
            score += NEW_ITEM_URGENCY

        # FIFO among new items
        if state.is_new and item.created is not None:
            age_days = (now - as_utc(item.created)) / ONE_DAY
            score += min(MAX_AGE_BONUS, age_days)

        return score
