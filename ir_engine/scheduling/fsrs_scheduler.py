"""
FSRS Spaced Repetition Scheduler.

Wraps the official py-fsrs implementation of the Free Spaced Repetition
Scheduler. The library models each item with:
- Stability (S): days until recall probability decays to 90%
- Difficulty (D): inherent difficulty of the item (1-10)
- State: Learning, Review or Relearning, with short-term learning steps

Fuzzing is disabled so identical inputs always produce identical schedules.

References:
- FSRS algorithm: https://github.com/open-spaced-repetition/fsrs4anki
- py-fsrs: https://github.com/open-spaced-repetition/py-fsrs
"""

from __future__ import annotations

from datetime import datetime

from fsrs import Card, Rating as FSRSRating, Scheduler as FSRS, State as FSRSState
from loguru import logger

from ..models import MemoryState, Rating, SchedulingParams, Status, as_utc
from .base import Scheduler, exam_adjusted, to_rating

_TO_FSRS_STATE = {
    Status.LEARNING: FSRSState.Learning,
    Status.REVIEW: FSRSState.Review,
    Status.RELEARNING: FSRSState.Relearning,
}
_FROM_FSRS_STATE = {value: key for key, value in _TO_FSRS_STATE.items()}


class FSRSScheduler(Scheduler):
    """
    FSRS scheduler for cloze, basic and image-occlusion items.

    reps counts successful grades and lapses counts "Again" grades; both
    are kept by this class since the library no longer tracks them.
    """

    def __init__(self, params: SchedulingParams | None = None):
        """
        Initialize FSRS scheduler.

        Args:
            params: Interval cap, desired retention and optional custom weights
        """
        self.params = params or SchedulingParams()

        options = {
            "desired_retention": self.params.request_retention,
            "maximum_interval": self.params.maximum_interval,
            "enable_fuzzing": False,
        }
        if self.params.weights:
            options["parameters"] = tuple(self.params.weights)

        self.fsrs = FSRS(**options)

    def grade(self, state: MemoryState, rating: int | Rating, now: datetime) -> MemoryState:
        rating = to_rating(rating)
        now = as_utc(now)

        card = self._to_card(state, now)
        card, _review_log = self.fsrs.review_card(card, FSRSRating(rating.value), now)

        again = rating is Rating.AGAIN
        new_state = MemoryState(
            status=_FROM_FSRS_STATE[card.state],
            due=as_utc(card.due),
            stability=float(card.stability),
            difficulty=float(card.difficulty),
            reps=state.reps if again else state.reps + 1,
            lapses=state.lapses + 1 if again else state.lapses,
            last_review=now,
            step=card.step or 0,
        )

        logger.debug(
            f"FSRS graded {rating.name}: {state.status.value} -> {new_state.status.value}, "
            f"S={new_state.stability:.2f}, D={new_state.difficulty:.2f}, due={new_state.due.isoformat()}"
        )
        return new_state

    def apply_exam_adjustment(
        self,
        state: MemoryState,
        exam_date: datetime,
        now: datetime,
    ) -> MemoryState:
        return exam_adjusted(state, exam_date, now)

    def _to_card(self, state: MemoryState, now: datetime) -> Card:
        """Build a library card from a memory state."""
        # No usable memory model yet: schedule as a first review
        if state.is_new or state.stability <= 0 or state.difficulty <= 0:
            return Card(card_id=0, state=FSRSState.Learning, step=0, due=now)

        fsrs_state = _TO_FSRS_STATE[state.status]
        return Card(
            card_id=0,
            state=fsrs_state,
            step=None if fsrs_state is FSRSState.Review else state.step,
            stability=state.stability,
            difficulty=state.difficulty,
            due=as_utc(state.due) if state.due else now,
            last_review=as_utc(state.last_review) if state.last_review else None,
        )
