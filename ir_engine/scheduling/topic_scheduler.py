"""
Fixed-interval scheduler for topics (whole notes read incrementally).

Topics are not memorised, they are revisited. Intervals depend only on
the grade; stability and difficulty are carried through untouched.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

from loguru import logger

from ..models import MemoryState, Rating, Status, as_utc
from .base import Scheduler, to_rating

TOPIC_INTERVALS = {
    Rating.AGAIN: timedelta(minutes=10),
    Rating.HARD: timedelta(days=1),
    Rating.GOOD: timedelta(days=3),
    Rating.EASY: timedelta(days=7),
}


class TopicScheduler(Scheduler):
    """Again: 10 min, Hard: 1 day, Good: 3 days, Easy: 7 days."""

    def grade(self, state: MemoryState, rating: int | Rating, now: datetime) -> MemoryState:
        rating = to_rating(rating)
        now = as_utc(now)
        due = now + TOPIC_INTERVALS[rating]

        if rating is Rating.AGAIN:
            new_state = replace(
                state,
                status=Status.LEARNING,
                due=due,
                lapses=state.lapses + 1,
                last_review=now,
            )
        else:
            new_state = replace(
                state,
                status=Status.REVIEW,
                due=due,
                reps=state.reps + 1,
                last_review=now,
            )

        logger.debug(f"Topic graded {rating.name}: due={due.isoformat()}")
        return new_state
