"""
Scheduler interface shared by every scheduling algorithm.

A scheduler is a pure function of (state, rating, now). It never touches
storage; the SessionManager persists whatever it returns.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timedelta

from ..exceptions import InvalidRatingError
from ..models import MemoryState, Rating, as_utc

# Exam mode: fit this many reviews between now and the exam
EXAM_TARGET_REVIEWS = 6
EXAM_MIN_INTERVAL_DAYS = 1
EXAM_MAX_INTERVAL_DAYS = 60


def to_rating(rating: int | Rating) -> Rating:
    """Coerce an int to a Rating, failing fast on anything outside 1-4."""
    if isinstance(rating, bool):
        raise InvalidRatingError(rating)
    try:
        return Rating(rating)
    except ValueError:
        raise InvalidRatingError(rating) from None


def exam_adjusted(state: MemoryState, exam_date: datetime, now: datetime) -> MemoryState:
    """
    Pull the due date in so the item is seen ~6 times before the exam.

    The target interval is days_to_exam / 6, clamped to [1, 60] days.
    Only ever shortens: a due date already inside the target is kept.
    """
    now = as_utc(now)
    days_to_exam = max(0, math.floor((as_utc(exam_date) - now) / timedelta(days=1)))
    target_days = min(
        max(days_to_exam // EXAM_TARGET_REVIEWS, EXAM_MIN_INTERVAL_DAYS),
        EXAM_MAX_INTERVAL_DAYS,
    )

    scheduled_due = as_utc(state.due) if state.due else now
    adjusted_due = now + timedelta(days=target_days)

    if scheduled_due > adjusted_due:
        return replace(state, due=adjusted_due)
    return state


class Scheduler(ABC):
    """Turns a memory state and a grade into the next memory state."""

    @abstractmethod
    def grade(self, state: MemoryState, rating: int | Rating, now: datetime) -> MemoryState:
        """
        Grade an item.

        Args:
            state: Current memory state
            rating: 1 (Again) to 4 (Easy)
            now: Review time

        Returns:
            New MemoryState
        """

    def is_due(self, state: MemoryState, now: datetime) -> bool:
        """Items without a due date are always due."""
        if state.due is None:
            return True
        return as_utc(state.due) <= as_utc(now)

    def apply_exam_adjustment(
        self,
        state: MemoryState,
        exam_date: datetime,
        now: datetime,
    ) -> MemoryState:
        """Schedulers without exam support leave the state untouched."""
        return state
