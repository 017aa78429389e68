"""
Unit tests for the fixed-interval TopicScheduler.
"""

from datetime import datetime, timedelta, timezone

import pytest

from ir_engine.exceptions import InvalidRatingError
from ir_engine.models import MemoryState, Rating, Status
from ir_engine.scheduling import TopicScheduler


@pytest.fixture
def scheduler():
    return TopicScheduler()


class TestTopicIntervals:

    @pytest.mark.parametrize(
        "rating, interval",
        [
            (Rating.HARD, timedelta(days=1)),
            (Rating.GOOD, timedelta(days=3)),
            (Rating.EASY, timedelta(days=7)),
        ],
    )
    def test_passing_grades(self, scheduler, now, rating, interval):
        """Hard/Good/Easy move to review with fixed intervals."""
        state = scheduler.grade(MemoryState(), rating, now)

        assert state.status is Status.REVIEW
        assert state.due == now + interval
        assert state.reps == 1
        assert state.lapses == 0
        assert state.last_review == now

    def test_again_relearns_in_ten_minutes(self, scheduler, now):
        state = scheduler.grade(MemoryState(reps=4), Rating.AGAIN, now)

        assert state.status is Status.LEARNING
        assert state.due == now + timedelta(minutes=10)
        assert state.lapses == 1
        assert state.reps == 4  # Again is not a successful grade
        assert state.last_review == now

    def test_memory_model_untouched(self, scheduler, now):
        before = MemoryState(status=Status.REVIEW, stability=12.5, difficulty=4.2, reps=3)
        after = scheduler.grade(before, 3, now)

        assert after.stability == 12.5
        assert after.difficulty == 4.2
        assert before.reps == 3  # input not mutated

    def test_accepts_plain_int_and_naive_time(self, scheduler):
        naive = datetime(2025, 3, 1, 9, 0)
        state = scheduler.grade(MemoryState(), 4, naive)

        assert state.due == datetime(2025, 3, 8, 9, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("rating", [0, 5, -1, True])
    def test_invalid_rating_fails_fast(self, scheduler, now, rating):
        with pytest.raises(InvalidRatingError):
            scheduler.grade(MemoryState(), rating, now)


class TestIsDue:

    def test_no_due_date_is_due(self, scheduler, now):
        assert scheduler.is_due(MemoryState(), now) is True

    def test_due_boundary_inclusive(self, scheduler, now):
        assert scheduler.is_due(MemoryState(due=now), now) is True
        assert scheduler.is_due(MemoryState(due=now + timedelta(seconds=1)), now) is False

    def test_no_exam_adjustment(self, scheduler, now):
        state = MemoryState(due=now + timedelta(days=300))
        assert scheduler.apply_exam_adjustment(state, now + timedelta(days=7), now) is state
