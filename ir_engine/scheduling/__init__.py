"""
Schedulers for the session engine.

- FSRSScheduler: memory-model scheduling for fragments (default)
- TopicScheduler: fixed intervals for topics
- SM2Scheduler: selectable placeholder, grading raises
"""

from __future__ import annotations

from loguru import logger

from ..models import SchedulerId, SchedulingParams
from .base import Scheduler, exam_adjusted, to_rating
from .fsrs_scheduler import FSRSScheduler
from .sm2_scheduler import SM2Scheduler
from .topic_scheduler import TopicScheduler

_SCHEDULERS: dict[SchedulerId, type[Scheduler]] = {
    SchedulerId.FSRS: FSRSScheduler,
    SchedulerId.SM2: SM2Scheduler,
}


def get_scheduler(
    scheduler_id: SchedulerId | str,
    params: SchedulingParams | None = None,
) -> Scheduler:
    """Select a scheduler by id, falling back to FSRS for unknown ids."""
    try:
        key = SchedulerId(scheduler_id)
    except ValueError:
        logger.warning(f"Unknown scheduler '{scheduler_id}', falling back to fsrs")
        key = SchedulerId.FSRS
    return _SCHEDULERS[key](params)


__all__ = [
    "Scheduler",
    "FSRSScheduler",
    "SM2Scheduler",
    "TopicScheduler",
    "get_scheduler",
    "exam_adjusted",
    "to_rating",
]
