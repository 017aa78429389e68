"""
SM-2 scheduler placeholder.

SM-2 can be selected in settings so existing configs keep loading, but
grading with it raises instead of silently producing a schedule.
"""

from __future__ import annotations

from datetime import datetime

from ..exceptions import SchedulerNotImplementedError
from ..models import MemoryState, Rating, SchedulingParams
from .base import Scheduler


class SM2Scheduler(Scheduler):
    """Selectable but not implemented: grade() always raises."""

    def __init__(self, params: SchedulingParams | None = None):
        self.params = params or SchedulingParams()

    def grade(self, state: MemoryState, rating: int | Rating, now: datetime) -> MemoryState:
        raise SchedulerNotImplementedError("SM-2 scheduler is not implemented yet")
