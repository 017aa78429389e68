"""Exceptions raised by the session engine."""


class EngineError(Exception):
    """Base class for session engine errors."""
    pass


class SchedulerNotImplementedError(EngineError, NotImplementedError):
    """Raised when grading with a scheduler that is selectable but not implemented."""
    pass


class InvalidRatingError(EngineError, ValueError):
    """Raised when a rating is outside Again/Hard/Good/Easy (1-4)."""

    def __init__(self, rating):
        self.rating = rating
        super().__init__(f"Invalid rating {rating!r}: expected 1 (Again) to 4 (Easy)")
