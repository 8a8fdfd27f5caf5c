"""Error taxonomy for the quiz domain.

Every failure a use case can report is one of these exceptions. The web layer
maps ``kind`` to an HTTP status; callers never need to parse messages.
"""
from __future__ import annotations


class QuizError(Exception):
    kind = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgumentError(QuizError):
    kind = "invalid_argument"


class NotFoundError(QuizError):
    kind = "not_found"


class ForbiddenError(QuizError):
    kind = "forbidden"


class ConflictError(QuizError):
    kind = "conflict"


class DataCorruptionError(QuizError):
    """Stored data violates an invariant. Signals a bug, not a user mistake."""

    kind = "internal"
