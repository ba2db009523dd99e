"""Exception taxonomy shared by the stores, the attempt controller and the API."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quicktestly.core.models import QuizResult


class QuizError(Exception):
    """Base class for every error raised by QuickTestly."""


class NotFoundError(QuizError):
    """Raised when a quiz or result does not exist."""


class TransientError(QuizError):
    """Raised when the backing store is unreachable or fails mid-operation."""


class ValidationError(QuizError):
    """Raised for malformed quizzes or attempt state (e.g. zero questions)."""


class PersistenceError(QuizError):
    """Raised when a scored result could not be saved.

    The computed result is kept on the exception so persistence can be retried
    without scoring the attempt again.
    """

    def __init__(self, message: str, result: QuizResult) -> None:
        super().__init__(message)
        self.result = result


class PermissionDeniedError(QuizError):
    """Raised when a student tries a teacher-only operation."""
