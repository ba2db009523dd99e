"""Pure scoring of a finished attempt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import math
from typing import Sequence

from quicktestly.core.errors import ValidationError
from quicktestly.core.models import QuizQuestion
from quicktestly.core.services.answer_ledger import AnswerLedger


@dataclass(slots=True, frozen=True)
class ScoreSummary:
    """Figures derived from the ledger at submission time."""

    score: int
    correct_answers: int
    total_questions: int
    time_spent_seconds: int


def percentage(part: int, whole: int) -> int:
    """Integer percentage rounded half-up, computed without floating point."""
    if whole <= 0:
        raise ValidationError("Cannot compute a percentage of zero items.")
    return (200 * part + whole) // (2 * whole)


def elapsed_seconds(
    started_at: datetime,
    submitted_at: datetime,
    limit_seconds: int | None = None,
) -> int:
    """Whole seconds between two instants, clamped to ``[0, limit_seconds]``."""
    raw = (submitted_at - started_at).total_seconds()
    seconds = max(0, math.floor(raw + 0.5))
    if limit_seconds is not None:
        seconds = min(seconds, limit_seconds)
    return seconds


def score_attempt(
    questions: Sequence[QuizQuestion],
    ledger: AnswerLedger,
    started_at: datetime,
    submitted_at: datetime,
    time_limit_seconds: int | None = None,
) -> ScoreSummary:
    """Count correct answers by value and derive the percentage score."""
    total = len(questions)
    if total == 0:
        raise ValidationError("A quiz without questions cannot be scored.")

    correct = sum(
        1 for question in questions if ledger.get(question.id) == question.correct_option_value
    )
    return ScoreSummary(
        score=percentage(correct, total),
        correct_answers=correct,
        total_questions=total,
        time_spent_seconds=elapsed_seconds(started_at, submitted_at, time_limit_seconds),
    )
