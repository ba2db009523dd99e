"""Ranking and aggregate statistics over persisted quiz results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from quicktestly.constants.quiz_constants import GRADE_THRESHOLDS, LOWEST_GRADE, PASS_MARK
from quicktestly.core.models import Quiz, QuizResult
from quicktestly.core.services.scorer import percentage


@dataclass(slots=True, frozen=True)
class QuizStatistics:
    """Per-quiz figures shown on the teacher results view."""

    total_attempts: int
    average_score: int
    unique_students: int
    pass_rate: int


@dataclass(slots=True, frozen=True)
class TeacherDashboardStats:
    """Totals across every quiz owned by one teacher."""

    total_quizzes: int
    total_students: int
    total_attempts: int
    average_score: int


def leaderboard_sort_key(result: QuizResult) -> tuple:
    """Higher score first, then less time spent, then earlier completion."""
    return (-result.score, result.time_spent_seconds, result.completed_at)


def rank_results(results: Iterable[QuizResult], limit: int | None = None) -> list[QuizResult]:
    """Return results in leaderboard order, truncated to ``limit`` entries."""
    ranked = sorted(results, key=leaderboard_sort_key)
    if limit is not None:
        ranked = ranked[: max(0, limit)]
    return ranked


def find_user_rank(leaderboard: Sequence[QuizResult], user_id: str) -> int | None:
    """1-based position of the user's best entry, or None if absent."""
    for position, result in enumerate(leaderboard, start=1):
        if result.user_id == user_id:
            return position
    return None


def grade_for_score(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return LOWEST_GRADE


def summarize_results(results: Sequence[QuizResult], pass_mark: int = PASS_MARK) -> QuizStatistics:
    if not results:
        return QuizStatistics(total_attempts=0, average_score=0, unique_students=0, pass_rate=0)

    total_score = sum(result.score for result in results)
    passed = sum(1 for result in results if result.score >= pass_mark)
    return QuizStatistics(
        total_attempts=len(results),
        average_score=percentage(total_score, 100 * len(results)),
        unique_students=len({result.user_id for result in results}),
        pass_rate=percentage(passed, len(results)),
    )


def summarize_teacher_quizzes(
    quizzes: Sequence[Quiz],
    results: Iterable[QuizResult],
) -> TeacherDashboardStats:
    """Aggregate the results that belong to the given quizzes."""
    quiz_ids = {quiz.id for quiz in quizzes}
    owned = [result for result in results if result.quiz_id in quiz_ids]
    average = percentage(sum(r.score for r in owned), 100 * len(owned)) if owned else 0
    return TeacherDashboardStats(
        total_quizzes=len(quizzes),
        total_students=len({result.user_id for result in owned}),
        total_attempts=len(owned),
        average_score=average,
    )
