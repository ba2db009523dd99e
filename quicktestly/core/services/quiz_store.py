"""Store interfaces for quizzes and results, plus an in-process implementation."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import replace
from datetime import datetime, timezone
import logging
from threading import Lock
from typing import Protocol
from uuid import uuid4

from quicktestly.core.errors import NotFoundError, ValidationError
from quicktestly.core.models import Quiz, QuizResult
from quicktestly.core.services.leaderboard import rank_results
from quicktestly.core.services.quiz_draft import validate_quiz

logger = logging.getLogger(__name__)

EDITABLE_QUIZ_FIELDS = frozenset(
    {"name", "description", "time_limit_minutes", "is_public", "questions"}
)


class QuizStore(Protocol):
    """Quiz persistence. Implementations raise NotFoundError / TransientError."""

    def get_quiz(self, quiz_id: str) -> Quiz: ...

    def list_public_quizzes(self) -> list[Quiz]: ...

    def list_quizzes_by_teacher(self, teacher_id: str) -> list[Quiz]: ...

    def create_quiz(self, quiz: Quiz) -> str: ...

    def update_quiz(self, quiz_id: str, **changes: object) -> Quiz: ...

    def delete_quiz(self, quiz_id: str) -> None: ...


class ResultStore(Protocol):
    """Result persistence. Results are append-only."""

    def submit_result(self, result: QuizResult) -> str: ...

    def list_results_for_quiz(self, quiz_id: str) -> list[QuizResult]: ...

    def list_results_for_user(self, user_id: str) -> list[QuizResult]: ...

    def leaderboard_for_quiz(self, quiz_id: str, limit: int) -> list[QuizResult]: ...

    def global_leaderboard(self, limit: int) -> list[QuizResult]: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def apply_quiz_changes(quiz: Quiz, changes: dict[str, object]) -> Quiz:
    """Validate an update against the editable fields and return the new quiz."""
    unknown = set(changes) - EDITABLE_QUIZ_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update quiz fields: {', '.join(sorted(unknown))}")
    updated = validate_quiz(replace(quiz, **changes))
    updated.updated_at = utc_now()
    return updated


def validate_result(result: QuizResult) -> None:
    if result.total_questions <= 0:
        raise ValidationError("A result must cover at least one question.")
    if not 0 <= result.correct_answers <= result.total_questions:
        raise ValidationError("Correct answers must be between 0 and the question count.")
    if not 0 <= result.score <= 100:
        raise ValidationError("Score must be between 0 and 100.")
    if result.time_spent_seconds < 0:
        raise ValidationError("Time spent cannot be negative.")


class InMemoryQuizStore:
    """Thread-safe quiz store kept in process memory."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, Quiz] = {}

    def get_quiz(self, quiz_id: str) -> Quiz:
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
            if quiz is None:
                raise NotFoundError(f"Quiz {quiz_id!r} not found.")
            return deepcopy(quiz)

    def list_public_quizzes(self) -> list[Quiz]:
        with self._lock:
            return [deepcopy(q) for q in reversed(self._quizzes.values()) if q.is_public]

    def list_quizzes_by_teacher(self, teacher_id: str) -> list[Quiz]:
        with self._lock:
            return [
                deepcopy(q)
                for q in reversed(self._quizzes.values())
                if q.created_by_teacher_id == teacher_id
            ]

    def create_quiz(self, quiz: Quiz) -> str:
        prepared = validate_quiz(deepcopy(quiz))
        now = utc_now()
        prepared.id = uuid4().hex
        prepared.created_at = now
        prepared.updated_at = now
        with self._lock:
            self._quizzes[prepared.id] = prepared
        logger.info("Created quiz %s (%s questions)", prepared.id, prepared.question_count)
        return prepared.id

    def update_quiz(self, quiz_id: str, **changes: object) -> Quiz:
        with self._lock:
            current = self._quizzes.get(quiz_id)
            if current is None:
                raise NotFoundError(f"Quiz {quiz_id!r} not found.")
            updated = apply_quiz_changes(deepcopy(current), changes)
            self._quizzes[quiz_id] = updated
            return deepcopy(updated)

    def delete_quiz(self, quiz_id: str) -> None:
        with self._lock:
            if self._quizzes.pop(quiz_id, None) is None:
                raise NotFoundError(f"Quiz {quiz_id!r} not found.")
        logger.info("Deleted quiz %s", quiz_id)


class InMemoryResultStore:
    """Thread-safe, append-only result store kept in process memory."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._results: list[QuizResult] = []

    def submit_result(self, result: QuizResult) -> str:
        validate_result(result)
        stored = deepcopy(result)
        stored.id = uuid4().hex
        with self._lock:
            self._results.append(stored)
        return stored.id

    def list_results_for_quiz(self, quiz_id: str) -> list[QuizResult]:
        return self._newest_first(lambda r: r.quiz_id == quiz_id)

    def list_results_for_user(self, user_id: str) -> list[QuizResult]:
        return self._newest_first(lambda r: r.user_id == user_id)

    def leaderboard_for_quiz(self, quiz_id: str, limit: int) -> list[QuizResult]:
        with self._lock:
            matching = [deepcopy(r) for r in self._results if r.quiz_id == quiz_id]
        return rank_results(matching, limit)

    def global_leaderboard(self, limit: int) -> list[QuizResult]:
        with self._lock:
            snapshot = deepcopy(self._results)
        return rank_results(snapshot, limit)

    def _newest_first(self, predicate) -> list[QuizResult]:
        with self._lock:
            matching = [deepcopy(r) for r in reversed(self._results) if predicate(r)]
        return sorted(matching, key=lambda r: r.completed_at, reverse=True)
