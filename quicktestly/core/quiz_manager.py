"""Business logic shared between the API server and the teacher console."""

from __future__ import annotations

from functools import partial
import logging
from threading import Lock
import time
from typing import Callable
from uuid import uuid4

from quicktestly.constants.quiz_constants import (
    DEFAULT_LEADERBOARD_LIMIT,
    FINISHED_ATTEMPT_RETENTION_SECONDS,
    TIMER_TICK_INTERVAL_SECONDS,
)
from quicktestly.core.errors import NotFoundError, PermissionDeniedError
from quicktestly.core.models import Quiz, QuizResult, UserIdentity
from quicktestly.core.services.leaderboard import (
    QuizStatistics,
    TeacherDashboardStats,
    summarize_results,
    summarize_teacher_quizzes,
)
from quicktestly.core.services.quiz_attempt import QuizAttempt
from quicktestly.core.services.quiz_store import QuizStore, ResultStore

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade over the quiz store, the result store and the live attempts."""

    def __init__(
        self,
        quiz_store: QuizStore,
        result_store: ResultStore,
        tick_interval_seconds: float | None = TIMER_TICK_INTERVAL_SECONDS,
        finished_attempt_retention_seconds: float = FINISHED_ATTEMPT_RETENTION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = Lock()
        self._quiz_store = quiz_store
        self._result_store = result_store
        self._tick_interval_seconds = tick_interval_seconds
        self._retention_seconds = finished_attempt_retention_seconds
        self._clock = clock
        self._attempts: dict[str, QuizAttempt] = {}
        self._finished_at: dict[str, float] = {}

    # --- Quizzes ---

    def list_public_quizzes(self) -> list[Quiz]:
        return self._quiz_store.list_public_quizzes()

    def list_quizzes_by_teacher(self, teacher_id: str) -> list[Quiz]:
        return self._quiz_store.list_quizzes_by_teacher(teacher_id)

    def get_quiz(self, quiz_id: str) -> Quiz:
        return self._quiz_store.get_quiz(quiz_id)

    def create_quiz(self, quiz: Quiz, teacher: UserIdentity) -> str:
        self._require_teacher(teacher)
        quiz.created_by_teacher_id = teacher.user_id
        quiz.created_by_teacher_name = teacher.name
        quiz.created_by_teacher_email = teacher.email
        return self._quiz_store.create_quiz(quiz)

    def set_quiz_visibility(self, quiz_id: str, is_public: bool, teacher: UserIdentity) -> Quiz:
        self.get_owned_quiz(quiz_id, teacher)
        return self._quiz_store.update_quiz(quiz_id, is_public=is_public)

    def delete_quiz(self, quiz_id: str, teacher: UserIdentity) -> None:
        self.get_owned_quiz(quiz_id, teacher)
        self._quiz_store.delete_quiz(quiz_id)

    def get_owned_quiz(self, quiz_id: str, teacher: UserIdentity) -> Quiz:
        """Fetch a quiz and check that ``teacher`` created it."""
        self._require_teacher(teacher)
        quiz = self._quiz_store.get_quiz(quiz_id)
        if quiz.created_by_teacher_id != teacher.user_id:
            raise NotFoundError(f"Quiz {quiz_id!r} not found.")
        return quiz

    # --- Attempts ---

    def start_attempt(self, quiz_id: str, user: UserIdentity) -> QuizAttempt:
        attempt_id = uuid4().hex
        attempt = QuizAttempt.start(
            quiz_id,
            self._quiz_store,
            self._result_store,
            user,
            tick_interval_seconds=self._tick_interval_seconds,
            on_complete=partial(self._mark_finished, attempt_id),
            attempt_id=attempt_id,
        )
        with self._lock:
            self._prune_finished()
            self._attempts[attempt_id] = attempt
        return attempt

    def get_attempt(self, attempt_id: str, user: UserIdentity) -> QuizAttempt:
        with self._lock:
            self._prune_finished()
            attempt = self._attempts.get(attempt_id)
        if attempt is None or attempt.user.user_id != user.user_id:
            raise NotFoundError(f"Attempt {attempt_id!r} not found.")
        return attempt

    def discard_attempt(self, attempt_id: str, user: UserIdentity) -> None:
        """Drop an attempt, cancelling its timer if it is still running."""
        attempt = self.get_attempt(attempt_id, user)
        attempt.abandon()
        with self._lock:
            self._attempts.pop(attempt_id, None)
            self._finished_at.pop(attempt_id, None)

    def active_attempt_count(self) -> int:
        with self._lock:
            self._prune_finished()
            return sum(1 for attempt in self._attempts.values() if not attempt.is_finished())

    def shutdown(self) -> None:
        """Cancel every running attempt without submitting it."""
        with self._lock:
            attempts = list(self._attempts.values())
            self._attempts.clear()
            self._finished_at.clear()
        for attempt in attempts:
            attempt.abandon()
        logger.info("Discarded %s attempts on shutdown", len(attempts))

    def tracked_attempt_count(self) -> int:
        """Attempts still held in memory, running or recently finished."""
        with self._lock:
            self._prune_finished()
            return len(self._attempts)

    def _mark_finished(self, attempt_id: str, result: QuizResult) -> None:
        with self._lock:
            if attempt_id in self._attempts:
                self._finished_at[attempt_id] = self._clock()

    def _prune_finished(self) -> None:
        # Caller holds self._lock. Failed submissions never get here, so they stay retryable.
        cutoff = self._clock() - self._retention_seconds
        expired = [attempt_id for attempt_id, finished in self._finished_at.items() if finished <= cutoff]
        for attempt_id in expired:
            del self._finished_at[attempt_id]
            self._attempts.pop(attempt_id, None)
        if expired:
            logger.debug("Dropped %s finished attempts", len(expired))

    # --- Results ---

    def results_for_user(self, user_id: str) -> list[QuizResult]:
        return self._result_store.list_results_for_user(user_id)

    def results_for_quiz(self, quiz_id: str, teacher: UserIdentity) -> list[QuizResult]:
        self.get_owned_quiz(quiz_id, teacher)
        return self._result_store.list_results_for_quiz(quiz_id)

    def quiz_statistics(self, quiz_id: str, teacher: UserIdentity) -> QuizStatistics:
        return summarize_results(self.results_for_quiz(quiz_id, teacher))

    def teacher_dashboard(self, teacher: UserIdentity) -> TeacherDashboardStats:
        quizzes = self.list_quizzes_by_teacher(teacher.user_id)
        results: list[QuizResult] = []
        for quiz in quizzes:
            results.extend(self._result_store.list_results_for_quiz(quiz.id))
        return summarize_teacher_quizzes(quizzes, results)

    def leaderboard_for_quiz(self, quiz_id: str, limit: int = DEFAULT_LEADERBOARD_LIMIT) -> list[QuizResult]:
        self._quiz_store.get_quiz(quiz_id)
        return self._result_store.leaderboard_for_quiz(quiz_id, limit)

    def global_leaderboard(self, limit: int = DEFAULT_LEADERBOARD_LIMIT) -> list[QuizResult]:
        return self._result_store.global_leaderboard(limit)

    @staticmethod
    def _require_teacher(user: UserIdentity) -> None:
        if not user.is_teacher:
            raise PermissionDeniedError("Only teachers can manage quizzes.")
