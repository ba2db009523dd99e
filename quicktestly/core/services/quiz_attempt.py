"""Lifecycle of a single timed quiz attempt, from fetch to persisted result."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from enum import Enum
import logging
import random
from threading import RLock
from typing import Callable
from uuid import uuid4

from quicktestly.constants.quiz_constants import TIMER_TICK_INTERVAL_SECONDS
from quicktestly.core.errors import PersistenceError, QuizError, ValidationError
from quicktestly.core.models import Quiz, QuizQuestion, QuizResult, UserIdentity
from quicktestly.core.randomizer import shuffle_questions
from quicktestly.core.services.answer_ledger import AnswerLedger
from quicktestly.core.services.attempt_timer import AttemptTimer, TimerState
from quicktestly.core.services.quiz_draft import prepare_question
from quicktestly.core.services.quiz_store import QuizStore, ResultStore, utc_now
from quicktestly.core.services.scorer import score_attempt

logger = logging.getLogger(__name__)


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    PERSIST_FAILED = "persist_failed"
    ABANDONED = "abandoned"


def load_quiz_for_attempt(quiz_store: QuizStore, quiz_id: str) -> Quiz:
    """Fetch a quiz and check it can be taken.

    Raises NotFoundError or TransientError from the store, and ValidationError
    for quizzes that could not be scored (no questions, bad time limit,
    malformed questions).
    """
    quiz = quiz_store.get_quiz(quiz_id)
    if not quiz.questions:
        raise ValidationError(f"Quiz {quiz_id!r} has no questions.")
    if quiz.time_limit_minutes <= 0:
        raise ValidationError(f"Quiz {quiz_id!r} has no valid time limit.")
    return replace(quiz, questions=[prepare_question(question) for question in quiz.questions])


class QuizAttempt:
    """One user's pass through a quiz.

    The presented questions are a shuffled snapshot taken at construction.
    Answers are kept in an AnswerLedger keyed by question id. Exactly one
    result is produced: whichever of timer expiry and manual submission gets
    the lock first scores the attempt, the other returns that same result.
    """

    def __init__(
        self,
        quiz: Quiz,
        user: UserIdentity,
        result_store: ResultStore,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utc_now,
        tick_interval_seconds: float | None = TIMER_TICK_INTERVAL_SECONDS,
        on_low_time: Callable[[int], None] | None = None,
        on_tick: Callable[[int], None] | None = None,
        on_complete: Callable[[QuizResult], None] | None = None,
        attempt_id: str | None = None,
    ) -> None:
        if not quiz.questions:
            raise ValidationError("A quiz without questions cannot be attempted.")

        self.attempt_id = attempt_id or uuid4().hex
        self.quiz = quiz
        self.user = user
        self._result_store = result_store
        self._clock = clock
        self._on_low_time = on_low_time
        self._on_complete = on_complete

        self._lock = RLock()
        self._questions: list[QuizQuestion] = shuffle_questions(quiz.questions, rng)
        self._ledger = AnswerLedger()
        self._current_index = 0
        self._status = AttemptStatus.IN_PROGRESS
        self._started_at: datetime | None = None
        self._result: QuizResult | None = None
        self._persistence_error: QuizError | None = None
        self._low_time_warning = False
        self._forced_submission = False

        self._timer = AttemptTimer(
            quiz.time_limit_seconds,
            self._handle_time_expired,
            on_low_time=self._handle_low_time,
            on_tick=on_tick,
            tick_interval_seconds=tick_interval_seconds,
            name=f"AttemptTimer-{self.attempt_id[:8]}",
        )

    @classmethod
    def start(
        cls,
        quiz_id: str,
        quiz_store: QuizStore,
        result_store: ResultStore,
        user: UserIdentity,
        **options,
    ) -> "QuizAttempt":
        """Fetch the quiz, build the shuffled snapshot and start the clock."""
        quiz = load_quiz_for_attempt(quiz_store, quiz_id)
        attempt = cls(quiz, user, result_store, **options)
        attempt.begin()
        return attempt

    def begin(self) -> None:
        with self._lock:
            self._started_at = self._clock()
            self._timer.start()
        logger.info(
            "Attempt %s started: user=%s quiz=%s questions=%s limit=%ss",
            self.attempt_id,
            self.user.user_id,
            self.quiz.id,
            len(self._questions),
            self.quiz.time_limit_seconds,
        )

    # --- State ---

    @property
    def questions(self) -> list[QuizQuestion]:
        return list(self._questions)

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._current_index

    @property
    def current_question(self) -> QuizQuestion:
        with self._lock:
            return self._questions[self._current_index]

    @property
    def status(self) -> AttemptStatus:
        with self._lock:
            return self._status

    @property
    def result(self) -> QuizResult | None:
        with self._lock:
            return self._result

    @property
    def persistence_error(self) -> QuizError | None:
        with self._lock:
            return self._persistence_error

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def remaining_seconds(self) -> int:
        return self._timer.remaining_seconds

    @property
    def timer_state(self) -> TimerState:
        return self._timer.state

    @property
    def timer(self) -> AttemptTimer:
        return self._timer

    @property
    def low_time_warning(self) -> bool:
        return self._low_time_warning

    @property
    def was_forced(self) -> bool:
        return self._forced_submission

    def is_finished(self) -> bool:
        return self.status is not AttemptStatus.IN_PROGRESS

    def get_answer(self, question_id: str) -> str | None:
        with self._lock:
            return self._ledger.get(question_id)

    def answered_count(self) -> int:
        with self._lock:
            return self._ledger.answered_count()

    def unanswered_count(self) -> int:
        with self._lock:
            return len(self._questions) - self._ledger.answered_count()

    # --- Navigation ---

    def go_to_question(self, index: int) -> int:
        """Jump to ``index``; out-of-range indexes leave the position unchanged."""
        with self._lock:
            if 0 <= index < len(self._questions):
                self._current_index = index
            return self._current_index

    def next_question(self) -> int:
        with self._lock:
            return self.go_to_question(min(self._current_index + 1, len(self._questions) - 1))

    def previous_question(self) -> int:
        with self._lock:
            return self.go_to_question(max(self._current_index - 1, 0))

    # --- Answers ---

    def select_answer(self, question_id: str, option_value: str) -> bool:
        """Record ``option_value`` for the question. Returns True if it changed."""
        with self._lock:
            if self._status is not AttemptStatus.IN_PROGRESS:
                raise ValidationError("This attempt no longer accepts answers.")
            question = self._find_question(question_id)
            if option_value not in question.options:
                raise ValidationError(f"{option_value!r} is not an option of question {question_id!r}.")
            return self._ledger.select(question_id, option_value)

    # --- Submission ---

    def submit(
        self,
        forced: bool = False,
        confirm: Callable[[int], bool] | None = None,
    ) -> QuizResult | None:
        """Score and persist the attempt once.

        Unless ``forced`` (or the timer already expired), unanswered questions
        require ``confirm`` to return True; otherwise nothing happens and None
        is returned. Repeated calls return the result of the first submission
        without persisting again.
        Raises PersistenceError if the result could not be saved.
        """
        with self._lock:
            if self._status is not AttemptStatus.IN_PROGRESS:
                logger.debug("Attempt %s already %s; ignoring submit", self.attempt_id, self._status.value)
                return self._result

            # Time already ran out: the expiry path is still waiting for this lock.
            forced = forced or self._timer.state is TimerState.EXPIRED
            if not forced:
                unanswered = len(self._questions) - self._ledger.answered_count()
                if unanswered and (confirm is None or not confirm(unanswered)):
                    return None

            self._timer.stop()
            submitted_at = self._clock()
            summary = score_attempt(
                self._questions,
                self._ledger,
                self._started_at or submitted_at,
                submitted_at,
                self.quiz.time_limit_seconds,
            )
            self._result = QuizResult(
                quiz_id=self.quiz.id,
                quiz_name=self.quiz.name,
                user_id=self.user.user_id,
                user_name=self.user.name,
                user_email=self.user.email,
                score=summary.score,
                correct_answers=summary.correct_answers,
                total_questions=summary.total_questions,
                time_spent_seconds=summary.time_spent_seconds,
                answers=self._ledger.as_dict(),
                completed_at=submitted_at,
            )
            self._status = AttemptStatus.SUBMITTING
            self._forced_submission = forced

        logger.info(
            "Attempt %s submitted (%s): %s/%s correct, score %s, %ss",
            self.attempt_id,
            "forced" if forced else "manual",
            summary.correct_answers,
            summary.total_questions,
            summary.score,
            summary.time_spent_seconds,
        )
        return self._persist()

    def retry_persist(self) -> QuizResult:
        """Save the already computed result again after a PersistenceError."""
        with self._lock:
            if self._status is AttemptStatus.COMPLETED and self._result is not None:
                return self._result
            if self._status is not AttemptStatus.PERSIST_FAILED:
                raise ValidationError("There is no failed submission to retry.")
            self._status = AttemptStatus.SUBMITTING
        return self._persist()

    def abandon(self) -> bool:
        """Discard an unfinished attempt without submitting it."""
        with self._lock:
            if self._status is not AttemptStatus.IN_PROGRESS:
                return False
            self._timer.stop()
            self._status = AttemptStatus.ABANDONED
        logger.info("Attempt %s abandoned", self.attempt_id)
        return True

    def _persist(self) -> QuizResult:
        result = self._result
        try:
            result_id = self._result_store.submit_result(result)
        except QuizError as exc:
            with self._lock:
                self._status = AttemptStatus.PERSIST_FAILED
                self._persistence_error = exc
            logger.error("Result of attempt %s could not be saved: %s", self.attempt_id, exc)
            raise PersistenceError("The result was scored but could not be saved.", result) from exc

        with self._lock:
            result.id = result_id
            self._status = AttemptStatus.COMPLETED
            self._persistence_error = None
        if self._on_complete is not None:
            self._on_complete(result)
        return result

    def _find_question(self, question_id: str) -> QuizQuestion:
        for question in self._questions:
            if question.id == question_id:
                return question
        raise ValidationError(f"Question {question_id!r} is not part of this attempt.")

    def _handle_low_time(self, remaining_seconds: int) -> None:
        # Runs under the timer lock: flag only, no attempt lock.
        self._low_time_warning = True
        if self._on_low_time is not None:
            self._on_low_time(remaining_seconds)

    def _handle_time_expired(self) -> None:
        logger.info("Time is up for attempt %s; submitting", self.attempt_id)
        try:
            self.submit(forced=True)
        except PersistenceError:
            # Status and error stay on the attempt for the owner to retry.
            logger.warning("Forced submission of attempt %s awaits a retry", self.attempt_id)
