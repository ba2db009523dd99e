"""Shared fixtures for the QuickTestly test-suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import random

import pytest

from quicktestly.core.models import Quiz, QuizQuestion, QuizResult, UserRole, make_identity
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.core.services.quiz_store import InMemoryQuizStore, InMemoryResultStore

START = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_question(number: int, options: list[str] | None = None, correct: int = 0) -> QuizQuestion:
    return QuizQuestion(
        id=f"q{number}",
        question_text=f"Question {number}?",
        options=options or [f"{number}-a", f"{number}-b", f"{number}-c", f"{number}-d"],
        correct_option_index=correct,
    )


def make_quiz(question_count: int = 4, time_limit_minutes: int = 1, **overrides) -> Quiz:
    fields = {
        "id": "quiz-1",
        "name": "Sample quiz",
        "description": "Used by the tests",
        "time_limit_minutes": time_limit_minutes,
        "questions": [make_question(n, correct=n % 4) for n in range(1, question_count + 1)],
    }
    fields.update(overrides)
    return Quiz(**fields)


def make_result(
    user_id: str = "u1",
    score: int = 50,
    time_spent_seconds: int = 30,
    quiz_id: str = "quiz-1",
    completed_at: datetime = START,
) -> QuizResult:
    return QuizResult(
        quiz_id=quiz_id,
        quiz_name="Sample quiz",
        user_id=user_id,
        user_name=user_id.upper(),
        user_email=f"{user_id}@example.com",
        score=score,
        correct_answers=score // 25,
        total_questions=4,
        time_spent_seconds=time_spent_seconds,
        answers={},
        completed_at=completed_at,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def quiz_store() -> InMemoryQuizStore:
    return InMemoryQuizStore()


@pytest.fixture
def result_store() -> InMemoryResultStore:
    return InMemoryResultStore()


@pytest.fixture
def teacher():
    return make_identity("Ada Teacher", "ada@school.test", UserRole.TEACHER)


@pytest.fixture
def student():
    return make_identity("Sam Student", "sam@school.test")


@pytest.fixture
def manager(quiz_store, result_store) -> QuizManager:
    quiz_manager = QuizManager(quiz_store, result_store, tick_interval_seconds=None)
    yield quiz_manager
    quiz_manager.shutdown()
