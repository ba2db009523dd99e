"""Tests for score, percentage and elapsed-time arithmetic."""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import START, make_quiz
from quicktestly.core.errors import ValidationError
from quicktestly.core.services.answer_ledger import AnswerLedger
from quicktestly.core.services.scorer import elapsed_seconds, percentage, score_attempt


@pytest.mark.parametrize(
    ("part", "whole", "expected"),
    [(0, 4, 0), (3, 4, 75), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (4, 4, 100)],
)
def test_percentage_rounds_half_up(part, whole, expected):
    assert percentage(part, whole) == expected


def test_percentage_of_nothing_is_rejected():
    with pytest.raises(ValidationError):
        percentage(0, 0)


def test_elapsed_seconds_rounds_and_clamps():
    assert elapsed_seconds(START, START + timedelta(seconds=12.4)) == 12
    assert elapsed_seconds(START, START + timedelta(seconds=12.5)) == 13
    assert elapsed_seconds(START, START - timedelta(seconds=3)) == 0
    assert elapsed_seconds(START, START + timedelta(seconds=75), limit_seconds=60) == 60


def test_score_attempt_compares_by_value():
    quiz = make_quiz(question_count=4)
    ledger = AnswerLedger()
    for question in quiz.questions[:3]:
        ledger.select(question.id, question.correct_option_value)
    wrong = next(o for o in quiz.questions[3].options if o != quiz.questions[3].correct_option_value)
    ledger.select(quiz.questions[3].id, wrong)

    summary = score_attempt(quiz.questions, ledger, START, START + timedelta(seconds=42))

    assert summary.correct_answers == 3
    assert summary.total_questions == 4
    assert summary.score == 75
    assert summary.time_spent_seconds == 42


def test_unanswered_questions_count_as_wrong():
    quiz = make_quiz(question_count=3)
    summary = score_attempt(quiz.questions, AnswerLedger(), START, START)
    assert summary.score == 0
    assert summary.correct_answers == 0


def test_score_attempt_rejects_empty_quiz():
    with pytest.raises(ValidationError):
        score_attempt([], AnswerLedger(), START, START)
