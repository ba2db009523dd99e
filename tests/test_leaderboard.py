"""Tests for ranking, grades and aggregate statistics."""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import START, make_quiz, make_result
from quicktestly.core.services.leaderboard import (
    find_user_rank,
    grade_for_score,
    rank_results,
    summarize_results,
    summarize_teacher_quizzes,
)


def test_rank_orders_by_score_then_time_then_completion():
    slow = make_result("slow", score=80, time_spent_seconds=90)
    fast = make_result("fast", score=80, time_spent_seconds=40)
    best = make_result("best", score=100, time_spent_seconds=200)
    tie_late = make_result("late", score=80, time_spent_seconds=40, completed_at=START + timedelta(hours=1))

    ranked = rank_results([slow, tie_late, fast, best])

    assert [r.user_id for r in ranked] == ["best", "fast", "late", "slow"]
    assert [r.user_id for r in rank_results([slow, fast, best], limit=2)] == ["best", "fast"]
    assert rank_results([slow], limit=-1) == []


def test_find_user_rank():
    board = rank_results([make_result("a", score=10), make_result("b", score=90)])
    assert find_user_rank(board, "a") == 2
    assert find_user_rank(board, "zzz") is None


@pytest.mark.parametrize(
    ("score", "grade"),
    [(100, "A"), (90, "A"), (89, "B"), (75, "B"), (74, "C"), (60, "C"), (59, "D"), (0, "D")],
)
def test_grade_boundaries(score, grade):
    assert grade_for_score(score) == grade


def test_summarize_results():
    results = [
        make_result("a", score=100),
        make_result("a", score=50),
        make_result("b", score=75),
    ]
    stats = summarize_results(results)
    assert stats.total_attempts == 3
    assert stats.average_score == 75
    assert stats.unique_students == 2
    assert stats.pass_rate == 67


def test_summarize_results_without_attempts():
    stats = summarize_results([])
    assert (stats.total_attempts, stats.average_score, stats.unique_students, stats.pass_rate) == (0, 0, 0, 0)


def test_teacher_dashboard_only_counts_owned_quizzes():
    quizzes = [make_quiz(id="quiz-1"), make_quiz(id="quiz-2")]
    results = [
        make_result("a", score=100, quiz_id="quiz-1"),
        make_result("b", score=50, quiz_id="quiz-2"),
        make_result("c", score=0, quiz_id="someone-else"),
    ]
    stats = summarize_teacher_quizzes(quizzes, results)
    assert stats.total_quizzes == 2
    assert stats.total_students == 2
    assert stats.total_attempts == 2
    assert stats.average_score == 75
