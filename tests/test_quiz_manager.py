"""Tests for the facade shared by the API server and the console."""

from __future__ import annotations

import pytest

from conftest import make_quiz
from quicktestly.core.errors import NotFoundError, PermissionDeniedError, PersistenceError, TransientError
from quicktestly.core.models import UserRole, make_identity
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.core.services.quiz_attempt import AttemptStatus


def test_only_teachers_create_quizzes(manager, student):
    with pytest.raises(PermissionDeniedError):
        manager.create_quiz(make_quiz(), student)


def test_create_records_the_author(manager, teacher):
    quiz_id = manager.create_quiz(make_quiz(), teacher)
    quiz = manager.get_quiz(quiz_id)
    assert quiz.created_by_teacher_id == teacher.user_id
    assert quiz.created_by_teacher_name == teacher.name
    assert [q.id for q in manager.list_quizzes_by_teacher(teacher.user_id)] == [quiz_id]


def test_other_teachers_cannot_touch_a_quiz(manager, teacher):
    quiz_id = manager.create_quiz(make_quiz(), teacher)
    intruder = make_identity("Other", "other@school.test", UserRole.TEACHER)
    with pytest.raises(NotFoundError):
        manager.delete_quiz(quiz_id, intruder)
    with pytest.raises(NotFoundError):
        manager.results_for_quiz(quiz_id, intruder)


def test_visibility_toggle_hides_quiz_from_students(manager, teacher):
    quiz_id = manager.create_quiz(make_quiz(), teacher)
    manager.set_quiz_visibility(quiz_id, False, teacher)
    assert manager.list_public_quizzes() == []
    manager.set_quiz_visibility(quiz_id, True, teacher)
    assert [q.id for q in manager.list_public_quizzes()] == [quiz_id]


def test_attempt_round_trip_updates_results_and_statistics(manager, teacher, student):
    quiz_id = manager.create_quiz(make_quiz(), teacher)
    attempt = manager.start_attempt(quiz_id, student)
    assert manager.get_attempt(attempt.attempt_id, student) is attempt
    assert manager.active_attempt_count() == 1

    for question in attempt.questions:
        attempt.select_answer(question.id, question.correct_option_value)
    result = attempt.submit()

    assert manager.active_attempt_count() == 0
    assert [r.id for r in manager.results_for_user(student.user_id)] == [result.id]
    stats = manager.quiz_statistics(quiz_id, teacher)
    assert stats.total_attempts == 1
    assert stats.average_score == 100
    assert stats.pass_rate == 100
    assert [r.user_id for r in manager.leaderboard_for_quiz(quiz_id)] == [student.user_id]
    assert len(manager.global_leaderboard()) == 1
    dashboard = manager.teacher_dashboard(teacher)
    assert dashboard.total_quizzes == 1
    assert dashboard.total_students == 1


def test_attempts_are_private_to_their_owner(manager, teacher, student):
    quiz_id = manager.create_quiz(make_quiz(), teacher)
    attempt = manager.start_attempt(quiz_id, student)
    someone_else = make_identity("Eve", "eve@school.test")
    with pytest.raises(NotFoundError):
        manager.get_attempt(attempt.attempt_id, someone_else)
    with pytest.raises(NotFoundError):
        manager.get_attempt("missing", student)


def test_discard_and_shutdown_abandon_running_attempts(manager, teacher, student):
    quiz_id = manager.create_quiz(make_quiz(), teacher)
    first = manager.start_attempt(quiz_id, student)
    second = manager.start_attempt(quiz_id, student)

    manager.discard_attempt(first.attempt_id, student)
    assert first.status is AttemptStatus.ABANDONED
    with pytest.raises(NotFoundError):
        manager.get_attempt(first.attempt_id, student)

    manager.shutdown()
    assert second.status is AttemptStatus.ABANDONED
    assert manager.active_attempt_count() == 0


def test_leaderboard_of_unknown_quiz_is_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.leaderboard_for_quiz("missing")


class TickingClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_finished_attempts_are_dropped_after_retention(quiz_store, result_store, teacher, student, monkeypatch):
    clock = TickingClock()
    manager = QuizManager(
        quiz_store,
        result_store,
        tick_interval_seconds=None,
        finished_attempt_retention_seconds=30,
        clock=clock,
    )
    quiz_id = manager.create_quiz(make_quiz(), teacher)

    finished = [manager.start_attempt(quiz_id, student) for _ in range(100)]
    for attempt in finished:
        attempt.submit(forced=True)
    running = manager.start_attempt(quiz_id, student)

    real_submit = result_store.submit_result

    def offline(result):
        raise TransientError("store offline")

    failed = manager.start_attempt(quiz_id, student)
    monkeypatch.setattr(result_store, "submit_result", offline)
    with pytest.raises(PersistenceError):
        failed.submit(forced=True)
    monkeypatch.setattr(result_store, "submit_result", real_submit)

    # The final state stays readable for a while after submission.
    assert manager.get_attempt(finished[0].attempt_id, student) is finished[0]
    assert manager.tracked_attempt_count() == 102

    clock.now += 31

    assert manager.tracked_attempt_count() == 2
    with pytest.raises(NotFoundError):
        manager.get_attempt(finished[-1].attempt_id, student)
    assert manager.get_attempt(running.attempt_id, student) is running
    assert manager.get_attempt(failed.attempt_id, student).status is AttemptStatus.PERSIST_FAILED

    failed.retry_persist()
    clock.now += 31
    assert manager.tracked_attempt_count() == 1
    assert len(manager.results_for_user(student.user_id)) == 101
    manager.shutdown()
