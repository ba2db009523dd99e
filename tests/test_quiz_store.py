"""Tests for quiz validation and the in-memory stores."""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import START, make_question, make_quiz, make_result
from quicktestly.core.errors import NotFoundError, ValidationError
from quicktestly.core.services.quiz_draft import QuizDraft, validate_quiz


def test_create_assigns_id_timestamps_and_question_ids(quiz_store):
    quiz = make_quiz(questions=[make_question(7), make_question(9)])
    quiz_id = quiz_store.create_quiz(quiz)

    stored = quiz_store.get_quiz(quiz_id)
    assert stored.id == quiz_id
    assert [q.id for q in stored.questions] == ["q1", "q2"]
    assert stored.created_at is not None
    assert stored.created_at == stored.updated_at
    assert quiz.id == "quiz-1"


def test_get_returns_copies(quiz_store):
    quiz_id = quiz_store.create_quiz(make_quiz())
    fetched = quiz_store.get_quiz(quiz_id)
    fetched.questions.clear()
    assert quiz_store.get_quiz(quiz_id).question_count == 4


def test_public_listing_is_newest_first_and_skips_private(quiz_store):
    first = quiz_store.create_quiz(make_quiz(name="First"))
    quiz_store.create_quiz(make_quiz(name="Hidden", is_public=False))
    third = quiz_store.create_quiz(make_quiz(name="Third"))
    assert [q.id for q in quiz_store.list_public_quizzes()] == [third, first]


def test_teacher_listing_filters_by_owner(quiz_store):
    mine = quiz_store.create_quiz(make_quiz(created_by_teacher_id="t1"))
    quiz_store.create_quiz(make_quiz(created_by_teacher_id="t2"))
    assert [q.id for q in quiz_store.list_quizzes_by_teacher("t1")] == [mine]


def test_update_revalidates_and_rejects_unknown_fields(quiz_store):
    quiz_id = quiz_store.create_quiz(make_quiz())
    updated = quiz_store.update_quiz(quiz_id, is_public=False, name="  Renamed ")
    assert updated.name == "Renamed"
    assert not quiz_store.get_quiz(quiz_id).is_public
    with pytest.raises(ValidationError):
        quiz_store.update_quiz(quiz_id, created_by_teacher_id="someone")
    with pytest.raises(ValidationError):
        quiz_store.update_quiz(quiz_id, time_limit_minutes=0)
    with pytest.raises(NotFoundError):
        quiz_store.update_quiz("missing", name="x")


def test_delete_and_missing_lookups(quiz_store):
    quiz_id = quiz_store.create_quiz(make_quiz())
    quiz_store.delete_quiz(quiz_id)
    with pytest.raises(NotFoundError):
        quiz_store.get_quiz(quiz_id)
    with pytest.raises(NotFoundError):
        quiz_store.delete_quiz(quiz_id)


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "   "},
        {"time_limit_minutes": 0},
        {"time_limit_minutes": 601},
        {"time_limit_minutes": True},
        {"questions": []},
        {"questions": [make_question(1, options=["only"])]},
        {"questions": [make_question(1, options=["same", "same"])]},
        {"questions": [make_question(1, options=["a", "b"], correct=2)]},
        {"questions": [make_question(1, options=["a", ""])]},
    ],
)
def test_invalid_quizzes_are_rejected(quiz_store, overrides):
    with pytest.raises(ValidationError):
        quiz_store.create_quiz(make_quiz(**overrides))


def test_validate_quiz_strips_text():
    quiz = make_quiz(name=" Spaced ", description=" desc ")
    quiz.questions[0].question_text = "  padded?  "
    cleaned = validate_quiz(quiz)
    assert cleaned.name == "Spaced"
    assert cleaned.description == "desc"
    assert cleaned.questions[0].question_text == "padded?"


def test_draft_builds_a_validated_quiz(teacher):
    draft = QuizDraft(name="Draft", time_limit_minutes=5)
    draft.add_question(make_question(3))
    draft.add_question(make_question(4))
    draft.update_question(0, make_question(5))
    draft.delete_question(1)
    assert draft.has_unpublished_changes()

    quiz = draft.build_quiz(teacher)

    assert [q.question_text for q in quiz.questions] == ["Question 5?"]
    assert quiz.questions[0].id == "q1"
    assert quiz.created_by_teacher_id == teacher.user_id
    draft.mark_published()
    assert not draft.has_unpublished_changes()
    with pytest.raises(IndexError):
        draft.get_question_at_index(3)


def test_result_store_orders_and_ranks(result_store):
    early = make_result("u1", score=50, completed_at=START)
    late = make_result("u2", score=100, completed_at=START + timedelta(minutes=5))
    other_quiz = make_result("u1", score=100, quiz_id="quiz-2", completed_at=START + timedelta(minutes=1))
    for result in (early, late, other_quiz):
        result_store.submit_result(result)

    assert [r.user_id for r in result_store.list_results_for_quiz("quiz-1")] == ["u2", "u1"]
    assert [r.quiz_id for r in result_store.list_results_for_user("u1")] == ["quiz-2", "quiz-1"]
    assert [r.user_id for r in result_store.leaderboard_for_quiz("quiz-1", 10)] == ["u2", "u1"]
    assert len(result_store.global_leaderboard(2)) == 2
    assert result_store.leaderboard_for_quiz("quiz-1", 0) == []
    assert all(r.id for r in result_store.list_results_for_quiz("quiz-1"))
    assert early.id is None


def test_result_store_rejects_inconsistent_results(result_store):
    bad = make_result(score=150)
    with pytest.raises(ValidationError):
        result_store.submit_result(bad)
