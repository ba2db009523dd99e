"""Tests for per-attempt shuffling."""

from __future__ import annotations

import random

from conftest import make_question, make_quiz
from quicktestly.core.randomizer import shuffle_options, shuffle_questions, shuffled


def test_shuffled_returns_a_permutation_and_leaves_input_alone():
    items = list(range(10))
    result = shuffled(items, random.Random(7))
    assert sorted(result) == items
    assert items == list(range(10))
    assert result is not items


def test_shuffled_handles_empty_and_single_item():
    assert shuffled([]) == []
    assert shuffled(["only"]) == ["only"]


def test_shuffle_options_keeps_the_correct_value():
    question = make_question(1, options=["red", "green", "blue", "cyan"], correct=2)
    for seed in range(25):
        shuffled_question = shuffle_options(question, random.Random(seed))
        assert sorted(shuffled_question.options) == sorted(question.options)
        assert shuffled_question.correct_option_value == "blue"
        assert shuffled_question.id == question.id
    assert question.options == ["red", "green", "blue", "cyan"]


def test_shuffle_questions_keeps_every_question_once():
    quiz = make_quiz(question_count=6)
    result = shuffle_questions(quiz.questions, random.Random(3))
    assert sorted(q.id for q in result) == sorted(q.id for q in quiz.questions)
    originals = {q.id: q for q in quiz.questions}
    for question in result:
        assert question.correct_option_value == originals[question.id].correct_option_value


def test_shuffle_reaches_every_ordering_of_three_items():
    seen = {tuple(shuffled("abc", random.Random(seed))) for seed in range(200)}
    assert len(seen) == 6
