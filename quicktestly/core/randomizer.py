"""Per-attempt shuffling of question and option order."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

from quicktestly.core.models import QuizQuestion

T = TypeVar("T")

# SystemRandom draws from the OS entropy pool, so no state is carried between calls.
_SYSTEM_RANDOM = random.SystemRandom()


def shuffled(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a new list holding a uniformly random permutation of ``items``."""
    result = list(items)
    if len(result) > 1:
        (rng or _SYSTEM_RANDOM).shuffle(result)
    return result


def shuffle_options(question: QuizQuestion, rng: random.Random | None = None) -> QuizQuestion:
    """Return a copy of ``question`` with its options permuted.

    The correct index is remapped so the correct option value is unchanged.
    """
    order = shuffled(range(len(question.options)), rng)
    return QuizQuestion(
        id=question.id,
        question_text=question.question_text,
        options=[question.options[index] for index in order],
        correct_option_index=order.index(question.correct_option_index),
    )


def shuffle_questions(
    questions: Sequence[QuizQuestion],
    rng: random.Random | None = None,
) -> list[QuizQuestion]:
    """Shuffle question order and, independently, each question's options."""
    return [shuffle_options(question, rng) for question in shuffled(questions, rng)]
