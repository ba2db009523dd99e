"""Authoring buffer for a quiz and the validation every stored quiz passes."""

from __future__ import annotations

from dataclasses import replace

from quicktestly.constants.quiz_constants import (
    DEFAULT_TIME_LIMIT_MINUTES,
    MAX_OPTIONS_PER_QUESTION,
    MAX_TIME_LIMIT_MINUTES,
    MIN_OPTIONS_PER_QUESTION,
)
from quicktestly.core.errors import ValidationError
from quicktestly.core.models import Quiz, QuizQuestion, UserIdentity


def question_id_for_position(position: int) -> str:
    """Stable question id for the 0-based authored position."""
    return f"q{position + 1}"


def prepare_question(question: QuizQuestion, question_id: str | None = None) -> QuizQuestion:
    """Validate and normalize a question before storage."""
    cleaned_text = question.question_text.strip()
    if not cleaned_text:
        raise ValidationError("Question text must not be empty.")

    options = _validate_options(question.options)
    if not 0 <= question.correct_option_index < len(options):
        raise ValidationError(
            f"Correct option index must be between 0 and {len(options) - 1}."
        )

    return QuizQuestion(
        id=question_id if question_id is not None else question.id,
        question_text=cleaned_text,
        options=options,
        correct_option_index=question.correct_option_index,
    )


def validate_quiz(quiz: Quiz) -> Quiz:
    """Return a normalized copy of ``quiz`` with question ids ``q1..qN``.

    Raises ValidationError when the quiz could not be taken as an attempt.
    """
    name = quiz.name.strip()
    if not name:
        raise ValidationError("Quiz name must not be empty.")
    _validate_time_limit(quiz.time_limit_minutes)
    if not quiz.questions:
        raise ValidationError("Quiz must contain at least one question.")

    questions = [
        prepare_question(question, question_id_for_position(position))
        for position, question in enumerate(quiz.questions)
    ]
    return replace(
        quiz,
        name=name,
        description=quiz.description.strip(),
        questions=questions,
    )


class QuizDraft:
    """Holds the quiz being authored in the console or read from a file."""

    def __init__(
        self,
        name: str = "",
        description: str = "",
        time_limit_minutes: int = DEFAULT_TIME_LIMIT_MINUTES,
        is_public: bool = True,
    ) -> None:
        self.name = name
        self.description = description
        self.time_limit_minutes = time_limit_minutes
        self.is_public = is_public
        self._questions: list[QuizQuestion] = []
        self._has_unpublished_changes: bool = False

    def load_questions(self, questions: list[QuizQuestion]) -> None:
        """Replace the current questions with a new list."""
        if not questions:
            raise ValidationError("Quiz must contain at least one question.")
        self._questions = [self._prepare(question) for question in questions]
        self._has_unpublished_changes = True

    def get_questions(self) -> list[QuizQuestion]:
        return list(self._questions)

    def has_questions(self) -> bool:
        return bool(self._questions)

    def get_question_count(self) -> int:
        return len(self._questions)

    def get_question_at_index(self, index: int) -> QuizQuestion:
        self._check_index(index)
        return self._questions[index]

    def add_question(self, question: QuizQuestion) -> None:
        self._questions.append(self._prepare(question))
        self._has_unpublished_changes = True

    def update_question(self, index: int, question: QuizQuestion) -> None:
        self._check_index(index)
        self._questions[index] = self._prepare(question)
        self._has_unpublished_changes = True

    def delete_question(self, index: int) -> None:
        self._check_index(index)
        self._questions.pop(index)
        self._has_unpublished_changes = True

    def clear(self) -> None:
        self.name = ""
        self.description = ""
        self.time_limit_minutes = DEFAULT_TIME_LIMIT_MINUTES
        self.is_public = True
        self._questions = []
        self._has_unpublished_changes = False

    def has_unpublished_changes(self) -> bool:
        return self._has_unpublished_changes

    def mark_published(self) -> None:
        self._has_unpublished_changes = False

    def build_quiz(self, teacher: UserIdentity | None = None) -> Quiz:
        """Assemble a validated quiz ready for the quiz store."""
        quiz = Quiz(
            id="",
            name=self.name,
            description=self.description,
            time_limit_minutes=self.time_limit_minutes,
            questions=self.get_questions(),
            is_public=self.is_public,
        )
        if teacher is not None:
            quiz.created_by_teacher_id = teacher.user_id
            quiz.created_by_teacher_name = teacher.name
            quiz.created_by_teacher_email = teacher.email
        return validate_quiz(quiz)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._questions):
            raise IndexError(f"Question index {index} out of range")

    @staticmethod
    def _prepare(question: QuizQuestion) -> QuizQuestion:
        # Ids are reassigned from the final order when the quiz is built.
        return prepare_question(question, question_id="")


def _validate_options(options: list[str]) -> list[str]:
    cleaned = [option.strip() for option in options]
    if any(not option for option in cleaned):
        raise ValidationError("Option text cannot be empty.")
    if not MIN_OPTIONS_PER_QUESTION <= len(cleaned) <= MAX_OPTIONS_PER_QUESTION:
        raise ValidationError(
            f"Each question needs between {MIN_OPTIONS_PER_QUESTION} and "
            f"{MAX_OPTIONS_PER_QUESTION} options."
        )
    if len(set(cleaned)) != len(cleaned):
        raise ValidationError("Options of a question must be distinct.")
    return cleaned


def _validate_time_limit(time_limit_minutes: int) -> None:
    if isinstance(time_limit_minutes, bool) or not isinstance(time_limit_minutes, int):
        raise ValidationError("Time limit must be a whole number of minutes.")
    if not 0 < time_limit_minutes <= MAX_TIME_LIMIT_MINUTES:
        raise ValidationError(
            f"Time limit must be between 1 and {MAX_TIME_LIMIT_MINUTES} minutes."
        )
