"""Utilities for exporting quizzes to the plain-text format used for imports."""

from __future__ import annotations

from pathlib import Path

from quicktestly.constants.quiz_constants import OPTION_LETTERS
from quicktestly.core.errors import ValidationError
from quicktestly.core.models import Quiz, QuizQuestion
from quicktestly.core.services.quiz_draft import QuizDraft


def save_quiz_to_file(file_path: Path, quiz: Quiz | QuizDraft) -> None:
    """Persist a published quiz or an editor draft to disk in the text import format."""

    if isinstance(quiz, QuizDraft):
        questions = quiz.get_questions()
    else:
        questions = list(quiz.questions)
    if not questions:
        raise ValidationError("Cannot export an empty quiz.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    document = serialize_quiz(quiz.name, quiz.description, quiz.time_limit_minutes, quiz.is_public, questions)
    file_path.write_text(document, encoding="utf-8")


def serialize_quiz(
    name: str,
    description: str,
    time_limit_minutes: int,
    is_public: bool,
    questions: list[QuizQuestion],
) -> str:
    header = [
        f"NAME: {_single_line(name)}",
        f"DESCRIPTION: {_single_line(description)}",
        f"TIMELIMIT: {time_limit_minutes}",
        f"PUBLIC: {'yes' if is_public else 'no'}",
    ]
    blocks = ["\n".join(header)] + [_serialize_question(question) for question in questions]
    return "\n\n---\n\n".join(blocks) + "\n"


def _single_line(text: str) -> str:
    return " ".join(text.split())


def _serialize_question(question: QuizQuestion) -> str:
    lines: list[str] = []

    question_lines = question.question_text.splitlines() or [question.question_text]
    lines.append(f"Q: {question_lines[0]}")
    lines.extend(question_lines[1:])

    for letter, option_text in zip(OPTION_LETTERS, question.options):
        option_lines = option_text.splitlines() or [option_text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    lines.append(f"CORRECT: {OPTION_LETTERS[question.correct_option_index]}")
    return "\n".join(lines)
