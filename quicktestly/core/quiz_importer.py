"""Utilities for importing quizzes from a human-friendly text file.

File format: an optional header block followed by question blocks, blocks
separated by blank lines or '---':

    NAME: Quiz name
    DESCRIPTION: One line describing the quiz
    TIMELIMIT: minutes       (optional, defaults to 30)
    PUBLIC: yes|no           (optional, defaults to yes)
    ---
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Optional third option (up to F)
    CORRECT: A|B|...

Example:

    NAME: Arithmetic warm-up
    TIMELIMIT: 5

    Q: What is $2 + 2$?
    A: 3
    B: 4
    C: 22
    CORRECT: B
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from quicktestly.constants.quiz_constants import DEFAULT_TIME_LIMIT_MINUTES, OPTION_LETTERS
from quicktestly.core.errors import ValidationError
from quicktestly.core.models import QuizQuestion
from quicktestly.core.services.quiz_draft import QuizDraft


class QuizImportError(ValidationError):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    source_path: Path | None
    name: str = ""
    description: str = ""
    time_limit_minutes: int = DEFAULT_TIME_LIMIT_MINUTES
    is_public: bool = True
    questions: list[QuizQuestion] = field(default_factory=list)

    def to_draft(self) -> QuizDraft:
        draft = QuizDraft(
            name=self.name,
            description=self.description,
            time_limit_minutes=self.time_limit_minutes,
            is_public=self.is_public,
        )
        draft.load_questions(self.questions)
        return draft


_HEADER_KEYS = ("NAME:", "DESCRIPTION:", "TIMELIMIT:", "PUBLIC:")
_TRUE_VALUES = {"yes", "true", "1", "public"}
_FALSE_VALUES = {"no", "false", "0", "private"}


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    imported = load_quiz_from_text(text)
    imported.source_path = file_path
    return imported


def load_quiz_from_text(text: str) -> ImportedQuiz:
    imported = ImportedQuiz(source_path=None)
    for block in _split_blocks(text):
        if _is_header_block(block):
            if imported.questions:
                raise QuizImportError("Quiz details must come before the first question.")
            _parse_header(block, imported)
        else:
            imported.questions.append(_parse_block(block))
    if not imported.questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return imported


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---" or not stripped:
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        current_block.append(raw_line)
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _is_header_block(block: str) -> bool:
    first_line = block.splitlines()[0].strip().upper()
    return first_line.startswith(_HEADER_KEYS)


def _parse_header(block: str, imported: ImportedQuiz) -> None:
    for raw_line in block.splitlines():
        line = raw_line.strip()
        upper = line.upper()
        value = line.split(":", 1)[1].strip() if ":" in line else ""
        if upper.startswith("NAME:"):
            imported.name = value
        elif upper.startswith("DESCRIPTION:"):
            imported.description = value
        elif upper.startswith("TIMELIMIT:"):
            try:
                minutes = int(value)
            except ValueError as exc:
                raise QuizImportError("TIMELIMIT must be a whole number of minutes.") from exc
            if minutes <= 0:
                raise QuizImportError("TIMELIMIT must be a positive integer.")
            imported.time_limit_minutes = minutes
        elif upper.startswith("PUBLIC:"):
            flag = value.lower()
            if flag in _TRUE_VALUES:
                imported.is_public = True
            elif flag in _FALSE_VALUES:
                imported.is_public = False
            else:
                raise QuizImportError("PUBLIC must be yes or no.")
        else:
            raise QuizImportError(f"Unknown quiz detail: '{line}'.")


def _parse_block(block: str) -> QuizQuestion:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")

    letters = list(OPTION_LETTERS[: len(options)])
    if sorted(options) != letters:
        raise QuizImportError("Options must be lettered consecutively starting at A.")
    if len(options) < 2:
        raise QuizImportError("Each question must define at least two options.")

    option_list = [options[letter].strip() for letter in letters]
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("Each question needs a CORRECT line.")
    if correct_letter not in letters:
        raise QuizImportError(f"CORRECT must be one of {', '.join(letters)}.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text cannot be empty.")

    return QuizQuestion(
        id="",  # assigned when the quiz is published
        question_text=question_text,
        options=option_list,
        correct_option_index=letters.index(correct_letter),
    )
