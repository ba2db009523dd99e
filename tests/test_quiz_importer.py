"""Tests for the plain-text quiz import and export format."""

from __future__ import annotations

import pytest

from quicktestly.core.errors import ValidationError
from quicktestly.core.quiz_exporter import save_quiz_to_file
from quicktestly.core.quiz_importer import QuizImportError, load_quiz_from_file, load_quiz_from_text

SAMPLE = """NAME: Trigonometry basics
DESCRIPTION: Radians and degrees
TIMELIMIT: 10
PUBLIC: no
---
Q: What is $30^o$ in radians?
A: \\frac{\\pi}{2}
B: \\frac{\\pi}{6}
C: \\frac{\\pi}{3}
CORRECT: B

Q: Which identity holds?
   Pick one.
A: $\\sin^2 x + \\cos^2 x = 1$
B: $\\sin x = \\cos x$
CORRECT: a
"""


def test_parses_header_and_questions():
    imported = load_quiz_from_text(SAMPLE)
    assert imported.name == "Trigonometry basics"
    assert imported.description == "Radians and degrees"
    assert imported.time_limit_minutes == 10
    assert imported.is_public is False
    assert len(imported.questions) == 2

    first, second = imported.questions
    assert first.options == ["\\frac{\\pi}{2}", "\\frac{\\pi}{6}", "\\frac{\\pi}{3}"]
    assert first.correct_option_index == 1
    assert second.question_text == "Which identity holds?\nPick one."
    assert second.correct_option_index == 0


def test_header_is_optional():
    imported = load_quiz_from_text("Q: 1+1?\nA: 2\nB: 3\nCORRECT: A\n")
    assert imported.name == ""
    assert imported.time_limit_minutes == 30
    assert imported.is_public is True


@pytest.mark.parametrize(
    "text",
    [
        "",
        "NAME: Only a header\n",
        "Q: Missing correct\nA: 1\nB: 2\n",
        "Q: One option\nA: 1\nCORRECT: A\n",
        "Q: Gap in letters\nA: 1\nC: 3\nCORRECT: A\n",
        "Q: Bad letter\nA: 1\nB: 2\nCORRECT: D\n",
        "A: no question\nB: 2\nCORRECT: A\n",
        "TIMELIMIT: soon\n---\nQ: x\nA: 1\nB: 2\nCORRECT: A\n",
        "PUBLIC: maybe\n---\nQ: x\nA: 1\nB: 2\nCORRECT: A\n",
        "Q: x\nA: 1\nB: 2\nCORRECT: A\n\nNAME: too late\n",
    ],
)
def test_malformed_files_are_rejected(text):
    with pytest.raises(QuizImportError):
        load_quiz_from_text(text)


def test_import_errors_are_validation_errors():
    assert issubclass(QuizImportError, ValidationError)


def test_export_then_import_preserves_the_draft(tmp_path, teacher):
    draft = load_quiz_from_text(SAMPLE).to_draft()
    target = tmp_path / "nested" / "quiz.txt"

    save_quiz_to_file(target, draft)
    reloaded = load_quiz_from_file(target)

    assert reloaded.source_path == target
    assert reloaded.name == draft.name
    assert reloaded.time_limit_minutes == 10
    assert reloaded.is_public is False
    assert reloaded.questions == draft.get_questions()
    assert reloaded.to_draft().build_quiz(teacher).question_count == 2


def test_export_of_published_quiz_writes_header(tmp_path):
    from conftest import make_quiz

    target = tmp_path / "published.txt"
    save_quiz_to_file(target, make_quiz(question_count=2))
    text = target.read_text(encoding="utf-8")
    assert text.startswith("NAME: Sample quiz\n")
    assert "TIMELIMIT: 1" in text
    assert "CORRECT: B" in text


def test_export_refuses_empty_quiz(tmp_path):
    from quicktestly.core.services.quiz_draft import QuizDraft

    with pytest.raises(ValidationError):
        save_quiz_to_file(tmp_path / "empty.txt", QuizDraft(name="Empty"))
