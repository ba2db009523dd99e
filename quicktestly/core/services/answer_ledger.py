"""Per-attempt record of the option each question was answered with."""

from __future__ import annotations


class AnswerLedger:
    """Maps question ids to the selected option value.

    Answers are stored by value, never by presented index, because option
    order is shuffled per attempt. Entries can be overwritten but not removed.
    """

    def __init__(self) -> None:
        self._answers: dict[str, str] = {}

    def select(self, question_id: str, option_value: str) -> bool:
        """Record an answer. Returns True if it changed the recorded value."""
        previous = self._answers.get(question_id)
        self._answers[question_id] = option_value
        return previous != option_value

    def get(self, question_id: str) -> str | None:
        """Return the recorded option value, or None while unanswered."""
        return self._answers.get(question_id)

    def has_answer(self, question_id: str) -> bool:
        return question_id in self._answers

    def answered_count(self) -> int:
        return len(self._answers)

    def as_dict(self) -> dict[str, str]:
        return dict(self._answers)
