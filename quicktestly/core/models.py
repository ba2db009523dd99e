"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import NAMESPACE_URL, uuid5


class UserRole(str, Enum):
    """Role supplied by the identity provider."""

    TEACHER = "teacher"
    STUDENT = "student"


@dataclass(slots=True)
class UserIdentity:
    """Read-only description of the signed-in user."""

    user_id: str
    name: str
    email: str
    role: UserRole = UserRole.STUDENT

    @property
    def is_teacher(self) -> bool:
        return self.role is UserRole.TEACHER


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice question; correctness is decided by option value."""

    id: str
    question_text: str
    options: list[str]
    correct_option_index: int = 0

    @property
    def correct_option_value(self) -> str:
        return self.options[self.correct_option_index]


@dataclass(slots=True)
class Quiz:
    """A published quiz as stored in the quiz store."""

    id: str
    name: str
    description: str
    time_limit_minutes: int
    questions: list[QuizQuestion] = field(default_factory=list)
    is_public: bool = True
    created_by_teacher_id: str = ""
    created_by_teacher_name: str = ""
    created_by_teacher_email: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def time_limit_seconds(self) -> int:
        return self.time_limit_minutes * 60


@dataclass(slots=True)
class QuizResult:
    """Outcome of one submitted attempt. Never modified once persisted."""

    quiz_id: str
    quiz_name: str
    user_id: str
    user_name: str
    user_email: str
    score: int
    correct_answers: int
    total_questions: int
    time_spent_seconds: int
    answers: dict[str, str]
    completed_at: datetime
    id: str | None = None


def user_id_for_email(email: str) -> str:
    """Stable user id derived from the (case-insensitive) email address."""
    return uuid5(NAMESPACE_URL, f"mailto:{email.strip().lower()}").hex


def make_identity(name: str, email: str, role: UserRole = UserRole.STUDENT) -> UserIdentity:
    return UserIdentity(
        user_id=user_id_for_email(email),
        name=name.strip(),
        email=email.strip(),
        role=role,
    )
