"""Environment settings, store selection and rendering helpers."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

from pydantic import ValidationError as SettingsValidationError
import pytest

from quicktestly.core.markdown_math_renderer import MarkdownMathRenderer
from quicktestly.core.models import UserRole, user_id_for_email
from quicktestly.core.services import mongo_store
from quicktestly.core.services.quiz_store import InMemoryQuizStore, InMemoryResultStore
from quicktestly.utils.logging_config import configure_logging
from quicktestly.utils.settings import AppSettings, build_stores


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("QUICKTESTLY_PORT", "9001")
    monkeypatch.setenv("QUICKTESTLY_TEACHER_NAME", "Ada")
    monkeypatch.setenv("QUICKTESTLY_TEACHER_EMAIL", "Ada@School.test")

    settings = AppSettings(_env_file=None)

    assert settings.port == 9001
    teacher = settings.teacher_identity()
    assert teacher.role is UserRole.TEACHER
    assert teacher.user_id == user_id_for_email("ada@school.test")


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("QUICKTESTLY_STORE_BACKEND", "sqlite")
    with pytest.raises(SettingsValidationError):
        AppSettings(_env_file=None)


def test_memory_backend_is_the_default():
    quiz_store, result_store = build_stores(AppSettings(_env_file=None))
    assert isinstance(quiz_store, InMemoryQuizStore)
    assert isinstance(result_store, InMemoryResultStore)


def test_mongo_backend_creates_indexes(monkeypatch):
    database = MagicMock()
    connect = MagicMock(return_value=database)
    monkeypatch.setattr(mongo_store, "connect", connect)

    quiz_store, result_store = build_stores(
        AppSettings(_env_file=None, store_backend="mongo", mongo_database="exam")
    )

    assert isinstance(quiz_store, mongo_store.MongoQuizStore)
    assert isinstance(result_store, mongo_store.MongoResultStore)
    connect.assert_called_once_with("mongodb://localhost:27017", "exam", 5000)
    assert database.__getitem__.return_value.create_index.call_count == 2


def test_configure_logging_accepts_names():
    assert configure_logging("debug").name == "quicktestly"
    assert configure_logging(logging.WARNING).name == "quicktestly"


def test_option_markup_is_rendered_inline():
    renderer = MarkdownMathRenderer()
    assert renderer.render_inline("**bold** $x^2$") == "<strong>bold</strong> $x^2$"
    assert "No content" in renderer.render_fragment("   ")


def test_question_preview_marks_the_correct_option():
    document = MarkdownMathRenderer().render_question_preview("What is $1+1$?", ["1", "2"], 1)
    assert '<li class="correct">2</li>' in document
    assert "<li>1</li>" in document
    assert "mathjax" in document
