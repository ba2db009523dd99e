"""Environment-driven settings for the console, the API server and the stores."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from quicktestly.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quicktestly.constants.quiz_constants import TIMER_TICK_INTERVAL_SECONDS
from quicktestly.core.models import UserIdentity, UserRole, make_identity
from quicktestly.core.services.quiz_store import (
    InMemoryQuizStore,
    InMemoryResultStore,
    QuizStore,
    ResultStore,
)

logger = logging.getLogger(__name__)


class AppSettings(BaseSettings):
    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    # Stores
    store_backend: Literal["memory", "mongo"] = "memory"
    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "quicktestly"
    mongo_timeout_ms: int = 5000

    # Attempts
    tick_interval_seconds: float = TIMER_TICK_INTERVAL_SECONDS

    # Identity used by the teacher console
    teacher_name: str = "Teacher"
    teacher_email: str = "teacher@example.com"

    model_config = SettingsConfigDict(
        env_prefix="QUICKTESTLY_",
        env_file=".env",
        extra="ignore",
    )

    def teacher_identity(self) -> UserIdentity:
        return make_identity(self.teacher_name, self.teacher_email, UserRole.TEACHER)


def build_stores(settings: AppSettings) -> tuple[QuizStore, ResultStore]:
    """Create the quiz and result stores selected by ``store_backend``."""
    if settings.store_backend == "mongo":
        from quicktestly.core.services.mongo_store import MongoQuizStore, MongoResultStore, connect

        database = connect(settings.mongo_url, settings.mongo_database, settings.mongo_timeout_ms)
        result_store = MongoResultStore(database)
        result_store.ensure_indexes()
        logger.info("Using MongoDB stores at %s/%s", settings.mongo_url, settings.mongo_database)
        return MongoQuizStore(database), result_store

    logger.info("Using in-memory stores; data is lost on exit")
    return InMemoryQuizStore(), InMemoryResultStore()
