"""MongoDB-backed quiz and result stores."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
import logging
from typing import Any, Iterator

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from quicktestly.core.errors import NotFoundError, TransientError
from quicktestly.core.models import Quiz, QuizQuestion, QuizResult
from quicktestly.core.services.quiz_store import (
    apply_quiz_changes,
    utc_now,
    validate_result,
)
from quicktestly.core.services.quiz_draft import validate_quiz

logger = logging.getLogger(__name__)

QUIZ_COLLECTION = "quizzes"
RESULT_COLLECTION = "results"
_LEADERBOARD_SORT = [("score", DESCENDING), ("time_spent_seconds", ASCENDING), ("completed_at", ASCENDING)]


def connect(database_url: str, database_name: str, timeout_ms: int = 5000) -> Database:
    """Open a client lazily; the first operation performs server selection."""
    client: MongoClient = MongoClient(database_url, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
    return client[database_name]


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.error("MongoDB error while %s: %s", action, exc)
        raise TransientError(f"Store unavailable while {action}.") from exc


def _object_id(value: str, kind: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise NotFoundError(f"{kind} {value!r} not found.") from exc


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def quiz_to_document(quiz: Quiz) -> dict[str, Any]:
    return {
        "name": quiz.name,
        "description": quiz.description,
        "time_limit_minutes": quiz.time_limit_minutes,
        "is_public": quiz.is_public,
        "questions": [
            {
                "id": question.id,
                "question_text": question.question_text,
                "options": list(question.options),
                "correct_option_index": question.correct_option_index,
            }
            for question in quiz.questions
        ],
        "question_count": quiz.question_count,
        "created_by_teacher_id": quiz.created_by_teacher_id,
        "created_by_teacher_name": quiz.created_by_teacher_name,
        "created_by_teacher_email": quiz.created_by_teacher_email,
        "created_at": quiz.created_at,
        "updated_at": quiz.updated_at,
    }


def quiz_from_document(document: dict[str, Any]) -> Quiz:
    return Quiz(
        id=str(document["_id"]),
        name=document.get("name", ""),
        description=document.get("description", ""),
        time_limit_minutes=int(document.get("time_limit_minutes", 0)),
        questions=[
            QuizQuestion(
                id=str(item["id"]),
                question_text=item["question_text"],
                options=list(item["options"]),
                correct_option_index=int(item["correct_option_index"]),
            )
            for item in document.get("questions", [])
        ],
        is_public=bool(document.get("is_public", False)),
        created_by_teacher_id=document.get("created_by_teacher_id", ""),
        created_by_teacher_name=document.get("created_by_teacher_name", ""),
        created_by_teacher_email=document.get("created_by_teacher_email", ""),
        created_at=_as_utc(document.get("created_at")),
        updated_at=_as_utc(document.get("updated_at")),
    )


def result_to_document(result: QuizResult) -> dict[str, Any]:
    return {
        "quiz_id": result.quiz_id,
        "quiz_name": result.quiz_name,
        "user_id": result.user_id,
        "user_name": result.user_name,
        "user_email": result.user_email,
        "score": result.score,
        "correct_answers": result.correct_answers,
        "total_questions": result.total_questions,
        "time_spent_seconds": result.time_spent_seconds,
        "answers": dict(result.answers),
        "completed_at": result.completed_at,
    }


def result_from_document(document: dict[str, Any]) -> QuizResult:
    return QuizResult(
        id=str(document["_id"]),
        quiz_id=document["quiz_id"],
        quiz_name=document.get("quiz_name", ""),
        user_id=document["user_id"],
        user_name=document.get("user_name", ""),
        user_email=document.get("user_email", ""),
        score=int(document["score"]),
        correct_answers=int(document["correct_answers"]),
        total_questions=int(document["total_questions"]),
        time_spent_seconds=int(document["time_spent_seconds"]),
        answers=dict(document.get("answers", {})),
        completed_at=_as_utc(document["completed_at"]),
    )


class MongoQuizStore:
    """Quiz store backed by the ``quizzes`` collection."""

    def __init__(self, database: Database) -> None:
        self._collection: Collection = database[QUIZ_COLLECTION]

    def get_quiz(self, quiz_id: str) -> Quiz:
        object_id = _object_id(quiz_id, "Quiz")
        with _store_errors("fetching a quiz"):
            document = self._collection.find_one({"_id": object_id})
        if document is None:
            raise NotFoundError(f"Quiz {quiz_id!r} not found.")
        return quiz_from_document(document)

    def list_public_quizzes(self) -> list[Quiz]:
        return self._find({"is_public": True}, "listing public quizzes")

    def list_quizzes_by_teacher(self, teacher_id: str) -> list[Quiz]:
        return self._find({"created_by_teacher_id": teacher_id}, "listing teacher quizzes")

    def create_quiz(self, quiz: Quiz) -> str:
        prepared = validate_quiz(quiz)
        now = utc_now()
        prepared.created_at = now
        prepared.updated_at = now
        with _store_errors("creating a quiz"):
            inserted = self._collection.insert_one(quiz_to_document(prepared))
        logger.info("Created quiz %s", inserted.inserted_id)
        return str(inserted.inserted_id)

    def update_quiz(self, quiz_id: str, **changes: object) -> Quiz:
        updated = apply_quiz_changes(self.get_quiz(quiz_id), changes)
        document = quiz_to_document(updated)
        document.pop("created_at")
        with _store_errors("updating a quiz"):
            outcome = self._collection.update_one({"_id": _object_id(quiz_id, "Quiz")}, {"$set": document})
        if outcome.matched_count == 0:
            raise NotFoundError(f"Quiz {quiz_id!r} not found.")
        return updated

    def delete_quiz(self, quiz_id: str) -> None:
        object_id = _object_id(quiz_id, "Quiz")
        with _store_errors("deleting a quiz"):
            outcome = self._collection.delete_one({"_id": object_id})
        if outcome.deleted_count == 0:
            raise NotFoundError(f"Quiz {quiz_id!r} not found.")
        logger.info("Deleted quiz %s", quiz_id)

    def _find(self, query: dict[str, Any], action: str) -> list[Quiz]:
        with _store_errors(action):
            documents = list(self._collection.find(query).sort("created_at", DESCENDING))
        return [quiz_from_document(document) for document in documents]


class MongoResultStore:
    """Append-only result store backed by the ``results`` collection."""

    def __init__(self, database: Database) -> None:
        self._collection: Collection = database[RESULT_COLLECTION]

    def ensure_indexes(self) -> None:
        with _store_errors("creating result indexes"):
            self._collection.create_index([("quiz_id", ASCENDING), *_LEADERBOARD_SORT])
            self._collection.create_index([("user_id", ASCENDING), ("completed_at", DESCENDING)])

    def submit_result(self, result: QuizResult) -> str:
        validate_result(result)
        with _store_errors("saving a result"):
            inserted = self._collection.insert_one(result_to_document(result))
        return str(inserted.inserted_id)

    def list_results_for_quiz(self, quiz_id: str) -> list[QuizResult]:
        return self._find({"quiz_id": quiz_id}, [("completed_at", DESCENDING)], None, "listing quiz results")

    def list_results_for_user(self, user_id: str) -> list[QuizResult]:
        return self._find({"user_id": user_id}, [("completed_at", DESCENDING)], None, "listing user results")

    def leaderboard_for_quiz(self, quiz_id: str, limit: int) -> list[QuizResult]:
        return self._find({"quiz_id": quiz_id}, _LEADERBOARD_SORT, limit, "reading a leaderboard")

    def global_leaderboard(self, limit: int) -> list[QuizResult]:
        return self._find({}, _LEADERBOARD_SORT, limit, "reading the global leaderboard")

    def _find(
        self,
        query: dict[str, Any],
        sort: list[tuple[str, int]],
        limit: int | None,
        action: str,
    ) -> list[QuizResult]:
        # pymongo treats limit(0) as "no limit".
        if limit is not None and limit <= 0:
            return []
        with _store_errors(action):
            cursor = self._collection.find(query).sort(sort)
            if limit is not None:
                cursor = cursor.limit(limit)
            documents = list(cursor)
        return [result_from_document(document) for document in documents]
