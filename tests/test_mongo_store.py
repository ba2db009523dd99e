"""MongoDB stores exercised against a mocked pymongo database."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError
import pytest

from conftest import START, make_quiz, make_result
from quicktestly.core.errors import NotFoundError, TransientError, ValidationError
from quicktestly.core.services.mongo_store import (
    MongoQuizStore,
    MongoResultStore,
    quiz_from_document,
    quiz_to_document,
    result_to_document,
)


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def database(collection):
    db = MagicMock()
    db.__getitem__.return_value = collection
    return db


def test_documents_without_timezone_are_read_as_utc():
    document = quiz_to_document(make_quiz())
    document["_id"] = ObjectId()
    document["created_at"] = datetime(2024, 5, 1, 9, 0)

    quiz = quiz_from_document(document)

    assert quiz.id == str(document["_id"])
    assert quiz.created_at == START
    assert [q.correct_option_index for q in quiz.questions] == [1, 2, 3, 0]


def test_get_quiz_with_malformed_id_is_not_found(database, collection):
    with pytest.raises(NotFoundError):
        MongoQuizStore(database).get_quiz("not-an-object-id")
    collection.find_one.assert_not_called()


def test_get_missing_quiz(database, collection):
    collection.find_one.return_value = None
    with pytest.raises(NotFoundError):
        MongoQuizStore(database).get_quiz(str(ObjectId()))


def test_driver_errors_become_transient(database, collection):
    collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(TransientError):
        MongoQuizStore(database).get_quiz(str(ObjectId()))


def test_create_quiz_normalizes_and_stamps(database, collection):
    inserted_id = ObjectId()
    collection.insert_one.return_value.inserted_id = inserted_id

    quiz_id = MongoQuizStore(database).create_quiz(make_quiz(name="  Padded  "))

    assert quiz_id == str(inserted_id)
    document = collection.insert_one.call_args.args[0]
    assert document["name"] == "Padded"
    assert document["question_count"] == 4
    assert document["created_at"] is not None
    assert [q["id"] for q in document["questions"]] == ["q1", "q2", "q3", "q4"]


def test_create_invalid_quiz_never_reaches_the_database(database, collection):
    with pytest.raises(ValidationError):
        MongoQuizStore(database).create_quiz(make_quiz(question_count=0))
    collection.insert_one.assert_not_called()


def test_delete_missing_quiz(database, collection):
    collection.delete_one.return_value.deleted_count = 0
    with pytest.raises(NotFoundError):
        MongoQuizStore(database).delete_quiz(str(ObjectId()))


def test_leaderboard_sorts_and_limits(database, collection):
    document = result_to_document(make_result(score=75))
    document["_id"] = ObjectId()
    cursor = collection.find.return_value.sort.return_value
    cursor.limit.return_value = [document]

    leaderboard = MongoResultStore(database).leaderboard_for_quiz("quiz-1", 5)

    assert [r.score for r in leaderboard] == [75]
    collection.find.assert_called_once_with({"quiz_id": "quiz-1"})
    sort_keys = collection.find.return_value.sort.call_args.args[0]
    assert [key for key, _ in sort_keys] == ["score", "time_spent_seconds", "completed_at"]
    cursor.limit.assert_called_once_with(5)


def test_zero_limit_returns_nothing(database, collection):
    assert MongoResultStore(database).global_leaderboard(0) == []
    collection.find.assert_not_called()


def test_submit_result_validates_before_insert(database, collection):
    store = MongoResultStore(database)
    collection.insert_one.return_value.inserted_id = ObjectId()

    assert store.submit_result(make_result()) == str(collection.insert_one.return_value.inserted_id)
    with pytest.raises(ValidationError):
        store.submit_result(make_result(score=120))
    assert collection.insert_one.call_count == 1
