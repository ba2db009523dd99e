"""HTTP tests for the FastAPI app using TestClient."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from conftest import make_quiz
from quicktestly.core.errors import TransientError
from quicktestly.server.api_server import create_api_app


@pytest.fixture
def client(manager):
    with TestClient(create_api_app(manager)) as test_client:
        yield test_client


def sign_in(client, name="Sam Student", email="sam@school.test", role="student"):
    response = client.post("/identity", json={"name": name, "email": email, "role": role})
    assert response.status_code == 201
    return response.json()["identity"]


def create_quiz(client, question_count=4, **overrides):
    sign_in(client, "Ada Teacher", "ada@school.test", "teacher")
    quiz = make_quiz(question_count=question_count, **overrides)
    payload = {
        "name": quiz.name,
        "description": quiz.description,
        "time_limit_minutes": quiz.time_limit_minutes,
        "is_public": quiz.is_public,
        "questions": [
            {
                "question_text": q.question_text,
                "options": q.options,
                "correct_option_index": q.correct_option_index,
            }
            for q in quiz.questions
        ],
    }
    response = client.post("/quizzes", json=payload)
    assert response.status_code == 201
    return response.json()["id"]


def correct_answers(manager, quiz_id):
    return {q.id: q.correct_option_value for q in manager.get_quiz(quiz_id).questions}


def test_student_page_is_served(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "QuickTestly" in response.text


def test_identity_cookie_round_trip(client):
    assert client.get("/identity").json() == {"identity": None}
    identity = sign_in(client)
    assert identity["role"] == "student"
    assert client.get("/identity").json()["identity"] == identity


def test_identity_requires_a_valid_email(client):
    response = client.post("/identity", json={"name": "Sam", "email": "nope"})
    assert response.status_code == 422


def test_endpoints_require_identity(client):
    assert client.post("/attempts", json={"quiz_id": "x"}).status_code == 401
    assert client.get("/me/results").status_code == 401


def test_students_cannot_publish(client):
    sign_in(client)
    response = client.post("/quizzes", json={"name": "x", "questions": []})
    assert response.status_code == 403


def test_invalid_quiz_is_rejected(client):
    sign_in(client, "Ada Teacher", "ada@school.test", "teacher")
    response = client.post("/quizzes", json={"name": "Empty", "questions": []})
    assert response.status_code == 422


def test_quiz_listing_hides_answers(client):
    quiz_id = create_quiz(client)
    listing = client.get("/quizzes").json()["quizzes"]
    assert [q["id"] for q in listing] == [quiz_id]
    summary = client.get(f"/quizzes/{quiz_id}").json()
    assert summary["question_count"] == 4
    assert "questions" not in summary
    assert client.get("/quizzes/missing").status_code == 404


def test_full_attempt_flow(client, manager):
    quiz_id = create_quiz(client)
    answers = correct_answers(manager, quiz_id)
    student = sign_in(client)

    state = client.post("/attempts", json={"quiz_id": quiz_id}).json()
    attempt_id = state["attempt_id"]
    assert state["status"] == "in_progress"
    assert state["remaining_seconds"] == 60
    assert all("correct_option" not in q for q in state["questions"])

    first = state["questions"][0]
    response = client.post(
        f"/attempts/{attempt_id}/answer",
        json={"question_id": first["id"], "option": answers[first["id"]]},
    )
    assert response.json() == {"changed": True, "answered_count": 1}

    response = client.post(f"/attempts/{attempt_id}/submit", json={})
    assert response.status_code == 409
    assert response.json()["detail"]["unanswered"] == 3

    for question in state["questions"][1:]:
        client.post(
            f"/attempts/{attempt_id}/answer",
            json={"question_id": question["id"], "option": answers[question["id"]]},
        )
    done = client.post(f"/attempts/{attempt_id}/submit", json={"confirmed": False}).json()
    assert done["status"] == "completed"
    assert done["result"]["score"] == 100
    assert done["result"]["grade"] == "A"
    assert all(q["correct_option"] == answers[q["id"]] for q in done["questions"])

    board = client.get(f"/quizzes/{quiz_id}/leaderboard").json()
    assert board["your_rank"] == 1
    assert board["leaderboard"][0]["user_id"] == student["user_id"]
    assert len(client.get("/me/results").json()["results"]) == 1
    assert len(client.get("/leaderboard").json()["leaderboard"]) == 1

    resubmit = client.post(f"/attempts/{attempt_id}/submit", json={"confirmed": True}).json()
    assert resubmit["result"]["id"] == done["result"]["id"]

    sign_in(client, "Ada Teacher", "ada@school.test", "teacher")
    results = client.get(f"/quizzes/{quiz_id}/results").json()
    assert results["statistics"] == {
        "total_attempts": 1,
        "average_score": 100,
        "unique_students": 1,
        "pass_rate": 100,
    }


def test_confirmed_submit_with_unanswered_questions(client):
    quiz_id = create_quiz(client)
    sign_in(client)
    attempt_id = client.post("/attempts", json={"quiz_id": quiz_id}).json()["attempt_id"]
    done = client.post(f"/attempts/{attempt_id}/submit", json={"confirmed": True}).json()
    assert done["result"]["score"] == 0
    assert done["result"]["grade"] == "D"


def test_navigation_and_answer_validation(client):
    quiz_id = create_quiz(client)
    sign_in(client)
    state = client.post("/attempts", json={"quiz_id": quiz_id}).json()
    attempt_id = state["attempt_id"]

    def navigate(payload):
        return client.post(f"/attempts/{attempt_id}/navigate", json=payload)

    assert navigate({"index": 2}).json() == {"current_index": 2}
    assert navigate({"index": 9}).json() == {"current_index": 2}
    assert navigate({"direction": "next"}).json() == {"current_index": 3}
    assert navigate({"direction": "previous"}).json() == {"current_index": 2}
    assert navigate({}).status_code == 422
    assert client.post("/attempts/missing/navigate", json={"direction": "next"}).status_code == 404

    question_id = state["questions"][0]["id"]
    response = client.post(f"/attempts/{attempt_id}/answer", json={"question_id": question_id, "option": "??"})
    assert response.status_code == 422


def test_attempts_belong_to_their_owner(client):
    quiz_id = create_quiz(client)
    sign_in(client)
    attempt_id = client.post("/attempts", json={"quiz_id": quiz_id}).json()["attempt_id"]
    sign_in(client, "Eve", "eve@school.test")
    assert client.get(f"/attempts/{attempt_id}").status_code == 404


def test_abandoning_an_attempt(client):
    quiz_id = create_quiz(client)
    sign_in(client)
    attempt_id = client.post("/attempts", json={"quiz_id": quiz_id}).json()["attempt_id"]
    assert client.delete(f"/attempts/{attempt_id}").status_code == 204
    assert client.get(f"/attempts/{attempt_id}").status_code == 404


def test_persistence_failure_returns_result_and_can_be_retried(client, result_store, monkeypatch):
    quiz_id = create_quiz(client)
    sign_in(client)
    attempt_id = client.post("/attempts", json={"quiz_id": quiz_id}).json()["attempt_id"]

    real_submit = result_store.submit_result
    calls = []

    def flaky_submit(result):
        calls.append(result)
        if len(calls) == 1:
            raise TransientError("store offline")
        return real_submit(result)

    monkeypatch.setattr(result_store, "submit_result", flaky_submit)

    response = client.post(f"/attempts/{attempt_id}/submit", json={"confirmed": True})
    assert response.status_code == 502
    assert response.json()["detail"]["result"]["score"] == 0
    assert client.get(f"/attempts/{attempt_id}").json()["status"] == "persist_failed"

    retried = client.post(f"/attempts/{attempt_id}/retry")
    assert retried.status_code == 200
    assert retried.json()["status"] == "completed"
    assert len(calls) == 2


def test_store_outage_maps_to_503(client, quiz_store, monkeypatch):
    def offline():
        raise TransientError("store offline")

    monkeypatch.setattr(quiz_store, "list_public_quizzes", offline)
    assert client.get("/quizzes").status_code == 503


def test_teacher_deletes_own_quiz(client):
    quiz_id = create_quiz(client)
    assert client.delete(f"/quizzes/{quiz_id}").status_code == 204
    assert client.get(f"/quizzes/{quiz_id}").status_code == 404
    sign_in(client)
    assert client.delete(f"/quizzes/{quiz_id}").status_code == 403
