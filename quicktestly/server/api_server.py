"""FastAPI server that exposes the student and teacher endpoints."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
import logging
from threading import Thread
from typing import Iterator, Literal

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
import uvicorn

from quicktestly.constants.about import APP_NAME, APP_VERSION
from quicktestly.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    IDENTITY_COOKIE,
    IDENTITY_COOKIE_MAX_AGE,
)
from quicktestly.constants.quiz_constants import (
    DEFAULT_LEADERBOARD_LIMIT,
    DEFAULT_TIME_LIMIT_MINUTES,
    GLOBAL_LEADERBOARD_LIMIT,
)
from quicktestly.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    TransientError,
    ValidationError,
)
from quicktestly.core.markdown_math_renderer import renderer
from quicktestly.core.models import Quiz, QuizQuestion, QuizResult, UserIdentity, UserRole, make_identity
from quicktestly.core.quiz_manager import QuizManager
from quicktestly.core.services.leaderboard import QuizStatistics, find_user_rank, grade_for_score
from quicktestly.core.services.quiz_attempt import AttemptStatus, QuizAttempt
from quicktestly.server.student_page import STUDENT_PAGE_HTML

logger = logging.getLogger(__name__)


def _encode_identity_cookie(identity: UserIdentity) -> str:
    return f"{identity.role.value}|{identity.email}|{identity.name}"


def _decode_identity_cookie(value: str | None) -> UserIdentity | None:
    if not value:
        return None
    parts = value.split("|", 2)
    if len(parts) != 3:
        return None
    role_value, email, name = parts
    try:
        role = UserRole(role_value)
    except ValueError:
        return None
    if not email or not name:
        return None
    return make_identity(name, email, role)


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


@contextmanager
def _http_errors() -> Iterator[None]:
    """Translate domain errors raised inside an endpoint into HTTP errors."""
    try:
        yield
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PermissionDeniedError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=502,
            detail={"message": str(exc), "result": _result_payload(exc.result)},
        ) from exc
    except TransientError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# --- Payloads ---


class IdentityPayload(BaseModel):
    """Payload schema for signing in."""

    name: str = Field(min_length=1, max_length=80)
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@|\s]+@[^@|\s]+$")
    role: UserRole = UserRole.STUDENT


class QuestionPayload(BaseModel):
    question_text: str
    options: list[str]
    correct_option_index: int = 0


class QuizCreatePayload(BaseModel):
    """Payload schema for publishing a quiz from the API."""

    name: str
    description: str = ""
    time_limit_minutes: int = DEFAULT_TIME_LIMIT_MINUTES
    is_public: bool = True
    questions: list[QuestionPayload]


class StartAttemptPayload(BaseModel):
    quiz_id: str


class AnswerPayload(BaseModel):
    """Payload schema for selected answers."""

    question_id: str
    option: str


class NavigatePayload(BaseModel):
    index: int | None = None
    direction: Literal["next", "previous"] | None = None


class SubmitPayload(BaseModel):
    confirmed: bool = False


# --- Response bodies ---


def _identity_payload(identity: UserIdentity) -> dict[str, object]:
    return {
        "user_id": identity.user_id,
        "name": identity.name,
        "email": identity.email,
        "role": identity.role.value,
    }


def _quiz_summary(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "name": quiz.name,
        "description": quiz.description,
        "time_limit_minutes": quiz.time_limit_minutes,
        "question_count": quiz.question_count,
        "is_public": quiz.is_public,
        "created_by_teacher_name": quiz.created_by_teacher_name,
        "created_at": _iso(quiz.created_at),
    }


def _result_payload(result: QuizResult) -> dict[str, object]:
    return {
        "id": result.id,
        "quiz_id": result.quiz_id,
        "quiz_name": result.quiz_name,
        "user_id": result.user_id,
        "user_name": result.user_name,
        "score": result.score,
        "grade": grade_for_score(result.score),
        "correct_answers": result.correct_answers,
        "total_questions": result.total_questions,
        "time_spent_seconds": result.time_spent_seconds,
        "completed_at": _iso(result.completed_at),
    }


def _statistics_payload(stats: QuizStatistics) -> dict[str, object]:
    return {
        "total_attempts": stats.total_attempts,
        "average_score": stats.average_score,
        "unique_students": stats.unique_students,
        "pass_rate": stats.pass_rate,
    }


def _question_payload(question: QuizQuestion, selected: str | None, reveal: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "question_html": renderer.render_fragment(question.question_text),
        "options": [
            {"value": option, "html": renderer.render_inline(option)}
            for option in question.options
        ],
        "selected": selected,
    }
    if reveal:
        payload["correct_option"] = question.correct_option_value
    return payload


def _attempt_state(attempt: QuizAttempt) -> dict[str, object]:
    status = attempt.status
    finished = status in (AttemptStatus.COMPLETED, AttemptStatus.PERSIST_FAILED)
    result = attempt.result
    error = attempt.persistence_error
    return {
        "attempt_id": attempt.attempt_id,
        "quiz": _quiz_summary(attempt.quiz),
        "status": status.value,
        "started_at": _iso(attempt.started_at),
        "remaining_seconds": attempt.remaining_seconds,
        "low_time_warning": attempt.low_time_warning,
        "current_index": attempt.current_index,
        "question_count": attempt.question_count,
        "answered_count": attempt.answered_count(),
        "questions": [
            _question_payload(question, attempt.get_answer(question.id), reveal=finished)
            for question in attempt.questions
        ],
        "result": _result_payload(result) if result is not None else None,
        "forced": attempt.was_forced,
        "error": str(error) if error is not None else None,
    }


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def current_identity(request: Request) -> UserIdentity:
    identity = _decode_identity_cookie(request.cookies.get(IDENTITY_COOKIE))
    if identity is None:
        raise HTTPException(status_code=401, detail="Sign in first.")
    return identity


def optional_identity(request: Request) -> UserIdentity | None:
    return _decode_identity_cookie(request.cookies.get(IDENTITY_COOKIE))


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/", response_class=HTMLResponse)
    def serve_student_page() -> str:
        return STUDENT_PAGE_HTML

    # --- Identity ---

    @app.get("/identity")
    def get_identity(identity: UserIdentity | None = Depends(optional_identity)) -> dict[str, object]:
        return {"identity": _identity_payload(identity) if identity else None}

    @app.post("/identity", status_code=201)
    def set_identity(payload: IdentityPayload, response: Response) -> dict[str, object]:
        identity = make_identity(payload.name, payload.email, payload.role)
        response.set_cookie(
            key=IDENTITY_COOKIE,
            value=_encode_identity_cookie(identity),
            max_age=IDENTITY_COOKIE_MAX_AGE,
            samesite="lax",
            httponly=True,
        )
        return {"identity": _identity_payload(identity)}

    # --- Quizzes ---

    @app.get("/quizzes")
    def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        with _http_errors():
            quizzes = manager.list_public_quizzes()
        return {"quizzes": [_quiz_summary(quiz) for quiz in quizzes]}

    @app.post("/quizzes", status_code=201)
    def create_quiz(
        payload: QuizCreatePayload,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        quiz = Quiz(
            id="",
            name=payload.name,
            description=payload.description,
            time_limit_minutes=payload.time_limit_minutes,
            is_public=payload.is_public,
            questions=[
                QuizQuestion(
                    id="",
                    question_text=item.question_text,
                    options=list(item.options),
                    correct_option_index=item.correct_option_index,
                )
                for item in payload.questions
            ],
        )
        with _http_errors():
            quiz_id = manager.create_quiz(quiz, identity)
        return {"id": quiz_id}

    @app.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        with _http_errors():
            quiz = manager.get_quiz(quiz_id)
        return _quiz_summary(quiz)

    @app.delete("/quizzes/{quiz_id}", status_code=204)
    def delete_quiz(
        quiz_id: str,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> Response:
        with _http_errors():
            manager.delete_quiz(quiz_id, identity)
        return Response(status_code=204)

    @app.get("/quizzes/{quiz_id}/results")
    def quiz_results(
        quiz_id: str,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            results = manager.results_for_quiz(quiz_id, identity)
            stats = manager.quiz_statistics(quiz_id, identity)
        return {
            "statistics": _statistics_payload(stats),
            "results": [_result_payload(result) for result in results],
        }

    @app.get("/quizzes/{quiz_id}/leaderboard")
    def quiz_leaderboard(
        quiz_id: str,
        limit: int = DEFAULT_LEADERBOARD_LIMIT,
        identity: UserIdentity | None = Depends(optional_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            leaderboard = manager.leaderboard_for_quiz(quiz_id, limit)
        your_rank = find_user_rank(leaderboard, identity.user_id) if identity else None
        return {
            "leaderboard": [_result_payload(result) for result in leaderboard],
            "your_rank": your_rank,
        }

    @app.get("/leaderboard")
    def global_leaderboard(
        limit: int = GLOBAL_LEADERBOARD_LIMIT,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            leaderboard = manager.global_leaderboard(limit)
        return {"leaderboard": [_result_payload(result) for result in leaderboard]}

    @app.get("/me/results")
    def my_results(
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            results = manager.results_for_user(identity.user_id)
        return {"results": [_result_payload(result) for result in results]}

    # --- Attempts ---

    @app.post("/attempts", status_code=201)
    def start_attempt(
        payload: StartAttemptPayload,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            attempt = manager.start_attempt(payload.quiz_id, identity)
        return _attempt_state(attempt)

    @app.get("/attempts/{attempt_id}")
    def get_attempt(
        attempt_id: str,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            attempt = manager.get_attempt(attempt_id, identity)
        return _attempt_state(attempt)

    @app.post("/attempts/{attempt_id}/answer")
    def select_answer(
        attempt_id: str,
        payload: AnswerPayload,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            attempt = manager.get_attempt(attempt_id, identity)
            if attempt.is_finished():
                raise HTTPException(status_code=409, detail="This attempt has already been submitted.")
            changed = attempt.select_answer(payload.question_id, payload.option)
        return {"changed": changed, "answered_count": attempt.answered_count()}

    @app.post("/attempts/{attempt_id}/navigate")
    def navigate(
        attempt_id: str,
        payload: NavigatePayload,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        if payload.index is None and payload.direction is None:
            raise HTTPException(status_code=422, detail="Provide an index or a direction.")
        with _http_errors():
            attempt = manager.get_attempt(attempt_id, identity)
            if payload.index is not None:
                index = attempt.go_to_question(payload.index)
            elif payload.direction == "next":
                index = attempt.next_question()
            else:
                index = attempt.previous_question()
        return {"current_index": index}

    @app.post("/attempts/{attempt_id}/submit")
    def submit_attempt(
        attempt_id: str,
        payload: SubmitPayload,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            attempt = manager.get_attempt(attempt_id, identity)
            result = attempt.submit(confirm=lambda _unanswered: payload.confirmed)
        if result is None:
            raise HTTPException(
                status_code=409,
                detail={
                    "message": "Some questions are unanswered. Confirm to submit anyway.",
                    "unanswered": attempt.unanswered_count(),
                },
            )
        return _attempt_state(attempt)

    @app.post("/attempts/{attempt_id}/retry")
    def retry_attempt(
        attempt_id: str,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            attempt = manager.get_attempt(attempt_id, identity)
            attempt.retry_persist()
        return _attempt_state(attempt)

    @app.delete("/attempts/{attempt_id}", status_code=204)
    def abandon_attempt(
        attempt_id: str,
        identity: UserIdentity = Depends(current_identity),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> Response:
        with _http_errors():
            manager.discard_attempt(attempt_id, identity)
        return Response(status_code=204)

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level.lower())
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuickTestlyApiServer", daemon=True)
    thread.start()
    logger.info("Student server listening on http://%s:%s/", host, port)
    return thread
