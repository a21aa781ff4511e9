from __future__ import annotations

from typing import Iterator

from algoz.api.ai import router as ai_router
from algoz.api.dependencies import get_db_session
from algoz.core.dependencies import get_ai_analysis_service
from algoz.core.exceptions import register_exception_handlers
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session


class _FakeAnalysis:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail

    def debug(self, problem_statement: str, code: str, language: str) -> str:
        if self.fail:
            raise RuntimeError("GEMINI_API_KEY not found")
        return "found the bug"

    def explain(self, problem_statement: str, solution_code: str, language: str) -> str:
        if self.fail:
            raise RuntimeError("timeout")
        return "here is how it works"


def _create_app(engine: Engine, analysis: _FakeAnalysis) -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(ai_router)

    def _session() -> Iterator[Session]:
        with Session(engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_ai_analysis_service] = lambda: analysis
    return TestClient(app)


def test_debug_returns_result_and_records_for_known_user(sqlite_engine: Engine):
    client = _create_app(sqlite_engine, _FakeAnalysis())

    resp = client.post(
        "/api/ai/debug",
        json={"problemStatement": "A+B", "code": "print(1)", "language": "python", "userId": 9},
    )
    assert resp.status_code == 200
    assert resp.json() == {"result": "found the bug"}

    sessions = client.get("/api/debug-sessions/user/9").json()
    assert len(sessions) == 1
    assert sessions[0]["aiResponse"] == "found the bug"
    assert sessions[0]["problemStatement"] == "A+B"


def test_anonymous_explain_is_not_recorded(sqlite_engine: Engine):
    client = _create_app(sqlite_engine, _FakeAnalysis())

    resp = client.post(
        "/api/ai/explain",
        json={"problemStatement": "p", "solutionCode": "s", "language": "cpp"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"result": "here is how it works"}
    assert client.get("/api/explain-sessions/user/1").json() == []


def test_generation_failures_map_to_503(sqlite_engine: Engine):
    client = _create_app(sqlite_engine, _FakeAnalysis(fail=True))

    debug = client.post(
        "/api/ai/debug", json={"problemStatement": "p", "code": "c", "language": "go"}
    )
    assert debug.status_code == 503
    assert debug.json()["error"] == "Failed to analyze code. Please try again later."

    explain = client.post(
        "/api/ai/explain", json={"problemStatement": "p", "solutionCode": "s", "language": "go"}
    )
    assert explain.status_code == 503
    assert explain.json()["error"] == "Failed to generate explanation. Please try again later."


def test_missing_fields_are_validation_errors(sqlite_engine: Engine):
    client = _create_app(sqlite_engine, _FakeAnalysis())
    resp = client.post("/api/ai/debug", json={"code": "c", "language": "go"})
    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"
