from __future__ import annotations

from typing import Iterator

from algoz.api.dependencies import get_db_session
from algoz.api.recommendations import router as recommendations_router
from algoz.core.dependencies import get_codeforces_client
from algoz.core.exceptions import register_exception_handlers
from algoz.schemas.codeforces import CodeforcesProblem, CodeforcesUser
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session


class _FakeCodeforces:
    async def fetch_user(self, handle: str) -> CodeforcesUser:
        return CodeforcesUser(handle=handle, rating=1500)

    async def fetch_solved_problem_ids(self, handle: str) -> set[str]:
        return {"1700A"}

    async def fetch_problemset(self, tags=None):  # noqa: ANN001, ANN201
        return [
            CodeforcesProblem(contest_id=1700, index="A", name="Solved", rating=1600),
            CodeforcesProblem(contest_id=1701, index="B", name="Fresh", rating=1600, tags=["dp"]),
            CodeforcesProblem(contest_id=1702, index="C", name="Too hard", rating=2400),
        ]


def _client(engine: Engine) -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(recommendations_router)

    def _session() -> Iterator[Session]:
        with Session(engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_codeforces_client] = lambda: _FakeCodeforces()
    return TestClient(app)


def test_generate_list_and_mark_solved(sqlite_engine: Engine):
    client = _client(sqlite_engine)

    generated = client.post(
        "/api/problem-recommendations/generate", json={"userId": 5, "handle": "alice", "count": 3}
    )
    assert generated.status_code == 201
    (rec,) = generated.json()
    assert rec["problemId"] == "1701B"
    assert rec["problemUrl"] == "https://codeforces.com/problemset/problem/1701/B"
    assert rec["tags"] == ["dp"]
    assert rec["status"] == "recommended"

    listed = client.get("/api/problem-recommendations/user/5").json()
    assert [r["id"] for r in listed] == [rec["id"]]

    updated = client.patch(f"/api/problem-recommendations/{rec['id']}", json={"status": "solved"})
    assert updated.status_code == 200
    assert updated.json()["solvedOn"] is not None


def test_unknown_recommendation_and_bad_status(sqlite_engine: Engine):
    client = _client(sqlite_engine)
    assert client.patch("/api/problem-recommendations/999", json={"status": "solved"}).status_code == 404
    assert client.patch("/api/problem-recommendations/1", json={"status": "done"}).status_code == 422


def test_count_is_bounded(sqlite_engine: Engine):
    resp = _client(sqlite_engine).post(
        "/api/problem-recommendations/generate", json={"userId": 5, "handle": "alice", "count": 50}
    )
    assert resp.status_code == 422
