from __future__ import annotations

import pytest
from algoz.schemas.codeforces import CodeforcesProblem, CodeforcesUser
from algoz.services.recommendations import (
    RecommendationService,
    generate_recommendations,
    rating_band,
    select_problems,
)
from sqlmodel import Session


def _problem(contest_id: int, index: str, rating: int | None) -> CodeforcesProblem:
    return CodeforcesProblem(
        contest_id=contest_id, index=index, name=f"P{contest_id}{index}", rating=rating, tags=["math"]
    )


@pytest.mark.parametrize(
    ("rating", "band"),
    [(None, (800, 1100)), (0, (800, 1100)), (1234, (1200, 1500)), (1999, (1900, 2200))],
)
def test_rating_band(rating, band):
    assert rating_band(rating) == band


def test_select_problems_filters_band_excludes_and_ranks():
    problems = [
        _problem(100, "A", 1200),
        _problem(101, "B", 1300),
        _problem(102, "C", 1300),
        _problem(103, "D", 1600),  # above band
        _problem(104, "E", None),  # unrated
        _problem(105, "F", 1400),
        _problem(101, "B", 1300),  # duplicate entry
    ]

    picked = select_problems(problems, rating=1250, exclude={"100A"}, count=3)

    # Closest to 1300 first, newer contests break ties.
    assert [p.problem_id for p in picked] == ["102C", "101B", "105F"]


def test_select_problems_respects_count():
    problems = [_problem(200 + i, "A", 900) for i in range(10)]
    assert len(select_problems(problems, rating=None, exclude=set(), count=4)) == 4


class _FakeClient:
    def __init__(self, problems: list[CodeforcesProblem]) -> None:
        self.problems = problems

    async def fetch_user(self, handle: str) -> CodeforcesUser:
        return CodeforcesUser(handle=handle, rating=1210)

    async def fetch_solved_problem_ids(self, handle: str) -> set[str]:
        return {"300A"}

    async def fetch_problemset(self, tags=None):  # noqa: ANN001, ANN201
        return self.problems


@pytest.mark.asyncio
async def test_generate_skips_solved_and_previously_recommended(db_session: Session):
    client = _FakeClient([_problem(300, "A", 1300), _problem(301, "A", 1300), _problem(302, "A", 1300)])

    first = await generate_recommendations(
        client=client, session=db_session, user_id=1, handle="alice", count=1  # type: ignore[arg-type]
    )
    second = await generate_recommendations(
        client=client, session=db_session, user_id=1, handle="alice", count=5  # type: ignore[arg-type]
    )

    assert [r.problem_id for r in first] == ["302A"]
    assert [r.problem_id for r in second] == ["301A"]
    assert first[0].problem_url == "https://codeforces.com/problemset/problem/302/A"
    assert first[0].status == "recommended"


def test_update_status_tracks_solved_on(db_session: Session):
    svc = RecommendationService(db_session)
    (row,) = svc.store(7, [_problem(400, "B", 1500)])

    solved = svc.update_status(row, "solved")
    assert solved.solved_on is not None

    reopened = svc.update_status(solved, "attempted")
    assert reopened.solved_on is None
    assert [r.id for r in svc.list_for_user(7)] == [row.id]
