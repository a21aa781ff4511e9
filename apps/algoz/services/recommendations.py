"""Problem recommendations drawn from the Codeforces problemset."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from algoz.connectors.codeforces_connector import CodeforcesClient
from algoz.core.utils import round_down, utcnow_naive
from algoz.models.study import ProblemRecommendation
from algoz.schemas.codeforces import CodeforcesProblem

logger = logging.getLogger(__name__)

MIN_PROBLEM_RATING = 800
BAND_WIDTH = 300
TARGET_OFFSET = 100


def rating_band(rating: int | None) -> tuple[int, int]:
    """Inclusive difficulty band just above the user's current rating."""
    base = max(MIN_PROBLEM_RATING, round_down(rating or MIN_PROBLEM_RATING, 100))
    return base, base + BAND_WIDTH


def select_problems(
    problems: Iterable[CodeforcesProblem],
    *,
    rating: int | None,
    exclude: set[str],
    count: int,
) -> list[CodeforcesProblem]:
    lo, hi = rating_band(rating)
    target = lo + TARGET_OFFSET
    seen: set[str] = set()
    candidates: list[CodeforcesProblem] = []
    for problem in problems:
        if problem.rating is None or not lo <= problem.rating <= hi:
            continue
        pid = problem.problem_id
        if pid in exclude or pid in seen:
            continue
        seen.add(pid)
        candidates.append(problem)
    candidates.sort(key=lambda p: (abs((p.rating or 0) - target), -(p.contest_id or 0), p.index))
    return candidates[:count]


@dataclass
class RecommendationService:
    session: Session

    def list_for_user(self, user_id: int) -> list[ProblemRecommendation]:
        stmt = (
            select(ProblemRecommendation)
            .where(ProblemRecommendation.user_id == user_id)
            .order_by(ProblemRecommendation.created_at.desc(), ProblemRecommendation.id.desc())
        )
        return list(self.session.exec(stmt))

    def get(self, recommendation_id: int) -> ProblemRecommendation | None:
        return self.session.get(ProblemRecommendation, recommendation_id)

    def known_problem_ids(self, user_id: int) -> set[str]:
        stmt = select(ProblemRecommendation.problem_id).where(
            ProblemRecommendation.user_id == user_id
        )
        return set(self.session.exec(stmt))

    def store(self, user_id: int, problems: list[CodeforcesProblem]) -> list[ProblemRecommendation]:
        rows = [
            ProblemRecommendation(
                user_id=user_id,
                problem_id=p.problem_id,
                problem_title=p.name,
                problem_url=p.url,
                difficulty=p.rating,
                tags=list(p.tags),
                source="codeforces",
            )
            for p in problems
        ]
        self.session.add_all(rows)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        for row in rows:
            self.session.refresh(row)
        return rows

    def update_status(self, row: ProblemRecommendation, status: str) -> ProblemRecommendation:
        row.status = status
        row.solved_on = utcnow_naive() if status == "solved" else None
        row.updated_at = utcnow_naive()
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row


async def generate_recommendations(
    *,
    client: CodeforcesClient,
    session: Session,
    user_id: int,
    handle: str,
    count: int,
) -> list[ProblemRecommendation]:
    """Recommend `count` unsolved, not-yet-recommended problems for `handle`."""
    user = await client.fetch_user(handle)
    solved = await client.fetch_solved_problem_ids(handle)
    problems = await client.fetch_problemset()

    svc = RecommendationService(session)
    already = await run_in_threadpool(svc.known_problem_ids, user_id)
    picked = select_problems(
        problems, rating=user.rating, exclude=solved | already, count=count
    )
    logger.info(
        "Generated %d recommendations for %s (rating=%s, solved=%d)",
        len(picked),
        handle,
        user.rating,
        len(solved),
    )
    return await run_in_threadpool(svc.store, user_id, picked)


__all__ = [
    "RecommendationService",
    "generate_recommendations",
    "rating_band",
    "select_problems",
]
