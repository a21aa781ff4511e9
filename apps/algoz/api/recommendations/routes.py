from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from algoz.api.dependencies import get_db_session
from algoz.connectors.codeforces_connector import CodeforcesClient
from algoz.core.dependencies import get_codeforces_client
from algoz.models.study import ProblemRecommendation
from algoz.schemas.study import (
    RecommendationGenerateRequest,
    RecommendationOut,
    RecommendationUpdate,
)
from algoz.services.recommendations import RecommendationService, generate_recommendations

router = APIRouter(prefix="/api/problem-recommendations", tags=["recommendations"])


def _recommendation_out(row: ProblemRecommendation) -> RecommendationOut:
    return RecommendationOut(
        id=row.id or 0,
        user_id=row.user_id,
        problem_id=row.problem_id,
        problem_title=row.problem_title,
        problem_url=row.problem_url,
        difficulty=row.difficulty,
        tags=list(row.tags or []),
        source=row.source,
        status=row.status,
        solved_on=row.solved_on,
        created_at=row.created_at,
    )


@router.get("/user/{user_id}", response_model=list[RecommendationOut])
def list_recommendations(
    user_id: int, session: Session = Depends(get_db_session)
) -> list[RecommendationOut]:
    return [_recommendation_out(r) for r in RecommendationService(session).list_for_user(user_id)]


@router.post(
    "/generate", response_model=list[RecommendationOut], status_code=status.HTTP_201_CREATED
)
async def generate(
    payload: RecommendationGenerateRequest,
    client: CodeforcesClient = Depends(get_codeforces_client),
    session: Session = Depends(get_db_session),
) -> list[RecommendationOut]:
    try:
        rows = await generate_recommendations(
            client=client,
            session=session,
            user_id=payload.user_id,
            handle=payload.handle.strip(),
            count=payload.count,
        )
    except IntegrityError as exc:
        raise HTTPException(status_code=409, detail="Recommendations changed concurrently") from exc
    return [_recommendation_out(r) for r in rows]


@router.patch("/{recommendation_id}", response_model=RecommendationOut)
def update_recommendation(
    recommendation_id: int,
    payload: RecommendationUpdate,
    session: Session = Depends(get_db_session),
) -> RecommendationOut:
    svc = RecommendationService(session)
    row = svc.get(recommendation_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return _recommendation_out(svc.update_status(row, payload.status))
