from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from algoz.api.dependencies import get_db_session
from algoz.models.study import LearningResource, StudyRoutine
from algoz.schemas.study import LearningResourceOut, StudyRoutineCreate, StudyRoutineOut
from algoz.services.learning_resources import LearningResourceService
from algoz.services.study_routines import StudyRoutineService

router = APIRouter(tags=["study"])


def _routine_out(row: StudyRoutine) -> StudyRoutineOut:
    return StudyRoutineOut(
        id=row.id or 0,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        current_rating=row.current_rating,
        target_rating=row.target_rating,
        study_hours_per_week=row.study_hours_per_week,
        contest_participation=row.contest_participation,
        start_date=row.start_date,
        end_date=row.end_date,
        topics=list(row.topics or []),
        schedule=dict(row.schedule or {}),
        routine=dict(row.routine or {}),
        created_at=row.created_at,
    )


def _resource_out(row: LearningResource) -> LearningResourceOut:
    return LearningResourceOut(
        id=row.id or 0,
        title=row.title,
        description=row.description,
        url=row.url,
        resource_type=row.resource_type,
        tags=list(row.tags or []),
        difficulty=row.difficulty,
        source=row.source,
    )


@router.post("/api/study-routines", response_model=StudyRoutineOut, status_code=status.HTTP_201_CREATED)
def create_study_routine(
    payload: StudyRoutineCreate,
    session: Session = Depends(get_db_session),
) -> StudyRoutineOut:
    return _routine_out(StudyRoutineService(session).create(payload))


@router.get("/api/study-routines/user/{user_id}", response_model=list[StudyRoutineOut])
def list_study_routines(
    user_id: int, session: Session = Depends(get_db_session)
) -> list[StudyRoutineOut]:
    return [_routine_out(r) for r in StudyRoutineService(session).list_for_user(user_id)]


@router.get("/api/learning-resources", response_model=list[LearningResourceOut])
def list_learning_resources(
    tag: str | None = None,
    resource_type: str | None = Query(default=None, alias="resourceType"),
    difficulty: str | None = None,
    session: Session = Depends(get_db_session),
) -> list[LearningResourceOut]:
    rows = LearningResourceService(session).list_resources(
        tag=tag, resource_type=resource_type, difficulty=difficulty
    )
    return [_resource_out(r) for r in rows]
