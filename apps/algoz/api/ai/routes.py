from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from algoz.api.dependencies import get_db_session
from algoz.core.dependencies import get_ai_analysis_service
from algoz.core.exceptions import ServiceUnavailableError
from algoz.schemas.analysis import (
    AnalysisResult,
    DebugRequest,
    DebugSessionOut,
    ExplainRequest,
    ExplainSessionOut,
)
from algoz.services.ai_analysis import AIAnalysisService
from algoz.services.analysis_records import AnalysisRecordService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])


@router.post("/api/ai/debug", response_model=AnalysisResult)
def debug_code(
    payload: DebugRequest,
    svc: AIAnalysisService = Depends(get_ai_analysis_service),
    session: Session = Depends(get_db_session),
) -> AnalysisResult:
    try:
        text = svc.debug(payload.problem_statement, payload.code, payload.language)
    except Exception as exc:
        logger.exception("Debug analysis failed")
        raise ServiceUnavailableError("Failed to analyze code. Please try again later.") from exc

    if payload.user_id is not None:
        try:
            AnalysisRecordService(session).create_debug_session(
                problem_statement=payload.problem_statement,
                code=payload.code,
                language=payload.language,
                ai_response=text,
                user_id=payload.user_id,
            )
        except Exception:
            session.rollback()
            logger.exception("Failed to store debug session for user %s", payload.user_id)
    return AnalysisResult(result=text)


@router.post("/api/ai/explain", response_model=AnalysisResult)
def explain_code(
    payload: ExplainRequest,
    svc: AIAnalysisService = Depends(get_ai_analysis_service),
    session: Session = Depends(get_db_session),
) -> AnalysisResult:
    try:
        text = svc.explain(payload.problem_statement, payload.solution_code, payload.language)
    except Exception as exc:
        logger.exception("Explanation failed")
        raise ServiceUnavailableError(
            "Failed to generate explanation. Please try again later."
        ) from exc

    if payload.user_id is not None:
        try:
            AnalysisRecordService(session).create_explain_session(
                problem_statement=payload.problem_statement,
                solution_code=payload.solution_code,
                language=payload.language,
                ai_response=text,
                user_id=payload.user_id,
            )
        except Exception:
            session.rollback()
            logger.exception("Failed to store explain session for user %s", payload.user_id)
    return AnalysisResult(result=text)


@router.get("/api/debug-sessions/user/{user_id}", response_model=list[DebugSessionOut])
def list_debug_sessions(
    user_id: int,
    limit: int = Query(default=50, ge=1, le=200),
    session: Session = Depends(get_db_session),
) -> list[DebugSessionOut]:
    rows = AnalysisRecordService(session).list_debug_sessions(user_id, limit=limit)
    return [DebugSessionOut.model_validate(r, from_attributes=True) for r in rows]


@router.get("/api/explain-sessions/user/{user_id}", response_model=list[ExplainSessionOut])
def list_explain_sessions(
    user_id: int,
    limit: int = Query(default=50, ge=1, le=200),
    session: Session = Depends(get_db_session),
) -> list[ExplainSessionOut]:
    rows = AnalysisRecordService(session).list_explain_sessions(user_id, limit=limit)
    return [ExplainSessionOut.model_validate(r, from_attributes=True) for r in rows]
