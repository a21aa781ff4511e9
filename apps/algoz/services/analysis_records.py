"""Persistence for completed debug/explain analyses."""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel import Session, select

from algoz.models.analysis import DebugSession, ExplainSession


@dataclass
class AnalysisRecordService:
    session: Session

    def create_debug_session(
        self,
        *,
        problem_statement: str,
        code: str,
        language: str,
        ai_response: str,
        user_id: int | None = None,
    ) -> DebugSession:
        row = DebugSession(
            problem_statement=problem_statement,
            code=code,
            language=language,
            ai_response=ai_response,
            user_id=user_id,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def create_explain_session(
        self,
        *,
        problem_statement: str,
        solution_code: str,
        language: str,
        ai_response: str,
        user_id: int | None = None,
    ) -> ExplainSession:
        row = ExplainSession(
            problem_statement=problem_statement,
            solution_code=solution_code,
            language=language,
            ai_response=ai_response,
            user_id=user_id,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def list_debug_sessions(self, user_id: int, *, limit: int = 50) -> list[DebugSession]:
        stmt = (
            select(DebugSession)
            .where(DebugSession.user_id == user_id)
            .order_by(DebugSession.created_at.desc(), DebugSession.id.desc())
            .limit(limit)
        )
        return list(self.session.exec(stmt))

    def list_explain_sessions(self, user_id: int, *, limit: int = 50) -> list[ExplainSession]:
        stmt = (
            select(ExplainSession)
            .where(ExplainSession.user_id == user_id)
            .order_by(ExplainSession.created_at.desc(), ExplainSession.id.desc())
            .limit(limit)
        )
        return list(self.session.exec(stmt))


__all__ = ["AnalysisRecordService"]
