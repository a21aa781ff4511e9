from __future__ import annotations

from algoz.services.analysis_records import AnalysisRecordService
from sqlmodel import Session


def test_sessions_are_listed_newest_first_per_user(db_session: Session):
    svc = AnalysisRecordService(db_session)
    older = svc.create_debug_session(
        problem_statement="p1", code="c1", language="cpp", ai_response="r1", user_id=1
    )
    newer = svc.create_debug_session(
        problem_statement="p2", code="c2", language="cpp", ai_response="r2", user_id=1
    )
    svc.create_debug_session(
        problem_statement="p3", code="c3", language="cpp", ai_response="r3", user_id=2
    )

    rows = svc.list_debug_sessions(1)
    assert [r.id for r in rows] == [newer.id, older.id]
    assert [r.id for r in svc.list_debug_sessions(1, limit=1)] == [newer.id]


def test_explain_sessions_keep_solution_code(db_session: Session):
    svc = AnalysisRecordService(db_session)
    row = svc.create_explain_session(
        problem_statement="p", solution_code="s", language="java", ai_response="r", user_id=5
    )
    (listed,) = svc.list_explain_sessions(5)
    assert listed.id == row.id
    assert listed.solution_code == "s"
    assert svc.list_explain_sessions(6) == []
