from __future__ import annotations

from datetime import datetime

from pydantic import Field

from algoz.schemas.base import CamelModel


class DebugRequest(CamelModel):
    problem_statement: str = Field(min_length=1)
    code: str = Field(min_length=1)
    language: str = Field(min_length=1, max_length=32)
    user_id: int | None = None


class ExplainRequest(CamelModel):
    problem_statement: str = Field(min_length=1)
    solution_code: str = Field(min_length=1)
    language: str = Field(min_length=1, max_length=32)
    user_id: int | None = None


class AnalysisResult(CamelModel):
    result: str


class DebugSessionOut(CamelModel):
    id: int
    user_id: int | None
    problem_statement: str
    code: str
    language: str
    ai_response: str
    created_at: datetime | None


class ExplainSessionOut(CamelModel):
    id: int
    user_id: int | None
    problem_statement: str
    solution_code: str
    language: str
    ai_response: str
    created_at: datetime | None
