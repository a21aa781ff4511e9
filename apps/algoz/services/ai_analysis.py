"""Debug and explain analyses backed by the generation service.

Both operations render a fixed prompt template around the user's problem
statement, code and language and make one generation call. Methods are
blocking; async callers go through the threadpool.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Callable

from sqlmodel import Session

from algoz.core.database import session_scope
from algoz.models.analysis import DebugSession, ExplainSession
from algoz.prompts import render_prompt
from algoz.services.analysis_records import AnalysisRecordService
from algoz.services.llm_service import LLMService

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


def build_debug_prompt(problem_statement: str, code: str, language: str) -> str:
    return render_prompt(
        "debug.md", problem_statement=problem_statement, code=code, language=language
    )


def build_explain_prompt(problem_statement: str, solution_code: str, language: str) -> str:
    return render_prompt(
        "explain.md", problem_statement=problem_statement, code=solution_code, language=language
    )


class AIAnalysisService:
    def __init__(
        self,
        llm: LLMService,
        *,
        session_factory: SessionFactory = session_scope,
    ) -> None:
        self._llm = llm
        self._session_factory = session_factory

    def debug(self, problem_statement: str, code: str, language: str) -> str:
        prompt = build_debug_prompt(problem_statement, code, language)
        logger.info("Generating debug analysis (language=%s, code_chars=%d)", language, len(code))
        return self._llm.generate(prompt)

    def explain(self, problem_statement: str, solution_code: str, language: str) -> str:
        prompt = build_explain_prompt(problem_statement, solution_code, language)
        logger.info(
            "Generating explanation (language=%s, code_chars=%d)", language, len(solution_code)
        )
        return self._llm.generate(prompt)

    # ---------- session records ----------

    def record_debug(
        self,
        *,
        problem_statement: str,
        code: str,
        language: str,
        ai_response: str,
        user_id: int | None,
    ) -> DebugSession:
        with self._session_factory() as session:
            return AnalysisRecordService(session).create_debug_session(
                problem_statement=problem_statement,
                code=code,
                language=language,
                ai_response=ai_response,
                user_id=user_id,
            )

    def record_explain(
        self,
        *,
        problem_statement: str,
        solution_code: str,
        language: str,
        ai_response: str,
        user_id: int | None,
    ) -> ExplainSession:
        with self._session_factory() as session:
            return AnalysisRecordService(session).create_explain_session(
                problem_statement=problem_statement,
                solution_code=solution_code,
                language=language,
                ai_response=ai_response,
                user_id=user_id,
            )


__all__ = ["AIAnalysisService", "build_debug_prompt", "build_explain_prompt"]
