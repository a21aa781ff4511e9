"""Async client for the public Codeforces API.

Only unauthenticated methods are used. Every call returns the ``result`` member
of the ``{"status": "OK", "result": ...}`` envelope or raises.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import httpx

from algoz.core.exceptions import ProfileNotFoundError, ServiceUnavailableError
from algoz.core.settings import settings
from algoz.schemas.codeforces import CodeforcesProblem, CodeforcesUser
from algoz.schemas.realtime import ProfileSnapshot

logger = logging.getLogger(__name__)

ACCEPTED_VERDICT = "OK"


def _problem_key(problem: dict[str, Any]) -> str | None:
    index = problem.get("index")
    if not index:
        return None
    contest_id = problem.get("contestId")
    return f"{contest_id}{index}" if contest_id is not None else str(index)


class CodeforcesClient:
    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.codeforces_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.codeforces_timeout_seconds
        self._transport = transport

    async def _call(self, method: str, params: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.get(f"/{method}", params=params)
        except httpx.HTTPError as exc:
            logger.warning("Codeforces %s request failed: %s", method, exc)
            raise ServiceUnavailableError("Codeforces API is unreachable") from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            logger.warning("Codeforces %s returned HTTP %s without JSON", method, resp.status_code)
            raise ServiceUnavailableError("Codeforces API returned an invalid response")

        if payload.get("status") != "OK":
            comment = str(payload.get("comment") or "")
            if "not found" in comment.lower():
                raise ProfileNotFoundError(
                    "Codeforces handle not found", details={"comment": comment}
                )
            logger.warning("Codeforces %s failed (HTTP %s): %s", method, resp.status_code, comment)
            raise ServiceUnavailableError("Codeforces API request failed", details={"comment": comment})

        return payload.get("result")

    async def fetch_user_info(self, handle: str) -> dict[str, Any]:
        result = await self._call("user.info", {"handles": handle})
        if not result:
            raise ProfileNotFoundError("Codeforces handle not found")
        return result[0]

    async def fetch_user(self, handle: str) -> CodeforcesUser:
        return CodeforcesUser.model_validate(await self.fetch_user_info(handle))

    async def fetch_submissions(self, handle: str) -> list[dict[str, Any]]:
        return list(await self._call("user.status", {"handle": handle}) or [])

    async def fetch_solved_problem_ids(self, handle: str) -> set[str]:
        solved: set[str] = set()
        for submission in await self.fetch_submissions(handle):
            if submission.get("verdict") != ACCEPTED_VERDICT:
                continue
            key = _problem_key(submission.get("problem") or {})
            if key:
                solved.add(key)
        return solved

    async def fetch_contest_count(self, handle: str) -> int:
        return len(await self._call("user.rating", {"handle": handle}) or [])

    async def fetch_profile(self, handle: str) -> ProfileSnapshot:
        """Collect rating, rank, solved count and contest count for one handle."""
        info = await self.fetch_user_info(handle)
        solved = await self.fetch_solved_problem_ids(handle)
        contests = await self.fetch_contest_count(handle)
        return ProfileSnapshot(
            rating=info.get("rating"),
            max_rating=info.get("maxRating"),
            rank=info.get("rank"),
            max_rank=info.get("maxRank"),
            problems_solved=len(solved),
            contests_participated=contests,
            profile_data=info,
        )

    async def fetch_problemset(self, tags: Iterable[str] | None = None) -> list[CodeforcesProblem]:
        params: dict[str, Any] = {}
        tag_list = [t.strip() for t in (tags or []) if t and t.strip()]
        if tag_list:
            params["tags"] = ";".join(tag_list)
        result = await self._call("problemset.problems", params) or {}
        problems = result.get("problems") if isinstance(result, dict) else None
        return [CodeforcesProblem.model_validate(p) for p in problems or [] if isinstance(p, dict)]


__all__ = ["CodeforcesClient"]
