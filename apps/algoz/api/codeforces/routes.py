from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from algoz.api.dependencies import get_db_session
from algoz.connectors.codeforces_connector import CodeforcesClient
from algoz.core.dependencies import get_codeforces_client
from algoz.schemas.codeforces import (
    CodeforcesProfileCreate,
    CodeforcesProfileOut,
    CodeforcesSearchResult,
    CodeforcesUser,
)
from algoz.services.codeforces_profiles import CodeforcesProfileService, to_profile_out

logger = logging.getLogger(__name__)

router = APIRouter(tags=["codeforces"])


@router.get("/api/codeforces/search", response_model=CodeforcesSearchResult)
async def search_profile(
    handle: str = Query(min_length=1, max_length=64),
    client: CodeforcesClient = Depends(get_codeforces_client),
) -> CodeforcesSearchResult:
    snapshot = await client.fetch_profile(handle.strip())
    return CodeforcesSearchResult(
        handle=snapshot.profile_data.get("handle") or handle.strip(),
        snapshot=snapshot,
        user=CodeforcesUser.model_validate(snapshot.profile_data),
    )


@router.get("/api/codeforces-profiles/user/{user_id}", response_model=CodeforcesProfileOut)
def get_profile_for_user(
    user_id: int,
    session: Session = Depends(get_db_session),
) -> CodeforcesProfileOut:
    row = CodeforcesProfileService(session).get_by_user(user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Codeforces profile not found")
    return to_profile_out(row)


@router.post(
    "/api/codeforces-profiles",
    response_model=CodeforcesProfileOut,
    status_code=status.HTTP_201_CREATED,
)
async def link_profile(
    payload: CodeforcesProfileCreate,
    client: CodeforcesClient = Depends(get_codeforces_client),
    session: Session = Depends(get_db_session),
) -> CodeforcesProfileOut:
    """Link a handle to a user, storing the current snapshot."""
    handle = payload.handle.strip()
    snapshot = await client.fetch_profile(handle)
    svc = CodeforcesProfileService(session)

    existing = await run_in_threadpool(svc.get_by_handle, handle)
    if existing is not None and existing.user_id != payload.user_id:
        raise HTTPException(status_code=409, detail="Handle is already linked to another user")
    try:
        row = await run_in_threadpool(
            lambda: svc.save_snapshot(user_id=payload.user_id, handle=handle, snapshot=snapshot)
        )
    except IntegrityError as exc:
        session.rollback()
        raise HTTPException(status_code=409, detail="Handle is already linked") from exc
    logger.info("Linked Codeforces handle %s to user %s", handle, payload.user_id)
    return to_profile_out(row)


@router.delete(
    "/api/codeforces-profiles/user/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
def unlink_profile(user_id: int, session: Session = Depends(get_db_session)) -> None:
    if not CodeforcesProfileService(session).unlink(user_id):
        raise HTTPException(status_code=404, detail="Codeforces profile not found")
