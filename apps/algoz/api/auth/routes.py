from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Session

from algoz.api.dependencies import get_current_user_id, get_db_session
from algoz.core.settings import settings
from algoz.models.user import User
from algoz.schemas.users import AuthStatus, LoginRequest, UserCreate, UserOut
from algoz.services.users import UserService, issue_session_token

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_out(user: User) -> UserOut:
    return UserOut.model_validate(user, from_attributes=True)


def _set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        issue_session_token(user.id or 0),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.app_env not in {"dev", "test", "ci"},
    )


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    response: Response,
    session: Session = Depends(get_db_session),
) -> UserOut:
    user = UserService(session).register(
        username=payload.username,
        password=payload.password,
        email=payload.email,
        display_name=payload.display_name,
        profile_picture=payload.profile_picture,
    )
    _set_session_cookie(response, user)
    return _user_out(user)


@router.post("/login", response_model=UserOut)
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_db_session),
) -> UserOut:
    user = UserService(session).authenticate(payload.username, payload.password)
    _set_session_cookie(response, user)
    return _user_out(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
def logout() -> Response:
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/status", response_model=AuthStatus)
def auth_status(
    user_id: int | None = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
) -> AuthStatus:
    if user_id is None:
        return AuthStatus(authenticated=False)
    user = UserService(session).get(user_id)
    if user is None:
        return AuthStatus(authenticated=False)
    return AuthStatus(authenticated=True, user=_user_out(user))


@router.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: int, session: Session = Depends(get_db_session)) -> UserOut:
    user = UserService(session).get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return _user_out(user)
