"""Shared API dependencies."""

from collections.abc import Generator

from fastapi import Request
from sqlmodel import Session

from algoz.core.database import get_session
from algoz.core.settings import settings
from algoz.services.users import read_session_token


def get_db_session() -> Generator[Session, None, None]:
    """Provide a database session for request handlers."""
    yield from get_session()


def get_current_user_id(request: Request) -> int | None:
    """User id from the signed session cookie, or None when anonymous."""
    return read_session_token(request.cookies.get(settings.session_cookie_name))


__all__ = ["get_current_user_id", "get_db_session"]
