"""User accounts and signed-cookie sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from algoz.core.exceptions import AlgozException, AuthenticationError
from algoz.core.settings import settings
from algoz.core.utils import utcnow_naive
from algoz.models.user import User

logger = logging.getLogger(__name__)

_hasher = PasswordHasher(type=Type.ID)


def hash_password(password: str) -> str:
    """Return an Argon2id hash (salt and parameters encoded in the string)."""
    return _hasher.hash(password)


def verify_password(password: str, stored: str) -> bool:
    try:
        return _hasher.verify(stored, password)
    except (VerificationError, InvalidHashError):
        return False


class UsernameTakenError(AlgozException):
    status_code = 409
    default_code = "username_taken"


def _session_signer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.secret_key.get_secret_value(), salt="algoz-session")


def issue_session_token(user_id: int) -> str:
    return _session_signer().dumps({"uid": user_id})


def read_session_token(token: str | None) -> int | None:
    """Return the user id carried by a valid, unexpired token."""
    if not token:
        return None
    try:
        data = _session_signer().loads(token, max_age=settings.session_max_age_seconds)
    except SignatureExpired:
        logger.info("Expired session token")
        return None
    except BadSignature:
        logger.warning("Rejected session token with bad signature")
        return None
    uid = data.get("uid") if isinstance(data, dict) else None
    return uid if isinstance(uid, int) else None


@dataclass
class UserService:
    session: Session

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.session.exec(select(User).where(User.username == username)).first()

    def register(
        self,
        *,
        username: str,
        password: str,
        email: str | None = None,
        display_name: str | None = None,
        profile_picture: str | None = None,
    ) -> User:
        username = username.strip()
        if self.get_by_username(username) is not None:
            raise UsernameTakenError("Username already exists")
        user = User(
            username=username,
            password_hash=hash_password(password),
            email=email,
            display_name=display_name or username,
            profile_picture=profile_picture,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise UsernameTakenError("Username already exists") from exc
        self.session.refresh(user)
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.get_by_username(username.strip())
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid username or password")
        user.last_login = utcnow_naive()
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user


__all__ = [
    "UserService",
    "UsernameTakenError",
    "hash_password",
    "issue_session_token",
    "read_session_token",
    "verify_password",
]
