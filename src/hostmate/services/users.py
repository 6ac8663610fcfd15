from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlmodel import Session, select

from hostmate.core.config import get_settings
from hostmate.core.errors import BadRequest, NotFound, Unauthorized
from hostmate.core.security import (
    check_password,
    create_access_token,
    generate_refresh_token,
    hash_password,
)
from hostmate.models import RefreshToken, User
from hostmate.models.base import as_utc, utcnow
from hostmate.utils.validators import clean_text

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


def get_user_by_username(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def signup(session: Session, name: Optional[str], username: Optional[str], password: Optional[str]) -> User:
    normalized_name = clean_text(name)
    normalized_username = clean_text(username)
    if not normalized_name or not normalized_username or not password:
        raise BadRequest("Missing user username/name/password")

    if get_user_by_username(session, normalized_username):
        raise BadRequest("Username already exists")

    user = User(
        name=normalized_name,
        username=normalized_username,
        hashed_password=hash_password(password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Created user %s", user.id)
    return user


def login(session: Session, username: Optional[str], password: Optional[str]) -> LoginResult:
    if not username or not password:
        raise BadRequest("Missing user username/password")

    user = get_user_by_username(session, username.strip())
    if user is None:
        raise Unauthorized("Username does not exist")
    if not check_password(user.hashed_password, password):
        logger.info("Failed login for user %s", user.id)
        raise Unauthorized("Password is incorrect")

    refresh_token = save_refresh_token(session, user.id)
    return LoginResult(
        user=user,
        access_token=create_access_token(user.id),
        refresh_token=refresh_token,
    )


def save_refresh_token(session: Session, user_id: str) -> str:
    settings = get_settings()
    token = RefreshToken(
        token=generate_refresh_token(),
        user_id=user_id,
        expires_at=utcnow() + timedelta(seconds=settings.refresh_token_expiry_seconds),
    )
    session.add(token)
    session.commit()
    return token.token


def refresh_access_token(session: Session, token: Optional[str]) -> str:
    if not token:
        raise Unauthorized("Unauthorized")

    saved = session.get(RefreshToken, token)
    if saved is None or saved.revoked_at is not None:
        raise Unauthorized("Invalid refresh token")
    if as_utc(saved.expires_at) < utcnow():
        # Expired tokens are revoked on the spot; the client has to log in again.
        revoke_refresh_token(session, token)
        raise Unauthorized("Refresh token expired")

    return create_access_token(saved.user_id)


def revoke_refresh_token(session: Session, token: Optional[str]) -> None:
    if not token:
        return
    saved = session.get(RefreshToken, token)
    if saved is None or saved.revoked_at is not None:
        return
    saved.revoked_at = utcnow()
    session.add(saved)
    session.commit()


def get_user_name(session: Session, user_id: str) -> str:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")
    return user.name


def delete_user(session: Session, user_id: str) -> None:
    """Remove a user; guests, dishes, meals and tokens go with it."""
    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")
    session.delete(user)
    session.commit()
    logger.info("Deleted user %s", user_id)
