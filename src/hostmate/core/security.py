from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import get_settings
from .errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

_password_hasher = PasswordHasher()
_bearer_scheme = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "HS256"


class PasswordHashingError(RuntimeError):
    """Raised when the hashing backend fails; surfaces as a 500."""


def hash_password(password: str) -> str:
    try:
        return _password_hasher.hash(password)
    except Exception as exc:
        raise PasswordHashingError("Failed to hash password") from exc


def check_password(hashed_password: str, plain_password: str) -> bool:
    try:
        return _password_hasher.verify(hashed_password, plain_password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError) as exc:
        raise PasswordHashingError("Failed to check hashed password") from exc


def create_access_token(user_id: str, secret: Optional[str] = None, expires_in: Optional[int] = None) -> str:
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    lifetime = settings.access_token_expiry_seconds if expires_in is None else expires_in
    payload = {
        "iss": settings.jwt_issuer,
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=lifetime),
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: Optional[str] = None) -> str:
    """Return the user id carried by ``token`` or raise Unauthorized."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            secret or settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
        raise Unauthorized("Failed to authenticate token")
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid access token")
        raise Unauthorized("Failed to authenticate token")
    return str(payload["sub"])


def generate_refresh_token() -> str:
    return secrets.token_hex(32)


def generate_rank_token() -> str:
    # Bearer capability for the public ranking page; never derived from ids.
    return secrets.token_urlsafe(32)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Invalid authorization header")
    return decode_access_token(credentials.credentials)


def verify_resource_ownership(resource_user_id: str, authenticated_user_id: str) -> None:
    if not secrets.compare_digest(str(resource_user_id), str(authenticated_user_id)):
        raise Forbidden("Forbidden")
