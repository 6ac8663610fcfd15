from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlmodel import Session

from hostmate.core.config import get_settings
from hostmate.core.database import get_session
from hostmate.core.security import get_current_user_id
from hostmate.schemas import (
    AccessTokenResponse,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from hostmate.services import users

router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_COOKIE = "refreshToken"


def _cookie_kwargs() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.is_prod,
        "samesite": "none" if settings.is_prod else "lax",
    }


@router.post("/signup", response_model=SignupResponse)
def signup(payload: SignupRequest, session: Session = Depends(get_session)):
    user = users.signup(session, payload.name, payload.username, payload.password)
    return SignupResponse(username=user.username, name=user.name)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, session: Session = Depends(get_session)):
    result = users.login(session, payload.username, payload.password)
    response.set_cookie(
        REFRESH_COOKIE,
        result.refresh_token,
        max_age=get_settings().refresh_token_expiry_seconds,
        **_cookie_kwargs(),
    )
    return LoginResponse(
        user_id=result.user.id,
        username=result.user.username,
        name=result.user.name,
        access_token=result.access_token,
    )


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(
    refresh_token: Optional[str] = Cookie(default=None, alias=REFRESH_COOKIE),
    session: Session = Depends(get_session),
):
    return AccessTokenResponse(access_token=users.refresh_access_token(session, refresh_token))


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke(
    refresh_token: Optional[str] = Cookie(default=None, alias=REFRESH_COOKIE),
    session: Session = Depends(get_session),
):
    users.revoke_refresh_token(session, refresh_token)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(REFRESH_COOKIE, **_cookie_kwargs())
    return response


@router.delete("/account", status_code=status.HTTP_204_NO_CONTENT, summary="Delete the caller and everything they own")
def delete_account(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    users.delete_user(session, user_id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(REFRESH_COOKIE, **_cookie_kwargs())
    return response
