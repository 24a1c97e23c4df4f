"""
Session endpoints:
  POST /auth/login          – Check email/password and open a session (cookie)
  POST /auth/logout         – Destroy the current session and clear the cookie
  POST /auth/register       – Create a rater account and open a session
  GET  /auth/me             – Return the current principal's profile
  PUT  /auth/password       – Change the current user's password
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Response, status

from rating_platform.core.config import settings
from rating_platform.core.dependencies import (
    db_dependency,
    get_current_principal,
    get_session_store,
    session_cookie,
)
from rating_platform.core.session_store import SessionStore
from rating_platform.models.session import Principal
from rating_platform.schemas.auth import LoginRequest, SessionResponse
from rating_platform.schemas.user import (
    MessageResponse,
    PasswordChange,
    PrincipalSummary,
    RegisterRequest,
)
from rating_platform.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post(
    "/login",
    response_model=SessionResponse,
    summary="Login with email and password",
)
def login(
    body: LoginRequest,
    response: Response,
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
):
    """
    Verify the credentials and start a session. The session id is returned
    only as an HTTP-only cookie.
    """
    logger.info("Login requested for email=%s", body.email)
    token, user = AuthService(conn, store).login(body.email, body.password)
    _set_session_cookie(response, token)
    return SessionResponse(user=PrincipalSummary.model_validate(user))


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="End the current session",
)
def logout(
    response: Response,
    token: Optional[str] = Depends(session_cookie),
    store: SessionStore = Depends(get_session_store),
):
    """Destroy the session (if any) and clear the cookie. Always succeeds."""
    if token:
        store.destroy(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/register",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a rater account and log in",
)
def register(
    body: RegisterRequest,
    response: Response,
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
):
    """
    Public sign up. The new account always has the **rater** role.

    Password rules: 8-16 characters, at least one uppercase letter and one
    special character.
    """
    token, user = AuthService(conn, store).register(body)
    _set_session_cookie(response, token)
    return SessionResponse(user=PrincipalSummary.model_validate(user))


@router.get(
    "/me",
    response_model=PrincipalSummary,
    summary="Get the current authenticated user's profile",
)
def get_me(
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
    principal: Principal = Depends(get_current_principal),
):
    return AuthService(conn, store).current_user(principal)


@router.put(
    "/password",
    response_model=MessageResponse,
    summary="Change the current user's password",
)
def change_password(
    body: PasswordChange,
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
    principal: Principal = Depends(get_current_principal),
):
    AuthService(conn, store).change_password(principal, body)
    return MessageResponse(message="Password updated successfully")
