"""
FastAPI dependency injection helpers for authentication and authorisation.
"""
import logging
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie

from rating_platform.core.authorization import RolePolicy, require_role
from rating_platform.core.config import settings
from rating_platform.core.exceptions import Unauthenticated
from rating_platform.core.session_store import SessionLookupError, SessionStore
from rating_platform.db.database import get_db
from rating_platform.models.session import Principal

logger = logging.getLogger(__name__)

session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)


# ---------------------------------------------------------------------------
# DB / session store
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """
    Yield a database connection for the endpoint call.

    Declare it with ``scope="function"`` so the commit happens before the
    response is sent and a failed commit still reaches the error handlers.
    """
    logger.trace("Creating database dependency connection")
    with get_db() as conn:
        yield conn


def get_session_store(request: Request) -> SessionStore:
    """Return the application's session store (created in ``create_app``)."""
    return request.app.state.session_store


# ---------------------------------------------------------------------------
# Authentication gate
# ---------------------------------------------------------------------------

def authenticate(store: SessionStore, token: Optional[str]) -> Principal:
    """
    Resolve *token* to a Principal.

    Reads the session store only; the role is the snapshot taken when the
    session was created.
    """
    if not token:
        logger.warning("Request without a session cookie")
        raise Unauthenticated()
    try:
        session = store.lookup(token)
    except SessionLookupError as exc:
        logger.warning("Session rejected: %s", exc)
        raise Unauthenticated() from exc
    return session.principal


def get_current_principal(
    token: Optional[str] = Depends(session_cookie),
    store: SessionStore = Depends(get_session_store),
) -> Principal:
    principal = authenticate(store, token)
    logger.info("Authenticated principal id=%s", principal.id)
    return principal


# ---------------------------------------------------------------------------
# Role-based access control
# ---------------------------------------------------------------------------

def require_roles(policy: RolePolicy):
    """
    Factory that returns a dependency which enforces *policy* on the
    current principal.

    Usage::
        @router.get("/admin-only")
        def admin_only(principal: Principal = Depends(require_roles(ADMIN_ONLY))):
            ...
    """
    def _check(principal: Principal = Depends(get_current_principal)) -> Principal:
        require_role(principal, policy)
        logger.trace(
            "Principal id=%s authorized by %r", principal.id, policy
        )
        return principal
    return _check
