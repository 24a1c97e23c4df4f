"""
Authentication service: orchestrates login, registration, logout and
password changes on top of the session store.
"""
import sqlite3
from datetime import timedelta
from typing import Optional
import logging

from rating_platform.core.config import settings
from rating_platform.core.exceptions import (
    Conflict,
    PermissionDenied,
    Unauthenticated,
)
from rating_platform.core.security import hash_password, verify_password
from rating_platform.core.session_store import SessionStore
from rating_platform.models.session import Principal
from rating_platform.models.user import User, UserRole
from rating_platform.repositories.user_repository import UserRepository
from rating_platform.schemas.user import PasswordChange, RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        conn: sqlite3.Connection,
        session_store: SessionStore,
        session_ttl: Optional[timedelta] = None,
    ) -> None:
        logger.trace("Initializing AuthService")
        self._user_repo = UserRepository(conn)
        self._sessions = session_store
        self._ttl = session_ttl or timedelta(minutes=settings.SESSION_TTL_MINUTES)

    # ------------------------------------------------------------------
    # Login / logout
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> tuple[str, User]:
        """Check credentials and open a session. Returns (token, user)."""
        logger.info("Authenticating user '%s'", email)
        user = self._user_repo.get_by_email(email)

        if not user or user.is_federated or not verify_password(
            password, user.hashed_password
        ):
            logger.warning("Invalid login attempt for '%s'", email)
            raise Unauthenticated("Invalid credentials")

        logger.info("Login successful for user id=%s", user.id)
        return self._open_session(user), user

    def logout(self, token: str) -> None:
        """Destroy the session behind *token*; unknown tokens are ignored."""
        self._sessions.destroy(token)
        logger.info("Logout processed")

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, data: RegisterRequest) -> tuple[str, User]:
        """
        Create a rater account and log it in. Self-registration can never
        pick a role.
        """
        logger.info("Registering user %s", data.email)
        if self._user_repo.get_by_email(data.email):
            logger.warning("Duplicate email registration attempt: %s", data.email)
            raise Conflict("User already exists with this email")

        try:
            user = self._user_repo.create(
                email=data.email,
                name=data.name,
                address=data.address,
                hashed_password=hash_password(data.password),
                role=UserRole.RATER,
            )
        except sqlite3.IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email.
            logger.warning("Email uniqueness violated on insert: %s", data.email)
            raise Conflict("User already exists with this email") from exc

        logger.info("User registered id=%s", user.id)
        return self._open_session(user), user

    # ------------------------------------------------------------------
    # Profile / password
    # ------------------------------------------------------------------

    def current_user(self, principal: Principal) -> User:
        """Return the user behind *principal*; a vanished user is unauthenticated."""
        user = self._user_repo.get_by_id(principal.id)
        if user is None:
            logger.warning("Session refers to missing user id=%s", principal.id)
            raise Unauthenticated()
        return user

    def change_password(self, principal: Principal, data: PasswordChange) -> None:
        logger.info("Password change requested for user id=%s", principal.id)
        user = self.current_user(principal)
        if user.is_federated:
            logger.warning("Password change for federated user id=%s", user.id)
            raise PermissionDenied("This account has no password to change")
        if not verify_password(data.current_password, user.hashed_password):
            logger.warning("Wrong current password for user id=%s", user.id)
            raise PermissionDenied("Current password is incorrect")

        self._user_repo.update(
            user.id, hashed_password=hash_password(data.new_password)
        )
        logger.info("Password updated for user id=%s", user.id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _open_session(self, user: User) -> str:
        return self._sessions.create(user.id, user.role, self._ttl)
