"""
User administration: listing, creation, role transitions and deletion.

Deletion policy: a user's ratings are removed with them, stores they own
keep existing without an owner, and every session they hold is destroyed.
"""
import sqlite3
from typing import Optional
import logging

from rating_platform.core.exceptions import Conflict, NotFound
from rating_platform.core.security import hash_password
from rating_platform.core.session_store import SessionStore
from rating_platform.models.user import User, UserRole
from rating_platform.repositories.user_repository import UserRepository
from rating_platform.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, conn: sqlite3.Connection, session_store: SessionStore) -> None:
        logger.trace("Initializing UserService")
        self._repo = UserRepository(conn)
        self._sessions = session_store

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User:
        """Return a user or raise 404."""
        user = self._repo.get_by_id(user_id)
        if not user:
            logger.warning("User id=%s not found", user_id)
            raise NotFound(f"User with id={user_id} not found")
        return user

    def list_users(
        self, role: Optional[UserRole] = None, search: Optional[str] = None
    ) -> list[User]:
        logger.info("Listing users role=%s search=%s", role, search)
        return self._repo.list_all(role=role, search=search)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_user(self, data: UserCreate) -> User:
        logger.info("Admin creating user %s role=%s", data.email, data.role.value)
        if self._repo.get_by_email(data.email):
            logger.warning("Duplicate email on admin create: %s", data.email)
            raise Conflict("User already exists with this email")
        try:
            user = self._repo.create(
                email=data.email,
                name=data.name,
                address=data.address,
                hashed_password=hash_password(data.password),
                role=data.role,
            )
        except sqlite3.IntegrityError as exc:
            logger.warning("Email uniqueness violated on insert: %s", data.email)
            raise Conflict("User already exists with this email") from exc
        logger.info("User created id=%s", user.id)
        return user

    # ------------------------------------------------------------------
    # Role transition
    # ------------------------------------------------------------------

    def set_role(self, user_id: str, role: UserRole) -> User:
        """
        Change a user's role. Sessions already issued keep the role they
        were created with.
        """
        logger.info("Setting role for user id=%s to %s", user_id, role.value)
        self.get_user(user_id)
        return self._repo.update(user_id, role=role.value)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_user(self, user_id: str) -> None:
        logger.info("Deleting user id=%s", user_id)
        if not self._repo.delete(user_id):
            logger.warning("User id=%s not found for deletion", user_id)
            raise NotFound(f"User with id={user_id} not found")
        self._sessions.destroy_for_user(user_id)
        logger.info("User deleted id=%s", user_id)
