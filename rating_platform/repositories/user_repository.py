"""
Repository layer for User persistence.
All SQL for the `users` table lives here.
"""
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Optional
import logging

from rating_platform.models.user import User, UserRole
from rating_platform.core.logging_config import log_db_timing
from rating_platform.db.database import like_pattern

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access layer for user records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing UserRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, user_id: str) -> Optional[User]:
        """Return a user by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_email(self, email: str) -> Optional[User]:
        row = self._conn.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def list_all(
        self, role: Optional[UserRole] = None, search: Optional[str] = None
    ) -> list[User]:
        """Return users ordered by name, optionally filtered by role and text."""
        clauses: list[str] = []
        params: list = []
        if role is not None:
            clauses.append("role = ?")
            params.append(role.value)
        if search:
            clauses.append(
                "(name LIKE ? ESCAPE '\\' OR email LIKE ? ESCAPE '\\'"
                " OR address LIKE ? ESCAPE '\\')"
            )
            pattern = like_pattern(search)
            params.extend([pattern, pattern, pattern])
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(
            f"SELECT * FROM users {where} ORDER BY name", params
        ).fetchall()
        return [User.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        email: str,
        name: str,
        role: UserRole,
        hashed_password: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        """
        Insert a new user row and return it.
        Raises sqlite3.IntegrityError if the email is already taken.
        """
        logger.info("Creating user record email=%s role=%s", email, role.value)
        user_id = uuid.uuid4().hex
        now = datetime.now(tz=timezone.utc).isoformat()
        self._conn.execute(
            """
            INSERT INTO users (id, email, name, address, hashed_password, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, email, name, address, hashed_password, role.value, now, now),
        )
        return self.get_by_id(user_id)  # type: ignore[return-value]

    @log_db_timing
    def update(self, user_id: str, **fields) -> Optional[User]:
        """Update user fields and return the updated row (None if missing)."""
        if not fields:
            return self.get_by_id(user_id)

        logger.info("Updating user record id=%s fields=%s", user_id, sorted(fields))
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [user_id]
        self._conn.execute(f"UPDATE users SET {set_clause} WHERE id = ?", values)
        return self.get_by_id(user_id)

    @log_db_timing
    def delete(self, user_id: str) -> bool:
        """
        Remove the user row. Ratings cascade away and owned stores keep
        existing with owner_id set to NULL (see db/schema.py).
        """
        logger.info("Deleting user id=%s", user_id)
        cursor = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        logger.info("User delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
