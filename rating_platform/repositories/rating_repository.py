"""
Repository layer for Rating persistence.
All SQL for the `ratings` table lives here, and this is the only writer.

Design rules enforced at DB level:
  - UNIQUE(user_id, store_id)  →  one rating per user per store.
  - value BETWEEN 1 AND 5      →  enforced by a CHECK constraint.
  - store_id ON DELETE CASCADE →  no rating references a missing store.

Writes go through ``upsert``, a single INSERT ... ON CONFLICT statement, so
concurrent submissions for one (user, store) pair can never produce two
rows. The last statement to commit wins.
"""
import sqlite3
from datetime import datetime, timezone
from typing import Optional
import logging

from rating_platform.models.rating import Rating, RatingWithUser
from rating_platform.models.store import StoreAggregate
from rating_platform.core.logging_config import log_db_timing

logger = logging.getLogger(__name__)


class RatingRepository:
    """Data access layer for rating records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing RatingRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_for_user_and_store(self, user_id: str, store_id: int) -> Optional[Rating]:
        """Return the rating *user_id* gave *store_id*, if any."""
        row = self._conn.execute(
            "SELECT * FROM ratings WHERE user_id = ? AND store_id = ?",
            (user_id, store_id),
        ).fetchone()
        return Rating.from_row(row) if row else None

    @log_db_timing
    def list_for_store(self, store_id: int) -> list[RatingWithUser]:
        """Return a store's ratings with a minimal rater view, newest first."""
        rows = self._conn.execute(
            """
            SELECT
                r.*,
                u.name  AS user_name,
                u.email AS user_email
            FROM ratings r
            JOIN users u ON u.id = r.user_id
            WHERE r.store_id = ?
            ORDER BY r.created_at DESC, r.id DESC
            """,
            (store_id,),
        ).fetchall()
        return [RatingWithUser.from_row(r) for r in rows]

    @log_db_timing
    def aggregate_for_store(self, store_id: int) -> StoreAggregate:
        """
        Compute (average, count) from the current rows.

        AVG over no rows is NULL; COALESCE keeps the empty result at 0.0.
        """
        row = self._conn.execute(
            """
            SELECT COALESCE(AVG(value), 0.0) AS average_rating,
                   COUNT(id)                 AS total_ratings
              FROM ratings
             WHERE store_id = ?
            """,
            (store_id,),
        ).fetchone()
        total = int(row["total_ratings"])
        if total == 0:
            return StoreAggregate.empty()
        return StoreAggregate(
            average_rating=float(row["average_rating"]), total_ratings=total
        )

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM ratings").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def upsert(self, user_id: str, store_id: int, value: int) -> Rating:
        """
        Insert the rating for (user_id, store_id) or replace its value.

        On replace the row keeps its id and created_at; only value and
        updated_at change. Raises sqlite3.IntegrityError if the store or
        user row does not exist.
        """
        logger.info("Upserting rating user_id=%s store_id=%s", user_id, store_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        self._conn.execute(
            """
            INSERT INTO ratings (user_id, store_id, value, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT (user_id, store_id) DO UPDATE
               SET value      = excluded.value,
                   updated_at = excluded.updated_at
            """,
            (user_id, store_id, value, now, now),
        )
        # Same transaction: the write lock is held until commit.
        return self.get_for_user_and_store(user_id, store_id)  # type: ignore[return-value]
