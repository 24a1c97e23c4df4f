"""
Repository layer for Store persistence.
All SQL for the `stores` table lives here.
"""
import sqlite3
from datetime import datetime, timezone
from typing import Optional
import logging

from rating_platform.models.store import Store, StoreWithRating
from rating_platform.core.logging_config import log_db_timing
from rating_platform.db.database import like_pattern

logger = logging.getLogger(__name__)


class StoreRepository:
    """Data access layer for store records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing StoreRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, store_id: int) -> Optional[Store]:
        row = self._conn.execute(
            "SELECT * FROM stores WHERE id = ?", (store_id,)
        ).fetchone()
        return Store.from_row(row) if row else None

    @log_db_timing
    def list_by_owner(self, owner_id: str) -> list[Store]:
        rows = self._conn.execute(
            "SELECT * FROM stores WHERE owner_id = ? ORDER BY name", (owner_id,)
        ).fetchall()
        return [Store.from_row(r) for r in rows]

    @log_db_timing
    def list_with_ratings(
        self,
        search: Optional[str] = None,
        address: Optional[str] = None,
        rater_id: Optional[str] = None,
    ) -> list[StoreWithRating]:
        """
        Return stores ordered by name with their live aggregate.

        When *rater_id* is given, ``user_rating`` carries that user's own
        rating for each store (NULL if they have not rated it).
        """
        clauses: list[str] = []
        params: list = [rater_id]
        if search:
            clauses.append("s.name LIKE ? ESCAPE '\\'")
            params.append(like_pattern(search))
        if address:
            clauses.append("s.address LIKE ? ESCAPE '\\'")
            params.append(like_pattern(address))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(
            f"""
            SELECT
                s.*,
                COALESCE(AVG(r.value), 0.0) AS average_rating,
                COUNT(r.id)                 AS total_ratings,
                (SELECT ur.value FROM ratings ur
                  WHERE ur.store_id = s.id AND ur.user_id = ?) AS user_rating
            FROM stores s
            LEFT JOIN ratings r ON r.store_id = s.id
            {where}
            GROUP BY s.id
            ORDER BY s.name
            """,
            params,
        ).fetchall()
        return [StoreWithRating.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM stores").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self, name: str, email: str, address: str, owner_id: Optional[str]
    ) -> Store:
        """Insert a new store and return it."""
        logger.info("Creating store name=%s owner_id=%s", name, owner_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO stores (name, email, address, owner_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (name, email, address, owner_id, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, store_id: int, **fields) -> Optional[Store]:
        if not fields:
            return self.get_by_id(store_id)

        logger.info("Updating store id=%s fields=%s", store_id, sorted(fields))
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [store_id]
        self._conn.execute(f"UPDATE stores SET {set_clause} WHERE id = ?", values)
        return self.get_by_id(store_id)

    @log_db_timing
    def delete(self, store_id: int) -> bool:
        """Remove a store; its ratings are removed by ON DELETE CASCADE."""
        logger.info("Deleting store id=%s", store_id)
        cursor = self._conn.execute("DELETE FROM stores WHERE id = ?", (store_id,))
        logger.info("Store delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
