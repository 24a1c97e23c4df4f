"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.

Referential rules:
  - ratings.store_id  ON DELETE CASCADE   (a rating never outlives its store)
  - ratings.user_id   ON DELETE CASCADE   (deleting a user drops their ratings)
  - stores.owner_id   ON DELETE SET NULL  (stores survive their owner)
  - UNIQUE(user_id, store_id) on ratings is the upsert conflict target.
"""
from rating_platform.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                TEXT    PRIMARY KEY,
    email             TEXT    NOT NULL UNIQUE COLLATE NOCASE,
    name              TEXT    NOT NULL,
    address           TEXT,
    hashed_password   TEXT,
    role              TEXT    NOT NULL DEFAULT 'rater'
                              CHECK(role IN ('admin', 'rater', 'store_owner')),
    created_at        TEXT    NOT NULL,
    updated_at        TEXT    NOT NULL
);
"""

CREATE_STORES_TABLE = """
CREATE TABLE IF NOT EXISTS stores (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL,
    email       TEXT    NOT NULL,
    address     TEXT    NOT NULL,
    owner_id    TEXT    REFERENCES users(id) ON DELETE SET NULL,
    created_at  TEXT    NOT NULL,
    updated_at  TEXT    NOT NULL
);
"""

CREATE_RATINGS_TABLE = """
CREATE TABLE IF NOT EXISTS ratings (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     TEXT    NOT NULL REFERENCES users(id)  ON DELETE CASCADE,
    store_id    INTEGER NOT NULL REFERENCES stores(id) ON DELETE CASCADE,
    value       INTEGER NOT NULL CHECK(value BETWEEN 1 AND 5),
    created_at  TEXT    NOT NULL,
    updated_at  TEXT    NOT NULL,
    UNIQUE (user_id, store_id)
);
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_ratings_store_id ON ratings(store_id)",
    "CREATE INDEX IF NOT EXISTS idx_stores_owner_id ON stores(owner_id)",
]

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_STORES_TABLE,
    CREATE_RATINGS_TABLE,
]


def create_tables() -> None:
    """Create all tables and indexes; safe to call on every startup."""
    conn = get_connection()
    try:
        conn.execute("PRAGMA journal_mode = WAL")
        cursor = conn.cursor()
        for ddl in ALL_TABLES:
            cursor.execute(ddl)
        for ddl in INDEXES:
            cursor.execute(ddl)
        conn.commit()
    finally:
        conn.close()
