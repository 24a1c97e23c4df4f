"""
Database seeder – creates a default admin account on first startup.

⚠️  FOR DEVELOPMENT ONLY.
    Set SEED_ADMIN=false (or remove the call in main.py) before deploying.

The credentials come from the SEED_ADMIN_* settings.
"""
import logging
import uuid
from datetime import datetime, timezone

from rating_platform.core.config import settings
from rating_platform.core.security import hash_password
from rating_platform.db.database import get_connection
from rating_platform.models.user import UserRole

logger = logging.getLogger(__name__)


def seed_admin() -> None:
    """
    Insert the default admin user if no user holds the seed email yet.
    Safe to call on every startup.
    """
    conn = get_connection()
    try:
        existing = conn.execute(
            "SELECT id FROM users WHERE email = ?", (settings.SEED_ADMIN_EMAIL,)
        ).fetchone()

        if existing:
            logger.info(
                "Seeder: admin '%s' already exists – skipping.",
                settings.SEED_ADMIN_EMAIL,
            )
            return

        now = datetime.now(tz=timezone.utc).isoformat()
        conn.execute(
            """
            INSERT INTO users (id, email, name, address, hashed_password, role, created_at, updated_at)
            VALUES (?, ?, ?, NULL, ?, ?, ?, ?)
            """,
            (
                uuid.uuid4().hex,
                settings.SEED_ADMIN_EMAIL,
                settings.SEED_ADMIN_NAME,
                hash_password(settings.SEED_ADMIN_PASSWORD),
                UserRole.ADMIN.value,
                now,
                now,
            ),
        )
        conn.commit()
        logger.info("Seeder: created default admin '%s'.", settings.SEED_ADMIN_EMAIL)
    finally:
        conn.close()
