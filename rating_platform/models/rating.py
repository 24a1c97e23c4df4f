"""
Domain models representing rows of the `ratings` table.

At most one rating exists per (user_id, store_id); the table carries a
UNIQUE constraint on that pair.
"""
from dataclasses import dataclass
from datetime import datetime

from rating_platform.models.store import StoreAggregate

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Rating:
    id: int
    user_id: str
    store_id: int
    value: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        import logging

        logger = logging.getLogger(__name__)
        logger.trace("Initialized Rating model id=%s", self.id)

    @classmethod
    def from_row(cls, row) -> "Rating":
        """Build a Rating from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            store_id=row["store_id"],
            value=row["value"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


@dataclass
class RaterSummary:
    """Minimal view of the user who left a rating."""

    id: str
    name: str
    email: str


@dataclass
class RatingWithUser(Rating):
    user: RaterSummary = None  # type: ignore[assignment]

    @classmethod
    def from_row(cls, row) -> "RatingWithUser":
        """Build from a row produced by the ratings/users join."""
        return cls(
            **vars(Rating.from_row(row)),
            user=RaterSummary(
                id=row["user_id"],
                name=row["user_name"],
                email=row["user_email"],
            ),
        )


@dataclass
class StoreRatings:
    """A store's ratings (newest first) together with their aggregate."""

    ratings: list[RatingWithUser]
    stats: StoreAggregate
