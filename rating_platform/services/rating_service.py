"""
Rating service: the write path for ratings and the live aggregate.

Business rules:
  - value must be an integer in [1, 5].
  - the store must exist.
  - one rating per (user, store); resubmitting replaces the value.
  - role checks happen before this service is reached.
"""
import sqlite3
from typing import Optional
import logging

from rating_platform.core.exceptions import NotFound, ValidationFailed
from rating_platform.models.rating import MAX_RATING, MIN_RATING, Rating, RatingWithUser
from rating_platform.models.session import Principal
from rating_platform.models.store import StoreAggregate
from rating_platform.repositories.rating_repository import RatingRepository
from rating_platform.repositories.store_repository import StoreRepository

logger = logging.getLogger(__name__)


def validate_rating_value(value) -> int:
    """Return *value* if it is an integer rating, else raise ValidationFailed."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationFailed.single("value", "Rating must be an integer")
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationFailed.single(
            "value", f"Rating must be between {MIN_RATING} and {MAX_RATING}"
        )
    return value


class RatingService:
    """Business logic for submitting and reading ratings."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing RatingService")
        self._repo = RatingRepository(conn)
        self._store_repo = StoreRepository(conn)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def submit_rating(self, principal: Principal, store_id: int, value: int) -> Rating:
        """Create or replace *principal*'s rating for *store_id*."""
        logger.info("Submitting rating user_id=%s store_id=%s", principal.id, store_id)
        validate_rating_value(value)

        if self._store_repo.get_by_id(store_id) is None:
            logger.warning("Rating for missing store id=%s", store_id)
            raise NotFound(f"Store with id={store_id} not found")

        try:
            rating = self._repo.upsert(principal.id, store_id, value)
        except sqlite3.IntegrityError as exc:
            # The store (or user) was deleted after the existence check.
            logger.warning(
                "Rating insert hit a missing reference store_id=%s user_id=%s",
                store_id,
                principal.id,
            )
            raise NotFound(f"Store with id={store_id} not found") from exc

        logger.info("Rating stored id=%s value=%s", rating.id, rating.value)
        return rating

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user_rating(self, user_id: str, store_id: int) -> Optional[Rating]:
        return self._repo.get_for_user_and_store(user_id, store_id)

    def get_ratings_for_store(self, store_id: int) -> list[RatingWithUser]:
        logger.info("Listing ratings for store id=%s", store_id)
        return self._repo.list_for_store(store_id)

    def get_aggregate(self, store_id: int) -> StoreAggregate:
        """Average and count computed from the current rows, never cached."""
        return self._repo.aggregate_for_store(store_id)
