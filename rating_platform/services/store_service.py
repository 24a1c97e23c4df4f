"""
Store management and the store-facing read paths.

Business rules:
  - Only admins create, edit or delete stores (enforced by the endpoints).
  - A store's owner must be an existing store-owner account.
  - Deleting a store deletes its ratings.
  - Store owners only see ratings of stores they own; an unknown store is
    refused the same way as someone else's store.
"""
import sqlite3
from typing import Optional
import logging

from rating_platform.core.authorization import STORE_OWNER_ONLY, authorize
from rating_platform.core.exceptions import NotFound, ValidationFailed
from rating_platform.models.rating import StoreRatings
from rating_platform.models.session import Principal
from rating_platform.models.store import Store, StoreWithRating
from rating_platform.models.user import UserRole
from rating_platform.repositories.store_repository import StoreRepository
from rating_platform.repositories.user_repository import UserRepository
from rating_platform.schemas.store import StoreCreate, StoreUpdate
from rating_platform.services.rating_service import RatingService

logger = logging.getLogger(__name__)


class StoreService:
    """Business logic for stores."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing StoreService")
        self._repo = StoreRepository(conn)
        self._user_repo = UserRepository(conn)
        self._ratings = RatingService(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_store(self, store_id: int) -> Store:
        store = self._repo.get_by_id(store_id)
        if not store:
            logger.warning("Store id=%s not found", store_id)
            raise NotFound(f"Store with id={store_id} not found")
        return store

    def list_stores(
        self,
        principal: Principal,
        search: Optional[str] = None,
        address: Optional[str] = None,
    ) -> list[StoreWithRating]:
        """Stores with their aggregate; raters also get their own rating."""
        logger.info("Listing stores for user id=%s", principal.id)
        rater_id = principal.id if principal.role is UserRole.RATER else None
        return self._repo.list_with_ratings(
            search=search, address=address, rater_id=rater_id
        )

    def owner_stores(self, principal: Principal) -> list[Store]:
        logger.info("Listing stores owned by user id=%s", principal.id)
        return self._repo.list_by_owner(principal.id)

    def owner_store_ratings(self, principal: Principal, store_id: int) -> StoreRatings:
        """Ratings and aggregate of a store the principal owns."""
        logger.info(
            "Owner id=%s requesting ratings for store id=%s", principal.id, store_id
        )
        store = self._repo.get_by_id(store_id)
        authorize(
            principal,
            STORE_OWNER_ONLY,
            owner_id=store.owner_id if store else None,
            check_ownership=True,
        )
        return StoreRatings(
            ratings=self._ratings.get_ratings_for_store(store_id),
            stats=self._ratings.get_aggregate(store_id),
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create_store(self, data: StoreCreate) -> Store:
        logger.info("Creating store %s", data.name)
        if data.owner_id is not None:
            self._check_owner(data.owner_id)
        store = self._repo.create(
            name=data.name,
            email=data.email,
            address=data.address,
            owner_id=data.owner_id,
        )
        logger.info("Store created id=%s", store.id)
        return store

    def update_store(self, store_id: int, data: StoreUpdate) -> Store:
        logger.info("Updating store id=%s", store_id)
        self.get_store(store_id)
        updates = data.model_dump(exclude_unset=True)
        for required in ("name", "email", "address"):
            if required in updates and updates[required] is None:
                raise ValidationFailed.single(required, f"{required} cannot be null")
        if updates.get("owner_id") is not None:
            self._check_owner(updates["owner_id"])
        store = self._repo.update(store_id, **updates)
        logger.info("Store updated id=%s", store_id)
        return store  # type: ignore[return-value]

    def delete_store(self, store_id: int) -> None:
        """Delete a store; its ratings go with it."""
        logger.info("Deleting store id=%s", store_id)
        if not self._repo.delete(store_id):
            logger.warning("Store id=%s not found for deletion", store_id)
            raise NotFound(f"Store with id={store_id} not found")
        logger.info("Store deleted id=%s", store_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_owner(self, owner_id: str) -> None:
        owner = self._user_repo.get_by_id(owner_id)
        if owner is None:
            logger.warning("Store owner id=%s not found", owner_id)
            raise NotFound(f"User with id={owner_id} not found")
        if owner.role is not UserRole.STORE_OWNER:
            logger.warning("User id=%s is not a store owner", owner_id)
            raise ValidationFailed.single(
                "owner_id", "Owner must have the store_owner role"
            )
