"""Dashboard counters for administrators."""
import sqlite3
import logging

from rating_platform.repositories.rating_repository import RatingRepository
from rating_platform.repositories.store_repository import StoreRepository
from rating_platform.repositories.user_repository import UserRepository
from rating_platform.schemas.store import DashboardStats

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._users = UserRepository(conn)
        self._stores = StoreRepository(conn)
        self._ratings = RatingRepository(conn)

    def dashboard(self) -> DashboardStats:
        logger.info("Computing dashboard stats")
        return DashboardStats(
            total_users=self._users.count(),
            total_stores=self._stores.count(),
            total_ratings=self._ratings.count(),
        )
