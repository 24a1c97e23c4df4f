"""
Central v1 API router – registers all endpoint sub-routers.
"""
from fastapi import APIRouter
import logging

from rating_platform.api.v1.endpoints import admin, auth, owner, ratings, stores

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api/v1")

logger.info("Registering v1 API routers")
api_router.include_router(auth.router)
api_router.include_router(stores.router)
api_router.include_router(ratings.router)
api_router.include_router(owner.router)
api_router.include_router(admin.router)
