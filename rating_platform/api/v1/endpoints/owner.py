"""
Store-owner endpoints:
  GET /store-owner/stores                       – Stores owned by the caller
  GET /store-owner/stores/{store_id}/ratings    – Ratings + aggregate of an owned store
"""
from fastapi import APIRouter, Depends

from rating_platform.core.authorization import STORE_OWNER_ONLY
from rating_platform.core.dependencies import db_dependency, require_roles
from rating_platform.models.session import Principal
from rating_platform.schemas.rating import StoreRatingsResponse
from rating_platform.schemas.store import StoreResponse
from rating_platform.services.store_service import StoreService

router = APIRouter(prefix="/store-owner", tags=["Store Owner"])


@router.get(
    "/stores",
    response_model=list[StoreResponse],
    summary="List the stores owned by the caller",
)
def owner_stores(
    conn=Depends(db_dependency, scope="function"),
    principal: Principal = Depends(require_roles(STORE_OWNER_ONLY)),
):
    return StoreService(conn).owner_stores(principal)


@router.get(
    "/stores/{store_id}/ratings",
    response_model=StoreRatingsResponse,
    summary="Ratings and average for one of the caller's stores",
)
def owner_store_ratings(
    store_id: int,
    conn=Depends(db_dependency, scope="function"),
    principal: Principal = Depends(require_roles(STORE_OWNER_ONLY)),
):
    """
    Returns 403 both for stores owned by someone else and for stores that
    do not exist.
    """
    return StoreService(conn).owner_store_ratings(principal, store_id)
