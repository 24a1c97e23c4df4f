"""
Store browsing:
  GET /stores   – Every store with its average rating and rating count
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from rating_platform.core.authorization import ANY_ROLE
from rating_platform.core.dependencies import db_dependency, require_roles
from rating_platform.models.session import Principal
from rating_platform.schemas.store import StoreWithRatingResponse
from rating_platform.services.store_service import StoreService

router = APIRouter(prefix="/stores", tags=["Stores"])


@router.get(
    "",
    response_model=list[StoreWithRatingResponse],
    summary="List stores with their live rating aggregate",
)
def list_stores(
    search: Optional[str] = Query(None, description="Match on store name"),
    address: Optional[str] = Query(None, description="Match on store address"),
    conn=Depends(db_dependency, scope="function"),
    principal: Principal = Depends(require_roles(ANY_ROLE)),
):
    """
    Stores ordered by name. For **raters**, `user_rating` holds the
    caller's own rating of each store (or null).
    """
    return StoreService(conn).list_stores(principal, search=search, address=address)
