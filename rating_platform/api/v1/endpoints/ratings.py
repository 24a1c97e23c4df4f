"""
Rating endpoints (raters only):
  POST /ratings                    – Create or replace the caller's rating of a store
  GET  /ratings/{store_id}/mine    – The caller's current rating of a store
"""
from typing import Optional

from fastapi import APIRouter, Depends

from rating_platform.core.authorization import RATER_ONLY
from rating_platform.core.dependencies import db_dependency, require_roles
from rating_platform.models.session import Principal
from rating_platform.schemas.rating import RatingCreate, RatingResponse
from rating_platform.services.rating_service import RatingService

router = APIRouter(prefix="/ratings", tags=["Ratings"])


@router.post(
    "",
    response_model=RatingResponse,
    summary="Rate a store (1-5); resubmitting replaces the previous rating",
)
def submit_rating(
    body: RatingCreate,
    conn=Depends(db_dependency, scope="function"),
    principal: Principal = Depends(require_roles(RATER_ONLY)),
):
    return RatingService(conn).submit_rating(principal, body.store_id, body.value)


@router.get(
    "/{store_id}/mine",
    response_model=Optional[RatingResponse],
    summary="Get the caller's rating for a store (null if none)",
)
def get_my_rating(
    store_id: int,
    conn=Depends(db_dependency, scope="function"),
    principal: Principal = Depends(require_roles(RATER_ONLY)),
):
    return RatingService(conn).get_user_rating(principal.id, store_id)
