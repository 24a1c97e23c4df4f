"""
Pydantic schemas for Rating request/response validation.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from rating_platform.models.rating import MAX_RATING, MIN_RATING


class RatingCreate(BaseModel):
    store_id: int = Field(..., gt=0)
    value: int = Field(..., ge=MIN_RATING, le=MAX_RATING, strict=True)


class RatingResponse(BaseModel):
    id: int
    user_id: str
    store_id: int
    value: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RaterSummaryResponse(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class RatingWithUserResponse(RatingResponse):
    user: RaterSummaryResponse


class StoreAggregateResponse(BaseModel):
    average_rating: float
    total_ratings: int

    model_config = {"from_attributes": True}


class StoreRatingsResponse(BaseModel):
    """Ratings of one store plus the aggregate over them."""

    ratings: list[RatingWithUserResponse]
    stats: StoreAggregateResponse
