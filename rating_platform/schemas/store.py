"""
Pydantic schemas for Store request/response validation.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from rating_platform.schemas.user import ADDRESS_MAX_LENGTH

STORE_NAME_MAX_LENGTH = 60


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=STORE_NAME_MAX_LENGTH)
    email: EmailStr
    address: str = Field(..., max_length=ADDRESS_MAX_LENGTH)
    owner_id: Optional[str] = Field(None, description="User id of the store owner")


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=STORE_NAME_MAX_LENGTH)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=ADDRESS_MAX_LENGTH)
    owner_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class StoreResponse(BaseModel):
    id: int
    name: str
    email: str
    address: str
    owner_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StoreWithRatingResponse(StoreResponse):
    average_rating: float
    total_ratings: int
    user_rating: Optional[int] = None


class DashboardStats(BaseModel):
    total_users: int
    total_stores: int
    total_ratings: int
