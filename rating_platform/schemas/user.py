"""
Pydantic schemas for User request/response validation.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional

from rating_platform.core.security import password_problems
from rating_platform.models.user import UserRole

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400


def _check_password(value: str) -> str:
    problems = password_problems(value)
    if problems:
        raise ValueError("; ".join(problems))
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    """Self-service sign up. The account always gets the rater role."""

    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    address: str = Field(..., max_length=ADDRESS_MAX_LENGTH)
    password: str

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)


class UserCreate(RegisterRequest):
    """Admin-created account; the admin picks the role."""

    role: UserRole = UserRole.RATER


class RoleUpdate(BaseModel):
    role: UserRole


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    address: Optional[str]
    role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PrincipalSummary(BaseModel):
    """What the client learns about itself after login or registration."""

    id: str
    name: str
    email: str
    role: UserRole
    address: Optional[str] = None

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
