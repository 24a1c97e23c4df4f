"""
Pydantic schemas for the session endpoints.
"""
from pydantic import BaseModel, Field

from rating_platform.schemas.user import PrincipalSummary


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """
    Body returned by login/register. The session token itself is only
    sent as an HTTP-only cookie.
    """

    user: PrincipalSummary
