"""
Server-held session records and the Principal view derived from them.
"""
from dataclasses import dataclass
from datetime import datetime

from rating_platform.models.user import UserRole


@dataclass(frozen=True)
class Principal:
    """The authenticated identity attached to a request."""

    id: str
    role: UserRole


@dataclass(frozen=True)
class Session:
    token: str
    user_id: str
    role: UserRole
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    @property
    def principal(self) -> Principal:
        return Principal(id=self.user_id, role=self.role)
