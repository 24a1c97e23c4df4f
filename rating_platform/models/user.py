"""
Domain model (plain Python dataclass) representing a User row from the DB.
This is the internal representation used across service and repository layers.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    """Closed set of roles. Every access policy must decide on each member."""

    ADMIN = "admin"
    RATER = "rater"
    STORE_OWNER = "store_owner"


@dataclass
class User:
    id: str
    email: str
    name: str
    address: Optional[str]
    role: UserRole
    created_at: datetime
    updated_at: datetime
    hashed_password: Optional[str] = None

    def __post_init__(self) -> None:
        import logging

        logger = logging.getLogger(__name__)
        logger.trace("Initialized User model id=%s", self.id)

    @property
    def is_federated(self) -> bool:
        """True for accounts created by an external identity provider."""
        return self.hashed_password is None

    @classmethod
    def from_row(cls, row) -> "User":
        """Build a User from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            address=row["address"],
            hashed_password=row["hashed_password"],
            role=UserRole(row["role"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
