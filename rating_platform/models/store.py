"""
Domain models for the `stores` table and its live rating aggregate.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Store:
    id: int
    name: str
    email: str
    address: str
    owner_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Store":
        """Build a Store from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            address=row["address"],
            owner_id=row["owner_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


@dataclass(frozen=True)
class StoreAggregate:
    """(average, count) over a store's current ratings."""

    average_rating: float
    total_ratings: int

    @classmethod
    def empty(cls) -> "StoreAggregate":
        return cls(average_rating=0.0, total_ratings=0)


@dataclass
class StoreWithRating(Store):
    """A store joined with its aggregate and, for raters, their own rating."""

    average_rating: float = 0.0
    total_ratings: int = 0
    user_rating: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> "StoreWithRating":
        base = Store.from_row(row)
        return cls(
            **vars(base),
            average_rating=float(row["average_rating"] or 0.0),
            total_ratings=int(row["total_ratings"] or 0),
            user_rating=row["user_rating"],
        )
