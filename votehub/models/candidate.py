from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from .types import Amount


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Candidate(SQLModel, table=True):
    """
    A single candidate on the roster.

    Notes:
    - id is the stable identity; it never changes.
    - position is the externally used index. Deleting a candidate moves the
      current last candidate into the freed position (swap-and-pop), so
      positions are NOT stable across deletes.
    - accumulated_funds is in the smallest currency unit.
    """

    __tablename__ = "candidates"

    id: Optional[int] = Field(default=None, primary_key=True)

    position: int = Field(index=True)

    name: str
    description: str = Field(default="")
    payout_address: str = Field(index=True)

    vote_count: int = Field(default=0)
    accumulated_funds: int = Field(default=0, sa_column=Column(Amount(), nullable=False, default=0))

    created_at: datetime = Field(default_factory=utcnow)

    def to_details(self) -> Dict[str, Any]:
        return {
            "index": self.position,
            "candidate_id": self.id,
            "name": self.name,
            "description": self.description,
            "vote_count": self.vote_count,
            "payout_address": self.payout_address,
            "accumulated_funds": self.accumulated_funds,
        }
