from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VoteRecord(SQLModel, table=True):
    """
    Write-once record of what a principal voted for.

    candidate_index is the position at vote time (positions cannot change
    during voting since deletes are registration-only).
    """

    __tablename__ = "vote_records"

    voter: str = Field(primary_key=True)
    candidate_index: int = Field(index=True)
    token_id: int = Field(foreign_key="participation_tokens.token_id", unique=True)

    cast_at: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
