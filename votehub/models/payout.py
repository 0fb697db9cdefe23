from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from .types import Amount


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Payout(SQLModel, table=True):
    """
    A value transfer made out of a candidate's accumulated funds.
    """

    __tablename__ = "payouts"

    id: Optional[int] = Field(default=None, primary_key=True)

    candidate_id: int = Field(foreign_key="candidates.id", index=True)
    recipient: str = Field(index=True)
    amount: int = Field(sa_column=Column(Amount(), nullable=False))

    created_at: datetime = Field(default_factory=utcnow, index=True)
