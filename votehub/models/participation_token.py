from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


TOKEN_NAME = "Voting Participation NFT"
TOKEN_SYMBOL = "VOTE"

TOKEN_COLLECTION_ID = 1


class TokenCollection(SQLModel, table=True):
    """
    Singleton row describing the participation token collection.

    minter is the only principal allowed to mint; it is granted once.
    """

    __tablename__ = "token_collections"

    id: Optional[int] = Field(default=TOKEN_COLLECTION_ID, primary_key=True)

    name: str = Field(default=TOKEN_NAME)
    symbol: str = Field(default=TOKEN_SYMBOL)
    minter: Optional[str] = Field(default=None)


class ParticipationToken(SQLModel, table=True):
    """
    One non-fungible participation token. token_id is assigned sequentially from 0.
    """

    __tablename__ = "participation_tokens"

    token_id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    owner: str = Field(index=True)

    minted_at: datetime = Field(default_factory=utcnow)
