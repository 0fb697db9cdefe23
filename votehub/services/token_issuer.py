from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func
from sqlmodel import Session, select

from ..errors import TokenNotFound, Unauthorized
from ..models.participation_token import (
    TOKEN_COLLECTION_ID,
    ParticipationToken,
    TokenCollection,
)

logger = logging.getLogger(__name__)


class ParticipationTokenIssuer:
    """
    Issues sequentially numbered participation tokens.

    - Only the granted minter may mint (the election ledger).
    - The issuer itself does not cap tokens per owner; the ledger does.
    - Ownership never changes after mint.
    """

    def __init__(self, collection_id: int = TOKEN_COLLECTION_ID) -> None:
        self.collection_id = collection_id

    def collection(self, session: Session) -> TokenCollection:
        row = session.get(TokenCollection, self.collection_id)
        if row is None:
            row = TokenCollection(id=self.collection_id)
            session.add(row)
            session.flush()
        return row

    def grant_minter(self, session: Session, principal: str) -> TokenCollection:
        """
        Hand the mint capability to `principal`. Granted once: re-granting to
        the same principal is a no-op, any other principal is refused.
        """
        row = self.collection(session)
        if row.minter == principal:
            return row
        if row.minter is not None:
            raise Unauthorized("Mint capability already granted to another principal")

        row.minter = principal
        session.add(row)
        session.flush()
        logger.info("participation token minter granted to %s", principal)
        return row

    def mint(self, session: Session, caller: str, to: str) -> int:
        row = self.collection(session)
        if row.minter is None or caller != row.minter:
            raise Unauthorized(f"{caller} is not allowed to mint participation tokens")

        token_id = self.total_supply(session)
        session.add(ParticipationToken(token_id=token_id, owner=to))
        session.flush()
        return token_id

    def total_supply(self, session: Session) -> int:
        return int(session.exec(select(func.count()).select_from(ParticipationToken)).one())

    def balance_of(self, session: Session, owner: str) -> int:
        return int(
            session.exec(
                select(func.count()).select_from(ParticipationToken).where(ParticipationToken.owner == owner)
            ).one()
        )

    def owner_of(self, session: Session, token_id: int) -> str:
        token = session.get(ParticipationToken, token_id)
        if token is None:
            raise TokenNotFound(f"Token {token_id} has not been minted")
        return token.owner

    def tokens_of(self, session: Session, owner: str) -> List[int]:
        return list(
            session.exec(
                select(ParticipationToken.token_id)
                .where(ParticipationToken.owner == owner)
                .order_by(ParticipationToken.token_id)
            ).all()
        )
