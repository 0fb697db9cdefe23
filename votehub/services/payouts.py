from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from sqlmodel import Session

from ..errors import TransferFailed
from ..models.payout import Payout
from ..models.principal import Principal

if TYPE_CHECKING:
    from ..models.candidate import Candidate

logger = logging.getLogger(__name__)


class PayoutGateway(Protocol):
    """
    Value-transfer collaborator used by withdraw.

    transfer() must raise TransferFailed (or any exception) when the recipient
    rejects the payment; it runs inside the ledger transaction.
    """

    def transfer(self, session: Session, candidate: "Candidate", recipient: str, amount: int) -> None:
        ...


class LedgerPayoutGateway:
    """
    Default gateway: records a Payout row.

    Recipients flagged accepts_payouts=False reject the transfer.
    """

    def transfer(self, session: Session, candidate: "Candidate", recipient: str, amount: int) -> None:
        principal = session.get(Principal, recipient)
        if principal is not None and not principal.accepts_payouts:
            logger.warning("payout of %s to %s rejected by recipient", amount, recipient)
            raise TransferFailed(f"Recipient {recipient} rejected the payout")

        session.add(Payout(candidate_id=candidate.id, recipient=recipient, amount=int(amount)))
        session.flush()
