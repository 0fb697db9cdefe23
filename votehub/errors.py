from __future__ import annotations

from typing import Optional


class LedgerError(Exception):
    """
    Base class for every rejected ledger operation.

    - code is an API-stable string surfaced to callers.
    - status_code is the HTTP status the API layer maps the error to.
    - Raising one of these inside a ledger operation aborts the whole transaction.
    """

    code: str = "ledger_error"
    status_code: int = 400
    default_message: str = "Ledger operation rejected"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class SequenceViolation(LedgerError):
    code = "sequence_violation"
    status_code = 409
    default_message = "Workflow can only advance to the next phase"


class InvalidIndex(LedgerError):
    code = "invalid_index"
    status_code = 404
    default_message = "Candidate index out of bounds"


class InvalidAddress(LedgerError):
    code = "invalid_address"
    status_code = 400
    default_message = "Payout address must be a non-zero principal"


class WrongPhase(LedgerError):
    code = "wrong_phase"
    status_code = 409
    default_message = "Operation not allowed in the current phase"


class VotingNotOpen(WrongPhase):
    code = "voting_not_open"
    default_message = "Voting is not open"


class VotingNotCompleted(WrongPhase):
    code = "voting_not_completed"
    default_message = "Voting has not been completed"


class ZeroAmount(LedgerError):
    code = "zero_amount"
    status_code = 400
    default_message = "Amount must be greater than zero"


class Unauthorized(LedgerError):
    code = "unauthorized"
    status_code = 403
    default_message = "Caller is not allowed to perform this operation"


class NoFunds(LedgerError):
    code = "no_funds"
    status_code = 409
    default_message = "No funds to withdraw"


class AlreadyVoted(LedgerError):
    code = "already_voted"
    status_code = 409
    default_message = "Principal has already voted"


class HasNotVoted(LedgerError):
    code = "has_not_voted"
    status_code = 404
    default_message = "Principal has not voted"


class DelayNotElapsed(LedgerError):
    code = "delay_not_elapsed"
    status_code = 409
    default_message = "Voting delay has not elapsed"


class NoCandidates(LedgerError):
    code = "no_candidates"
    status_code = 409
    default_message = "No candidates registered"


class TokenNotFound(LedgerError):
    code = "token_not_found"
    status_code = 404
    default_message = "Token has not been minted"


class TransferFailed(LedgerError):
    code = "transfer_failed"
    status_code = 402
    default_message = "Payout transfer was rejected by the recipient"
