# votehub/models/__init__.py
# Central import surface for SQLModel table registration.

from .election_state import ElectionState, WorkflowPhase
from .candidate import Candidate
from .principal import Principal
from .participation_token import ParticipationToken, TokenCollection, TOKEN_NAME, TOKEN_SYMBOL
from .vote_record import VoteRecord
from .payout import Payout
from .ledger_event import LedgerEvent, LedgerEventKind

__all__ = [
    "ElectionState",
    "WorkflowPhase",
    "Candidate",
    "Principal",
    "ParticipationToken",
    "TokenCollection",
    "TOKEN_NAME",
    "TOKEN_SYMBOL",
    "VoteRecord",
    "Payout",
    "LedgerEvent",
    "LedgerEventKind",
]
