from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from sqlmodel import Session

from ..errors import SequenceViolation, WrongPhase
from ..models.election_state import ELECTION_STATE_ID, ElectionState, WorkflowPhase
from ..models.ledger_event import LedgerEventKind
from . import access, events


# Mandatory wait between voting opening and the first accepted vote (seconds).
VOTE_DELAY = 3600


@dataclass(frozen=True)
class VotingStatus:
    """
    is_open is only True once the VOTE phase has started AND the delay elapsed.
    """
    is_open: bool
    seconds_remaining: int


def load_state(session: Session) -> ElectionState:
    """
    Return the singleton workflow row, creating it on first use.
    """
    state = session.get(ElectionState, ELECTION_STATE_ID)
    if state is None:
        state = ElectionState(id=ELECTION_STATE_ID)
        session.add(state)
        session.flush()
    return state


def current_phase(session: Session) -> WorkflowPhase:
    return load_state(session).current_phase


def check_transition(current: WorkflowPhase, requested: Union[WorkflowPhase, int]) -> Tuple[bool, str]:
    """
    Pure transition guard.

    Only current + 1 is accepted: same phase, going back and skipping ahead
    are all rejected. Nothing follows COMPLETED.
    """
    try:
        target = WorkflowPhase(int(requested))
    except ValueError:
        return False, f"unknown_phase:{requested}"

    if int(target) != int(current) + 1:
        return False, f"{current.name}->{target.name}"

    return True, "ok"


def advance(session: Session, caller: str, requested: Union[WorkflowPhase, int], now: int) -> ElectionState:
    """
    Move the workflow one phase forward.

    - caller must be an admin
    - entering VOTE records vote_opened_at = now (exactly once)
    """
    access.require(session, caller, access.Operation.ADVANCE_PHASE)

    state = load_state(session)
    allowed, why = check_transition(state.current_phase, requested)
    if not allowed:
        raise SequenceViolation(f"Invalid phase transition: {why}")

    target = WorkflowPhase(int(requested))
    if target == WorkflowPhase.VOTE:
        state.vote_opened_at = int(now)

    state.phase = int(target)
    session.add(state)

    events.emit(session, LedgerEventKind.PHASE_CHANGED, phase=target.name, phase_value=int(target))
    return state


def require_phase(session: Session, phase: WorkflowPhase, error: type = WrongPhase) -> ElectionState:
    state = load_state(session)
    if state.current_phase != phase:
        raise error(f"Requires phase {phase.name}, current phase is {state.current_phase.name}")
    return state


def can_vote_at(state: ElectionState) -> int:
    """
    Earliest epoch second at which votes are accepted; 0 outside the VOTE phase.
    """
    if state.current_phase != WorkflowPhase.VOTE:
        return 0
    return int(state.vote_opened_at) + VOTE_DELAY


def voting_status(state: ElectionState, now: int) -> VotingStatus:
    if state.current_phase != WorkflowPhase.VOTE:
        return VotingStatus(is_open=False, seconds_remaining=0)

    opens_at = can_vote_at(state)
    if now >= opens_at:
        return VotingStatus(is_open=True, seconds_remaining=0)

    return VotingStatus(is_open=False, seconds_remaining=int(opens_at - now))
