from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sqlmodel import Session, select

from ..errors import InvalidAddress, InvalidIndex, NoFunds, Unauthorized, ZeroAmount
from ..models.candidate import Candidate
from ..models.election_state import WorkflowPhase
from ..models.ledger_event import LedgerEventKind
from . import access, events, workflow
from .payouts import PayoutGateway


ZERO_ADDRESS = "0x" + "0" * 40


@dataclass(frozen=True)
class CandidateListing:
    """
    Parallel sequences in current index order.
    """
    names: List[str]
    descriptions: List[str]
    vote_counts: List[int]


def _is_null_address(address: Optional[str]) -> bool:
    s = (address or "").strip()
    if not s:
        return True
    if s.lower() == ZERO_ADDRESS:
        return True
    return False


def require_address(address: Optional[str]) -> str:
    if _is_null_address(address):
        raise InvalidAddress()
    return str(address).strip()


def count(session: Session) -> int:
    return len(session.exec(select(Candidate.id)).all())


def ordered(session: Session) -> List[Candidate]:
    return list(session.exec(select(Candidate).order_by(Candidate.position)).all())


def get_at(session: Session, index: int) -> Candidate:
    """
    Candidate currently at `index`, or InvalidIndex.
    """
    if index is None or int(index) < 0:
        raise InvalidIndex(f"Invalid candidate index: {index}")
    candidate = session.exec(select(Candidate).where(Candidate.position == int(index))).first()
    if candidate is None:
        raise InvalidIndex(f"Invalid candidate index: {index}")
    return candidate


# -------------------------
# Registration phase (admin)
# -------------------------

def add(session: Session, caller: str, name: str, description: str, payout_address: str) -> Candidate:
    access.require(session, caller, access.Operation.ADD_CANDIDATE)
    workflow.require_phase(session, WorkflowPhase.REGISTER_CANDIDATES)
    address = require_address(payout_address)

    candidate = Candidate(
        position=count(session),
        name=name,
        description=description,
        payout_address=address,
        vote_count=0,
        accumulated_funds=0,
    )
    session.add(candidate)
    session.flush()

    events.emit(
        session,
        LedgerEventKind.CANDIDATE_ADDED,
        name=name,
        description=description,
        address=address,
    )
    return candidate


def update(
    session: Session,
    caller: str,
    index: int,
    name: str,
    description: str,
    payout_address: str,
) -> Candidate:
    """
    Overwrite name/description/address in place. Votes and funds are untouched.
    """
    access.require(session, caller, access.Operation.UPDATE_CANDIDATE)
    workflow.require_phase(session, WorkflowPhase.REGISTER_CANDIDATES)
    address = require_address(payout_address)
    candidate = get_at(session, index)

    candidate.name = name
    candidate.description = description
    candidate.payout_address = address
    session.add(candidate)

    events.emit(
        session,
        LedgerEventKind.CANDIDATE_UPDATED,
        index=candidate.position,
        name=name,
        description=description,
        address=address,
    )
    return candidate


def delete(session: Session, caller: str, index: int) -> None:
    """
    Swap-and-pop: the current last candidate takes over `index`, then the
    roster shrinks by one. Deleting the last slot just pops it.
    """
    access.require(session, caller, access.Operation.DELETE_CANDIDATE)
    workflow.require_phase(session, WorkflowPhase.REGISTER_CANDIDATES)
    removed = get_at(session, index)
    freed = removed.position
    last = get_at(session, count(session) - 1)

    session.delete(removed)
    session.flush()

    if last is not removed:
        last.position = freed
        session.add(last)
        session.flush()

    events.emit(session, LedgerEventKind.CANDIDATE_DELETED, index=int(index))


# -------------------------
# Funding phase
# -------------------------

def fund(session: Session, caller: str, index: int, amount: int) -> Candidate:
    """
    Add `amount` to a candidate's funds. Amounts accumulate across calls and funders.
    """
    access.require(session, caller, access.Operation.FUND_CANDIDATE)
    workflow.require_phase(session, WorkflowPhase.FOUND_CANDIDATES)
    candidate = get_at(session, index)
    if amount is None or int(amount) <= 0:
        raise ZeroAmount()

    candidate.accumulated_funds = int(candidate.accumulated_funds) + int(amount)
    session.add(candidate)

    events.emit(
        session,
        LedgerEventKind.CANDIDATE_FUNDED,
        index=candidate.position,
        funder=caller,
        amount=str(int(amount)),
    )
    return candidate


def withdraw(session: Session, caller: str, index: int, gateway: PayoutGateway) -> int:
    """
    Pay a candidate's full balance out to its payout address. Any phase.

    Funds are zeroed and flushed BEFORE the transfer is attempted; if the
    gateway raises, the caller's transaction rolls the zeroing back.
    Returns the amount paid out.
    """
    candidate = get_at(session, index)
    if caller != candidate.payout_address:
        raise Unauthorized("Only the candidate's payout address may withdraw")

    balance = int(candidate.accumulated_funds)
    if balance <= 0:
        raise NoFunds()

    candidate.accumulated_funds = 0
    session.add(candidate)
    session.flush()

    gateway.transfer(session, candidate, caller, balance)

    events.emit(
        session,
        LedgerEventKind.FUNDS_WITHDRAWN,
        index=candidate.position,
        amount=str(balance),
    )
    return balance


# -------------------------
# Reads
# -------------------------

def get_all(session: Session) -> CandidateListing:
    rows = ordered(session)
    return CandidateListing(
        names=[c.name for c in rows],
        descriptions=[c.description for c in rows],
        vote_counts=[int(c.vote_count) for c in rows],
    )


def get_details(session: Session, index: int) -> Candidate:
    return get_at(session, index)
