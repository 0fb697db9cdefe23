from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Generator, Iterable, List, Optional, Union

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from ..database import session_scope
from ..errors import (
    AlreadyVoted,
    DelayNotElapsed,
    HasNotVoted,
    LedgerError,
    NoCandidates,
    VotingNotCompleted,
    VotingNotOpen,
)
from ..models.candidate import Candidate
from ..models.election_state import ElectionState, WorkflowPhase
from ..models.ledger_event import LedgerEvent, LedgerEventKind
from ..models.participation_token import TokenCollection
from ..models.principal import Principal, utcnow
from ..models.vote_record import VoteRecord
from . import access, candidate_registry, events, workflow
from .candidate_registry import CandidateListing
from .payouts import LedgerPayoutGateway, PayoutGateway
from .token_issuer import ParticipationTokenIssuer
from .workflow import VotingStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time())


class ElectionLedger:
    """
    The single owner of election state.

    Every public method runs as one critical section: a process-wide lock plus
    one database transaction. A raised LedgerError rolls back everything the
    call did, including its notifications.

    Bound to exactly one ParticipationTokenIssuer; bootstrap() grants this
    ledger's principal the exclusive mint capability.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        issuer: Optional[ParticipationTokenIssuer] = None,
        gateway: Optional[PayoutGateway] = None,
        clock: Clock = system_clock,
        principal: str = "votehub-ledger",
    ) -> None:
        self.engine = engine
        self.issuer = issuer or ParticipationTokenIssuer()
        self.gateway = gateway or LedgerPayoutGateway()
        self.clock = clock
        self.principal = principal
        self._lock = threading.RLock()

    # -------------------------
    # Plumbing
    # -------------------------

    @contextmanager
    def _transaction(self, operation: str) -> Generator[Session, None, None]:
        with self._lock:
            try:
                with session_scope(self.engine) as session:
                    yield session
                    emitted = events.take_pending(session)
            except LedgerError as exc:
                logger.info("%s rejected: %s (%s)", operation, exc.code, exc.message)
                raise
            events.log_committed(emitted)

    def _now(self) -> int:
        return int(self.clock())

    def bootstrap(self, admins: Iterable[str] = (), funders: Iterable[str] = ()) -> None:
        """
        Create the singleton rows, bind the issuer to this ledger and seed roles.
        Idempotent.
        """
        with self._transaction("bootstrap") as session:
            workflow.load_state(session)
            self.issuer.grant_minter(session, self.principal)
            for address in admins:
                self._set_roles(session, address, is_admin=True)
            for address in funders:
                self._set_roles(session, address, funder_access=True)

    # -------------------------
    # Workflow
    # -------------------------

    def advance_phase(self, caller: str, requested: Union[WorkflowPhase, int]) -> WorkflowPhase:
        with self._transaction("advance_phase") as session:
            state = workflow.advance(session, caller, requested, self._now())
            return state.current_phase

    def current_phase(self) -> WorkflowPhase:
        with self._transaction("current_phase") as session:
            return workflow.current_phase(session)

    def state(self) -> ElectionState:
        with self._transaction("state") as session:
            return workflow.load_state(session)

    def can_vote_at(self) -> int:
        with self._transaction("can_vote_at") as session:
            return workflow.can_vote_at(workflow.load_state(session))

    def get_voting_status(self) -> VotingStatus:
        with self._transaction("get_voting_status") as session:
            return workflow.voting_status(workflow.load_state(session), self._now())

    # -------------------------
    # Candidates
    # -------------------------

    def add_candidate(self, caller: str, name: str, description: str, payout_address: str) -> Candidate:
        with self._transaction("add_candidate") as session:
            return candidate_registry.add(session, caller, name, description, payout_address)

    def update_candidate(
        self,
        caller: str,
        index: int,
        name: str,
        description: str,
        payout_address: str,
    ) -> Candidate:
        with self._transaction("update_candidate") as session:
            return candidate_registry.update(session, caller, index, name, description, payout_address)

    def delete_candidate(self, caller: str, index: int) -> None:
        with self._transaction("delete_candidate") as session:
            candidate_registry.delete(session, caller, index)

    def fund_candidate(self, caller: str, index: int, amount: int) -> Candidate:
        with self._transaction("fund_candidate") as session:
            return candidate_registry.fund(session, caller, index, amount)

    def withdraw(self, caller: str, index: int) -> int:
        with self._transaction("withdraw") as session:
            return candidate_registry.withdraw(session, caller, index, self.gateway)

    def get_all_candidates(self) -> CandidateListing:
        with self._transaction("get_all_candidates") as session:
            return candidate_registry.get_all(session)

    def list_candidates(self) -> List[Candidate]:
        with self._transaction("list_candidates") as session:
            return candidate_registry.ordered(session)

    def get_candidate_details(self, index: int) -> Candidate:
        with self._transaction("get_candidate_details") as session:
            return candidate_registry.get_details(session, index)

    # -------------------------
    # Voting
    # -------------------------

    def cast_vote(self, voter: str, index: int) -> int:
        """
        Record one vote for the candidate at `index` and mint the voter's
        participation token. Returns the token id.

        Gates, in order: VOTE phase, delay elapsed, index in bounds, voter holds no token.
        """
        with self._transaction("cast_vote") as session:
            now = self._now()
            state = workflow.require_phase(session, WorkflowPhase.VOTE, VotingNotOpen)
            if now < workflow.can_vote_at(state):
                raise DelayNotElapsed(f"Voting opens at {workflow.can_vote_at(state)}")

            candidate = candidate_registry.get_at(session, index)

            if self.issuer.balance_of(session, voter) > 0:
                raise AlreadyVoted(f"{voter} has already voted")

            candidate.vote_count = int(candidate.vote_count) + 1
            session.add(candidate)

            token_id = self.issuer.mint(session, self.principal, voter)
            session.add(VoteRecord(voter=voter, candidate_index=candidate.position, token_id=token_id, cast_at=now))

            events.emit(session, LedgerEventKind.VOTED, voter=voter, index=candidate.position)
            return token_id

    def get_user_vote(self, principal: str) -> int:
        with self._transaction("get_user_vote") as session:
            if self.issuer.balance_of(session, principal) < 1:
                raise HasNotVoted(f"{principal} has not voted")
            record = session.get(VoteRecord, principal)
            if record is None:
                raise HasNotVoted(f"{principal} has not voted")
            return int(record.candidate_index)

    def get_winner(self) -> Candidate:
        """
        Plurality winner by vote count only. Ties (including all-zero) go to
        the lowest index.
        """
        with self._transaction("get_winner") as session:
            workflow.require_phase(session, WorkflowPhase.COMPLETED, VotingNotCompleted)
            roster = candidate_registry.ordered(session)
            if not roster:
                raise NoCandidates()

            winning_votes = 0
            winner = roster[0]
            for candidate in roster:
                if candidate.vote_count > winning_votes:
                    winning_votes = candidate.vote_count
                    winner = candidate
            return winner

    # -------------------------
    # Participation tokens
    # -------------------------

    def token_collection(self) -> TokenCollection:
        with self._transaction("token_collection") as session:
            return self.issuer.collection(session)

    def token_balance(self, owner: str) -> int:
        with self._transaction("token_balance") as session:
            return self.issuer.balance_of(session, owner)

    def token_owner(self, token_id: int) -> str:
        with self._transaction("token_owner") as session:
            return self.issuer.owner_of(session, token_id)

    def tokens_of(self, owner: str) -> List[int]:
        with self._transaction("tokens_of") as session:
            return self.issuer.tokens_of(session, owner)

    # -------------------------
    # Principals / roles
    # -------------------------

    def _set_roles(
        self,
        session: Session,
        address: str,
        *,
        is_admin: Optional[bool] = None,
        funder_access: Optional[bool] = None,
        accepts_payouts: Optional[bool] = None,
    ) -> Principal:
        principal = session.get(Principal, address)
        if principal is None:
            principal = Principal(address=address)

        if is_admin is not None:
            principal.is_admin = bool(is_admin)
        if funder_access is not None:
            principal.funder_access = bool(funder_access)
        if accepts_payouts is not None:
            principal.accepts_payouts = bool(accepts_payouts)
        principal.updated_at = utcnow()

        session.add(principal)
        session.flush()
        return principal

    def grant_roles(
        self,
        caller: str,
        address: str,
        *,
        is_admin: Optional[bool] = None,
        funder_access: Optional[bool] = None,
        accepts_payouts: Optional[bool] = None,
    ) -> Principal:
        """
        Admin-only. Omitted flags are left unchanged.
        """
        with self._transaction("grant_roles") as session:
            access.require(session, caller, access.Operation.GRANT_ROLES)
            candidate_registry.require_address(address)
            principal = self._set_roles(
                session,
                address,
                is_admin=is_admin,
                funder_access=funder_access,
                accepts_payouts=accepts_payouts,
            )
            events.emit(
                session,
                LedgerEventKind.ROLES_CHANGED,
                address=address,
                is_admin=principal.is_admin,
                funder_access=principal.funder_access,
                accepts_payouts=principal.accepts_payouts,
                changed_by=caller,
            )
            return principal

    def get_principal(self, address: str) -> Principal:
        """
        Known principal row, or a transient role-less one.
        """
        with self._transaction("get_principal") as session:
            return session.get(Principal, address) or Principal(address=address)

    # -------------------------
    # Audit trail
    # -------------------------

    def list_events(self, kind: Optional[LedgerEventKind] = None, limit: int = 200) -> List[LedgerEvent]:
        with self._transaction("list_events") as session:
            q = select(LedgerEvent).order_by(LedgerEvent.id)
            if kind:
                q = q.where(LedgerEvent.kind == kind)
            q = q.limit(max(1, int(limit)))
            return list(session.exec(q).all())
