from __future__ import annotations

from typing import Callable

import pytest
from sqlmodel import SQLModel

from votehub.database import init_db, make_engine
from votehub.models.election_state import WorkflowPhase
from votehub.services.election_ledger import ElectionLedger
from votehub.services.workflow import VOTE_DELAY

ADMIN = "0xadmin"
FOUNDER_1 = "0xfounder1"
FOUNDER_2 = "0xfounder2"
ALICE_PAYOUT = "0xalice"
BOB_PAYOUT = "0xbob"
CHARLIE_PAYOUT = "0xcharlie"

ONE_COIN = 10**18


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    init_db(eng)
    yield eng
    SQLModel.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(engine, clock) -> ElectionLedger:
    lg = ElectionLedger(engine, clock=clock, principal="test-ledger")
    lg.bootstrap(admins=[ADMIN], funders=[FOUNDER_1, FOUNDER_2])
    return lg


@pytest.fixture
def three_candidates(ledger: ElectionLedger) -> ElectionLedger:
    ledger.add_candidate(ADMIN, "Alice", "Candidate A", ALICE_PAYOUT)
    ledger.add_candidate(ADMIN, "Bob", "Candidate B", BOB_PAYOUT)
    ledger.add_candidate(ADMIN, "Charlie", "Candidate C", CHARLIE_PAYOUT)
    return ledger


@pytest.fixture
def to_phase(ledger: ElectionLedger) -> Callable[[WorkflowPhase], None]:
    """Advance step by step until `target` is reached."""

    def _go(target: WorkflowPhase) -> None:
        while ledger.current_phase() < target:
            ledger.advance_phase(ADMIN, ledger.current_phase() + 1)

    return _go


@pytest.fixture
def voting_open(three_candidates, to_phase, clock) -> ElectionLedger:
    to_phase(WorkflowPhase.VOTE)
    clock.advance(VOTE_DELAY)
    return three_candidates
