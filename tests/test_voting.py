from __future__ import annotations

import threading

import pytest

from votehub.errors import (
    AlreadyVoted,
    DelayNotElapsed,
    HasNotVoted,
    InvalidIndex,
    NoCandidates,
    VotingNotCompleted,
    VotingNotOpen,
    WrongPhase,
)
from votehub.models.election_state import WorkflowPhase
from votehub.models.ledger_event import LedgerEventKind
from votehub.services.workflow import VOTE_DELAY

from .conftest import ADMIN, ALICE_PAYOUT, BOB_PAYOUT, FOUNDER_1, FOUNDER_2, ONE_COIN


def test_vote_counts_and_mints_token(voting_open):
    token_id = voting_open.cast_vote("0xvoter1", 1)
    assert token_id == 0
    assert voting_open.get_candidate_details(1).vote_count == 1
    assert voting_open.token_balance("0xvoter1") == 1
    assert voting_open.token_owner(0) == "0xvoter1"
    assert voting_open.get_user_vote("0xvoter1") == 1


def test_token_ids_are_sequential(voting_open):
    ids = [voting_open.cast_vote(f"0xvoter{i}", i % 3) for i in range(4)]
    assert ids == [0, 1, 2, 3]


def test_second_vote_rejected(voting_open):
    voting_open.cast_vote("0xvoter1", 0)
    for index in (0, 1, 2):
        with pytest.raises(AlreadyVoted):
            voting_open.cast_vote("0xvoter1", index)
    assert voting_open.token_balance("0xvoter1") == 1
    assert voting_open.get_all_candidates().vote_counts == [1, 0, 0]


def test_vote_requires_vote_phase(three_candidates, to_phase):
    with pytest.raises(VotingNotOpen):
        three_candidates.cast_vote("0xvoter1", 0)
    to_phase(WorkflowPhase.FOUND_CANDIDATES)
    with pytest.raises(WrongPhase):
        three_candidates.cast_vote("0xvoter1", 0)
    to_phase(WorkflowPhase.COMPLETED)
    with pytest.raises(VotingNotOpen):
        three_candidates.cast_vote("0xvoter1", 0)


def test_delay_boundary(three_candidates, to_phase, clock):
    to_phase(WorkflowPhase.VOTE)
    clock.advance(VOTE_DELAY - 1)
    with pytest.raises(DelayNotElapsed):
        three_candidates.cast_vote("0xvoter1", 0)
    assert three_candidates.token_balance("0xvoter1") == 0

    clock.advance(1)
    three_candidates.cast_vote("0xvoter1", 0)
    assert three_candidates.get_candidate_details(0).vote_count == 1


def test_invalid_index_leaves_no_trace(voting_open):
    with pytest.raises(InvalidIndex):
        voting_open.cast_vote("0xvoter1", 3)
    assert voting_open.token_balance("0xvoter1") == 0
    with pytest.raises(HasNotVoted):
        voting_open.get_user_vote("0xvoter1")
    assert voting_open.list_events(kind=LedgerEventKind.VOTED) == []


def test_voted_event(voting_open):
    voting_open.cast_vote("0xvoter9", 2)
    (event,) = voting_open.list_events(kind=LedgerEventKind.VOTED)
    assert event.payload == {"voter": "0xvoter9", "index": 2}


def test_get_user_vote_without_vote(ledger):
    with pytest.raises(HasNotVoted):
        ledger.get_user_vote("0xnobody")


def test_winner_requires_completed(voting_open):
    with pytest.raises(VotingNotCompleted):
        voting_open.get_winner()


def test_winner_requires_candidates(ledger, to_phase):
    to_phase(WorkflowPhase.COMPLETED)
    with pytest.raises(NoCandidates):
        ledger.get_winner()


def test_tie_goes_to_lowest_index(voting_open, to_phase):
    voting_open.cast_vote("0xvoter1", 0)
    voting_open.cast_vote("0xvoter2", 1)
    to_phase(WorkflowPhase.COMPLETED)
    winner = voting_open.get_winner()
    assert (winner.name, winner.vote_count) == ("Alice", 1)


def test_no_votes_first_candidate_wins(voting_open, to_phase):
    to_phase(WorkflowPhase.COMPLETED)
    assert voting_open.get_winner().name == "Alice"


def test_later_candidate_wins_with_more_votes(voting_open, to_phase):
    voting_open.cast_vote("0xvoter1", 2)
    voting_open.cast_vote("0xvoter2", 2)
    voting_open.cast_vote("0xvoter3", 0)
    to_phase(WorkflowPhase.COMPLETED)
    winner = voting_open.get_winner()
    assert (winner.name, winner.vote_count) == ("Charlie", 2)


def test_winner_is_a_pure_read(voting_open, to_phase):
    voting_open.cast_vote("0xvoter1", 1)
    to_phase(WorkflowPhase.COMPLETED)
    before = len(voting_open.list_events())
    assert voting_open.get_winner().name == voting_open.get_winner().name == "Bob"
    assert len(voting_open.list_events()) == before


def test_full_election(ledger, clock):
    ledger.add_candidate(ADMIN, "Alice", "Candidate A", ALICE_PAYOUT)
    ledger.add_candidate(ADMIN, "Bob", "Candidate B", BOB_PAYOUT)

    ledger.advance_phase(ADMIN, WorkflowPhase.FOUND_CANDIDATES)
    ledger.fund_candidate(FOUNDER_1, 0, 2 * ONE_COIN)
    ledger.fund_candidate(FOUNDER_2, 1, ONE_COIN)

    ledger.advance_phase(ADMIN, WorkflowPhase.VOTE)
    clock.advance(VOTE_DELAY)
    ledger.cast_vote("0xvoter1", 0)
    ledger.cast_vote("0xvoter2", 0)
    ledger.cast_vote("0xvoter3", 1)

    ledger.advance_phase(ADMIN, WorkflowPhase.COMPLETED)
    winner = ledger.get_winner()
    assert (winner.name, winner.vote_count, winner.accumulated_funds) == ("Alice", 2, 2 * ONE_COIN)

    kinds = [e.kind for e in ledger.list_events()]
    assert kinds.count(LedgerEventKind.PHASE_CHANGED) == 3
    assert kinds.count(LedgerEventKind.CANDIDATE_FUNDED) == 2
    assert kinds.count(LedgerEventKind.VOTED) == 3


def test_concurrent_repeat_votes_are_linearized(voting_open):

    outcomes = []

    def attempt(index):
        try:
            voting_open.cast_vote("0xracer", index)
            outcomes.append("ok")
        except AlreadyVoted:
            outcomes.append("already_voted")

    threads = [threading.Thread(target=attempt, args=(i % 3,)) for i in range(12)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("already_voted") == 11
    assert voting_open.token_balance("0xracer") == 1
    assert sum(voting_open.get_all_candidates().vote_counts) == 1
