from __future__ import annotations

import pytest
from sqlmodel import Session

from votehub.database import session_scope
from votehub.errors import TokenNotFound, Unauthorized
from votehub.models.participation_token import TOKEN_NAME, TOKEN_SYMBOL
from votehub.services.token_issuer import ParticipationTokenIssuer


@pytest.fixture
def issuer() -> ParticipationTokenIssuer:
    return ParticipationTokenIssuer()


def test_collection_metadata(ledger):
    row = ledger.token_collection()
    assert (row.name, row.symbol) == ("Voting Participation NFT", "VOTE")
    assert (TOKEN_NAME, TOKEN_SYMBOL) == (row.name, row.symbol)
    assert row.minter == "test-ledger"


def test_only_minter_can_mint(engine, issuer):
    with session_scope(engine) as session:
        issuer.grant_minter(session, "minter")
        with pytest.raises(Unauthorized):
            issuer.mint(session, "someone-else", "0xvoter")
        assert issuer.mint(session, "minter", "0xvoter") == 0
        assert issuer.mint(session, "minter", "0xvoter") == 1
        # The issuer does not cap tokens per owner; the ledger does.
        assert issuer.balance_of(session, "0xvoter") == 2
        assert issuer.tokens_of(session, "0xvoter") == [0, 1]
        assert issuer.total_supply(session) == 2


def test_mint_without_minter_is_refused(engine, issuer):
    with Session(engine) as session:
        with pytest.raises(Unauthorized):
            issuer.mint(session, "anyone", "0xvoter")


def test_minter_granted_once(engine, issuer):
    with session_scope(engine) as session:
        issuer.grant_minter(session, "minter")
        issuer.grant_minter(session, "minter")
        with pytest.raises(Unauthorized):
            issuer.grant_minter(session, "usurper")
        assert issuer.collection(session).minter == "minter"


def test_owner_of_unminted(ledger):
    with pytest.raises(TokenNotFound):
        ledger.token_owner(0)
    assert ledger.token_balance("0xnobody") == 0


def test_second_bootstrap_keeps_binding(ledger):
    ledger.bootstrap()
    assert ledger.token_collection().minter == "test-ledger"
