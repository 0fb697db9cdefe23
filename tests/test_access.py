from __future__ import annotations

import pytest

from votehub.errors import InvalidAddress, Unauthorized
from votehub.models.ledger_event import LedgerEventKind
from votehub.services.access import Operation, RoleFlags, is_allowed

from .conftest import ADMIN, FOUNDER_1


@pytest.mark.parametrize(
    "operation",
    [
        Operation.ADVANCE_PHASE,
        Operation.ADD_CANDIDATE,
        Operation.UPDATE_CANDIDATE,
        Operation.DELETE_CANDIDATE,
        Operation.GRANT_ROLES,
    ],
)
def test_admin_operations(operation):
    assert is_allowed(RoleFlags(admin=True), operation)
    assert not is_allowed(RoleFlags(funder=True), operation)
    assert not is_allowed(RoleFlags(), operation)


def test_funding_needs_funder_not_admin():
    assert is_allowed(RoleFlags(funder=True), Operation.FUND_CANDIDATE)
    assert not is_allowed(RoleFlags(admin=True), Operation.FUND_CANDIDATE)
    assert is_allowed(RoleFlags(admin=True, funder=True), Operation.FUND_CANDIDATE)


def test_roles_seeded_at_bootstrap(ledger):
    admin = ledger.get_principal(ADMIN)
    assert admin.is_admin and not admin.funder_access
    founder = ledger.get_principal(FOUNDER_1)
    assert founder.funder_access and not founder.is_admin
    stranger = ledger.get_principal("0xstranger")
    assert not stranger.is_admin and not stranger.funder_access and stranger.accepts_payouts


def test_admin_grants_and_revokes(ledger):
    ledger.grant_roles(ADMIN, "0xnewadmin", is_admin=True)
    ledger.add_candidate("0xnewadmin", "Alice", "", "0xalice")

    ledger.grant_roles(ADMIN, "0xnewadmin", is_admin=False)
    with pytest.raises(Unauthorized):
        ledger.add_candidate("0xnewadmin", "Bob", "", "0xbob")

    (event, _) = ledger.list_events(kind=LedgerEventKind.ROLES_CHANGED)
    assert event.payload["address"] == "0xnewadmin"
    assert event.payload["changed_by"] == ADMIN


def test_non_admin_cannot_grant(ledger):
    with pytest.raises(Unauthorized):
        ledger.grant_roles(FOUNDER_1, FOUNDER_1, is_admin=True)
    assert not ledger.get_principal(FOUNDER_1).is_admin


def test_grant_rejects_null_address(ledger):
    with pytest.raises(InvalidAddress):
        ledger.grant_roles(ADMIN, "", funder_access=True)
