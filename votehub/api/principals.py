from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field as PydField

from ..models.principal import Principal
from ..services.election_ledger import ElectionLedger
from .deps import get_ledger

router = APIRouter(prefix="/principals", tags=["principals"])


class RoleGrant(BaseModel):
    """
    Admin-only. Omitted flags are left unchanged.
    """
    caller: str = PydField(..., min_length=1)
    is_admin: Optional[bool] = None
    funder_access: Optional[bool] = None
    accepts_payouts: Optional[bool] = None


class PrincipalOut(BaseModel):
    address: str
    is_admin: bool
    funder_access: bool
    accepts_payouts: bool


def _out(principal: Principal) -> PrincipalOut:
    return PrincipalOut(
        address=principal.address,
        is_admin=bool(principal.is_admin),
        funder_access=bool(principal.funder_access),
        accepts_payouts=bool(principal.accepts_payouts),
    )


@router.get("/{address}", response_model=PrincipalOut)
def get_principal(address: str, ledger: ElectionLedger = Depends(get_ledger)) -> PrincipalOut:
    return _out(ledger.get_principal(address))


@router.post("/{address}/roles", response_model=PrincipalOut)
def grant_roles(address: str, payload: RoleGrant, ledger: ElectionLedger = Depends(get_ledger)) -> PrincipalOut:
    principal = ledger.grant_roles(
        payload.caller,
        address,
        is_admin=payload.is_admin,
        funder_access=payload.funder_access,
        accepts_payouts=payload.accepts_payouts,
    )
    return _out(principal)
