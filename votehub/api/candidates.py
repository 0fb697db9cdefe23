from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field as PydField

from ..models.candidate import Candidate
from ..services.election_ledger import ElectionLedger
from .deps import get_ledger

router = APIRouter(prefix="/candidates", tags=["candidates"])


# -------------------------
# Schemas (do NOT use DB model as input)
# -------------------------

class CandidateWrite(BaseModel):
    """
    Used for both add and update (admin-only, registration phase only).
    """
    caller: str = PydField(..., min_length=1)
    name: str
    description: str = ""
    payout_address: str


class FundRequest(BaseModel):
    """
    amount is in the smallest currency unit; send large values as strings.
    """
    caller: str = PydField(..., min_length=1)
    amount: int


class CallerOnly(BaseModel):
    caller: str = PydField(..., min_length=1)


class CandidateOut(BaseModel):
    index: int
    candidate_id: int
    name: str
    description: str
    vote_count: int
    payout_address: str
    accumulated_funds: str


class CandidateListOut(BaseModel):
    names: List[str]
    descriptions: List[str]
    vote_counts: List[int]
    candidates: List[CandidateOut]


class WithdrawOut(BaseModel):
    index: int
    amount: str
    recipient: str


# -------------------------
# Helpers
# -------------------------

def _out(candidate: Candidate) -> CandidateOut:
    details: Dict[str, Any] = candidate.to_details()
    details["accumulated_funds"] = str(details["accumulated_funds"])
    return CandidateOut(**details)


# -------------------------
# Routes
# -------------------------

@router.get("", response_model=CandidateListOut)
def list_candidates(ledger: ElectionLedger = Depends(get_ledger)) -> CandidateListOut:
    listing = ledger.get_all_candidates()
    return CandidateListOut(
        names=listing.names,
        descriptions=listing.descriptions,
        vote_counts=listing.vote_counts,
        candidates=[_out(c) for c in ledger.list_candidates()],
    )


@router.get("/{index}", response_model=CandidateOut)
def get_candidate(index: int, ledger: ElectionLedger = Depends(get_ledger)) -> CandidateOut:
    return _out(ledger.get_candidate_details(index))


@router.post("", response_model=CandidateOut, status_code=201)
def add_candidate(payload: CandidateWrite, ledger: ElectionLedger = Depends(get_ledger)) -> CandidateOut:
    candidate = ledger.add_candidate(payload.caller, payload.name, payload.description, payload.payout_address)
    return _out(candidate)


@router.put("/{index}", response_model=CandidateOut)
def update_candidate(
    index: int,
    payload: CandidateWrite,
    ledger: ElectionLedger = Depends(get_ledger),
) -> CandidateOut:
    candidate = ledger.update_candidate(
        payload.caller,
        index,
        payload.name,
        payload.description,
        payload.payout_address,
    )
    return _out(candidate)


@router.delete("/{index}", response_model=Dict[str, Any])
def delete_candidate(
    index: int,
    caller: str = Query(..., min_length=1),
    ledger: ElectionLedger = Depends(get_ledger),
) -> Dict[str, Any]:
    """
    Swap-and-pop: the last candidate moves into `index`.
    """
    ledger.delete_candidate(caller, index)
    return {"ok": True, "deleted_index": index}


@router.post("/{index}/fund", response_model=CandidateOut)
def fund_candidate(index: int, payload: FundRequest, ledger: ElectionLedger = Depends(get_ledger)) -> CandidateOut:
    return _out(ledger.fund_candidate(payload.caller, index, payload.amount))


@router.post("/{index}/withdraw", response_model=WithdrawOut)
def withdraw(index: int, payload: CallerOnly, ledger: ElectionLedger = Depends(get_ledger)) -> WithdrawOut:
    amount = ledger.withdraw(payload.caller, index)
    return WithdrawOut(index=index, amount=str(amount), recipient=payload.caller)
