from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field as PydField

from ..services.election_ledger import ElectionLedger
from .candidates import CandidateOut, _out
from .deps import get_ledger

router = APIRouter(prefix="/votes", tags=["votes"])


class VoteRequest(BaseModel):
    voter: str = PydField(..., min_length=1)
    candidate_index: int


class VoteOut(BaseModel):
    voter: str
    candidate_index: int
    token_id: int


@router.post("", response_model=VoteOut, status_code=201)
def cast_vote(payload: VoteRequest, ledger: ElectionLedger = Depends(get_ledger)) -> VoteOut:
    token_id = ledger.cast_vote(payload.voter, payload.candidate_index)
    return VoteOut(voter=payload.voter, candidate_index=payload.candidate_index, token_id=token_id)


@router.get("/winner", response_model=CandidateOut)
def get_winner(ledger: ElectionLedger = Depends(get_ledger)) -> CandidateOut:
    return _out(ledger.get_winner())


@router.get("/{principal}", response_model=VoteOut)
def get_user_vote(principal: str, ledger: ElectionLedger = Depends(get_ledger)) -> VoteOut:
    index = ledger.get_user_vote(principal)
    tokens = ledger.tokens_of(principal)
    return VoteOut(voter=principal, candidate_index=index, token_id=tokens[0])
