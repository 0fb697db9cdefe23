from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field as PydField, field_validator

from ..models.election_state import WorkflowPhase
from ..services.election_ledger import ElectionLedger
from .deps import get_ledger

router = APIRouter(prefix="/workflow", tags=["workflow"])


# -------------------------
# Schemas
# -------------------------

class AdvanceRequest(BaseModel):
    """
    phase must be exactly current + 1. Accepts the integer value or the phase name.
    """
    caller: str = PydField(..., min_length=1)
    phase: int

    @field_validator("phase", mode="before")
    @classmethod
    def _phase_by_name(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip().lstrip("-").isdigit():
            try:
                return int(WorkflowPhase[v.strip().upper()])
            except KeyError:
                raise ValueError(f"unknown phase: {v}")
        return v


class WorkflowStatus(BaseModel):
    phase: str
    phase_value: int
    vote_opened_at: int
    can_vote_at: int
    voting_open: bool
    seconds_remaining: int
    next_phase: Optional[str] = None


# -------------------------
# Helpers
# -------------------------

def _status(ledger: ElectionLedger) -> WorkflowStatus:
    state = ledger.state()
    phase = state.current_phase
    voting = ledger.get_voting_status()
    following = int(phase) + 1
    return WorkflowStatus(
        phase=phase.name,
        phase_value=int(phase),
        vote_opened_at=int(state.vote_opened_at),
        can_vote_at=ledger.can_vote_at(),
        voting_open=voting.is_open,
        seconds_remaining=voting.seconds_remaining,
        next_phase=WorkflowPhase(following).name if following <= int(WorkflowPhase.COMPLETED) else None,
    )


# -------------------------
# Routes
# -------------------------

@router.get("", response_model=WorkflowStatus)
def get_status(ledger: ElectionLedger = Depends(get_ledger)) -> WorkflowStatus:
    return _status(ledger)


@router.post("/advance", response_model=WorkflowStatus)
def advance(payload: AdvanceRequest, ledger: ElectionLedger = Depends(get_ledger)) -> WorkflowStatus:
    """
    Admin-only. Moves the workflow forward by exactly one phase.
    """
    ledger.advance_phase(payload.caller, payload.phase)
    return _status(ledger)


@router.get("/voting", response_model=Dict[str, Any])
def voting_status(ledger: ElectionLedger = Depends(get_ledger)) -> Dict[str, Any]:
    status = ledger.get_voting_status()
    return {
        "is_open": status.is_open,
        "seconds_remaining": status.seconds_remaining,
        "can_vote_at": ledger.can_vote_at(),
    }
