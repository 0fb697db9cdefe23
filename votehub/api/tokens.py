from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..services.election_ledger import ElectionLedger
from .deps import get_ledger

router = APIRouter(prefix="/tokens", tags=["tokens"])


@router.get("", response_model=Dict[str, Any])
def collection(ledger: ElectionLedger = Depends(get_ledger)) -> Dict[str, Any]:
    row = ledger.token_collection()
    return {"name": row.name, "symbol": row.symbol, "minter": row.minter}


@router.get("/balance/{owner}", response_model=Dict[str, Any])
def balance_of(owner: str, ledger: ElectionLedger = Depends(get_ledger)) -> Dict[str, Any]:
    tokens: List[int] = ledger.tokens_of(owner)
    return {"owner": owner, "balance": ledger.token_balance(owner), "token_ids": tokens}


@router.get("/{token_id}/owner", response_model=Dict[str, Any])
def owner_of(token_id: int, ledger: ElectionLedger = Depends(get_ledger)) -> Dict[str, Any]:
    return {"token_id": token_id, "owner": ledger.token_owner(token_id)}
