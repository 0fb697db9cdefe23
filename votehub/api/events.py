from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..models.ledger_event import LedgerEventKind
from ..services.election_ledger import ElectionLedger
from .deps import get_ledger

router = APIRouter(prefix="/events", tags=["events"])


class LedgerEventOut(BaseModel):
    id: int
    kind: LedgerEventKind
    payload: Dict[str, Any]
    created_at: datetime


@router.get("", response_model=List[LedgerEventOut])
def list_events(
    kind: Optional[LedgerEventKind] = None,
    limit: int = 200,
    ledger: ElectionLedger = Depends(get_ledger),
) -> List[LedgerEventOut]:
    """
    Audit trail in commit order.
    """
    return [
        LedgerEventOut(id=e.id, kind=e.kind, payload=e.payload or {}, created_at=e.created_at)
        for e in ledger.list_events(kind=kind, limit=limit)
    ]
