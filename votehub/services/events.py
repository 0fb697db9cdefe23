from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlmodel import Session

from ..models.ledger_event import LedgerEvent, LedgerEventKind

logger = logging.getLogger(__name__)

_PENDING_KEY = "votehub.pending_events"


def emit(session: Session, kind: LedgerEventKind, **payload: Any) -> LedgerEvent:
    """
    Record a notification inside the caller's transaction.

    The row only becomes visible if the transaction commits.
    Amounts must be passed as decimal strings.
    """
    event = LedgerEvent(kind=kind, payload=dict(payload))
    session.add(event)
    session.info.setdefault(_PENDING_KEY, []).append(event)
    return event


def take_pending(session: Session) -> List[LedgerEvent]:
    return session.info.pop(_PENDING_KEY, [])


def log_committed(emitted: List[LedgerEvent]) -> None:
    for event in emitted:
        logger.info("ledger event %s %s", event.kind.value, _fmt(event.payload))


def _fmt(payload: Dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in payload.items())
