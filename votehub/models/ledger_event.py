from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import Column
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEventKind(str, Enum):
    """
    Observable notifications. Values are API-stable strings.
    """

    PHASE_CHANGED = "phase_changed"
    CANDIDATE_ADDED = "candidate_added"
    CANDIDATE_UPDATED = "candidate_updated"
    CANDIDATE_DELETED = "candidate_deleted"
    CANDIDATE_FUNDED = "candidate_funded"
    FUNDS_WITHDRAWN = "funds_withdrawn"
    VOTED = "voted"
    ROLES_CHANGED = "roles_changed"


class LedgerEvent(SQLModel, table=True):
    """
    Audit trail: one row per successful mutating ledger call.

    Rows are written in the same transaction as the state change, so an
    aborted call never leaves an event behind.
    Amounts inside payload are decimal strings.
    """

    __tablename__ = "ledger_events"

    id: Optional[int] = Field(default=None, primary_key=True)

    kind: LedgerEventKind = Field(index=True)
    payload: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, index=True)
