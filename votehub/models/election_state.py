from __future__ import annotations

from enum import IntEnum
from typing import Optional

from sqlmodel import SQLModel, Field


class WorkflowPhase(IntEnum):
    """
    Sequential election phases. Values are stored as plain integers.

    The workflow only ever moves forward by exactly one step:
    REGISTER_CANDIDATES -> FOUND_CANDIDATES -> VOTE -> COMPLETED
    """

    REGISTER_CANDIDATES = 0
    FOUND_CANDIDATES = 1
    VOTE = 2
    COMPLETED = 3


ELECTION_STATE_ID = 1


class ElectionState(SQLModel, table=True):
    """
    Singleton row (id=1) holding the workflow pointer.

    Notes:
    - vote_opened_at is an epoch-seconds timestamp, 0 until the VOTE phase starts.
    - It is written once, on the transition into VOTE, and never changes afterwards.
    """

    __tablename__ = "election_state"

    id: Optional[int] = Field(default=ELECTION_STATE_ID, primary_key=True)

    phase: int = Field(default=int(WorkflowPhase.REGISTER_CANDIDATES))
    vote_opened_at: int = Field(default=0)

    @property
    def current_phase(self) -> WorkflowPhase:
        return WorkflowPhase(self.phase)
