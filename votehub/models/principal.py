from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Principal(SQLModel, table=True):
    """
    An identity known to the ledger (wallet / account address).

    - is_admin gates workflow + roster management.
    - funder_access gates funding. Admin does NOT imply funder.
    - accepts_payouts=False makes the default payout gateway reject transfers to it.
    Principals with no row have no roles and accept payouts.
    """

    __tablename__ = "principals"

    address: str = Field(primary_key=True)

    is_admin: bool = Field(default=False, index=True)
    funder_access: bool = Field(default=False, index=True)
    accepts_payouts: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def has_admin_access(self) -> bool:
        return bool(self.is_admin)

    def has_funder_access(self) -> bool:
        return bool(self.funder_access)
