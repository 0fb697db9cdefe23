from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from sqlmodel import Session

from ..errors import Unauthorized
from ..models.principal import Principal


class Role(str, Enum):
    ADMIN = "admin"
    FUNDER = "funder"


class Operation(str, Enum):
    """
    Every role-gated ledger operation.
    """

    ADVANCE_PHASE = "advance_phase"
    ADD_CANDIDATE = "add_candidate"
    UPDATE_CANDIDATE = "update_candidate"
    DELETE_CANDIDATE = "delete_candidate"
    FUND_CANDIDATE = "fund_candidate"
    GRANT_ROLES = "grant_roles"


# Authorization table: operation -> role it requires.
REQUIRED_ROLE: Dict[Operation, Role] = {
    Operation.ADVANCE_PHASE: Role.ADMIN,
    Operation.ADD_CANDIDATE: Role.ADMIN,
    Operation.UPDATE_CANDIDATE: Role.ADMIN,
    Operation.DELETE_CANDIDATE: Role.ADMIN,
    Operation.GRANT_ROLES: Role.ADMIN,
    Operation.FUND_CANDIDATE: Role.FUNDER,
}


@dataclass(frozen=True)
class RoleFlags:
    """
    The roles a principal holds. Unknown principals hold none.
    """
    admin: bool = False
    funder: bool = False

    @classmethod
    def of(cls, principal: Optional[Principal]) -> "RoleFlags":
        if principal is None:
            return cls()
        return cls(admin=principal.has_admin_access(), funder=principal.has_funder_access())

    def has(self, role: Role) -> bool:
        if role == Role.ADMIN:
            return self.admin
        if role == Role.FUNDER:
            return self.funder
        return False


def is_allowed(roles: RoleFlags, operation: Operation) -> bool:
    """
    Pure allow/deny decision. Admin does not imply funder.
    """
    required = REQUIRED_ROLE.get(operation)
    if required is None:
        return False
    return roles.has(required)


def roles_of(session: Session, address: str) -> RoleFlags:
    return RoleFlags.of(session.get(Principal, address))


def require(session: Session, address: str, operation: Operation) -> None:
    """
    Raise Unauthorized unless `address` may perform `operation`.
    """
    if not is_allowed(roles_of(session, address), operation):
        raise Unauthorized(f"{address or '<anonymous>'} may not {operation.value}")
