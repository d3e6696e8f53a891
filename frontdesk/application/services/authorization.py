"""Every role rule for the front desk, evaluated in one place.

The rendering layer may pre-check roles for UX, but only these functions
decide. Rules run in a fixed order so that, for a staff deletion, a
non-admin caller is refused on role before the self-delete and
protected-admin checks are considered.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...exceptions import Forbidden
from ..ports.staff_repo import Identity, ROLES


class Action(str, Enum):
    LIST_STAFF = "list_staff"
    INVITE_STAFF = "invite_staff"
    DELETE_STAFF = "delete_staff"
    CHANGE_STAFF_ROLE = "change_staff_role"
    READ_PATIENTS = "read_patients"
    CREATE_PATIENT = "create_patient"
    READ_APPOINTMENTS = "read_appointments"
    CREATE_APPOINTMENT = "create_appointment"
    UPDATE_APPOINTMENT_STATUS = "update_appointment_status"
    PING_PRESENCE = "ping_presence"


ADMIN_ONLY = frozenset({
    Action.LIST_STAFF,
    Action.INVITE_STAFF,
    Action.DELETE_STAFF,
    Action.CHANGE_STAFF_ROLE,
})


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


def authorize(caller: Identity, action: Action, target: Optional[Identity] = None) -> Decision:
    if caller.role not in ROLES:
        return deny("role-not-allowed")

    if action in ADMIN_ONLY and not caller.is_admin:
        return deny("role-not-allowed")

    if action is Action.DELETE_STAFF and target is not None:
        if target.id == caller.id:
            return deny("self-delete")
        if target.is_admin:
            return deny("protected-admin")

    return ALLOW


def require(caller: Identity, action: Action, target: Optional[Identity] = None) -> None:
    """Raise Forbidden unless `caller` may perform `action`."""
    decision = authorize(caller, action, target)
    if not decision.allowed:
        raise Forbidden(decision.reason or "role-not-allowed")
