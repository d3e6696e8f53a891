from dataclasses import dataclass
from typing import List, Optional
import logging

from ...exceptions import ValidationError, NotFound, UpstreamError
from ..ports.staff_repo import StaffRepository, Identity, ROLES
from ..ports.identity_provider import IdentityProvider, IdentityProviderError
from ..ports.audit_logger import AuditLogger
from .authorization import Action, require

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "doctor"


def normalize_role(role: Optional[str]) -> str:
    value = (role if role is not None else DEFAULT_ROLE).strip().lower()
    if value not in ROLES:
        raise ValidationError("role", "Invalid role")
    return value


@dataclass
class StaffService:
    repo: StaffRepository
    provider: IdentityProvider
    audit: AuditLogger
    invite_redirect_url: str

    def invite(self, caller: Identity, email: Optional[str], role: Optional[str]) -> Identity:
        require(caller, Action.INVITE_STAFF)

        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("email", "Email is required")
        role = normalize_role(role)

        try:
            account_id = self.provider.invite(email, self.invite_redirect_url)
        except IdentityProviderError as e:
            logger.error(f"Invite failed for caller {caller.id} (role {role}): {e}")
            self.audit.log("staff.invite", caller.id, email=email, success=False, details={"error": str(e)})
            raise UpstreamError(str(e)) from e

        # Provider and directory are separate systems; upsert lets a retry converge
        try:
            identity = self.repo.upsert(account_id, email, role)
        except Exception as e:
            logger.error(f"Directory upsert failed for account {account_id}: {e}")
            self.audit.log("staff.invite", caller.id, target_id=account_id, email=email, success=False, details={"error": str(e)})
            raise UpstreamError(str(e)) from e

        self.audit.log("staff.invite", caller.id, target_id=account_id, email=email, details={"role": role})
        return identity

    def list(self, caller: Identity) -> List[Identity]:
        require(caller, Action.LIST_STAFF)
        return self.repo.list_recent_first()

    def unreconciled(self, caller: Identity) -> List[Identity]:
        """Directory rows whose external account no longer resolves."""
        require(caller, Action.LIST_STAFF)
        orphans = []
        for identity in self.repo.list_recent_first():
            try:
                exists = self.provider.account_exists(identity.id)
            except IdentityProviderError as e:
                raise UpstreamError(str(e)) from e
            if not exists:
                orphans.append(identity)
        return orphans

    def delete(self, caller: Identity, staff_id: str) -> None:
        require(caller, Action.DELETE_STAFF)
        if not staff_id:
            raise ValidationError("user_id", "userId required")

        target = self.repo.get_by_id(staff_id)
        if target is None:
            raise NotFound("Staff member not found")
        require(caller, Action.DELETE_STAFF, target)

        try:
            self.provider.delete_account(staff_id)
        except IdentityProviderError as e:
            logger.error(f"Account removal failed for {staff_id}; directory row kept: {e}")
            self.audit.log("staff.delete", caller.id, target_id=staff_id, success=False, details={"error": str(e)})
            raise UpstreamError(str(e)) from e

        try:
            self.repo.delete(staff_id)
        except Exception as e:
            logger.error(f"Account {staff_id} removed but directory row remains; needs reconciliation: {e}")
            self.audit.log("staff.delete", caller.id, target_id=staff_id, success=False, details={"error": str(e), "reconcile": True})
            raise UpstreamError(str(e), reconcile=True) from e

        self.audit.log("staff.delete", caller.id, target_id=staff_id)

    def change_role(self, caller: Identity, staff_id: str, role: Optional[str]) -> Identity:
        require(caller, Action.CHANGE_STAFF_ROLE)
        role = normalize_role(role)
        updated = self.repo.set_role(staff_id, role)
        if updated is None:
            raise NotFound("Staff member not found")
        self.audit.log("staff.role", caller.id, target_id=staff_id, details={"role": role})
        return updated
