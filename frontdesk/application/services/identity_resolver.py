from dataclasses import dataclass
from typing import Optional
import logging

from ...exceptions import Unauthenticated
from ..ports.credential_verifier import CredentialVerifier
from ..ports.staff_repo import StaffRepository, Identity, ROLES

logger = logging.getLogger(__name__)


@dataclass
class IdentityResolver:
    verifier: CredentialVerifier
    staff_repo: StaffRepository

    def resolve(self, credential: Optional[str]) -> Identity:
        if not credential:
            raise Unauthenticated()

        try:
            account_id = self.verifier.verify(credential)
        except Exception as e:
            logger.error(f"Credential verification failed: {e}")
            raise Unauthenticated() from e
        if not account_id:
            logger.warning("Session token rejected - invalid or expired")
            raise Unauthenticated()

        # Role is re-read on every request so role changes apply immediately
        try:
            identity = self.staff_repo.get_by_id(account_id)
        except Exception as e:
            logger.error(f"Directory lookup failed for {account_id}: {e}")
            raise Unauthenticated() from e

        if identity is None:
            logger.warning(f"No directory row for account {account_id}")
            raise Unauthenticated()
        if identity.role not in ROLES:
            logger.warning(f"Unrecognized role {identity.role!r} for account {account_id}")
            raise Unauthenticated()
        return identity
