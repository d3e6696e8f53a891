from typing import Optional, Protocol


class CredentialVerifier(Protocol):
    def verify(self, token: str) -> Optional[str]:
        """Return the account id the token was issued to, or None."""
        ...
