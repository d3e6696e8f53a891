from typing import Optional

from ...utils import decode_jwt_token
from ...application.ports.credential_verifier import CredentialVerifier


class JwtCredentialVerifier(CredentialVerifier):
    def __init__(self, secret: Optional[str] = None):
        self.secret = secret

    def verify(self, token: str) -> Optional[str]:
        payload = decode_jwt_token(token, secret=self.secret)
        if not payload:
            return None
        subject = payload.get("sub")
        return str(subject) if subject else None
