"""Identity provisioning against the Supabase GoTrue admin REST API.

All calls use the service-role key, so this adapter must only ever run
server-side. Failures are raised as IdentityProviderError carrying the
upstream message; nothing here retries.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from ...application.ports.identity_provider import IdentityProvider, IdentityProviderError

logger = logging.getLogger(__name__)

USERS_PER_PAGE = 1000


class SupabaseIdentityProvider(IdentityProvider):
    def __init__(self, base_url: str, service_key: str, timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.service_key = service_key
        self.timeout = timeout
        self._client = client

    def _http(self) -> httpx.Client:
        if not self.base_url:
            raise IdentityProviderError("Missing env: SUPABASE_URL")
        if not self.service_key:
            raise IdentityProviderError("Missing env: SUPABASE_SERVICE_ROLE_KEY")
        if self._client is None:
            self._client = httpx.Client(
                base_url=f"{self.base_url}/auth/v1",
                timeout=self.timeout,
                headers={
                    "apikey": self.service_key,
                    "Authorization": f"Bearer {self.service_key}",
                },
            )
        return self._client

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._http().request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Identity provider {method} {path} failed: {e}")
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        return body.get("msg") or body.get("message") or body.get("error_description") or body.get("error") or f"HTTP {response.status_code}"

    def invite(self, email: str, redirect_to: str) -> str:
        response = self._request("POST", "/invite", params={"redirect_to": redirect_to}, json={"email": email})
        if response.status_code in (400, 409, 422):
            # Already registered: converge on the existing account
            existing = self._find_by_email(email)
            if existing:
                logger.info(f"Invite target already registered; reusing account {existing}")
                return existing
        if response.is_error:
            raise IdentityProviderError(self._error_message(response))

        user: Dict[str, Any] = response.json()
        account_id = user.get("id") or (user.get("user") or {}).get("id")
        if not account_id:
            raise IdentityProviderError("Invite succeeded but no user id")
        return account_id

    def _find_by_email(self, email: str) -> Optional[str]:
        page = 1
        while True:
            response = self._request("GET", "/admin/users", params={"page": page, "per_page": USERS_PER_PAGE})
            if response.is_error:
                raise IdentityProviderError(self._error_message(response))
            users = response.json().get("users") or []
            for user in users:
                if (user.get("email") or "").lower() == email:
                    return user.get("id")
            if len(users) < USERS_PER_PAGE:
                return None
            page += 1

    def delete_account(self, account_id: str) -> None:
        response = self._request("DELETE", f"/admin/users/{account_id}")
        if response.is_error:
            raise IdentityProviderError(self._error_message(response))

    def account_exists(self, account_id: str) -> bool:
        response = self._request("GET", f"/admin/users/{account_id}")
        if response.status_code == 404:
            return False
        if response.is_error:
            raise IdentityProviderError(self._error_message(response))
        return True
