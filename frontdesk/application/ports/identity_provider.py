from typing import Protocol


class IdentityProviderError(Exception):
    pass


class IdentityProvider(Protocol):
    def invite(self, email: str, redirect_to: str) -> str:
        """Invite (or find) the external account for `email`; returns its id."""
        ...

    def delete_account(self, account_id: str) -> None:
        ...

    def account_exists(self, account_id: str) -> bool:
        ...
