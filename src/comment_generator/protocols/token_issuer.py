"""Token issuer protocol.

A token issuer talks to one vendor's credential endpoint using that vendor's
static secrets and returns a short-lived access token.
"""

from typing import NamedTuple, Protocol, runtime_checkable


class IssuedToken(NamedTuple):
    """Token as returned by the issuance endpoint."""

    token: str
    ttl_seconds: int


@runtime_checkable
class TokenIssuer(Protocol):
    """Protocol for vendor credential endpoints."""

    @property
    def provider(self) -> str:
        """Short provider name used for cache keys and diagnostics."""
        ...

    async def issue(self) -> IssuedToken:
        """Request a fresh token.

        Returns:
            The issued token and its lifetime

        Raises:
            CredentialUnavailable: If the static secrets are not configured
            CredentialFetchFailed: If the endpoint rejects the request
        """
        ...
