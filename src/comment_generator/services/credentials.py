"""Credential cache with refresh-ahead.

Each vendor that hands out short-lived access tokens gets one
``CredentialCache``. It keeps a single live credential in the shared
expiring cache and replaces it before it runs out.
"""

import asyncio
import time
from collections.abc import Callable

from comment_generator.entities import Credential
from comment_generator.log import get_logger
from comment_generator.protocols import ExpiringCache, TokenIssuer

logger = get_logger(__name__)


class CredentialCache:
    """Single-slot token cache for one provider.

    The credential is stored in the shared ExpiringCache under
    ``credential:<provider>`` and is refreshed once ``now + safety_margin``
    reaches its expiry. Refreshes are single-flight: concurrent callers on a
    stale slot wait for one issuance and share its token.

    Example:
        ```python
        baidu = CredentialCache(
            issuer=BaiduTokenIssuer.create(),
            cache=cache,
            safety_margin=300,
        )
        token = await baidu.get_token()
        ```
    """

    def __init__(
        self,
        issuer: TokenIssuer,
        cache: ExpiringCache,
        safety_margin: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the credential cache.

        Args:
            issuer: Vendor endpoint used on a miss.
            cache: Shared expiring cache holding the slot.
            safety_margin: Seconds before expiry at which the token is refreshed.
            clock: Source of the current Unix time (injectable for tests).
        """
        self._issuer = issuer
        self._cache = cache
        self._margin = safety_margin
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def provider(self) -> str:
        return self._issuer.provider

    @property
    def cache_key(self) -> str:
        return f"credential:{self._issuer.provider}"

    @property
    def safety_margin(self) -> float:
        return self._margin

    def _cached(self) -> Credential | None:
        data = self._cache.get(self.cache_key)
        if data is None:
            return None
        credential = Credential.from_dict(data)
        if credential.is_fresh(self._clock(), self._margin):
            return credential
        return None

    async def get_token(self) -> str:
        """Return a usable token, issuing a new one when needed.

        Returns:
            The access token

        Raises:
            CredentialUnavailable: If the provider is not configured
            CredentialFetchFailed: If issuance fails (nothing is cached)
        """
        credential = self._cached()
        if credential is not None:
            return credential.token

        async with self._lock:
            # Another caller may have refreshed while we waited
            credential = self._cached()
            if credential is not None:
                return credential.token

            logger.info("Issuing new %s access token", self.provider)
            issued = await self._issuer.issue()
            now = self._clock()
            credential = Credential(token=issued.token, expires_at=now + issued.ttl_seconds)
            self._cache.set(self.cache_key, credential.to_dict(), ttl=issued.ttl_seconds)
            logger.debug(
                "%s token valid for %ss (refresh %ss early)",
                self.provider,
                issued.ttl_seconds,
                self._margin,
            )
            return credential.token

    def invalidate(self) -> None:
        """Drop the cached credential so the next call re-issues."""
        self._cache.delete(self.cache_key)
