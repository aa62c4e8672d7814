"""Expiring cache protocol.

Defines the interface of the process-wide key/value store used to memoize
short-lived credentials and idempotent lookups.

Implementations can include:
- In-process dictionary (default)
- Redis (shared between workers)
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ExpiringCache(Protocol):
    """Protocol for key/value stores with optional per-entry expiry.

    An entry whose expiry has passed is logically absent: ``get`` returns
    None for it and removes it in the same step. There is no eviction
    policy beyond expiry, so callers own their key cardinality.
    """

    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None if absent or expired.

        Args:
            key: The cache key

        Returns:
            The cached value or None
        """
        ...

    def set(
        self,
        key: str,
        value: Any,
        ttl: float | None = None,
        expires_at: float | None = None,
    ) -> None:
        """Store a value.

        Args:
            key: The cache key
            value: The value to store
            ttl: Relative lifetime in seconds (None or 0 = never expires)
            expires_at: Absolute Unix expiry, alternative to ttl
        """
        ...

    def delete(self, key: str) -> None:
        """Remove key unconditionally."""
        ...

    def clear(self) -> None:
        """Remove every entry unconditionally."""
        ...

    def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
