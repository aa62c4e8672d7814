"""Expiring cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """A value held by the expiring cache.

    Attributes:
        value: The cached value
        expires_at: Unix timestamp after which the entry is logically absent,
            or None if it never expires
    """

    value: Any
    expires_at: float | None = None
