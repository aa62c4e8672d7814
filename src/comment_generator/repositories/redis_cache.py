"""Redis implementation of ExpiringCache.

Lets several API workers share credentials and memoized lookups. Expiry is
delegated to Redis itself, so an expired key is simply gone when read.
"""

import json
import time
from typing import Any

import redis

from comment_generator.config import get_redis_client, settings
from comment_generator.log import get_logger

logger = get_logger(__name__)


class RedisExpiringCache:
    """Redis implementation using plain string keys with PX expiry.

    This class satisfies the ExpiringCache protocol through structural
    typing - no explicit inheritance needed.

    Values are stored JSON-encoded under ``<prefix>:<key>``, so only
    JSON-serializable values can be cached.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key_prefix: Namespace for all keys. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisExpiringCache":
        """Factory method to create RedisExpiringCache with defaults.

        Args:
            key_prefix: Key namespace. If None, uses settings.

        Returns:
            Configured RedisExpiringCache
        """
        return cls(key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> Any | None:
        """Return the decoded value for key, or None if absent or expired."""
        raw = self._client.get(self._key(key))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Dropping undecodable cache entry %s", key)
            self._client.delete(self._key(key))
            return None

    def set(
        self,
        key: str,
        value: Any,
        ttl: float | None = None,
        expires_at: float | None = None,
    ) -> None:
        """Store value under key with an optional relative or absolute expiry."""
        if not ttl and expires_at is not None:
            ttl = expires_at - time.time()
            if ttl <= 0:
                # Already expired
                self._client.delete(self._key(key))
                return

        data = json.dumps(value, ensure_ascii=False)
        if ttl:
            self._client.set(self._key(key), data, px=max(1, int(ttl * 1000)))
        else:
            self._client.set(self._key(key), data)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def clear(self) -> None:
        """Delete every key under this cache's prefix."""
        keys = list(self._client.scan_iter(match=f"{self._prefix}:*"))
        if keys:
            self._client.delete(*keys)

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
