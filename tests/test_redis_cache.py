"""
Tests for the Redis expiring cache.

The Redis client is mocked, so no server is needed.
"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from comment_generator.protocols import ExpiringCache
from comment_generator.repositories import RedisExpiringCache


@pytest.fixture
def client():
    """Create a mock Redis client."""
    return MagicMock()


@pytest.fixture
def redis_cache(client):
    """Create a Redis cache over the mock client."""
    return RedisExpiringCache(redis_client=client, key_prefix="test")


def test_satisfies_protocol(redis_cache):
    """Test the cache satisfies the ExpiringCache protocol."""
    assert isinstance(redis_cache, ExpiringCache)


def test_set_with_ttl_uses_px(redis_cache, client):
    """Test a ttl is passed to Redis in milliseconds under the prefixed key."""
    redis_cache.set("credential:baidu", {"token": "t", "expires_at": 10.0}, ttl=2.5)

    client.set.assert_called_once()
    args, kwargs = client.set.call_args
    assert args[0] == "test:credential:baidu"
    assert json.loads(args[1]) == {"token": "t", "expires_at": 10.0}
    assert kwargs == {"px": 2500}


def test_set_without_expiry(redis_cache, client):
    """Test a value without expiry is stored without px."""
    redis_cache.set("k", "v")
    client.set.assert_called_once_with("test:k", '"v"')


def test_set_past_expiry_deletes(redis_cache, client):
    """Test an absolute expiry in the past removes the key instead of storing."""
    redis_cache.set("k", "v", expires_at=1.0)
    client.set.assert_not_called()
    client.delete.assert_called_once_with("test:k")


def test_get_decodes_json(redis_cache, client):
    """Test stored JSON is decoded, including non-ASCII text."""
    client.get.return_value = json.dumps({"name": "美食"}, ensure_ascii=False).encode()
    assert redis_cache.get("category:id:1") == {"name": "美食"}
    client.get.assert_called_once_with("test:category:id:1")


def test_get_missing(redis_cache, client):
    """Test a missing key reads as None."""
    client.get.return_value = None
    assert redis_cache.get("k") is None


def test_get_undecodable_entry_is_dropped(redis_cache, client):
    """Test a corrupt entry is deleted and reads as None."""
    client.get.return_value = b"{not json"
    assert redis_cache.get("k") is None
    client.delete.assert_called_once_with("test:k")


def test_clear_only_touches_prefix(redis_cache, client):
    """Test clear deletes the keys found under the prefix."""
    client.scan_iter.return_value = iter([b"test:a", b"test:b"])
    redis_cache.clear()
    client.scan_iter.assert_called_once_with(match="test:*")
    client.delete.assert_called_once_with(b"test:a", b"test:b")


def test_health_check(redis_cache, client):
    """Test health reflects ping, and connection errors report unhealthy."""
    client.ping.return_value = True
    assert redis_cache.health_check() is True

    client.ping.side_effect = redis.ConnectionError("down")
    assert redis_cache.health_check() is False
