"""
Tests for the in-memory expiring cache.
"""

from comment_generator.protocols import ExpiringCache
from comment_generator.repositories import InMemoryExpiringCache


def test_satisfies_protocol(cache):
    """Test the cache satisfies the ExpiringCache protocol."""
    assert isinstance(cache, ExpiringCache)


def test_get_missing_key(cache):
    """Test a missing key reads as None."""
    assert cache.get("missing") is None


def test_set_without_expiry(cache, clock):
    """Test entries without expiry never expire."""
    cache.set("k", {"a": 1})
    clock.advance(10**9)
    assert cache.get("k") == {"a": 1}


def test_ttl_expiry(cache, clock):
    """Test an entry is visible before its ttl and gone after."""
    cache.set("k", "v", ttl=10)
    clock.advance(9.5)
    assert cache.get("k") == "v"
    clock.advance(0.5)
    assert cache.get("k") is None


def test_expired_entry_is_evicted_on_read(cache, clock):
    """Test reading an expired entry removes it."""
    cache.set("k", "v", ttl=1)
    assert len(cache) == 1
    clock.advance(2)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_absolute_expiry(cache, clock):
    """Test expires_at is honored when no ttl is given."""
    cache.set("k", "v", expires_at=clock.now + 5)
    clock.advance(4)
    assert cache.get("k") == "v"
    clock.advance(1)
    assert cache.get("k") is None


def test_ttl_wins_over_expires_at(cache, clock):
    """Test a ttl takes precedence over an absolute expiry."""
    cache.set("k", "v", ttl=100, expires_at=clock.now + 1)
    clock.advance(50)
    assert cache.get("k") == "v"


def test_overwrite_replaces_value(cache):
    """Test set replaces the previous value."""
    cache.set("k", "old")
    cache.set("k", "new")
    assert cache.get("k") == "new"


def test_delete_and_clear(cache):
    """Test delete removes one key and clear removes all."""
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.delete("never-set")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear()
    assert len(cache) == 0


def test_health_check():
    """Test the in-memory cache is always healthy."""
    assert InMemoryExpiringCache.create().health_check() is True


def test_setting_expired_entry_removes_previous_value(cache, clock):
    """Test storing an already-expired entry leaves the key absent."""
    cache.set("k", "old")
    cache.set("k", "new", expires_at=clock.now - 1)
    assert cache.get("k") is None


def test_never_expiring_entry_survives_eviction(cache, clock):
    """Test evicting an expired entry keeps entries without expiry."""
    cache.set("short", "x", expires_at=clock.now + 10)
    cache.set("forever", "y")
    clock.advance(11)

    assert cache.get("short") is None
    assert len(cache) == 1
    assert cache.get("forever") == "y"
