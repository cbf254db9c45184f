"""Tests for the transient stores and derived-data cache slots."""

import json
from unittest.mock import MagicMock

import pytest

from rolemanager.core.cache import (
    CacheSlot,
    DerivedCache,
    MemoryTransientStore,
    RedisTransientStore,
    create_transient_store,
)
from rolemanager.core.config import Settings


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return MemoryTransientStore(clock=clock)


class TestMemoryTransientStore:
    """Test the process-local transient store."""

    def test_set_and_get(self, memory_store):
        memory_store.set("key", {"a": 1}, 60)
        assert memory_store.get("key") == {"a": 1}

    def test_missing_key(self, memory_store):
        assert memory_store.get("missing") is None

    def test_expiry(self, memory_store, clock):
        memory_store.set("key", "value", 60)
        clock.advance(59)
        assert memory_store.get("key") == "value"
        clock.advance(1)
        assert memory_store.get("key") is None

    def test_delete(self, memory_store):
        memory_store.set("key", "value", 60)
        memory_store.delete("key")
        assert memory_store.get("key") is None
        memory_store.delete("key")  # deleting twice is harmless

    def test_clear(self, memory_store):
        memory_store.set("a", 1, 60)
        memory_store.set("b", 2, 60)
        memory_store.clear()
        assert memory_store.get("a") is None
        assert memory_store.get("b") is None


class TestRedisTransientStore:
    """Test the Redis-backed transient store against a mocked client."""

    def test_set_uses_setex_with_json(self):
        client = MagicMock()
        store = RedisTransientStore("redis://localhost:6379/0", client=client)
        store.set("key", ["a", "b"], 300)
        client.setex.assert_called_once_with("key", 300, json.dumps(["a", "b"]))

    def test_get_decodes_json(self):
        client = MagicMock()
        client.get.return_value = '{"editor": 2}'
        store = RedisTransientStore("redis://localhost:6379/0", client=client)
        assert store.get("key") == {"editor": 2}

    def test_get_miss(self):
        client = MagicMock()
        client.get.return_value = None
        store = RedisTransientStore("redis://localhost:6379/0", client=client)
        assert store.get("key") is None

    def test_delete(self):
        client = MagicMock()
        store = RedisTransientStore("redis://localhost:6379/0", client=client)
        store.delete("key")
        client.delete.assert_called_once_with("key")


class TestCacheSlot:
    """Test a single cache slot."""

    def test_miss_then_hit(self, memory_store):
        slot = CacheSlot(memory_store, "slot", 60)
        assert slot.get() is None
        slot.set({"x": 1})
        assert slot.get() == {"x": 1}

    def test_invalidate(self, memory_store):
        slot = CacheSlot(memory_store, "slot", 60)
        slot.set("value")
        slot.invalidate()
        assert slot.get() is None

    def test_ttl_expiry(self, memory_store, clock):
        slot = CacheSlot(memory_store, "slot", 60)
        slot.set("value")
        clock.advance(61)
        assert slot.get() is None

    def test_encode_decode(self, memory_store):
        slot = CacheSlot(memory_store, "slot", 60, encode=sorted, decode=set)
        slot.set({"b", "a"})
        assert memory_store.get("slot") == ["a", "b"]
        assert slot.get() == {"a", "b"}


class TestDerivedCache:
    """Test the two derived-data slots."""

    def test_slot_ttls(self, memory_store):
        cache = DerivedCache(memory_store, Settings())
        assert cache.plugin_capabilities.ttl == 3600
        assert cache.user_counts.ttl == 300

    def test_slots_are_independent(self, memory_store):
        cache = DerivedCache(memory_store, Settings())
        cache.plugin_capabilities.set({"custom_cap"})
        cache.user_counts.set({"editor": 3})

        cache.plugin_capabilities.invalidate()
        assert cache.plugin_capabilities.get() is None
        assert cache.user_counts.get() == {"editor": 3}

    def test_user_counts_expire_before_plugin_capabilities(self, memory_store, clock):
        cache = DerivedCache(memory_store, Settings())
        cache.plugin_capabilities.set({"custom_cap"})
        cache.user_counts.set({"editor": 3})
        clock.advance(301)
        assert cache.user_counts.get() is None
        assert cache.plugin_capabilities.get() == {"custom_cap"}

    def test_empty_values_are_hits(self, memory_store):
        cache = DerivedCache(memory_store, Settings())
        cache.plugin_capabilities.set(set())
        cache.user_counts.set({})
        assert cache.plugin_capabilities.get() == set()
        assert cache.user_counts.get() == {}

    def test_invalidate_all(self, memory_store):
        cache = DerivedCache(memory_store, Settings())
        cache.plugin_capabilities.set({"custom_cap"})
        cache.user_counts.set({"editor": 3})
        cache.invalidate_all()
        assert cache.plugin_capabilities.get() is None
        assert cache.user_counts.get() is None

    def test_key_prefix(self, memory_store):
        cache = DerivedCache(memory_store, Settings(cache_key_prefix="site1"))
        assert cache.plugin_capabilities.key == "site1:plugin_capabilities"
        assert cache.user_counts.key == "site1:user_counts"


class TestCreateTransientStore:
    """Test backend selection."""

    def test_memory_backend_is_shared(self):
        settings = Settings(cache_backend="memory")
        store = create_transient_store(settings)
        assert isinstance(store, MemoryTransientStore)
        assert create_transient_store(settings) is store

    def test_redis_backend(self):
        settings = Settings(cache_backend="redis", redis_url="redis://cache.internal:6379/1")
        store = create_transient_store(settings)
        assert isinstance(store, RedisTransientStore)
        assert store.redis_url == "redis://cache.internal:6379/1"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_transient_store(Settings(cache_backend="memcached"))
