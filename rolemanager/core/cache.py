"""Derived-data cache for the role manager.

Two read-through slots sit on top of a transient key-value store:

- ``plugin_capabilities``: custom capabilities in use across all roles.
  Invalidated by every capability add/remove/copy/cleanup.
- ``user_counts``: number of users per role slug.
  Invalidated by role deletion (users are reassigned).

Entries expire after their slot's TTL; there is no other eviction.
"""

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol

import redis

from rolemanager.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class TransientStore(Protocol):
    """Key-value store with per-key expiry."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def delete(self, key: str) -> None: ...


class RedisTransientStore:
    """Transient store backed by Redis. Values are JSON encoded."""

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        return self._client

    def get(self, key: str) -> Optional[Any]:
        raw = self.client.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self.client.setex(key, ttl_seconds, json.dumps(value))

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


class MemoryTransientStore:
    """Process-local transient store for single-process deployments and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, tuple] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class CacheSlot:
    """A single named cache entry with its own TTL."""

    def __init__(
        self,
        store: TransientStore,
        key: str,
        ttl: int,
        *,
        encode: Callable[[Any], Any] = lambda value: value,
        decode: Callable[[Any], Any] = lambda value: value,
    ):
        self.store = store
        self.key = key
        self.ttl = ttl
        self._encode = encode
        self._decode = decode

    def get(self) -> Optional[Any]:
        """Return the cached value, or None on a miss."""
        raw = self.store.get(self.key)
        if raw is None:
            return None
        return self._decode(raw)

    def set(self, value: Any) -> None:
        self.store.set(self.key, self._encode(value), self.ttl)

    def invalidate(self) -> None:
        self.store.delete(self.key)
        logger.debug("Invalidated cache slot %s", self.key)


class DerivedCache:
    """The role manager's two derived-data cache slots."""

    def __init__(self, store: TransientStore, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        prefix = settings.cache_key_prefix
        self.store = store
        self.plugin_capabilities = CacheSlot(
            store,
            f"{prefix}:plugin_capabilities",
            settings.plugin_capabilities_ttl,
            encode=sorted,
            decode=set,
        )
        self.user_counts = CacheSlot(
            store,
            f"{prefix}:user_counts",
            settings.user_counts_ttl,
            encode=dict,
            decode=lambda raw: {slug: int(count) for slug, count in raw.items()},
        )

    def invalidate_all(self) -> None:
        self.plugin_capabilities.invalidate()
        self.user_counts.invalidate()


_stores: Dict[str, TransientStore] = {}


def create_transient_store(settings: Optional[Settings] = None) -> TransientStore:
    """
    Return the process-wide transient store selected by ``settings.cache_backend``.

    Stores are shared across requests so cached entries and queued notices
    survive between them.
    """
    settings = settings or get_settings()
    backend = settings.cache_backend.lower()

    if backend == "redis":
        key = f"redis:{settings.redis_url}"
        if key not in _stores:
            _stores[key] = RedisTransientStore(settings.redis_url)
        return _stores[key]
    if backend == "memory":
        if "memory" not in _stores:
            _stores["memory"] = MemoryTransientStore()
        return _stores["memory"]
    raise ValueError(f"Unknown cache backend: {settings.cache_backend}")
