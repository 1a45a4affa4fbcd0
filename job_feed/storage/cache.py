"""Read-through cache for feeds and learned preferences."""

import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Optional, TypeVar

from cachetools import TLRUCache, TTLCache

logger = logging.getLogger("job_feed.cache")

T = TypeVar("T")


class Cache(ABC):
    """Key/value store with per-entry TTL in seconds. `get` returns None on a miss."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryCache(Cache):
    """In-process cache on cachetools.TLRUCache, each entry expiring on its own TTL."""

    def __init__(self, max_entries: int = 10000, timer: Callable[[], float] = time.monotonic):
        self._entries = TLRUCache(
            maxsize=max_entries,
            ttu=lambda _key, entry, now: now + entry[0],
            timer=timer,
        )
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
        return entry[1] if entry is not None else None

    def set(self, key: str, value: Any, ttl: int) -> None:
        with self._lock:
            self._entries[key] = (ttl, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)


class UserCache:
    """Per-user cache keys with invalidation through an explicit key index.

    Every key stored for a user is remembered under that user's id, so
    invalidation deletes exactly those keys without scanning the keyspace.
    The key index and the invalidation stamps live in TTL caches, so users
    who stop reading age out once their entries could no longer be live.
    All cache errors are logged and swallowed.
    """

    FEED_PREFIX = "job-feed"
    PREFERENCES_PREFIX = "user-preferences"

    def __init__(
        self,
        cache: Cache,
        max_users: int = 10000,
        index_ttl: int = 3600,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.cache = cache
        self._keys_by_user = TTLCache(maxsize=max_users, ttl=index_ttl, timer=timer)
        self._invalidated_at = TTLCache(maxsize=max_users, ttl=index_ttl, timer=timer)
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    @classmethod
    def feed_key(cls, user_id: str) -> str:
        return f"{cls.FEED_PREFIX}:{user_id}"

    @classmethod
    def preferences_key(cls, user_id: str) -> str:
        return f"{cls.PREFERENCES_PREFIX}:{user_id}"

    def _register(self, user_id: str, key: str) -> None:
        # Caller holds self._lock. Reassigning restarts the entry's TTL.
        keys = self._keys_by_user.get(user_id, set())
        keys.add(key)
        self._keys_by_user[user_id] = keys

    def get_or_compute(
        self,
        key: str,
        ttl: int,
        compute: Callable[[], T],
        user_id: Optional[str] = None,
    ) -> T:
        """Return the cached value for `key`, or compute, store and return it.

        Passing `user_id` records the key for `invalidate_user`. A value
        computed while that user was invalidated is returned but not stored,
        since it may predate the write that caused the invalidation.
        """
        try:
            cached = self.cache.get(key)
        except Exception as e:
            logger.error("Cache read error for %s: %s", key, e)
            cached = None

        if cached is not None:
            logger.debug("Cache hit for: %s", key)
            return cached

        logger.debug("Cache miss for: %s", key)
        with self._lock:
            started = next(self._sequence)
        fresh = compute()

        if user_id is None:
            self._store(key, fresh, ttl)
            return fresh

        # Check and write under one lock so an invalidation cannot land in between
        with self._lock:
            if self._invalidated_at.get(user_id, -1) > started:
                logger.debug("[user:%s] Invalidated during compute, not caching %s", user_id, key)
                return fresh
            self._register(user_id, key)
            self._store(key, fresh, ttl)
        return fresh

    def _store(self, key: str, value: Any, ttl: int) -> None:
        try:
            self.cache.set(key, value, ttl)
        except Exception as e:
            logger.error("Cache write error for %s: %s", key, e)

    def invalidate_user(self, user_id: str) -> None:
        """Delete every key cached for the user and discard computes already in flight."""
        with self._lock:
            self._invalidated_at[user_id] = next(self._sequence)
            keys = self._keys_by_user.pop(user_id, set())
        # Always clear the well-known keys, even if this process did not write them
        keys |= {self.feed_key(user_id), self.preferences_key(user_id)}

        for key in keys:
            try:
                self.cache.delete(key)
            except Exception as e:
                logger.error("Error invalidating %s for user %s: %s", key, user_id, e)
