"""Result cache for single-entity lookups.

Only get-by-id results for tasks and categories are cached. Filtered lists,
search and statistics always read the store. The cache is an optimization:
`NullResultCache` is a valid configuration and behaves identically apart from
store round-trips.
"""

import logging
import os
import threading
from collections import OrderedDict
from typing import Callable, Hashable, Optional, Tuple, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=BaseModel)

TASKS = "tasks"
CATEGORIES = "categories"

CacheKey = Tuple[str, Hashable]

DEFAULT_MAX_ENTRIES = 1024


def task_key(task_id: str) -> CacheKey:
    return (TASKS, task_id)


def category_key(category_id: str) -> CacheKey:
    return (CATEGORIES, category_id)


class ResultCache:
    """Interface shared by the cache implementations."""

    def get_or_load(self, key: CacheKey, loader: Callable[[], Optional[V]]) -> Optional[V]:
        """Return the cached value for `key`, or call `loader` and cache a non-None result."""
        raise NotImplementedError

    def invalidate(self, key: CacheKey) -> None:
        """Drop `key`. Must complete before the mutating call returns."""
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class NullResultCache(ResultCache):
    """Cache that never stores anything."""

    def get_or_load(self, key: CacheKey, loader: Callable[[], Optional[V]]) -> Optional[V]:
        return loader()

    def invalidate(self, key: CacheKey) -> None:
        return None

    def clear(self) -> None:
        return None


class InMemoryResultCache(ResultCache):
    """Process-local LRU cache of pydantic models.

    Values are deep-copied on the way in and out so callers can never mutate
    a cached entry. A generation counter is bumped by every invalidation; a
    load that started before any invalidation is returned to its caller but
    not stored, so a write that commits while a read is in flight cannot
    leave a stale entry behind.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[CacheKey, BaseModel]" = OrderedDict()
        self._generation = 0
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries

    def get_or_load(self, key: CacheKey, loader: Callable[[], Optional[V]]) -> Optional[V]:
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached.model_copy(deep=True)
            self.misses += 1
            generation = self._generation

        value = loader()
        if value is None:
            return None

        with self._lock:
            if self._generation == generation:
                self._entries[key] = value.model_copy(deep=True)
                self._entries.move_to_end(key)
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)
            else:
                logger.debug(f"Skipped caching {key}: invalidated during load")
        return value

    def invalidate(self, key: CacheKey) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._generation += 1
        logger.debug(f"Invalidated cache entry {key}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generation += 1


def build_result_cache() -> ResultCache:
    """Build the process-wide cache from RESULT_CACHE_* environment settings."""
    enabled = os.getenv("RESULT_CACHE_ENABLED", "True").lower() == "true"
    if not enabled:
        logger.info("Result cache disabled")
        return NullResultCache()
    max_entries = int(os.getenv("RESULT_CACHE_MAX_ENTRIES", str(DEFAULT_MAX_ENTRIES)))
    logger.info(f"Result cache enabled (max_entries={max_entries})")
    return InMemoryResultCache(max_entries=max_entries)
