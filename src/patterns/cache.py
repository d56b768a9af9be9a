"""
Pattern Cache

Bounded memoization in front of the procedural generators.

- Keys: (generator name, *numeric params), e.g. ("CIRCLE", 8, 3)
- Reads and writes are copies: no caller ever shares a row list
  with the cache or with another caller
- Eviction is FIFO (insertion order), not LRU: a cache hit does not
  refresh an entry's position
"""

import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable

from models.pattern import Pattern
from patterns.codec import copy_pattern
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CACHE)

DEFAULT_CAPACITY = 100


class PatternCache:
    """
    FIFO-bounded pattern memoization.

    Constructed once per process (capacity from config) and passed to the
    generator functions that should use it.

    Example:
        cache = PatternCache(capacity=100)
        ring = create_ring_pattern(8, 3, 2, cache=cache)
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Args:
            capacity: Maximum number of entries (>= 1)
        """
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"PatternCache capacity must be a positive integer, got {capacity!r}")

        self.capacity = capacity
        self._entries: "OrderedDict[Hashable, Pattern]" = OrderedDict()
        self._lock = threading.Lock()

        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get_or_generate(
        self,
        key: Hashable,
        generator_fn: Callable[..., Pattern],
        *args: Any
    ) -> Pattern:
        """
        Return a copy of the cached pattern for key, generating it on a miss.

        Args:
            key: Cache key, usually (generator name, *params)
            generator_fn: Called as generator_fn(*args) on a miss
            *args: Generator arguments

        Returns:
            Independent copy of the pattern
        """
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self.hits += 1
                return copy_pattern(cached)
            self.misses += 1

        # Generate outside the lock; generators may be slow
        generated = generator_fn(*args)

        with self._lock:
            if key not in self._entries:
                if len(self._entries) >= self.capacity:
                    evicted_key, _ = self._entries.popitem(last=False)
                    self.evictions += 1
                    log.debug("Evicted oldest pattern", key=evicted_key, capacity=self.capacity)
                self._entries[key] = copy_pattern(generated)

        return copy_pattern(generated)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        log.debug("Pattern cache cleared")

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def get_stats(self) -> Dict[str, int]:
        """Cache metrics (size, capacity, hits, misses, evictions)"""
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
            }
