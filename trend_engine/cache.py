"""Small in-process LRU cache with per-entry TTL.

The cache is an ordinary object owned by the caller; pass it where it is
needed. The clock is injectable so expiry can be driven from tests.
"""
from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Mapping, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def make_cache_key(prefix: str, params: Mapping[str, Any]) -> str:
    """Build a stable key such as ``trends:limit:10|source:all``."""
    parts = "|".join(f"{key}:{params[key]}" for key in sorted(params))
    return f"{prefix}:{parts}"


class TrendCache(Generic[T]):
    """LRU cache whose entries expire *ttl_seconds* after their last use."""

    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[Hashable, Tuple[float, T]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _live_entry(self, key: Hashable) -> Optional[Tuple[float, T]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, _ = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return entry

    def get(self, key: Hashable) -> Optional[T]:
        """Return the cached value, refreshing its age, or None when absent/expired."""
        entry = self._live_entry(key)
        if entry is None:
            return None
        value = entry[1]
        self._entries[key] = (self._clock(), value)
        self._entries.move_to_end(key)
        return value

    def has(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def set(self, key: Hashable, value: T) -> None:
        self._entries[key] = (self._clock(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache entry {evicted!r}")

    def delete(self, key: Hashable) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        return {"size": len(self._entries), "max_entries": self.max_entries, "ttl_seconds": self.ttl_seconds}

    async def get_or_fetch(
        self,
        key: Hashable,
        fetch: Callable[[], Awaitable[T]],
        force_refresh: bool = False,
    ) -> T:
        """Return the cached value for *key*, calling *fetch* on a miss."""
        if not force_refresh:
            cached = self.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for {key!r}")
                return cached

        value = await fetch()
        self.set(key, value)
        return value
