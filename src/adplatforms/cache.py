"""In-memory search result cache with TTL expiry and batched eviction.

The cache cannot tell when the index changes underneath it; it only knows
about time. Whoever replaces or clears the index must call ``clear()`` in the
same critical section.

Sizing is deliberately coarse. Once the store holds more than
``soft_capacity`` entries, the next ``put`` drops the ``eviction_batch``
oldest entries in one sweep instead of maintaining a per-entry LRU order.
Overflow is rare compared to query volume because queried locations come
from a bounded real-world hierarchy.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from adplatforms.models.cache import SearchCacheEntry

if TYPE_CHECKING:
    from adplatforms.config import CacheSettings
    from adplatforms.models.location import Location

log = structlog.get_logger()

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_SOFT_CAPACITY = 1000
DEFAULT_EVICTION_BATCH = 100


class SearchCache:
    """Thread-safe memo of ``location → ordered platform names``.

    Has its own lock, independent of the index lock, so readers holding the
    shared side of the index lock can still populate it on a miss.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        soft_capacity: int = DEFAULT_SOFT_CAPACITY,
        eviction_batch: int = DEFAULT_EVICTION_BATCH,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if soft_capacity <= 0 or eviction_batch <= 0:
            raise ValueError("soft_capacity and eviction_batch must be positive")
        self._ttl = ttl_seconds
        self._soft_capacity = soft_capacity
        self._eviction_batch = eviction_batch
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[Location, SearchCacheEntry] = {}

    @classmethod
    def from_settings(
        cls, settings: CacheSettings, clock: Callable[[], float] = time.monotonic
    ) -> SearchCache:
        return cls(
            ttl_seconds=settings.ttl_seconds,
            soft_capacity=settings.soft_capacity,
            eviction_batch=settings.eviction_batch,
            clock=clock,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, location: Location) -> tuple[str, ...] | None:
        """Return the cached names, or ``None`` on a miss or an expired entry.

        Expired entries are left in place; they are overwritten by the next
        ``put`` or dropped by eviction or ``clear``.
        """
        with self._lock:
            entry = self._entries.get(location)
            if entry is None:
                return None
            if self._clock() - entry.created_at >= self._ttl:
                return None
            return entry.platforms

    def put(self, location: Location, platforms: tuple[str, ...]) -> None:
        with self._lock:
            if len(self._entries) > self._soft_capacity:
                self._evict_oldest_locked()
            # Re-insert so dict order follows refresh time
            self._entries.pop(location, None)
            self._entries[location] = SearchCacheEntry(
                location=location,
                platforms=tuple(platforms),
                created_at=self._clock(),
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict_oldest_locked(self) -> None:
        # sorted() is stable, so equal timestamps fall back to insertion order
        oldest = sorted(self._entries.values(), key=lambda entry: entry.created_at)
        for entry in oldest[: self._eviction_batch]:
            del self._entries[entry.location]
        log.debug(
            "search_cache_evicted",
            evicted=min(self._eviction_batch, len(oldest)),
            remaining=len(self._entries),
        )
