"""Public service surface: load, search, stats, clear.

``PlatformService`` pairs one ``LocationIndex`` with one ``SearchCache`` and
guards them with a single reader/writer lock:

- ``load`` and ``clear`` hold the write side for the whole
  swap-and-invalidate sequence, so no reader ever sees the new index next to
  cache entries computed against the old one.
- ``search`` and ``stats`` hold the read side. A search that misses the cache
  populates it while still holding the read side; the cache's own lock makes
  that safe without upgrading to the write side.

Everything that can fail (record validation, file ingestion) runs before the
write lock is taken, so a failed load leaves the index and cache exactly as
they were.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from adplatforms.cache import SearchCache
from adplatforms.config import IngestSettings
from adplatforms.errors import AdPlatformsError, ErrorCode
from adplatforms.index import LocationIndex
from adplatforms.ingest import read_platform_file
from adplatforms.locking import ReadWriteLock
from adplatforms.models.location import Location
from adplatforms.models.platform import Platform
from adplatforms.models.results import IndexStats, LoadSummary

if TYPE_CHECKING:
    from adplatforms.config import Settings

log = structlog.get_logger()

PlatformRecord = Platform | tuple[str, Sequence[str]]


def _to_platforms(records: Iterable[PlatformRecord]) -> list[Platform]:
    platforms: list[Platform] = []
    for position, record in enumerate(records):
        if isinstance(record, Platform):
            platforms.append(record)
            continue
        try:
            name, paths = record
            platforms.append(Platform(name=name, locations=paths))
        except (TypeError, ValueError) as exc:
            detail = exc.errors()[0]["msg"] if isinstance(exc, ValidationError) else str(exc)
            raise AdPlatformsError(
                code=ErrorCode.INVALID_INPUT,
                message=f"Record {position} is not a valid platform: {detail}",
                suggestion="Each record is (name, [location paths]) with at least one location.",
            ) from exc
    return platforms


class PlatformService:
    def __init__(
        self,
        cache: SearchCache | None = None,
        ingest_settings: IngestSettings | None = None,
    ) -> None:
        self._index = LocationIndex()
        self._cache = cache if cache is not None else SearchCache()
        self._ingest_settings = ingest_settings if ingest_settings is not None else IngestSettings()
        self._lock = ReadWriteLock()

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], float] = time.monotonic
    ) -> PlatformService:
        return cls(
            cache=SearchCache.from_settings(settings.cache, clock=clock),
            ingest_settings=settings.ingest,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def load(self, records: Iterable[PlatformRecord]) -> IndexStats:
        """Replace the whole dataset with ``records``.

        Raises ``AdPlatformsError`` (INVALID_INPUT or EMPTY_DATASET) without
        touching current state.
        """
        platforms = _to_platforms(records)
        if not platforms:
            raise AdPlatformsError(
                code=ErrorCode.EMPTY_DATASET,
                message="Cannot load an empty platform list.",
                suggestion="Use clear() to drop all data.",
            )

        with self._lock.write():
            self._index.replace(platforms)
            self._cache.clear()
            stats = self._stats_locked()

        log.info(
            "platforms_loaded",
            platform_count=stats.platform_count,
            location_count=stats.location_count,
        )
        return stats

    def load_file(self, path: str | Path, cancel: threading.Event | None = None) -> LoadSummary:
        """Ingest a dataset file and load it. Ingestion happens outside the lock."""
        report = read_platform_file(path, self._ingest_settings, cancel=cancel)
        stats = self.load(report.platforms)
        return LoadSummary(
            platform_count=stats.platform_count,
            location_count=stats.location_count,
            valid_lines=report.valid_lines,
            invalid_lines=report.invalid_lines,
        )

    def clear(self) -> None:
        with self._lock.write():
            self._index.clear()
            self._cache.clear()
        log.info("platforms_cleared")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def search(self, query: str | Location) -> list[str]:
        """Names of platforms serving ``query`` or any of its ancestors, sorted.

        Never raises: a malformed location yields an empty list.
        """
        if isinstance(query, Location):
            location = query
        else:
            if not isinstance(query, str) or not query.strip():
                return []
            try:
                location = Location.parse(query)
            except ValueError:
                log.warning("malformed_location", location=query)
                return []

        with self._lock.read():
            cached = self._cache.get(location)
            if cached is not None:
                log.debug("search_cache_hit", location=str(location))
                return list(cached)

            names = self._index.exact_matches(location) | self._index.ancestor_matches(location)
            result = tuple(sorted(names))
            self._cache.put(location, result)

        log.debug("search_computed", location=str(location), count=len(result))
        return list(result)

    def stats(self) -> IndexStats:
        with self._lock.read():
            return self._stats_locked()

    def _stats_locked(self) -> IndexStats:
        return IndexStats(
            platform_count=self._index.platform_count(),
            location_count=self._index.location_count(),
        )
