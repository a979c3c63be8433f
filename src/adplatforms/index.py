"""Location index: exact-path registrations and ancestor lookups.

The index owns one immutable ``IndexSnapshot``. ``replace`` builds a complete
new snapshot off to the side and publishes it with a single reference swap,
so a reader holding the old snapshot keeps a consistent view and never sees
a half-built mapping. A full rebuild for a few thousand platforms is a single
pass over their locations.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog

from adplatforms.errors import AdPlatformsError, ErrorCode

if TYPE_CHECKING:
    from adplatforms.models.location import Location
    from adplatforms.models.platform import Platform

log = structlog.get_logger()

_NO_MATCHES: frozenset[str] = frozenset()


@dataclass(frozen=True)
class IndexSnapshot:
    """Complete index state at one point in time."""

    # exact location → names of platforms registered precisely there
    by_location: Mapping[Location, frozenset[str]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    # every loaded platform record, kept for counts
    platforms: tuple[Platform, ...] = ()

    @classmethod
    def build(cls, platforms: Sequence[Platform]) -> IndexSnapshot:
        names_by_location: dict[Location, set[str]] = {}
        for platform in platforms:
            for location in platform.locations:
                names_by_location.setdefault(location, set()).add(platform.name)

        frozen = {loc: frozenset(names) for loc, names in names_by_location.items()}
        return cls(by_location=MappingProxyType(frozen), platforms=tuple(platforms))


class LocationIndex:
    def __init__(self) -> None:
        self._snapshot = IndexSnapshot()

    @property
    def snapshot(self) -> IndexSnapshot:
        return self._snapshot

    def replace(self, platforms: Sequence[Platform]) -> None:
        """Publish a snapshot built from ``platforms``, discarding the current one.

        An empty sequence is a failed load, not a clear: the current snapshot
        is kept and ``AdPlatformsError(EMPTY_DATASET)`` is raised.
        """
        if not platforms:
            raise AdPlatformsError(
                code=ErrorCode.EMPTY_DATASET,
                message="No platforms to load.",
                suggestion="Provide at least one valid platform record.",
            )
        snapshot = IndexSnapshot.build(platforms)
        self._snapshot = snapshot
        log.debug(
            "index_replaced",
            platform_count=len(snapshot.platforms),
            location_count=len(snapshot.by_location),
        )

    def clear(self) -> None:
        self._snapshot = IndexSnapshot()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def exact_matches(self, location: Location) -> frozenset[str]:
        return self._snapshot.by_location.get(location, _NO_MATCHES)

    def ancestor_matches(self, location: Location) -> frozenset[str]:
        by_location = self._snapshot.by_location
        result: set[str] = set()
        for ancestor in location.ancestors():
            result.update(by_location.get(ancestor, _NO_MATCHES))
        return frozenset(result)

    def platform_count(self) -> int:
        return len(self._snapshot.platforms)

    def location_count(self) -> int:
        return len(self._snapshot.by_location)
