from __future__ import annotations

from adplatforms.models.cache import SearchCacheEntry
from adplatforms.models.location import Location
from adplatforms.models.platform import Platform
from adplatforms.models.results import IndexStats, LoadSummary

__all__ = [
    # domain
    "Location",
    "Platform",
    # cache
    "SearchCacheEntry",
    # results
    "IndexStats",
    "LoadSummary",
]
