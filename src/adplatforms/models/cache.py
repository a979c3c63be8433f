from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from adplatforms.models.location import Location


class SearchCacheEntry(BaseModel):
    """Memoized search result for one queried location."""

    model_config = ConfigDict(frozen=True)

    location: Location
    platforms: tuple[str, ...]  # Lexicographically ordered
    created_at: float  # Reading of the cache clock at insert/refresh time
