from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator

_LOCATION_RE = re.compile(r"^/[A-Za-z0-9/_-]+$")
_REPEATED_SLASHES_RE = re.compile(r"/{2,}")


class Location(BaseModel):
    """Hierarchical location path such as ``/ru/svrd/revda``.

    Stored lowercase, so ``/RU/Svrd`` and ``/ru/svrd`` are the same location.
    Equality and hashing are by the canonical path.
    """

    model_config = ConfigDict(frozen=True)

    path: str

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        v = v.strip()
        if not _LOCATION_RE.match(v):
            raise ValueError(f"Invalid location path: {v!r}")
        # "/ru//svrd/" and "/ru/svrd" name the same location
        v = _REPEATED_SLASHES_RE.sub("/", v).rstrip("/")
        if not v:
            raise ValueError("Location path has no segments")
        return v.lower()

    @classmethod
    def parse(cls, raw: str) -> Location:
        """Build a Location from a raw string. Raises ``ValueError`` if malformed."""
        return cls(path=raw)

    def __str__(self) -> str:
        return self.path

    @property
    def depth(self) -> int:
        return self.path.count("/")

    def parent(self) -> Location | None:
        """Path with the last segment removed, or ``None`` for a top-level location."""
        cut = self.path.rfind("/")
        if cut <= 0:
            return None
        return Location(path=self.path[:cut])

    def ancestors(self) -> tuple[Location, ...]:
        """All strict ancestors, nearest first, ending at the top-level segment."""
        result: list[Location] = []
        current = self.parent()
        while current is not None:
            result.append(current)
            current = current.parent()
        return tuple(result)

    def is_ancestor_of(self, other: Location) -> bool:
        """True if ``other`` is this location or lies anywhere beneath it."""
        return other.path == self.path or other.path.startswith(self.path + "/")
