from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from adplatforms.models.location import Location


class Platform(BaseModel):
    """An advertising platform and the locations it is registered at."""

    model_config = ConfigDict(frozen=True)

    name: str
    locations: tuple[Location, ...]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("platform name must not be empty")
        return v

    @field_validator("locations", mode="before")
    @classmethod
    def coerce_locations(cls, v: Any) -> Any:
        # Raw path strings are accepted alongside Location instances
        if isinstance(v, str):
            raise ValueError("locations must be a sequence, not a single string")
        if not isinstance(v, list | tuple):
            return v
        return [{"path": item} if isinstance(item, str) else item for item in v]

    @field_validator("locations")
    @classmethod
    def validate_locations(cls, v: tuple[Location, ...]) -> tuple[Location, ...]:
        if not v:
            raise ValueError("at least one location is required")
        return tuple(dict.fromkeys(v))

    def is_active_in(self, location: Location) -> bool:
        """True if any registered location is ``location`` or one of its ancestors."""
        return any(own.is_ancestor_of(location) for own in self.locations)

    def __str__(self) -> str:
        return f"{self.name}:{','.join(str(loc) for loc in self.locations)}"
