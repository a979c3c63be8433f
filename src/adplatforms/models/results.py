from __future__ import annotations

from pydantic import BaseModel


class IndexStats(BaseModel):
    platform_count: int
    location_count: int


class LoadSummary(BaseModel):
    """Outcome of loading a dataset file."""

    platform_count: int
    location_count: int
    valid_lines: int
    invalid_lines: int
