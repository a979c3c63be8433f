from __future__ import annotations

from adplatforms.errors import AdPlatformsError, ErrorCode
from adplatforms.models import IndexStats, LoadSummary, Location, Platform
from adplatforms.service import PlatformService

__all__ = [
    "AdPlatformsError",
    "ErrorCode",
    "IndexStats",
    "LoadSummary",
    "Location",
    "Platform",
    "PlatformService",
]
