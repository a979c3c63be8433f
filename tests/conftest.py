"""Shared fixtures: a controllable clock, sample records and a wired service."""

from __future__ import annotations

import pytest

from adplatforms.cache import SearchCache
from adplatforms.config import IngestSettings
from adplatforms.models.platform import Platform
from adplatforms.service import PlatformService


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sample_records() -> list[tuple[str, list[str]]]:
    return [
        ("Yandex.Direct", ["/ru"]),
        ("Revda Worker", ["/ru/svrd/revda", "/ru/svrd/pervik"]),
        ("Gazeta Uralskih Moskvichey", ["/ru/msk", "/ru/permobl", "/ru/chelobl"]),
        ("Cool Ads", ["/ru/svrd"]),
    ]


@pytest.fixture()
def sample_platforms(sample_records: list[tuple[str, list[str]]]) -> list[Platform]:
    return [Platform(name=name, locations=paths) for name, paths in sample_records]


@pytest.fixture()
def service(clock: FakeClock) -> PlatformService:
    return PlatformService(
        cache=SearchCache(ttl_seconds=300, soft_capacity=1000, eviction_batch=100, clock=clock),
        ingest_settings=IngestSettings(),
    )
