"""Unit-specific fixtures (no I/O beyond tmp_path)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from adplatforms.cache import SearchCache
from adplatforms.index import LocationIndex

if TYPE_CHECKING:
    from tests.conftest import FakeClock


@pytest.fixture()
def cache(clock: FakeClock) -> SearchCache:
    """Small cache so eviction is cheap to trigger."""
    return SearchCache(ttl_seconds=60, soft_capacity=10, eviction_batch=3, clock=clock)


@pytest.fixture()
def index() -> LocationIndex:
    return LocationIndex()
