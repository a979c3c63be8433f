"""Integration test fixtures.

Provides a fully wired AppState built through ``create_app_state`` with
settings small enough to exercise expiry and eviction, plus a dataset file
on disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from adplatforms.config import CacheSettings, LoggingSettings, Settings
from adplatforms.state import AppState, create_app_state

if TYPE_CHECKING:
    from pathlib import Path

DATASET = (
    "Yandex.Direct:/ru\n"
    "Revda Worker:/ru/svrd/revda,/ru/svrd/pervik\n"
    "Gazeta Uralskih Moskvichey:/ru/msk,/ru/permobl,/ru/chelobl\n"
    "Cool Ads:/ru/svrd\n"
)


@pytest.fixture()
def app_state() -> AppState:
    settings = Settings(
        cache=CacheSettings(ttl_seconds=300, soft_capacity=50, eviction_batch=10),
        logging=LoggingSettings(level="WARNING", format="text"),
    )
    return create_app_state(settings)


@pytest.fixture()
def dataset_file(tmp_path: Path) -> Path:
    path = tmp_path / "platforms.txt"
    path.write_text(DATASET, encoding="utf-8")
    return path
