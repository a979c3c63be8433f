"""End-to-end workflow: upload a file, search, inspect stats, clear."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest

from adplatforms.errors import AdPlatformsError, ErrorCode
from adplatforms.models import IndexStats, LoadSummary

if TYPE_CHECKING:
    from pathlib import Path

    from adplatforms.state import AppState


class TestUploadAndSearch:
    def test_complete_workflow(self, app_state: AppState, dataset_file: Path) -> None:
        service = app_state.service

        summary = service.load_file(dataset_file)
        assert summary == LoadSummary(
            platform_count=4, location_count=7, valid_lines=4, invalid_lines=0
        )

        assert service.search("/ru/svrd/revda") == [
            "Cool Ads",
            "Revda Worker",
            "Yandex.Direct",
        ]
        assert service.search("/ru/msk") == ["Gazeta Uralskih Moskvichey", "Yandex.Direct"]
        assert service.search("/ru") == ["Yandex.Direct"]
        assert service.stats() == IndexStats(platform_count=4, location_count=7)

        service.clear()
        assert service.stats() == IndexStats(platform_count=0, location_count=0)
        assert service.search("/ru/svrd/revda") == []

    def test_search_without_upload(self, app_state: AppState) -> None:
        assert app_state.service.search("/ru") == []

    def test_invalid_lines_reported(self, app_state: AppState, tmp_path: Path) -> None:
        path = tmp_path / "mixed.txt"
        path.write_text("A:/ru\nInvalidLine\n:/ru\nB:/ru/svrd/revda\n", encoding="utf-8")

        summary = app_state.service.load_file(path)

        assert summary.valid_lines == 2
        assert summary.invalid_lines == 2
        assert app_state.service.search("/ru/svrd/revda") == ["A", "B"]


class TestFailedUploadsKeepState:
    @pytest.fixture(autouse=True)
    def _loaded(self, app_state: AppState, dataset_file: Path) -> None:
        app_state.service.load_file(dataset_file)
        # Warm the cache so we can check it survives a failed load
        app_state.service.search("/ru/svrd/revda")

    def _assert_unchanged(self, app_state: AppState) -> None:
        assert app_state.service.stats() == IndexStats(platform_count=4, location_count=7)
        assert app_state.service.search("/ru/svrd/revda") == [
            "Cool Ads",
            "Revda Worker",
            "Yandex.Direct",
        ]

    def test_only_invalid_lines(self, app_state: AppState, tmp_path: Path) -> None:
        path = tmp_path / "bad.txt"
        path.write_text("InvalidLine1\nInvalidLine2\n", encoding="utf-8")
        with pytest.raises(AdPlatformsError) as exc_info:
            app_state.service.load_file(path)
        assert exc_info.value.code == ErrorCode.EMPTY_DATASET
        self._assert_unchanged(app_state)

    def test_wrong_extension(self, app_state: AppState, tmp_path: Path) -> None:
        path = tmp_path / "platforms.doc"
        path.write_text("A:/ru\n", encoding="utf-8")
        with pytest.raises(AdPlatformsError) as exc_info:
            app_state.service.load_file(path)
        assert exc_info.value.code == ErrorCode.INVALID_FILE
        self._assert_unchanged(app_state)

    def test_cancelled(self, app_state: AppState, tmp_path: Path) -> None:
        path = tmp_path / "next.txt"
        path.write_text("Other:/en\n", encoding="utf-8")
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(AdPlatformsError) as exc_info:
            app_state.service.load_file(path, cancel=cancel)
        assert exc_info.value.code == ErrorCode.LOAD_CANCELLED
        self._assert_unchanged(app_state)
        assert app_state.service.search("/en") == []

    def test_too_large(self, app_state: AppState, tmp_path: Path) -> None:
        limit = app_state.settings.ingest.max_file_bytes
        path = tmp_path / "huge.txt"
        path.write_text("a" * (limit + 1), encoding="utf-8")
        with pytest.raises(AdPlatformsError) as exc_info:
            app_state.service.load_file(path)
        assert exc_info.value.code == ErrorCode.INVALID_FILE
        self._assert_unchanged(app_state)


class TestCacheSizing:
    def test_many_distinct_queries_stay_bounded(
        self, app_state: AppState, dataset_file: Path
    ) -> None:
        service = app_state.service
        service.load_file(dataset_file)
        for i in range(500):
            assert service.search(f"/ru/svrd/street{i}") == ["Cool Ads", "Yandex.Direct"]
        # soft_capacity=50 tolerates at most one extra entry
        assert len(service._cache) <= 51
