"""Shared fixtures for Mission Control tests."""

from datetime import date as Date
from pathlib import Path
from typing import Any

import pytest

from mission_control.config import Settings, build_bucket_queries
from mission_control.handlers.base import BaseHandler


class RecordingHandler(BaseHandler):
    """In-memory handler that records every search call."""

    def __init__(self, results_by_kind: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.results_by_kind = results_by_kind or {}
        self.calls: list[tuple[str, str, Date | None]] = []
        self.closed = False

    async def search(self, query: str, kind: str, date: Date | None = None) -> list[dict[str, Any]]:
        self.calls.append((query, kind, date))
        return list(self.results_by_kind.get(kind, []))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def recording_handler() -> type[RecordingHandler]:
    return RecordingHandler


@pytest.fixture
def make_settings(tmp_path: Path):
    """Factory for Settings pointing at files under tmp_path."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "serpapi_api_key": "test-key",
            "serpapi_base_url": "https://serpapi.test/search.json",
            "tasks_file": str(tmp_path / "db.json"),
            "news_cache_file": str(tmp_path / "news_cache.json"),
            "news_max_items": 10,
            "upstream_timeout_seconds": 5.0,
            "bucket_queries": build_bucket_queries(),
            "host": "127.0.0.1",
            "port": 3000,
            "log_level": "INFO",
        }
        values.update(overrides)
        return Settings(**values)

    return _make
