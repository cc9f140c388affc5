"""Pytest configuration and fixtures for mongo-sanitizer tests."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from mongo_sanitizer.patterns import clear_options_cache


@pytest.fixture(autouse=True)
def _clear_options_cache():
    """Isolate tests from each other's cached options files."""
    clear_options_cache()
    yield
    clear_options_cache()


@pytest.fixture
def json_file(tmp_path: Path):
    """Create a JSON file for testing."""

    def _create(data: Any, name: str = "input.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _create


@pytest.fixture
def make_request():
    """Create a request-like object for testing."""

    def _create(
        body: Any = None,
        query: Any = None,
        params: Any = None,
        headers: Any = None,
        url: str | None = None,
    ) -> SimpleNamespace:
        return SimpleNamespace(body=body, query=query, params=params, headers=headers, url=url)

    return _create
