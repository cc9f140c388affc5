"""Tests for options file loading."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

from mongo_sanitizer.patterns.loader import (
    OptionsLoadError,
    _cache_get,
    _cache_set,
    clear_options_cache,
    load_json_file,
    load_options,
    normalize_options,
)


class TestOptionsLoadError:
    """Tests for OptionsLoadError wrapping."""

    def test_file_not_found(self, tmp_path: Path) -> None:
        """Test FileNotFoundError is wrapped."""
        with pytest.raises(OptionsLoadError, match="not found"):
            load_json_file(tmp_path / "nonexistent.json")

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="chmod doesn't restrict reads on Windows or for root",
    )
    def test_permission_denied(self, tmp_path: Path) -> None:
        """Test PermissionError is wrapped."""
        restricted_file = tmp_path / "restricted.json"
        restricted_file.write_text('{"dry_run": true}')
        restricted_file.chmod(0o000)

        try:
            with pytest.raises(OptionsLoadError, match="Permission denied"):
                load_json_file(restricted_file)
        finally:
            restricted_file.chmod(0o644)

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test JSONDecodeError is wrapped."""
        invalid_file = tmp_path / "invalid.json"
        invalid_file.write_text("{ not valid json }")

        with pytest.raises(OptionsLoadError, match="Invalid JSON"):
            load_json_file(invalid_file)

    def test_not_an_object(self, tmp_path: Path) -> None:
        """Test a JSON array is rejected as an options file."""
        array_file = tmp_path / "array.json"
        array_file.write_text("[1, 2]")

        with pytest.raises(OptionsLoadError, match="JSON object"):
            load_options(array_file)


class TestNormalizeOptions:
    """Tests for option key normalization."""

    # fmt: off
    ALIAS_CASES = [
        ({"replaceWith": "-"},      {"replace_with": "-"},      "camel_replace"),
        ({"replace_with": "-"},     {"replace_with": "-"},      "snake_replace"),
        ({"allowDots": True},       {"allow_dots": True},       "camel_dots"),
        ({"dryRun": True},          {"dry_run": True},          "camel_dry_run"),
        ({"maxDepth": 5},           {"max_depth": 5},           "camel_depth"),
        ({},                        {},                         "empty"),
    ]
    # fmt: on

    @pytest.mark.parametrize(
        ("raw", "expected", "desc"),
        ALIAS_CASES,
        ids=[c[2] for c in ALIAS_CASES],
    )
    def test_aliases(self, raw: dict, expected: dict, desc: str) -> None:
        """Test camelCase and snake_case keys are accepted."""
        assert normalize_options(raw) == expected, desc

    def test_unknown_key_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test unknown keys are dropped with a warning."""
        with caplog.at_level("WARNING"):
            result = normalize_options({"fields": ["body"], "dryRun": True})
        assert result == {"dry_run": True}
        assert "Ignoring unknown option: fields" in caplog.text


class TestLoadOptions:
    """Tests for load_options."""

    def test_load(self, tmp_path: Path) -> None:
        """Test options are loaded and normalized."""
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"replaceWith": "-", "allowDots": True}))

        assert load_options(path) == {"replace_with": "-", "allow_dots": True}

    def test_cached_by_path(self, tmp_path: Path) -> None:
        """Test a second load comes from the cache."""
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"dry_run": True}))
        first = load_options(path)

        path.write_text(json.dumps({"dry_run": False}))
        assert load_options(path) == first

        clear_options_cache()
        assert load_options(path) == {"dry_run": False}

    def test_returns_copy(self, tmp_path: Path) -> None:
        """Test callers cannot change the cached options."""
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"dry_run": True}))

        load_options(path)["dry_run"] = False
        assert load_options(path) == {"dry_run": True}


class TestCacheLRU:
    """Tests for LRU cache behavior."""

    def test_cache_stores_value(self) -> None:
        """Test cache stores and retrieves values."""
        _cache_set("test_key", {"dry_run": True})
        assert _cache_get("test_key") == {"dry_run": True}

    def test_cache_returns_none_for_missing(self) -> None:
        """Test cache returns None for missing keys."""
        assert _cache_get("nonexistent") is None

    def test_cache_eviction(self) -> None:
        """Test cache evicts oldest entries when full."""
        for i in range(25):
            _cache_set(f"key_{i}", {"max_depth": i})

        for i in range(5):
            assert _cache_get(f"key_{i}") is None
        for i in range(5, 25):
            assert _cache_get(f"key_{i}") == {"max_depth": i}

    def test_cache_lru_order(self) -> None:
        """Test recently read entries survive eviction."""
        for i in range(20):
            _cache_set(f"key_{i}", {"max_depth": i})

        # Touch the oldest entry so it becomes most recently used
        _cache_get("key_0")
        _cache_set("key_new", {"max_depth": 99})

        assert _cache_get("key_0") == {"max_depth": 0}
        assert _cache_get("key_1") is None
