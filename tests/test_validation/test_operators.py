"""Table-driven tests for the validation/operators module."""

from __future__ import annotations

import gzip
import json
from pathlib import Path
from typing import Any

import pytest

from mongo_sanitizer.sanitization import SanitizeCycleError, SanitizeDepthError, has
from mongo_sanitizer.validation.operators import (
    Finding,
    child_location,
    find_operators,
    truncate,
    validate_json_file,
)

# ┌─────────────────────┬─────────────┬──────────────────────────┬─────────────────────┐
# │ parent              │ key         │ expected                 │ description         │
# ├─────────────────────┼─────────────┼──────────────────────────┼─────────────────────┤
# │ Container location  │ Key / index │ Child location           │ test case name      │
# └─────────────────────┴─────────────┴──────────────────────────┴─────────────────────┘
#
# fmt: off
LOCATION_CASES = [
    ("$",           "user",         "$.user",                   "plain_key"),
    ("$.user",      "$where",       '$.user["$where"]',         "operator_key"),
    ("$",           "a.b",          '$["a.b"]',                 "dotted_key"),
    ("$",           "with space",   '$["with space"]',          "space_key"),
    ("$.tags",      2,              "$.tags[2]",                "index"),
    ("$",           "_private",     "$._private",               "underscore_key"),
    ("$",           "1st",          '$["1st"]',                 "leading_digit"),
    ("$",           None,           "$[None]",                  "non_string_key"),
]
# fmt: on


class TestChildLocation:
    """Tests for location formatting."""

    @pytest.mark.parametrize(
        ("parent", "key", "expected", "desc"),
        LOCATION_CASES,
        ids=[c[3] for c in LOCATION_CASES],
    )
    def test_location(self, parent: str, key: Any, expected: str, desc: str) -> None:
        """Test location strings."""
        assert child_location(parent, key) == expected, desc


class TestTruncate:
    """Tests for display truncation."""

    def test_short_value_kept(self) -> None:
        """Test short values are returned whole."""
        assert truncate("short") == "short"

    def test_long_value_truncated(self) -> None:
        """Test long values end with an ellipsis."""
        result = truncate("x" * 100, max_len=10)
        assert result == "xxxxxxx..."
        assert len(result) == 10


class TestFindOperators:
    """Tests for find_operators."""

    def test_clean_value(self) -> None:
        """Test clean input has no findings."""
        assert find_operators({"safe": "value", "nested": {"also": "safe"}}) == []

    def test_key_finding(self) -> None:
        """Test operator keys are reported as keys."""
        findings = find_operators({"user": {"$where": "1"}})
        assert findings == [
            Finding(
                location='$.user["$where"]',
                kind="key",
                value="$where",
                reason="Key contains '$'",
            )
        ]

    def test_value_finding(self) -> None:
        """Test string values are reported as values."""
        findings = find_operators({"tags": ["ok", "a.$b"]})
        assert len(findings) == 1
        assert findings[0].location == "$.tags[1]"
        assert findings[0].kind == "value"
        assert findings[0].reason == "Value contains '$', '.'"

    def test_key_and_value(self) -> None:
        """Test a key and its value are both reported, key first."""
        findings = find_operators({"a.b": "c.d"})
        assert [(f.kind, f.location) for f in findings] == [("key", '$["a.b"]'), ("value", '$["a.b"]')]

    def test_string_root(self) -> None:
        """Test a bare string is reported at the root."""
        findings = find_operators("$ne")
        assert [(f.kind, f.location) for f in findings] == [("value", "$")]

    def test_allow_dots(self) -> None:
        """Test dots are not reported when allowed."""
        assert find_operators({"a.b": "c.d"}, allow_dots=True) == []

    def test_long_value_truncated(self) -> None:
        """Test reported values are truncated for display."""
        findings = find_operators({"k": "$" + "x" * 100})
        assert findings[0].value.endswith("...")

    def test_depth_limit(self) -> None:
        """Test the nesting limit applies."""
        with pytest.raises(SanitizeDepthError):
            find_operators({"a": {"b": {"c": "$"}}}, max_depth=2)

    def test_cycle_rejected(self) -> None:
        """Test self-referencing input raises the same error as has()."""
        data: dict = {"$a": 1}
        data["self"] = [data]
        with pytest.raises(SanitizeCycleError):
            find_operators(data)
        with pytest.raises(SanitizeCycleError):
            has(data)

    def test_shared_subtree_reported_twice(self) -> None:
        """Test a subtree reused side by side is not a cycle."""
        shared = {"$x": 1}
        findings = find_operators({"a": shared, "b": shared})
        assert [f.location for f in findings] == ['$.a["$x"]', '$.b["$x"]']

    @pytest.mark.parametrize(
        "value",
        [
            {"a": 1},
            {"$a": 1},
            ["x", ["y", {"z.w": None}]],
            "plain",
            "p.q",
            42,
        ],
    )
    def test_agrees_with_has(self, value: Any) -> None:
        """Test findings exist exactly when has() is true."""
        assert bool(find_operators(value)) is has(value)


class TestValidateJsonFile:
    """Tests for validate_json_file."""

    def test_plain_json(self, json_file) -> None:
        """Test a .json file is scanned."""
        path = json_file({"filter": {"$gt": 1}})
        findings = validate_json_file(path)
        assert [f.location for f in findings] == ['$.filter["$gt"]']

    def test_gzipped_json(self, tmp_path: Path) -> None:
        """Test a .json.gz file is scanned."""
        path = tmp_path / "payload.json.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            json.dump({"a.b": 1}, f)

        findings = validate_json_file(path)
        assert len(findings) == 1

    def test_clean_file(self, json_file) -> None:
        """Test a clean file has no findings."""
        assert validate_json_file(json_file({"a": ["b"]})) == []

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test invalid JSON raises JSONDecodeError."""
        path = tmp_path / "bad.json"
        path.write_text("{nope")
        with pytest.raises(json.JSONDecodeError):
            validate_json_file(path)
