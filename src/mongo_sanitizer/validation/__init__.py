"""Validation utilities for query-operator detection.

This module reports where forbidden characters occur in nested data or
JSON files. Useful for CI checks on request fixtures and stored payloads.

Exports:
    - find_operators: Locate forbidden characters in a value
    - validate_json_file: Check a JSON file
    - Finding: Dataclass for validation findings
"""

from __future__ import annotations

from mongo_sanitizer.validation.operators import (
    Finding,
    child_location,
    find_operators,
    truncate,
    validate_json_file,
)

__all__ = [
    "Finding",
    "child_location",
    "find_operators",
    "truncate",
    "validate_json_file",
]
