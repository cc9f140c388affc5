"""Sanitization engine for query-operator characters.

This module neutralizes "$" and "." in keys and string values of nested
data with ZERO external dependencies (stdlib only).

Exports:
    - sanitize: Return a sanitized copy of a value
    - has: Check whether a value contains forbidden characters
    - sanitize_value: Engine entry point returning value and modified flag
    - sanitize_json_file: Sanitize a JSON file on disk
"""

from __future__ import annotations

from mongo_sanitizer.sanitization.engine import (
    SanitizeCycleError,
    SanitizeDepthError,
    SanitizeResult,
    Value,
    has,
    sanitize,
    sanitize_string,
    sanitize_value,
)
from mongo_sanitizer.sanitization.files import (
    DEFAULT_MAX_FILE_SIZE,
    InputSizeError,
    default_output_path,
    sanitize_json_file,
)

__all__ = [
    # Engine
    "sanitize",
    "has",
    "sanitize_value",
    "sanitize_string",
    "SanitizeResult",
    "Value",
    # File helper
    "sanitize_json_file",
    "default_output_path",
    # Limits and errors
    "DEFAULT_MAX_FILE_SIZE",
    "InputSizeError",
    "SanitizeDepthError",
    "SanitizeCycleError",
]
