"""Policy and options utilities for sanitization.

This module provides:
- The Policy record and forbidden-character selection
- Loading of sanitizer options from JSON files
"""

from __future__ import annotations

from mongo_sanitizer.patterns.loader import (
    OptionsLoadError,
    clear_options_cache,
    load_json_file,
    load_options,
    normalize_options,
)
from mongo_sanitizer.patterns.policy import (
    DEFAULT_REPLACEMENT,
    DOLLAR_AND_DOT_PATTERN,
    DOLLAR_PATTERN,
    Policy,
    select_pattern,
)

__all__ = [
    # Policy
    "Policy",
    "select_pattern",
    "DEFAULT_REPLACEMENT",
    "DOLLAR_PATTERN",
    "DOLLAR_AND_DOT_PATTERN",
    # Options loading
    "load_options",
    "load_json_file",
    "normalize_options",
    "clear_options_cache",
    "OptionsLoadError",
]
