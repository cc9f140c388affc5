"""Options file loading utilities.

This module loads sanitizer options (replacement, dot handling, dry run,
depth limit) from JSON files, caching parsed files by resolved path.
"""

from __future__ import annotations

import json
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

# Maximum number of cache entries to prevent unbounded growth
_MAX_CACHE_SIZE = 20

# LRU cache for loaded option files (OrderedDict for LRU behavior)
_options_cache: OrderedDict[str, dict[str, Any]] = OrderedDict()

# Accepted spellings for each option, mapped to the keyword used by Policy.from_options
OPTION_ALIASES: dict[str, str] = {
    "replace_with": "replace_with",
    "replaceWith": "replace_with",
    "allow_dots": "allow_dots",
    "allowDots": "allow_dots",
    "dry_run": "dry_run",
    "dryRun": "dry_run",
    "max_depth": "max_depth",
    "maxDepth": "max_depth",
}


def _cache_get(key: str) -> dict[str, Any] | None:
    """Get value from cache, moving it to end (most recently used)."""
    if key in _options_cache:
        _options_cache.move_to_end(key)
        return _options_cache[key]
    return None


def _cache_set(key: str, value: dict[str, Any]) -> None:
    """Set value in cache with LRU eviction."""
    if key in _options_cache:
        _options_cache.move_to_end(key)
    _options_cache[key] = value
    while len(_options_cache) > _MAX_CACHE_SIZE:
        evicted_key = next(iter(_options_cache))
        _options_cache.pop(evicted_key)
        _LOGGER.debug("Options cache evicted: %s", evicted_key)


class OptionsLoadError(Exception):
    """Raised when an options file cannot be loaded."""


def load_json_file(path: Path | str) -> Any:
    """Load a JSON file with error handling.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON data

    Raises:
        OptionsLoadError: If file cannot be read or parsed
    """
    path_str = str(path)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise OptionsLoadError(f"Options file not found: {path_str}") from e
    except PermissionError as e:
        raise OptionsLoadError(f"Permission denied reading options file: {path_str}") from e
    except json.JSONDecodeError as e:
        raise OptionsLoadError(f"Invalid JSON in options file {path_str}: {e}") from e


def normalize_options(raw: dict[str, Any]) -> dict[str, Any]:
    """Map option spellings onto Policy.from_options keywords.

    Args:
        raw: Options as written in a file (snake_case or camelCase keys)

    Returns:
        Dict keyed by replace_with, allow_dots, dry_run and max_depth

    Example:
        >>> normalize_options({"replaceWith": "-", "allowDots": True})
        {'replace_with': '-', 'allow_dots': True}
    """
    options: dict[str, Any] = {}
    for key, value in raw.items():
        name = OPTION_ALIASES.get(key)
        if name is None:
            _LOGGER.warning("Ignoring unknown option: %s", key)
            continue
        options[name] = value
    return options


def load_options(path: Path | str) -> dict[str, Any]:
    """Load sanitizer options from a JSON file.

    Args:
        path: Path to a JSON object of options

    Returns:
        Normalized options dict (a fresh copy on every call)

    Raises:
        OptionsLoadError: If the file cannot be loaded or is not a JSON object
    """
    cache_key = str(Path(path).resolve())
    cached = _cache_get(cache_key)
    if cached is not None:
        return dict(cached)

    data = load_json_file(path)
    if not isinstance(data, dict):
        raise OptionsLoadError(f"Options file must contain a JSON object: {path}")

    options = normalize_options(data)
    _cache_set(cache_key, options)
    return dict(options)


def clear_options_cache() -> None:
    """Clear the options cache.

    Useful for testing or when option files have been modified.
    """
    _options_cache.clear()
