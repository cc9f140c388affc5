"""JSON file sanitization utilities.

This module sanitizes JSON documents on disk, writing the result to a new
file so the original is never overwritten.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from mongo_sanitizer.patterns import DEFAULT_REPLACEMENT, Policy
from mongo_sanitizer.sanitization.engine import sanitize_value

_LOGGER = logging.getLogger(__name__)

# Default maximum input file size (100 MB)
DEFAULT_MAX_FILE_SIZE = 100 * 1024 * 1024


class InputSizeError(ValueError):
    """Raised when an input file exceeds the size limit."""

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"Input file size ({size:,} bytes) exceeds limit ({max_size:,} bytes). "
            f"Use max_size parameter to increase or set to None to disable."
        )


def default_output_path(input_path: str | Path) -> Path:
    """Derive the output path for a sanitized file.

    Args:
        input_path: Path to the input file

    Returns:
        Sibling path with a .sanitized.json suffix

    Example:
        >>> default_output_path("body.json").name
        'body.sanitized.json'
        >>> default_output_path("dump.txt").name
        'dump.txt.sanitized.json'
    """
    input_path = Path(input_path)
    if input_path.suffix == ".json":
        return input_path.with_name(input_path.stem + ".sanitized.json")
    return input_path.with_name(input_path.name + ".sanitized.json")


def sanitize_json_file(
    input_path: str | Path,
    output_path: str | Path | None = None,
    *,
    replace_with: str = DEFAULT_REPLACEMENT,
    allow_dots: bool = False,
    dry_run: bool = False,
    max_depth: int | None = None,
    max_size: int | None = DEFAULT_MAX_FILE_SIZE,
) -> tuple[str, bool]:
    """Sanitize a JSON file and write the result to a new file.

    Args:
        input_path: Path to input JSON file
        output_path: Path to output file (default: input with .sanitized.json suffix)
        replace_with: Replacement for each forbidden character
        allow_dots: If True, only "$" is replaced
        dry_run: If True, the output is a copy of the input
        max_depth: Maximum nesting depth, or None for no limit
        max_size: Maximum file size in bytes (default: 100MB). Set to None to disable.

    Returns:
        Tuple of (path to the sanitized file, whether anything was found)

    Raises:
        InputSizeError: If file exceeds max_size limit
        SanitizeDepthError: If nesting exceeds max_depth
        FileNotFoundError: If input file doesn't exist
        json.JSONDecodeError: If file is not valid JSON

    Example:
        >>> # sanitize_json_file("body.json")  # Creates body.sanitized.json
        >>> # sanitize_json_file("body.json", "clean.json", allow_dots=True)
    """
    input_path = Path(input_path)

    # Check file size before reading
    if max_size is not None:
        file_size = input_path.stat().st_size
        if file_size > max_size:
            raise InputSizeError(file_size, max_size)

    output = Path(output_path) if output_path is not None else default_output_path(input_path)

    with open(input_path, encoding="utf-8") as f:
        data = json.load(f)

    policy = Policy.from_options(
        replace_with=replace_with,
        dry_run=dry_run,
        allow_dots=allow_dots,
        max_depth=max_depth,
    )
    result = sanitize_value(data, policy)

    with open(output, "w", encoding="utf-8") as f:
        json.dump(result.value, f, indent=2)

    _LOGGER.info("Sanitized JSON written to: %s", output)
    return str(output), result.modified
