"""Locate query-operator characters in nested data.

Reports every key and string value that contains a forbidden character,
with a JSONPath-like location so the offending input can be traced:

    $.user["$where"]        key "$where" inside the "user" object
    $.tags[2]               third element of the "tags" list

This module has ZERO external dependencies (stdlib only).
"""

from __future__ import annotations

import gzip
import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mongo_sanitizer.patterns import select_pattern
from mongo_sanitizer.sanitization.engine import SanitizeCycleError, SanitizeDepthError

# Keys that can be written as $.key without quoting
_PLAIN_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class Finding:
    """A forbidden character occurrence.

    Attributes:
        location: JSONPath-like location of the key or value
        kind: "key" or "value"
        value: The offending text (truncated for display)
        reason: Human-readable explanation of why it was flagged
    """

    location: str
    kind: str  # "key" or "value"
    value: str
    reason: str


def truncate(value: str, max_len: int = 40) -> str:
    """Truncate a value for display.

    Args:
        value: Value to truncate
        max_len: Maximum length

    Returns:
        Truncated value
    """
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def child_location(parent: str, key: Any) -> str:
    """Build the location of a mapping entry or sequence element.

    Args:
        parent: Location of the container
        key: Mapping key or sequence index

    Returns:
        Location string

    Example:
        >>> child_location("$", "user")
        '$.user'
        >>> child_location("$.user", "$where")
        '$.user["$where"]'
        >>> child_location("$.tags", 2)
        '$.tags[2]'
    """
    if isinstance(key, int) and not isinstance(key, bool):
        return f"{parent}[{key}]"
    if isinstance(key, str) and _PLAIN_KEY.match(key):
        return f"{parent}.{key}"
    if isinstance(key, str):
        return f"{parent}[{json.dumps(key)}]"
    return f"{parent}[{key!r}]"


def _describe(text: str, pattern: re.Pattern[str]) -> str:
    """List the forbidden characters present in text."""
    found = sorted(set(pattern.findall(text)))
    return ", ".join(f"'{char}'" for char in found)


def _walk(
    node: Any,
    location: str,
    pattern: re.Pattern[str],
    findings: list[Finding],
    max_depth: int | None,
    depth: int,
    ancestors: set[int],
) -> None:
    """Collect findings for node and its children."""
    if isinstance(node, str):
        if pattern.search(node):
            findings.append(
                Finding(
                    location=location,
                    kind="value",
                    value=truncate(node),
                    reason=f"Value contains {_describe(node, pattern)}",
                )
            )
        return

    if isinstance(node, Mapping):
        entries: Any = node.items()
    elif isinstance(node, (list, tuple)):
        entries = enumerate(node)
    else:
        return

    if max_depth is not None and depth > max_depth:
        raise SanitizeDepthError(depth, max_depth)

    node_id = id(node)
    if node_id in ancestors:
        raise SanitizeCycleError()
    ancestors.add(node_id)

    is_mapping = isinstance(node, Mapping)
    for key, item in entries:
        item_location = child_location(location, key)
        if is_mapping and isinstance(key, str) and pattern.search(key):
            findings.append(
                Finding(
                    location=item_location,
                    kind="key",
                    value=truncate(key),
                    reason=f"Key contains {_describe(key, pattern)}",
                )
            )
        _walk(item, item_location, pattern, findings, max_depth, depth + 1, ancestors)

    ancestors.discard(node_id)


def find_operators(
    value: Any,
    *,
    allow_dots: bool = False,
    max_depth: int | None = None,
) -> list[Finding]:
    """Find every key and string value containing forbidden characters.

    Args:
        value: Value to scan
        allow_dots: If True, only "$" is reported
        max_depth: Maximum nesting depth, or None for no limit

    Returns:
        List of findings in traversal order (empty if clean)

    Raises:
        SanitizeDepthError: If nesting exceeds max_depth
        SanitizeCycleError: If value contains a reference cycle

    Example:
        >>> [f.location for f in find_operators({"user": {"$where": "1"}})]
        ['$.user["$where"]']
    """
    findings: list[Finding] = []
    _walk(value, "$", select_pattern(allow_dots), findings, max_depth, 1, set())
    return findings


def validate_json_file(
    json_path: Path | str,
    *,
    allow_dots: bool = False,
    max_depth: int | None = None,
) -> list[Finding]:
    """Check a JSON file for forbidden characters.

    Args:
        json_path: Path to JSON file (.json or .json.gz)
        allow_dots: If True, only "$" is reported
        max_depth: Maximum nesting depth, or None for no limit

    Returns:
        List of findings (empty if clean)

    Example:
        >>> findings = validate_json_file("body.json")  # doctest: +SKIP
        >>> if findings:
        ...     print(f"Found {len(findings)} issues")
    """
    json_path = Path(json_path)

    if json_path.suffix == ".gz":
        with gzip.open(json_path, "rt", encoding="utf-8") as f:
            data = json.load(f)
    else:
        with open(json_path, encoding="utf-8") as f:
            data = json.load(f)

    return find_operators(data, allow_dots=allow_dots, max_depth=max_depth)
