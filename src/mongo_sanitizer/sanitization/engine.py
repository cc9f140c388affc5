"""Recursive sanitization engine.

Walks nested data (mappings, lists, tuples, strings) and replaces the
characters that act as operators in document queries ("$" always, "."
unless dots are allowed) in every key and string value.

The engine is pure: it never mutates its input, keeps no state between
calls, and reports whether any replacement was (or, in dry-run mode, would
have been) made.

Example usage:
    >>> sanitize({"$where": "1==1", "a.b": 5})
    {'_where': '1==1', 'a_b': 5}
    >>> has("price.$lt")
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mongo_sanitizer.patterns import DEFAULT_REPLACEMENT, Policy

# JSON-like tree accepted by the engine. Anything else is an opaque leaf.
Value = str | int | float | bool | None | Mapping[Any, Any] | list[Any] | tuple[Any, ...]


class SanitizeDepthError(ValueError):
    """Raised when input nesting exceeds the policy's max_depth."""

    def __init__(self, depth: int, max_depth: int) -> None:
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Input nesting depth ({depth}) exceeds limit ({max_depth}). "
            f"Use max_depth to increase or set to None to disable."
        )


class SanitizeCycleError(ValueError):
    """Raised when input contains a reference cycle."""

    def __init__(self) -> None:
        super().__init__("Input contains a reference cycle and cannot be sanitized")


@dataclass(frozen=True)
class SanitizeResult:
    """Outcome of one engine call.

    Attributes:
        value: Sanitized value (the original object in dry-run mode)
        modified: True if at least one forbidden character was found
    """

    value: Any
    modified: bool


def sanitize_string(text: str, policy: Policy) -> tuple[str, bool]:
    """Sanitize a single string.

    Args:
        text: String to check
        policy: Active policy

    Returns:
        Tuple of (sanitized or original string, whether a match was found)

    Example:
        >>> sanitize_string("user.$name", Policy())
        ('user__name', True)
        >>> sanitize_string("a.b", Policy(allow_dots=True))
        ('a.b', False)
    """
    pattern = policy.pattern
    if not pattern.search(text):
        return text, False
    if policy.dry_run:
        return text, True

    replacement = policy.replacement
    # Replacement is literal, never a regex template
    return pattern.sub(lambda _match: replacement, text), True


def _sanitize_node(node: Any, policy: Policy, depth: int, ancestors: set[int]) -> tuple[Any, bool]:
    """Sanitize one node of the tree.

    Args:
        node: Current value
        policy: Active policy
        depth: Nesting depth of node (root container is 1)
        ancestors: ids of the containers on the path to node

    Returns:
        Tuple of (sanitized node, modified flag)
    """
    if isinstance(node, str):
        return sanitize_string(node, policy)

    is_mapping = isinstance(node, Mapping)
    if not is_mapping and not isinstance(node, (list, tuple)):
        return node, False

    if policy.max_depth is not None and depth > policy.max_depth:
        raise SanitizeDepthError(depth, policy.max_depth)

    node_id = id(node)
    if node_id in ancestors:
        raise SanitizeCycleError()
    ancestors.add(node_id)

    modified = False
    result: Any
    if is_mapping:
        result = {}
        for key, item in node.items():
            if isinstance(key, str):
                key, key_modified = sanitize_string(key, policy)
                modified = modified or key_modified
            item, item_modified = _sanitize_node(item, policy, depth + 1, ancestors)
            modified = modified or item_modified
            # Colliding keys: last write wins
            result[key] = item
    else:
        items = []
        for item in node:
            item, item_modified = _sanitize_node(item, policy, depth + 1, ancestors)
            modified = modified or item_modified
            items.append(item)
        result = tuple(items) if isinstance(node, tuple) else items

    ancestors.discard(node_id)
    return result, modified


def sanitize_value(value: Value, policy: Policy | None = None) -> SanitizeResult:
    """Sanitize a value of any shape.

    Containers are rebuilt, so the result never shares a mapping or list
    with the input. In dry-run mode the original object is returned.

    Args:
        value: String, scalar, mapping, list or tuple to sanitize
        policy: Policy to apply (default: Policy())

    Returns:
        SanitizeResult with the sanitized value and modified flag

    Raises:
        SanitizeDepthError: If nesting exceeds policy.max_depth
        SanitizeCycleError: If value contains a reference cycle
    """
    if policy is None:
        policy = Policy()

    if isinstance(value, str):
        text, modified = sanitize_string(value, policy)
        return SanitizeResult(text, modified)

    sanitized, modified = _sanitize_node(value, policy, 1, set())
    return SanitizeResult(value if policy.dry_run else sanitized, modified)


def sanitize(
    value: Value,
    *,
    replace_with: str = DEFAULT_REPLACEMENT,
    dry_run: bool = False,
    allow_dots: bool = False,
    max_depth: int | None = None,
) -> Value:
    """Sanitize a value and return only the result.

    Args:
        value: Value to sanitize
        replace_with: Replacement for each forbidden character (default "_").
            An empty string may merge distinct keys ("a.b" and "a$b" both
            become "ab"); the entry processed last wins.
        dry_run: If True, return the value unchanged
        allow_dots: If True, only "$" is replaced
        max_depth: Maximum nesting depth, or None for no limit

    Returns:
        Sanitized value

    Example:
        >>> sanitize("user.$name")
        'user__name'
        >>> sanitize({"a": {"$gt": 3}}, allow_dots=True)
        {'a': {'_gt': 3}}
        >>> sanitize({"a.b": 1, "a$b": 2}, replace_with="")
        {'ab': 2}
    """
    policy = Policy.from_options(
        replace_with=replace_with,
        dry_run=dry_run,
        allow_dots=allow_dots,
        max_depth=max_depth,
    )
    return sanitize_value(value, policy).value


def has(value: Value, *, allow_dots: bool = False) -> bool:
    """Check whether a value contains forbidden characters.

    The value is never modified.

    Args:
        value: Value to check
        allow_dots: If True, only "$" counts as forbidden

    Returns:
        True if sanitizing the value would change it

    Example:
        >>> has("price.$lt")
        True
        >>> has({"safe": "value", "nested": {"also": "safe"}})
        False
    """
    return sanitize_value(value, Policy(dry_run=True, allow_dots=allow_dots)).modified
