"""Sanitization policy and forbidden-character selection.

This module provides the Policy record that drives a single engine call,
and the selector that picks which characters are treated as query operators.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

_LOGGER = logging.getLogger(__name__)

DEFAULT_REPLACEMENT = "_"

# "$" starts an operator ($where, $gt); "." addresses nested fields.
DOLLAR_PATTERN = re.compile(r"\$")
DOLLAR_AND_DOT_PATTERN = re.compile(r"[$.]")


def select_pattern(allow_dots: bool) -> re.Pattern[str]:
    """Select the forbidden-character pattern.

    Args:
        allow_dots: If True, only "$" is forbidden

    Returns:
        Compiled pattern matching a single forbidden character

    Example:
        >>> select_pattern(True).search("a.b") is None
        True
        >>> select_pattern(False).search("a.b") is None
        False
    """
    return DOLLAR_PATTERN if allow_dots else DOLLAR_AND_DOT_PATTERN


def _flag(name: str, value: Any) -> bool:
    """Accept only real booleans; anything else means False."""
    if isinstance(value, bool):
        return value
    _LOGGER.warning("Ignoring non-boolean %s %r, using False", name, value)
    return False


@dataclass(frozen=True)
class Policy:
    """Configuration for one sanitization call.

    Attributes:
        replacement: String substituted for each forbidden character.
            An empty string is allowed, but distinct keys such as "a.b" and
            "a$b" then collapse to the same key and the later one wins.
        dry_run: If True, detect only; values are returned untouched.
        allow_dots: If True, "." is not treated as forbidden.
        max_depth: Maximum container nesting depth, or None for no limit.
    """

    replacement: str = DEFAULT_REPLACEMENT
    dry_run: bool = False
    allow_dots: bool = False
    max_depth: int | None = None

    @property
    def pattern(self) -> re.Pattern[str]:
        """Forbidden-character pattern for this policy."""
        return select_pattern(self.allow_dots)

    @classmethod
    def from_options(
        cls,
        replace_with: Any = DEFAULT_REPLACEMENT,
        dry_run: Any = False,
        allow_dots: Any = False,
        max_depth: Any = None,
    ) -> Policy:
        """Build a policy from loosely typed options.

        Invalid values fall back to the defaults instead of raising, so a
        bad configuration degrades to the strictest behavior.

        Args:
            replace_with: Replacement string (default "_")
            dry_run: Detect without rewriting
            allow_dots: Leave "." untouched
            max_depth: Positive nesting limit, or None

        Returns:
            Configured Policy instance
        """
        if not isinstance(replace_with, str):
            _LOGGER.warning("Ignoring non-string replace_with %r, using %r", replace_with, DEFAULT_REPLACEMENT)
            replace_with = DEFAULT_REPLACEMENT

        if max_depth is not None and (
            isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1
        ):
            _LOGGER.warning("Ignoring invalid max_depth %r, depth is unlimited", max_depth)
            max_depth = None

        return cls(
            replacement=replace_with,
            dry_run=_flag("dry_run", dry_run),
            allow_dots=_flag("allow_dots", allow_dots),
            max_depth=max_depth,
        )
