"""CLI for mongo-sanitizer.

This module provides a Typer-based CLI for sanitizing and checking
JSON documents.

Requires the 'cli' optional dependency: pip install mongo-sanitizer[cli]
"""

from __future__ import annotations
