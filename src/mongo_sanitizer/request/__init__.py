"""Request adapter for query-operator sanitization.

Exports:
    - RequestSanitizer: Reusable, configured adapter
    - sanitize_request: One-shot functional form
    - FIELDS: Request fields the adapter can process
"""

from __future__ import annotations

from mongo_sanitizer.request.adapter import (
    FIELDS,
    RequestSanitizer,
    parse_query_string,
    query_mapping,
    sanitize_request,
    sanitized_attribute,
)

__all__ = [
    "FIELDS",
    "RequestSanitizer",
    "parse_query_string",
    "query_mapping",
    "sanitize_request",
    "sanitized_attribute",
]
