"""Query-operator sanitization library.

This library provides tools for:
- Neutralizing "$" and "." in keys and string values of untrusted,
  nested input before it is used to build document-database queries
- Sanitizing the body, query, params and headers of request objects
- Checking JSON files for operator characters before they are stored

Core sanitization has ZERO dependencies (only stdlib).
Optional features require: typer (cli).

Example usage:
    from mongo_sanitizer import has, sanitize

    sanitize({"$where": "1==1", "a.b": 5})   # {"_where": "1==1", "a_b": 5}
    sanitize("a.b", allow_dots=True)         # "a.b"
    has({"price": {"$lt": 10}})              # True

    # Request objects
    from mongo_sanitizer.request import sanitize_request
    sanitize_request(request)
    request.sanitized_body
"""

from __future__ import annotations

__version__ = "1.0.3"

# Re-export public API for convenience
from mongo_sanitizer.patterns import Policy
from mongo_sanitizer.request import RequestSanitizer, sanitize_request
from mongo_sanitizer.sanitization import (
    SanitizeResult,
    has,
    sanitize,
    sanitize_value,
)

__all__ = [
    "__version__",
    "Policy",
    "RequestSanitizer",
    "SanitizeResult",
    "has",
    "sanitize",
    "sanitize_request",
    "sanitize_value",
]
