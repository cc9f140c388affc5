"""Request adapter for the sanitization engine.

Sanitizes the body, query, params and headers of a request-like object
and stores the results on sanitized_<field> attributes. The original fields
are never overwritten, so handlers must read the sanitized_* attributes to
get safe data.

Works with any object exposing those attributes (framework request
wrappers, types.SimpleNamespace in tests). Query strings are split with
urllib.parse when the request has a url but no (or an empty) parsed query
mapping. Multi-dict query objects keep every repeated value as a list.

Example usage:
    from mongo_sanitizer.request import RequestSanitizer

    sanitize_fields = RequestSanitizer(on_sanitize=lambda req, field: audit(field))

    def handler(request):
        sanitize_fields(request)
        users.find(request.sanitized_body)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from mongo_sanitizer.patterns import DEFAULT_REPLACEMENT, Policy
from mongo_sanitizer.sanitization.engine import sanitize_value

_LOGGER = logging.getLogger(__name__)

# Request fields the adapter knows how to process
FIELDS: tuple[str, ...] = ("body", "params", "query", "headers")

# Processing order for selected fields
_PROCESS_ORDER: tuple[str, ...] = ("query", "params", "body", "headers")

OnSanitize = Callable[[Any, str], None]


def sanitized_attribute(field: str) -> str:
    """Name of the attribute holding the sanitized copy of a field.

    Example:
        >>> sanitized_attribute("body")
        'sanitized_body'
    """
    return f"sanitized_{field}"


def parse_query_string(query: str) -> dict[str, Any]:
    """Split a raw query string into a flat mapping.

    Repeated keys collect their values into a list, in order.

    Args:
        query: Query string without the leading "?"

    Returns:
        Dict of parameter name to value (or list of values)

    Example:
        >>> parse_query_string("name[$ne]=x&tag=a&tag=b")
        {'name[$ne]': 'x', 'tag': ['a', 'b']}
    """
    return _collect(parse_qsl(query, keep_blank_values=True))


def _collect(pairs: Iterable[tuple[Any, Any]]) -> dict[Any, Any]:
    """Group (key, value) pairs, turning repeated keys into lists."""
    result: dict[Any, Any] = {}
    for key, value in pairs:
        if key not in result:
            result[key] = value
        elif isinstance(result[key], list):
            result[key].append(value)
        else:
            result[key] = [result[key], value]
    return result


def query_mapping(query: Mapping[Any, Any]) -> Mapping[Any, Any]:
    """Flatten a parsed query mapping the way parse_query_string does.

    Framework multi-dicts (Starlette's multi_items, Werkzeug and Django's
    getlist) hide repeated values behind items(), so they are read in full
    and repeats become lists. Plain mappings are returned as they are.

    Example:
        >>> query_mapping({"a": "1"})
        {'a': '1'}
    """
    multi_items = getattr(query, "multi_items", None)
    if callable(multi_items):
        return _collect(multi_items())
    getlist = getattr(query, "getlist", None)
    if callable(getlist):
        return _collect((key, value) for key in query for value in getlist(key))
    return query


def _is_non_empty_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple)) and len(value) > 0


class RequestSanitizer:
    """Sanitize selected fields of request-like objects.

    Attributes:
        policy: Engine policy built from the options
        fields: Field names processed on each call
        on_sanitize: Callback invoked as on_sanitize(request, field) for
            each field in which forbidden characters were found
    """

    def __init__(
        self,
        *,
        replace_with: str = DEFAULT_REPLACEMENT,
        allow_dots: bool = False,
        dry_run: bool = False,
        fields: Iterable[str] | None = None,
        on_sanitize: OnSanitize | None = None,
    ) -> None:
        """Configure the adapter.

        Args:
            replace_with: Replacement for each forbidden character (default "_")
            allow_dots: If True, only "$" is replaced
            dry_run: If True, sanitized_* hold the original values
            fields: Fields to process (default: body, params, query, headers)
            on_sanitize: Optional callback for fields that needed sanitizing

        Raises:
            ValueError: If fields names an unknown request field
        """
        self.policy = Policy.from_options(
            replace_with=replace_with,
            dry_run=dry_run,
            allow_dots=allow_dots,
        )

        selected = FIELDS if fields is None else tuple(fields)
        unknown = [field for field in selected if field not in FIELDS]
        if unknown:
            raise ValueError(f"Unknown request fields: {', '.join(unknown)} (expected one of {', '.join(FIELDS)})")
        self.fields = selected

        if on_sanitize is not None and not callable(on_sanitize):
            _LOGGER.warning("Ignoring non-callable on_sanitize %r", on_sanitize)
            on_sanitize = None
        self.on_sanitize = on_sanitize

    def _extract(self, request: Any, field: str) -> Any | None:
        """Get the value of a field to sanitize, or None to skip it."""
        if field == "query":
            query = getattr(request, "query", None)
            if isinstance(query, Mapping) and query:
                return query_mapping(query)
            # Empty or missing mapping: fall back to the raw query string
            url = getattr(request, "url", None)
            if isinstance(url, str) and "?" in url:
                return parse_query_string(urlsplit(url).query)
            return None

        value = getattr(request, field, None)
        if field == "params":
            return dict(value) if isinstance(value, Mapping) and value else None
        if field == "headers":
            return value if isinstance(value, Mapping) and value else None
        return value if _is_non_empty_container(value) else None

    def __call__(self, request: Any) -> Any:
        """Sanitize the selected fields of a request.

        Args:
            request: Object with body/params/query/headers attributes

        Returns:
            The same request, with sanitized_* attributes set
        """
        # Downstream code can always read the sanitized_* attributes
        for field in FIELDS:
            attribute = sanitized_attribute(field)
            if not getattr(request, attribute, None):
                setattr(request, attribute, {})

        for field in _PROCESS_ORDER:
            if field not in self.fields:
                continue

            data = self._extract(request, field)
            if data is None:
                continue

            result = sanitize_value(data, self.policy)
            setattr(request, sanitized_attribute(field), result.value)

            if result.modified:
                _LOGGER.debug("Forbidden characters found in request %s", field)
                if self.on_sanitize is not None:
                    self.on_sanitize(request, field)

        return request


def sanitize_request(
    request: Any,
    *,
    replace_with: str = DEFAULT_REPLACEMENT,
    allow_dots: bool = False,
    dry_run: bool = False,
    fields: Iterable[str] | None = None,
    on_sanitize: OnSanitize | None = None,
) -> Any:
    """Sanitize a request once with the given options.

    See RequestSanitizer for the meaning of each option.

    Returns:
        The same request, with sanitized_* attributes set
    """
    sanitizer = RequestSanitizer(
        replace_with=replace_with,
        allow_dots=allow_dots,
        dry_run=dry_run,
        fields=fields,
        on_sanitize=on_sanitize,
    )
    return sanitizer(request)
