"""Shared text processing utilities.

Holds the content normalizer (snake_case to camelCase key conversion for the
remote JSON payloads, on top of :mod:`humps`) together with the small display
formatters used by the HTML renderers.
"""

import re
import html as htmllib
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

import humps


def camelize(key: str) -> str:
    """Convert a single snake_case or kebab-case key to camelCase.

    Thin wrapper over :func:`humps.camelize`: numeric and all-caps keys are
    returned unchanged and already camelCased keys pass through untouched,
    which makes the conversion idempotent.

    Examples:
        >>> camelize("items_analyzed")
        'itemsAnalyzed'
        >>> camelize("itemsAnalyzed")
        'itemsAnalyzed'
        >>> camelize("@context")
        '@context'
    """
    if not key:
        return key
    return humps.camelize(key)


def camelize_keys(data: Any, preserve: Iterable[str] = ()) -> Any:
    """Recursively camelize every mapping key in a JSON-like value.

    Works on any combination of dicts, lists and scalars; scalars are returned
    as-is. Keys listed in *preserve* (matched after camelization) are renamed
    like any other key, but the keys of their mapping value are kept verbatim.
    Item ``attributes`` use this because their keys are display labels.

    Args:
        data: Parsed JSON value
        preserve: Field names whose nested mapping keys must not be rewritten

    Returns:
        A new structure with camelCase keys
    """
    preserved = frozenset(camelize(name) for name in preserve)
    return _camelize(data, preserved)


def _camelize(data: Any, preserved: frozenset) -> Any:
    if isinstance(data, dict):
        result = {}
        for key, value in data.items():
            new_key = camelize(key) if isinstance(key, str) else key
            if new_key in preserved and isinstance(value, dict):
                result[new_key] = dict(value)
            else:
                result[new_key] = _camelize(value, preserved)
        return result
    if isinstance(data, list):
        return [_camelize(item, preserved) for item in data]
    return data


def strip_tags(text: Optional[str]) -> str:
    """Remove HTML tags and unescape entities.

    Examples:
        >>> strip_tags("<p>Best &amp; brightest</p>")
        'Best & brightest'
    """
    if not text:
        return ""
    text = re.sub(r"<[^>]+>", "", text)
    return htmllib.unescape(text).strip()


def format_count(value: Union[int, float, None]) -> str:
    """Format a number with thousands separators (``12400 -> '12,400'``)."""
    if value is None:
        return ""
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,}"
    return f"{int(value):,}"


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """Render an ISO date/datetime as ``'January 5, 2026'``.

    Unparsable input is returned as a string unchanged; ``None`` gives ``''``.
    """
    parsed = _parse_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def date_sort_key(value: Any) -> date:
    """Sort key for ISO dates; unparsable values sort as the oldest."""
    return _parse_date(value) or date.min


def capitalize_first(text: str) -> str:
    """Upper-case only the first character (``'hand tools' -> 'Hand tools'``)."""
    return text[:1].upper() + text[1:] if text else ""
