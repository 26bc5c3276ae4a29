"""Conversion between filter states and canonical URL path fragments."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Tuple
from urllib.parse import quote, unquote

from .config import DEFAULT_SORT_KEY, FacetSettings, default_settings


def _encode(segment: str) -> str:
    return quote(str(segment), safe="")


def filter_to_path(filters: Mapping[str, str] | None) -> str:
    """Return ``k1/v1/k2/v2`` with keys in lexicographic order.

    ``{"type": "cottage", "bedrooms": "2"}`` gives ``"bedrooms/2/type/cottage"``.
    """

    if not filters:
        return ""
    segments: List[str] = []
    for key in sorted(filters):
        segments.append(_encode(key))
        segments.append(_encode(filters[key]))
    return "/".join(segments)


def _pairs(segments: List[str]) -> Iterable[Tuple[str, str]]:
    for index in range(0, len(segments) - 1, 2):
        yield segments[index], segments[index + 1]


def path_to_filter(path: str | None) -> Dict[str, str]:
    """Parse ``"capacity/3/size/small"`` back into ``{"capacity": "3", "size": "small"}``.

    A trailing key without a value is ignored, as is a pair whose key or
    value is empty. Round trips therefore hold for states with non-empty keys
    and values; ``{"a": ""}`` comes back as ``{}``.
    """

    if not path:
        return {}
    segments = [segment for segment in path.split("/") if segment]
    filters: Dict[str, str] = {}
    for raw_key, raw_value in _pairs(segments):
        key, value = unquote(raw_key), unquote(raw_value)
        if key and value:
            filters[key] = value
    return filters


def to_sorted_path(
    filters: Mapping[str, str] | None,
    sort_key: str = DEFAULT_SORT_KEY,
) -> str:
    """Append a non-default sort key to the filter path as its last segment."""

    path = filter_to_path(filters)
    if not sort_key or sort_key == DEFAULT_SORT_KEY:
        return path
    return f"{path}/{sort_key}" if path else sort_key


def parse_sorted_path(
    path: str | None, settings: FacetSettings | None = None
) -> Tuple[Dict[str, str], str]:
    """Split a path into its filter state and trailing sort key, if any."""

    settings = settings or default_settings()
    segments = [segment for segment in (path or "").split("/") if segment]
    sort_key = DEFAULT_SORT_KEY
    if segments and segments[-1] in settings.sort_keys and len(segments) % 2 == 1:
        sort_key = segments.pop()
    return path_to_filter("/".join(segments)), sort_key


def build_search_url(
    base_url: str,
    filters: Mapping[str, str] | None,
    sort_key: str = DEFAULT_SORT_KEY,
    settings: FacetSettings | None = None,
) -> str:
    """Return the page URL for a filter state below ``base_url``."""

    settings = settings or default_settings()
    base = base_url.rstrip("/")
    search_part = to_sorted_path(filters, sort_key)
    if not search_part:
        return f"{base}/"
    return f"{base}/{settings.search_segment}/{search_part}/"
