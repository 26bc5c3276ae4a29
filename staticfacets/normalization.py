"""Helpers for canonicalizing raw filter attributes into URL slugs."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Tuple

from .utils import slugify

logger = logging.getLogger(__name__)

FilterState = Dict[str, str]


def normalize(text: str) -> str:
    """Return the canonical slug for an attribute name or value.

    ``normalize(normalize(x)) == normalize(x)`` for every string.
    """

    return slugify(text)


def normalize_attribute(raw_name: str, raw_value: str) -> Tuple[str, str]:
    """Return the ``(key, value)`` slug pair for one raw attribute."""

    return normalize(raw_name), normalize(raw_value)


def _raw_fields(attribute: Any) -> Tuple[object, object]:
    if isinstance(attribute, Mapping):
        return attribute.get("name"), attribute.get("value")
    return getattr(attribute, "name", None), getattr(attribute, "value", None)


def iter_canonical_pairs(attributes: Iterable[Any] | None) -> Iterable[Tuple[str, str, str, str]]:
    """Yield ``(key, value, display_name, display_value)`` for usable attributes.

    Attributes with a missing or non-string name/value, or whose slug is
    empty, are skipped.
    """

    if not attributes:
        return
    for attribute in attributes:
        name, value = _raw_fields(attribute)
        if not isinstance(name, str) or not isinstance(value, str):
            logger.debug("Dropping malformed filter attribute %r", attribute)
            continue
        key, slug = normalize_attribute(name, value)
        if not key or not slug:
            logger.debug("Dropping filter attribute with empty slug %r", attribute)
            continue
        yield key, slug, name.strip(), value.strip()


def parse_filter_attributes(attributes: Iterable[Any] | None) -> FilterState:
    """Parse raw attributes into a filter state.

    ``[{"name": "Size", "value": "Small"}]`` becomes ``{"size": "small"}``.
    A repeated key keeps the last value seen on the item.
    """

    parsed: FilterState = {}
    for key, value, _, _ in iter_canonical_pairs(attributes):
        parsed[key] = value
    return parsed


def normalize_filters(filters: Mapping[str, str] | None) -> FilterState:
    """Canonicalize both sides of a caller-supplied filter state."""

    if not filters:
        return {}
    normalized: FilterState = {}
    for key, value in filters.items():
        slug_key = normalize(str(key))
        if slug_key:
            normalized[slug_key] = normalize(str(value))
    return normalized


def has_blank_key(filters: Mapping[str, str] | None) -> bool:
    """``True`` when some caller-supplied key has no canonical form.

    Such a key can never be present on an item, so the filter state is
    unreachable.
    """

    return any(not normalize(str(key)) for key in filters or ())
