"""Build the catalog of filterable attributes and their display labels."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from .models import DisplayLookup, FilterAttributeCatalog, Item
from .normalization import iter_canonical_pairs, parse_filter_attributes

logger = logging.getLogger(__name__)


def require_items(items: Sequence[Item] | None) -> Sequence[Item]:
    """Reject a missing collection; an empty one is fine."""

    if items is None:
        raise TypeError("an item collection is required, got None")
    return items


def build_display_lookup(items: Sequence[Item]) -> DisplayLookup:
    """Map canonical keys and values to the first text authored for them.

    Items are walked in input order, so the same list always produces the
    same labels even when authors disagree on capitalization.
    """

    keys: Dict[str, str] = {}
    values: Dict[str, str] = {}
    for item in require_items(items):
        for key, value, display_name, display_value in iter_canonical_pairs(item.filter_attributes):
            keys.setdefault(key, display_name)
            values.setdefault(value, display_value)
    return DisplayLookup(keys=keys, values=values)


def get_all_filter_attributes(items: Sequence[Item]) -> Dict[str, List[str]]:
    """Return ``{key: [values]}`` with keys and values sorted and unique.

    ``[Size=small, Size=large]`` gives ``{"size": ["large", "small"]}``.
    """

    grouped: Dict[str, set[str]] = defaultdict(set)
    for item in require_items(items):
        for key, value in parse_filter_attributes(item.filter_attributes).items():
            grouped[key].add(value)
    return {key: sorted(grouped[key]) for key in sorted(grouped)}


def build_catalog(items: Sequence[Item]) -> FilterAttributeCatalog:
    attributes = get_all_filter_attributes(items)
    logger.debug("Catalog of %s items has %s filter keys", len(items), len(attributes))
    return FilterAttributeCatalog(
        attributes=attributes,
        display_lookup=build_display_lookup(items),
        item_count=len(items),
    )


def build_filter_description(
    filters: Dict[str, str], display_lookup: DisplayLookup
) -> List[Dict[str, str]]:
    """Label each filter for headings, in path (sorted key) order.

    ``{"size": "compact"}`` gives ``[{"key": "Size", "value": "Compact"}]``.
    """

    return [
        {
            "key": display_lookup.key_label(key),
            "value": display_lookup.value_label(filters[key]),
        }
        for key in sorted(filters)
    ]
