"""Generate every filter combination that has at least one matching item."""
from __future__ import annotations

import logging
from dataclasses import replace
from itertools import combinations
from typing import Dict, Iterator, List, Sequence, Tuple

from .catalog import build_display_lookup, build_filter_description, require_items
from .config import DEFAULT_SORT_KEY, FacetSettings, default_settings
from .matching import ItemIndex, sort_items
from .models import Combination, DisplayLookup, Item
from .normalization import FilterState, parse_filter_attributes
from .paths import filter_to_path, to_sorted_path

logger = logging.getLogger(__name__)

AttributePairs = Tuple[Tuple[str, str], ...]


def item_attribute_pairs(item: Item, max_attributes: int | None = None) -> AttributePairs:
    """Return the item's canonical ``(key, value)`` pairs sorted by key.

    When ``max_attributes`` is set only the first keys in sorted order are
    kept, which bounds the item's powerset at ``2**max_attributes - 1``.
    """

    pairs = tuple(sorted(parse_filter_attributes(item.filter_attributes).items()))
    if max_attributes is not None and len(pairs) > max_attributes:
        logger.warning(
            "%s has %s filter attributes; combinations use the first %s keys only",
            item.title or item.slug,
            len(pairs),
            max_attributes,
        )
        pairs = pairs[:max_attributes]
    return pairs


def iter_subsets(pairs: AttributePairs) -> Iterator[AttributePairs]:
    """Yield every non-empty subset of ``pairs``, smallest first."""

    for size in range(1, len(pairs) + 1):
        yield from combinations(pairs, size)


def collect_candidate_filters(
    items: Sequence[Item], max_attributes: int | None = None
) -> Dict[str, FilterState]:
    """Fold every item's attribute subsets into ``{path: filters}``."""

    candidates: Dict[str, FilterState] = {}
    for item in items:
        for subset in iter_subsets(item_attribute_pairs(item, max_attributes)):
            filters = dict(subset)
            candidates.setdefault(filter_to_path(filters), filters)
    return candidates


def generate_combinations(
    items: Sequence[Item],
    *,
    category_slug: str | None = None,
    display_lookup: DisplayLookup | None = None,
    settings: FacetSettings | None = None,
) -> List[Combination]:
    """Return one combination per reachable filter path, ordered by path.

    Each candidate comes from the attributes of some item, but its item list
    is matched against the whole collection. With ``category_slug`` every
    combination also carries the category slug and URL.
    """

    items = require_items(items)
    settings = settings or default_settings()
    candidates = collect_candidate_filters(items, settings.max_attributes_per_item)
    if not candidates:
        return []

    index = ItemIndex(items)
    lookup = display_lookup or build_display_lookup(items)
    category_url = settings.category_url(category_slug) if category_slug else None

    generated: List[Combination] = []
    for path in sorted(candidates):
        filters = candidates[path]
        generated.append(
            Combination(
                path=path,
                filters=dict(filters),
                items=index.select(filters),
                filter_description=build_filter_description(filters, lookup),
                category_slug=category_slug,
                category_url=category_url,
            )
        )
    logger.debug(
        "Generated %s combinations from %s items%s",
        len(generated),
        len(items),
        f" in {category_slug}" if category_slug else "",
    )
    return generated


def expand_with_sort_variants(
    generated: Sequence[Combination], settings: FacetSettings | None = None
) -> List[Combination]:
    """Return one page per combination and sort option.

    The default sort keeps the plain path; the others append their key.
    """

    settings = settings or default_settings()
    expanded: List[Combination] = []
    for combo in generated:
        for option in settings.sort_options:
            expanded.append(
                replace(
                    combo,
                    sort_key=option.key,
                    path=to_sorted_path(combo.filters, option.key),
                    items=sort_items(combo.items, option.key),
                )
            )
    return expanded


def generate_sort_only_pages(
    items: Sequence[Item],
    *,
    category_slug: str | None = None,
    settings: FacetSettings | None = None,
) -> List[Combination]:
    """Pages for the unfiltered listing under each non-default sort."""

    items = require_items(items)
    settings = settings or default_settings()
    category_url = settings.category_url(category_slug) if category_slug else None
    return [
        Combination(
            path=option.key,
            filters={},
            items=sort_items(items, option.key),
            category_slug=category_slug,
            category_url=category_url,
            sort_key=option.key,
        )
        for option in settings.sort_options
        if option.key != DEFAULT_SORT_KEY
    ]


def generate_filter_pages(
    items: Sequence[Item],
    *,
    category_slug: str | None = None,
    display_lookup: DisplayLookup | None = None,
    settings: FacetSettings | None = None,
) -> List[Combination]:
    """Every page a listing links to from its filter widget.

    Each combination appears once per sort option, followed by the sorted
    variants of the unfiltered listing. A collection without combinations
    has no pages at all.
    """

    settings = settings or default_settings()
    generated = generate_combinations(
        items,
        category_slug=category_slug,
        display_lookup=display_lookup,
        settings=settings,
    )
    if not generated:
        return []
    pages = expand_with_sort_variants(generated, settings)
    pages.extend(
        generate_sort_only_pages(items, category_slug=category_slug, settings=settings)
    )
    return pages
