"""Decide which items satisfy a filter state."""
from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Set

from .config import DEFAULT_SORT_KEY
from .models import Item
from .normalization import has_blank_key, normalize_filters, parse_filter_attributes

_UNORDERED = float("inf")


def order_then_title(item: Item) -> tuple:
    order = item.order if item.order is not None else _UNORDERED
    return (order, item.title.lower(), item.slug)


def sort_items(items: Sequence[Item], sort_key: str = DEFAULT_SORT_KEY) -> List[Item]:
    """Return a new list ordered for the given sort option.

    Unknown keys fall back to the default order. Items without a price sort
    after priced ones in both price directions.
    """

    ordered = sorted(items, key=order_then_title)
    if sort_key == "name-asc":
        return sorted(ordered, key=lambda item: item.title.lower())
    if sort_key == "name-desc":
        return sorted(ordered, key=lambda item: item.title.lower(), reverse=True)
    if sort_key in {"price-asc", "price-desc"}:
        priced = [item for item in ordered if item.price is not None]
        unpriced = [item for item in ordered if item.price is None]
        priced.sort(key=lambda item: item.price, reverse=sort_key == "price-desc")
        return priced + unpriced
    return ordered


def matches(item: Item, filters: Mapping[str, str] | None) -> bool:
    """Return ``True`` when the item carries every key/value in ``filters``."""

    if not filters:
        return True
    if has_blank_key(filters):
        return False
    attributes = parse_filter_attributes(item.filter_attributes)
    wanted = normalize_filters(filters)
    return all(attributes.get(key) == value for key, value in wanted.items())


def get_items_by_filters(
    items: Sequence[Item] | None, filters: Mapping[str, str] | None
) -> List[Item]:
    """Return matching items in display order; no filters returns everything."""

    if not items:
        return []
    if not filters:
        return sorted(items, key=order_then_title)
    return sorted(
        (item for item in items if matches(item, filters)),
        key=order_then_title,
    )


class ItemIndex:
    """Lookup table of filter key -> value -> positions of the items holding it.

    ``{"color": {"red": {0, 2}, "blue": {1}}, "size": {"large": {0, 1}}}``
    """

    def __init__(self, items: Sequence[Item]) -> None:
        self.items = list(items)
        self.attributes: List[Dict[str, str]] = []
        self._positions: Dict[str, Dict[str, Set[int]]] = {}
        for position, item in enumerate(self.items):
            attributes = parse_filter_attributes(item.filter_attributes)
            self.attributes.append(attributes)
            for key, value in attributes.items():
                self._positions.setdefault(key, {}).setdefault(value, set()).add(position)

    def positions(self, filters: Mapping[str, str]) -> List[int]:
        """Positions of the items matching all filters, in input order."""

        if has_blank_key(filters):
            return []
        wanted = normalize_filters(filters)
        if not wanted:
            return list(range(len(self.items)))
        candidate_sets = []
        for key, value in wanted.items():
            found = self._positions.get(key, {}).get(value)
            if not found:
                return []
            candidate_sets.append(found)
        candidate_sets.sort(key=len)
        matched = set(candidate_sets[0]).intersection(*candidate_sets[1:])
        return sorted(matched)

    def count(self, filters: Mapping[str, str]) -> int:
        return len(self.positions(filters))

    def select(self, filters: Mapping[str, str]) -> List[Item]:
        """Matching items in display order."""

        return sorted(
            (self.items[position] for position in self.positions(filters)),
            key=order_then_title,
        )
