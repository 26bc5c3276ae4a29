"""Data models shared by the facet engine and its collections."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .utils import parse_price_string, slugify

logger = logging.getLogger(__name__)

_ITEM_FIELDS = {
    "title",
    "slug",
    "url",
    "categories",
    "tags",
    "order",
    "price",
    "filter_attributes",
}


@dataclass(frozen=True)
class RawAttribute:
    """A filter attribute exactly as authored on an item."""

    name: str
    value: str

    @classmethod
    def from_payload(cls, payload: object) -> Optional["RawAttribute"]:
        """Accept ``{"name": ..., "value": ...}`` or ``"Name: value"`` payloads."""

        if isinstance(payload, dict):
            name = payload.get("name")
            value = payload.get("value")
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                value = str(value)
            if isinstance(name, str) and isinstance(value, str):
                return cls(name=name, value=value)
            return None
        if isinstance(payload, str) and ":" in payload:
            name, value = payload.split(":", 1)
            return cls(name=name, value=value)
        return None

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


def _string_list(value: object) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(entry) for entry in value if isinstance(entry, str) and entry]
    return []


@dataclass
class Item:
    """A catalog entry (product, property, ...) published by the site."""

    title: str
    slug: str = ""
    url: str = ""
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    order: Optional[int] = None
    price: Optional[float] = None
    filter_attributes: List[RawAttribute] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.slug:
            self.slug = slugify(self.title)

    def to_dict(self) -> dict:
        payload = dict(self.data)
        payload.update(
            {
                "title": self.title,
                "slug": self.slug,
                "url": self.url,
                "categories": list(self.categories),
                "tags": list(self.tags),
                "order": self.order,
                "price": self.price,
                "filter_attributes": [attr.to_dict() for attr in self.filter_attributes],
            }
        )
        return payload

    def summary(self) -> dict:
        """The fields a filter page needs to list this item."""

        return {"title": self.title, "slug": self.slug, "url": self.url, "price": self.price}

    @classmethod
    def from_dict(cls, payload: dict) -> "Item":
        title = str(payload.get("title") or "").strip()

        attributes: List[RawAttribute] = []
        raw_attributes = payload.get("filter_attributes") or []
        if isinstance(raw_attributes, list):
            for raw in raw_attributes:
                attribute = RawAttribute.from_payload(raw)
                if attribute is None:
                    logger.debug("Skipping malformed filter attribute %r on %s", raw, title)
                    continue
                attributes.append(attribute)

        order_value = payload.get("order")
        order: int | None = None
        if isinstance(order_value, bool):
            order = None
        elif isinstance(order_value, (int, float)):
            order = int(order_value)
        elif isinstance(order_value, str):
            try:
                order = int(order_value.strip())
            except ValueError:
                order = None

        price_value = payload.get("price")
        price: float | None = None
        if isinstance(price_value, bool):
            price = None
        elif isinstance(price_value, (int, float)):
            price = float(price_value)
        elif isinstance(price_value, str):
            parsed = parse_price_string(price_value.strip())
            if parsed:
                price = parsed[0]

        return cls(
            title=title,
            slug=str(payload.get("slug") or ""),
            url=str(payload.get("url") or ""),
            categories=_string_list(payload.get("categories")),
            tags=_string_list(payload.get("tags")),
            order=order,
            price=price,
            filter_attributes=attributes,
            data={key: value for key, value in payload.items() if key not in _ITEM_FIELDS},
        )


@dataclass(frozen=True)
class DisplayLookup:
    """Maps canonical slugs back to the text first authored for them."""

    keys: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, str] = field(default_factory=dict)

    def key_label(self, key: str) -> str:
        return self.keys.get(key, key)

    def value_label(self, value: str) -> str:
        return self.values.get(value, value)

    def to_dict(self) -> dict:
        return {"keys": dict(self.keys), "values": dict(self.values)}


@dataclass(frozen=True)
class FilterAttributeCatalog:
    """Every filterable dimension observed across an item set."""

    attributes: Dict[str, List[str]]
    display_lookup: DisplayLookup
    item_count: int = 0

    def to_dict(self) -> dict:
        return {
            "attributes": {key: list(values) for key, values in self.attributes.items()},
            "displayLookup": self.display_lookup.to_dict(),
            "itemCount": self.item_count,
        }


@dataclass
class Combination:
    """One reachable filter state and the items that satisfy it."""

    path: str
    filters: Dict[str, str]
    items: List[Item]
    filter_description: List[Dict[str, str]] = field(default_factory=list)
    category_slug: str | None = None
    category_url: str | None = None
    sort_key: str | None = None
    filter_ui: Optional["FilterUIData"] = None

    @property
    def count(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict:
        payload: Dict[str, Any] = {
            "path": self.path,
            "filters": dict(self.filters),
            "count": self.count,
            "items": [item.summary() for item in self.items],
            "filterDescription": [dict(part) for part in self.filter_description],
        }
        if self.category_slug is not None:
            payload["categorySlug"] = self.category_slug
            payload["categoryUrl"] = self.category_url
        if self.sort_key is not None:
            payload["sortKey"] = self.sort_key
        if self.filter_ui is not None:
            payload["filterUI"] = self.filter_ui.to_dict()
        return payload


@dataclass(frozen=True)
class ActiveFilter:
    key: str
    value: str
    remove_url: str

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value, "removeUrl": self.remove_url}


@dataclass(frozen=True)
class FilterOption:
    value: str
    url: str
    active: bool = False

    def to_dict(self) -> dict:
        return {"value": self.value, "url": self.url, "active": self.active}


@dataclass(frozen=True)
class FilterGroup:
    name: str
    label: str
    options: List[FilterOption]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "options": [option.to_dict() for option in self.options],
        }


@dataclass(frozen=True)
class FilterUIData:
    """Everything a template needs to render one page's filter widget."""

    has_filters: bool
    has_active_filters: bool = False
    active_filters: List[ActiveFilter] = field(default_factory=list)
    clear_all_url: str | None = None
    groups: List[FilterGroup] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "FilterUIData":
        return cls(has_filters=False)

    @property
    def is_empty(self) -> bool:
        return self.clear_all_url is None

    def to_dict(self) -> dict:
        if self.is_empty:
            return {"hasFilters": False}
        return {
            "hasFilters": self.has_filters,
            "hasActiveFilters": self.has_active_filters,
            "activeFilters": [entry.to_dict() for entry in self.active_filters],
            "clearAllUrl": self.clear_all_url,
            "groups": [group.to_dict() for group in self.groups],
        }


@dataclass(frozen=True)
class Redirect:
    source: str
    target: str

    def to_dict(self) -> dict:
        return {"from": self.source, "to": self.target}
