"""Configuration helpers for the staticfacets build step."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Tuple

from .utils import env_int

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
OUTPUT_DIR = BASE_DIR / "build" / "facets"

DEFAULT_SORT_KEY = "default"

# A single item with N distinct attributes expands to 2**N - 1 candidate
# combinations, so the per-item powerset is capped by default.
DEFAULT_MAX_ATTRIBUTES_PER_ITEM = 10


@dataclass(frozen=True)
class SortOption:
    """A fixed sort order offered on every listing with more than one item."""

    key: str
    label: str


DEFAULT_SORT_OPTIONS: Tuple[SortOption, ...] = (
    SortOption(key=DEFAULT_SORT_KEY, label="Featured"),
    SortOption(key="name-asc", label="Name (A-Z)"),
    SortOption(key="name-desc", label="Name (Z-A)"),
    SortOption(key="price-asc", label="Price (low to high)"),
    SortOption(key="price-desc", label="Price (high to low)"),
)


@dataclass(frozen=True)
class FacetSettings:
    """URL conventions and limits shared by every filter collection."""

    search_segment: str = "search"
    content_anchor: str = "content"
    category_permalink_dir: str = "categories"
    category_tag: str = "categories"
    product_tag: str = "products"
    product_permalink_dir: str = "products"
    property_tag: str = "property"
    property_permalink_dir: str = "properties"
    legacy_search_url: str = "/search"
    sort_label: str = "Sort"
    sort_options: Tuple[SortOption, ...] = DEFAULT_SORT_OPTIONS
    max_attributes_per_item: int | None = DEFAULT_MAX_ATTRIBUTES_PER_ITEM

    @property
    def sort_keys(self) -> Tuple[str, ...]:
        return tuple(option.key for option in self.sort_options)

    def category_url(self, category_slug: str) -> str:
        return f"/{self.category_permalink_dir}/{category_slug}"

    @classmethod
    def from_env(cls) -> "FacetSettings":
        """Return settings overridden by ``STATICFACETS_*`` variables."""

        settings = cls()
        overrides = {}
        for field_name, env_name in (
            ("search_segment", "STATICFACETS_SEARCH_SEGMENT"),
            ("content_anchor", "STATICFACETS_CONTENT_ANCHOR"),
            ("category_permalink_dir", "STATICFACETS_CATEGORY_DIR"),
            ("product_permalink_dir", "STATICFACETS_PRODUCT_DIR"),
            ("property_permalink_dir", "STATICFACETS_PROPERTY_DIR"),
            ("legacy_search_url", "STATICFACETS_LEGACY_SEARCH_URL"),
        ):
            value = os.getenv(env_name)
            if value and value.strip():
                overrides[field_name] = value.strip().strip("/")
        if "legacy_search_url" in overrides:
            overrides["legacy_search_url"] = "/" + overrides["legacy_search_url"]
        overrides["max_attributes_per_item"] = env_int(
            "STATICFACETS_MAX_ATTRIBUTES_PER_ITEM", settings.max_attributes_per_item
        )
        return replace(settings, **overrides)


def default_settings() -> FacetSettings:
    """Return the default settings."""

    return FacetSettings()
