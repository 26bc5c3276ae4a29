"""Category-scoped filter pages, catalogs and redirects.

Each category runs the same facet pipeline over its own products, with
pages under ``/categories/<slug>/search/`` and legacy flat ``/search/`` URLs
redirected into the category.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Sequence, Tuple

from .catalog import build_catalog, require_items
from .combinations import generate_combinations, generate_filter_pages
from .config import FacetSettings, default_settings
from .matching import order_then_title
from .models import Combination, FilterAttributeCatalog, FilterUIData, Item, Redirect
from .redirects import incomplete_path_redirects, legacy_search_redirects, to_redirects
from .ui import add_filter_ui, build_filter_ui_data

if TYPE_CHECKING:
    from .build import BuildRegistry, CollectionApi

logger = logging.getLogger(__name__)


def items_in_category(items: Sequence[Item] | None, category_slug: str) -> List[Item]:
    if not items:
        return []
    return sorted(
        (item for item in items if category_slug in item.categories),
        key=order_then_title,
    )


def generate_category_filter_pages(
    category_slug: str,
    category_items: Sequence[Item],
    settings: FacetSettings | None = None,
) -> List[Combination]:
    """Filter pages for one category, each carrying its own filter UI."""

    settings = settings or default_settings()
    if not require_items(category_items):
        return []
    catalog = build_catalog(category_items)
    pages = generate_filter_pages(
        category_items,
        category_slug=category_slug,
        display_lookup=catalog.display_lookup,
        settings=settings,
    )
    return add_filter_ui(
        pages, catalog, settings.category_url(category_slug), scoped=True, settings=settings
    )


def generate_category_catalog(category_items: Sequence[Item]) -> FilterAttributeCatalog | None:
    """The category's attribute catalog, or ``None`` when it has nothing to filter."""

    if not require_items(category_items):
        return None
    catalog = build_catalog(category_items)
    if not catalog.attributes:
        return None
    return catalog


def generate_redirects(
    category_slug: str,
    category_items: Sequence[Item],
    settings: FacetSettings | None = None,
) -> List[Redirect]:
    """Redirects into one category's filter pages.

    Covers legacy flat ``/search/<path>/`` URLs for every combination (and
    the key-order prefixes of multi-pair ones) plus dangling-key URLs inside
    the category's own search tree.
    """

    settings = settings or default_settings()
    if not require_items(category_items):
        return []
    category_url = settings.category_url(category_slug)
    catalog = build_catalog(category_items)
    generated = generate_combinations(
        category_items,
        category_slug=category_slug,
        display_lookup=catalog.display_lookup,
        settings=settings,
    )
    rules = legacy_search_redirects(generated, category_url, settings=settings)
    for source, target in incomplete_path_redirects(
        list(catalog.attributes), generated, category_url, settings=settings
    ).items():
        rules.setdefault(source, target)
    return to_redirects(rules)


def build_category_filter_ui_data(
    catalogs: Mapping[str, FilterAttributeCatalog],
    category_slug: str,
    current_filters: Mapping[str, str] | None,
    pages: Iterable[Combination],
    settings: FacetSettings | None = None,
) -> FilterUIData:
    """Filter UI for a category page, limited to that category's pages."""

    settings = settings or default_settings()
    catalog = catalogs.get(category_slug)
    if catalog is None:
        return FilterUIData.empty()
    category_pages = [page for page in pages if page.category_slug == category_slug]
    return build_filter_ui_data(
        catalog,
        current_filters,
        category_pages,
        settings.category_url(category_slug),
        scoped=True,
        settings=settings,
    )


class CategoryFilters:
    """Collections for filtering products within each category."""

    pages_name = "filteredCategoryProductPages"
    attributes_name = "categoryFilterAttributes"
    redirects_name = "categoryFilterRedirects"
    listing_ui_name = "categoryListingFilterUI"
    ui_filter_name = "buildCategoryFilterUIData"

    def __init__(self, settings: FacetSettings | None = None) -> None:
        self.settings = settings or default_settings()

    def _categories_with_items(self, api: "CollectionApi") -> List[Tuple[str, List[Item]]]:
        categories = api.get_filtered_by_tag(self.settings.category_tag)
        products = api.get_filtered_by_tag(self.settings.product_tag)
        return [
            (category.slug, items_in_category(products, category.slug))
            for category in categories
        ]

    def pages_collection(self, api: "CollectionApi") -> List[Combination]:
        pages: List[Combination] = []
        for slug, items in self._categories_with_items(api):
            pages.extend(generate_category_filter_pages(slug, items, self.settings))
        logger.info("Generated %s category filter pages", len(pages))
        return pages

    def attributes_collection(self, api: "CollectionApi") -> Dict[str, FilterAttributeCatalog]:
        catalogs: Dict[str, FilterAttributeCatalog] = {}
        for slug, items in self._categories_with_items(api):
            catalog = generate_category_catalog(items)
            if catalog is not None:
                catalogs[slug] = catalog
        return catalogs

    def redirects_collection(self, api: "CollectionApi") -> List[Redirect]:
        """All category redirects; a legacy URL claimed by two categories goes to the first."""

        seen: Dict[str, Redirect] = {}
        for slug, items in self._categories_with_items(api):
            for redirect in generate_redirects(slug, items, self.settings):
                if redirect.source in seen:
                    logger.debug(
                        "Redirect %s already points to %s; skipping %s",
                        redirect.source,
                        seen[redirect.source].target,
                        slug,
                    )
                    continue
                seen[redirect.source] = redirect
        return list(seen.values())

    def listing_ui_collection(self, api: "CollectionApi") -> Dict[str, FilterUIData]:
        """Filter UI for each category's unfiltered listing page."""

        pages = self.pages_collection(api)
        catalogs = self.attributes_collection(api)
        return {
            slug: build_category_filter_ui_data(catalogs, slug, None, pages, self.settings)
            for slug in catalogs
        }

    def build_ui_data(
        self,
        catalogs: Mapping[str, FilterAttributeCatalog],
        category_slug: str,
        current_filters: Mapping[str, str] | None,
        pages: Iterable[Combination],
    ) -> FilterUIData:
        return build_category_filter_ui_data(
            catalogs, category_slug, current_filters, pages, self.settings
        )

    def configure(self, registry: "BuildRegistry") -> None:
        registry.add_collection(self.pages_name, self.pages_collection)
        registry.add_collection(self.attributes_name, self.attributes_collection)
        registry.add_collection(self.redirects_name, self.redirects_collection)
        registry.add_collection(self.listing_ui_name, self.listing_ui_collection)
        registry.add_filter(self.ui_filter_name, self.build_ui_data)
