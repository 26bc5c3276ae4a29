"""Filter collections wired into the static site build."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Protocol

from .catalog import build_catalog
from .categories import CategoryFilters
from .combinations import generate_combinations, generate_filter_pages
from .config import DEFAULT_SORT_KEY, FacetSettings, default_settings
from .matching import get_items_by_filters
from .models import Combination, FilterAttributeCatalog, FilterUIData, Item, Redirect
from .redirects import incomplete_path_redirects, to_redirects
from .ui import add_filter_ui, build_filter_ui_data

logger = logging.getLogger(__name__)


class CollectionApi(Protocol):
    """The build pipeline's item query capability."""

    def get_filtered_by_tag(self, tag: str) -> List[Item]:
        ...


class BuildRegistry(Protocol):
    """Where the build pipeline receives collections and template filters."""

    def add_collection(self, name: str, factory: Callable[[CollectionApi], Any]) -> None:
        ...

    def add_filter(self, name: str, function: Callable[..., Any]) -> None:
        ...


@dataclass
class CollectionRegistry:
    """In-process :class:`BuildRegistry` that evaluates collections on demand."""

    collections: Dict[str, Callable[[CollectionApi], Any]] = field(default_factory=dict)
    filters: Dict[str, Callable[..., Any]] = field(default_factory=dict)

    def add_collection(self, name: str, factory: Callable[[CollectionApi], Any]) -> None:
        if name in self.collections:
            raise ValueError(f"Collection {name!r} is already registered")
        self.collections[name] = factory

    def add_filter(self, name: str, function: Callable[..., Any]) -> None:
        if name in self.filters:
            raise ValueError(f"Filter {name!r} is already registered")
        self.filters[name] = function

    def build(self, api: CollectionApi) -> Dict[str, Any]:
        results: Dict[str, Any] = {}
        for name, factory in self.collections.items():
            results[name] = factory(api)
            logger.debug("Built collection %s", name)
        return results


@dataclass(frozen=True)
class CollectionNames:
    pages: str
    redirects: str
    attributes: str


@dataclass(frozen=True)
class FilterConfig:
    """Filter pages, redirects and attribute catalog for one item type."""

    tag: str
    permalink_dir: str
    collections: CollectionNames
    ui_filter_name: str
    items_filter_name: str | None = None
    settings: FacetSettings = field(default_factory=default_settings)

    @property
    def base_url(self) -> str:
        return f"/{self.permalink_dir}"

    def _items(self, api: CollectionApi) -> List[Item]:
        return api.get_filtered_by_tag(self.tag) or []

    def pages_collection(self, api: CollectionApi) -> List[Combination]:
        items = self._items(api)
        catalog = build_catalog(items)
        pages = generate_filter_pages(
            items, display_lookup=catalog.display_lookup, settings=self.settings
        )
        logger.info("Generated %s %s filter pages", len(pages), self.tag)
        return add_filter_ui(pages, catalog, self.base_url, settings=self.settings)

    def redirects_collection(self, api: CollectionApi) -> List[Redirect]:
        items = self._items(api)
        catalog = build_catalog(items)
        if not catalog.attributes:
            return []
        generated = generate_combinations(
            items, display_lookup=catalog.display_lookup, settings=self.settings
        )
        rules = incomplete_path_redirects(
            list(catalog.attributes), generated, self.base_url, settings=self.settings
        )
        return to_redirects(rules)

    def attributes_collection(self, api: CollectionApi) -> FilterAttributeCatalog:
        return build_catalog(self._items(api))

    def build_ui_data(
        self,
        catalog: FilterAttributeCatalog,
        current_filters: Mapping[str, str] | None,
        pages: Iterable[object],
        current_sort: str = DEFAULT_SORT_KEY,
    ) -> FilterUIData:
        return build_filter_ui_data(
            catalog,
            current_filters,
            pages,
            self.base_url,
            current_sort=current_sort,
            settings=self.settings,
        )

    def configure(self, registry: BuildRegistry) -> None:
        registry.add_collection(self.collections.pages, self.pages_collection)
        registry.add_collection(self.collections.redirects, self.redirects_collection)
        registry.add_collection(self.collections.attributes, self.attributes_collection)
        registry.add_filter(self.ui_filter_name, self.build_ui_data)
        if self.items_filter_name:
            registry.add_filter(self.items_filter_name, get_items_by_filters)


def product_filter_config(settings: FacetSettings | None = None) -> FilterConfig:
    settings = settings or default_settings()
    return FilterConfig(
        tag=settings.product_tag,
        permalink_dir=settings.product_permalink_dir,
        collections=CollectionNames(
            pages="filteredProductPages",
            redirects="productFilterRedirects",
            attributes="productFilterAttributes",
        ),
        ui_filter_name="buildProductFilterUIData",
        items_filter_name="getProductsByFilters",
        settings=settings,
    )


def property_filter_config(settings: FacetSettings | None = None) -> FilterConfig:
    settings = settings or default_settings()
    return FilterConfig(
        tag=settings.property_tag,
        permalink_dir=settings.property_permalink_dir,
        collections=CollectionNames(
            pages="filteredPropertyPages",
            redirects="propertyFilterRedirects",
            attributes="propertyFilterAttributes",
        ),
        ui_filter_name="buildPropertyFilterUIData",
        items_filter_name="getPropertiesByFilters",
        settings=settings,
    )


def configure_filters(
    registry: BuildRegistry, settings: FacetSettings | None = None
) -> List[FilterConfig]:
    """Register product, property and category filter collections."""

    settings = settings or default_settings()
    configs = [product_filter_config(settings), property_filter_config(settings)]
    for config in configs:
        config.configure(registry)
    CategoryFilters(settings).configure(registry)
    return configs
