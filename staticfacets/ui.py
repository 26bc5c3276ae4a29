"""Pre-computed filter widget data for templates."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Mapping, Sequence, Set

from .config import DEFAULT_SORT_KEY, FacetSettings, default_settings
from .models import (
    ActiveFilter,
    Combination,
    FilterAttributeCatalog,
    FilterGroup,
    FilterOption,
    FilterUIData,
)
from .normalization import normalize_filters
from .paths import filter_to_path, to_sorted_path

SORT_GROUP_NAME = "sort"


def valid_paths(pages: Iterable[object] | None) -> Set[str]:
    """Collect the paths of existing pages.

    Accepts combinations, ``{"path": ...}`` mappings or bare path strings.
    """

    paths: Set[str] = set()
    for page in pages or ():
        if isinstance(page, str):
            paths.add(page)
        elif isinstance(page, Mapping):
            path = page.get("path")
            if isinstance(path, str):
                paths.add(path)
        else:
            path = getattr(page, "path", None)
            if isinstance(path, str):
                paths.add(path)
    return paths


def page_url(
    base_url: str,
    path: str,
    *,
    scoped: bool = False,
    settings: FacetSettings | None = None,
) -> str:
    """URL of a filter path below ``base_url``.

    Unscoped listings address filter states as a fragment (``/products#size/small``).
    Scoped listings have a real page per state and always jump to the
    results anchor (``/categories/tools/search/size/small/#content``).
    """

    settings = settings or default_settings()
    base = base_url.rstrip("/")
    if scoped:
        anchor = f"#{settings.content_anchor}"
        if path:
            return f"{base}/{settings.search_segment}/{path}/{anchor}"
        return f"{base}/{anchor}"
    return f"{base}#{path}" if path else base_url


def _sort_group(
    filters: Mapping[str, str],
    current_sort: str,
    base_url: str,
    *,
    scoped: bool,
    settings: FacetSettings,
) -> FilterGroup:
    options = [
        FilterOption(
            value=option.label,
            url=page_url(base_url, to_sorted_path(filters, option.key), scoped=scoped, settings=settings),
            active=option.key == current_sort,
        )
        for option in settings.sort_options
    ]
    return FilterGroup(name=SORT_GROUP_NAME, label=settings.sort_label, options=options)


def build_filter_ui_data(
    catalog: FilterAttributeCatalog,
    current_filters: Mapping[str, str] | None,
    valid_combinations: Iterable[object] | None,
    base_url: str,
    *,
    item_count: int | None = None,
    current_sort: str = DEFAULT_SORT_KEY,
    scoped: bool = False,
    settings: FacetSettings | None = None,
) -> FilterUIData:
    """Build the filter widget data for one page.

    Only options leading to a path in ``valid_combinations`` are offered and
    attribute groups with fewer than two such options are left out.
    """

    if not catalog.attributes:
        return FilterUIData.empty()

    settings = settings or default_settings()
    display = catalog.display_lookup
    filters = normalize_filters(current_filters)
    existing = valid_paths(valid_combinations)
    count = catalog.item_count if item_count is None else item_count

    active_filters: List[ActiveFilter] = []
    for key in sorted(filters):
        remaining = {other: value for other, value in filters.items() if other != key}
        active_filters.append(
            ActiveFilter(
                key=display.key_label(key),
                value=display.value_label(filters[key]),
                remove_url=page_url(base_url, filter_to_path(remaining), scoped=scoped, settings=settings),
            )
        )

    groups: List[FilterGroup] = []
    if count > 1:
        groups.append(
            _sort_group(filters, current_sort, base_url, scoped=scoped, settings=settings)
        )

    for name, values in catalog.attributes.items():
        options: List[FilterOption] = []
        for value in values:
            path = filter_to_path({**filters, name: value})
            if path not in existing:
                continue
            options.append(
                FilterOption(
                    value=display.value_label(value),
                    url=page_url(base_url, path, scoped=scoped, settings=settings),
                    active=filters.get(name) == value,
                )
            )
        if len(options) < 2:
            continue
        groups.append(FilterGroup(name=name, label=display.key_label(name), options=options))

    return FilterUIData(
        has_filters=bool(groups),
        has_active_filters=bool(active_filters),
        active_filters=active_filters,
        clear_all_url=page_url(base_url, "", scoped=scoped, settings=settings),
        groups=groups,
    )


def add_filter_ui(
    pages: Sequence[Combination],
    catalog: FilterAttributeCatalog,
    base_url: str,
    *,
    scoped: bool = False,
    settings: FacetSettings | None = None,
) -> List[Combination]:
    """Return copies of ``pages`` with their own ``filter_ui`` attached."""

    existing = valid_paths(pages)
    return [
        replace(
            page,
            filter_ui=build_filter_ui_data(
                catalog,
                page.filters,
                existing,
                base_url,
                item_count=page.count,
                current_sort=page.sort_key or DEFAULT_SORT_KEY,
                scoped=scoped,
                settings=settings,
            ),
        )
        for page in pages
    ]
