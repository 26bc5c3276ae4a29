"""Redirect rules for filter URLs that have no page of their own."""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .config import FacetSettings, default_settings
from .models import Combination, Redirect
from .paths import filter_to_path
from .ui import page_url


def incomplete_path_redirects(
    attribute_keys: Sequence[str],
    generated: Iterable[Combination],
    base_url: str,
    settings: FacetSettings | None = None,
) -> Dict[str, str]:
    """Map ``<search>/<path>/<key>/`` (a key with no value) to the page for ``<path>``.

    One rule per attribute key missing from each existing combination, plus
    one per key directly below the search root. A bare ``<search>/<key>/``
    goes to the listing page itself (``<base>/#content``) rather than to
    ``<search>/#content``, since no page is built at the search root.
    """

    settings = settings or default_settings()
    search_url = f"{base_url.rstrip('/')}/{settings.search_segment}"
    rules: Dict[str, str] = {}
    listing = page_url(base_url, "", scoped=True, settings=settings)
    for key in attribute_keys:
        rules.setdefault(f"{search_url}/{key}/", listing)
    for combo in generated:
        target = page_url(base_url, combo.path, scoped=True, settings=settings)
        for key in attribute_keys:
            if key in combo.filters:
                continue
            rules.setdefault(f"{search_url}/{combo.path}/{key}/", target)
    return rules


def legacy_search_redirects(
    generated: Iterable[Combination],
    category_url: str,
    settings: FacetSettings | None = None,
) -> Dict[str, str]:
    """Map flat ``/search/<path>/`` URLs to their category-scoped pages.

    Every combination is redirected, and a combination with several pairs
    also redirects each shorter prefix of its path (in key order). A prefix
    of an existing combination matches at least the same items, so every
    target exists.
    """

    settings = settings or default_settings()
    legacy = settings.legacy_search_url.rstrip("/")
    rules: Dict[str, str] = {}
    for combo in generated:
        pairs = sorted(combo.filters.items())
        for size in range(len(pairs), 0, -1):
            path = filter_to_path(dict(pairs[:size]))
            rules.setdefault(
                f"{legacy}/{path}/",
                page_url(category_url, path, scoped=True, settings=settings),
            )
    return rules


def to_redirects(rules: Dict[str, str]) -> List[Redirect]:
    return [Redirect(source=source, target=target) for source, target in rules.items()]
