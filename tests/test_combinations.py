import logging
from dataclasses import replace

import pytest

from staticfacets.combinations import (
    expand_with_sort_variants,
    generate_combinations,
    generate_filter_pages,
    generate_sort_only_pages,
    item_attribute_pairs,
    iter_subsets,
)
from staticfacets.config import default_settings
from staticfacets.matching import matches
from staticfacets.models import Item, RawAttribute


def make_item(title: str, *attributes: tuple[str, str], price: float | None = None) -> Item:
    return Item(
        title=title,
        price=price,
        filter_attributes=[RawAttribute(name, value) for name, value in attributes],
    )


def holiday_lets() -> list[Item]:
    return [
        make_item("Seaview", ("Pet Friendly", "Yes"), ("Type", "Cottage"), price=120.0),
        make_item("Hilltop", ("Type", "Cottage"), ("Bedrooms", "3"), price=90.0),
        make_item("Old Mill", ("Type", "Barn"), ("Pet Friendly", "Yes")),
        make_item("Plain"),
    ]


def test_single_item_yields_its_powerset():
    combos = generate_combinations(
        [make_item("Seaview", ("Pet Friendly", "Yes"), ("Type", "Cottage"))]
    )
    paths = [combo.path for combo in combos]
    assert paths == ["pet-friendly/yes", "pet-friendly/yes/type/cottage", "type/cottage"]
    assert all(combo.count >= 1 for combo in combos)


def test_counts_match_whole_collection():
    items = holiday_lets()
    combos = generate_combinations(items)
    by_path = {combo.path: combo for combo in combos}
    assert by_path["type/cottage"].count == 2
    assert by_path["pet-friendly/yes"].count == 2
    assert by_path["pet-friendly/yes/type/cottage"].count == 1
    for combo in combos:
        expected = [item for item in items if matches(item, combo.filters)]
        assert combo.count == len(expected) >= 1
        assert {item.title for item in combo.items} == {item.title for item in expected}


def test_only_reachable_combinations_are_emitted():
    paths = {combo.path for combo in generate_combinations(holiday_lets())}
    assert "bedrooms/3/pet-friendly/yes" not in paths
    assert "type/barn/type/cottage" not in paths
    assert "bedrooms/3/type/cottage" in paths


def test_filter_description_follows_path_order():
    combos = generate_combinations(holiday_lets())
    combo = next(c for c in combos if c.path == "pet-friendly/yes/type/cottage")
    assert combo.filter_description == [
        {"key": "Pet Friendly", "value": "Yes"},
        {"key": "Type", "value": "Cottage"},
    ]


def test_generation_is_deterministic():
    first = [(c.path, c.count) for c in generate_combinations(holiday_lets())]
    second = [(c.path, c.count) for c in generate_combinations(list(reversed(holiday_lets())))]
    assert first == second


def test_empty_and_attribute_less_collections():
    assert generate_combinations([]) == []
    assert generate_combinations([make_item("Plain")]) == []


def test_missing_collection_is_a_caller_error():
    with pytest.raises(TypeError):
        generate_combinations(None)


def test_category_scope_sets_slug_and_url():
    combos = generate_combinations(holiday_lets(), category_slug="coastal")
    assert combos
    assert {combo.category_slug for combo in combos} == {"coastal"}
    assert {combo.category_url for combo in combos} == {"/categories/coastal"}


def test_iter_subsets_counts():
    pairs = (("a", "1"), ("b", "2"), ("c", "3"))
    subsets = list(iter_subsets(pairs))
    assert len(subsets) == 7
    assert subsets[0] == (("a", "1"),)
    assert subsets[-1] == pairs


def test_attribute_guard_truncates_by_key_order(caplog):
    item = make_item("Busy", *[(f"Key {index}", "x") for index in range(5)])
    with caplog.at_level(logging.WARNING, logger="staticfacets.combinations"):
        pairs = item_attribute_pairs(item, max_attributes=3)
    assert [key for key, _ in pairs] == ["key-0", "key-1", "key-2"]
    assert "Busy" in caplog.text


def test_attribute_guard_bounds_combination_count():
    item = make_item("Busy", *[(f"Key {index}", "x") for index in range(6)])
    limited = replace(default_settings(), max_attributes_per_item=3)
    unbounded = replace(default_settings(), max_attributes_per_item=None)
    assert len(generate_combinations([item], settings=limited)) == 7
    assert len(generate_combinations([item], settings=unbounded)) == 63


def test_sort_variants_expand_every_combination():
    combos = generate_combinations(holiday_lets())
    expanded = expand_with_sort_variants(combos)
    settings = default_settings()
    assert len(expanded) == len(combos) * len(settings.sort_options)
    cottage = [c for c in expanded if c.filters == {"type": "cottage"}]
    assert {c.path for c in cottage} == {
        "type/cottage",
        "type/cottage/name-asc",
        "type/cottage/name-desc",
        "type/cottage/price-asc",
        "type/cottage/price-desc",
    }
    cheapest_first = next(c for c in cottage if c.sort_key == "price-asc")
    assert [item.title for item in cheapest_first.items] == ["Hilltop", "Seaview"]


def test_sort_only_pages_skip_default():
    pages = generate_sort_only_pages(holiday_lets())
    assert [page.path for page in pages] == ["name-asc", "name-desc", "price-asc", "price-desc"]
    assert all(page.count == 4 and page.filters == {} for page in pages)


def test_sort_only_pages_carry_category_scope():
    pages = generate_sort_only_pages(holiday_lets(), category_slug="coastal")
    assert {page.category_url for page in pages} == {"/categories/coastal"}


def test_filter_pages_cover_every_sort_link():
    items = holiday_lets()
    pages = generate_filter_pages(items)
    combos = generate_combinations(items)
    settings = default_settings()
    assert len(pages) == len(combos) * len(settings.sort_options) + len(settings.sort_options) - 1
    paths = {page.path for page in pages}
    assert {"type/barn", "type/barn/name-desc", "price-asc"} <= paths
    assert generate_filter_pages([make_item("Plain")]) == []
