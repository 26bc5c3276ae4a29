import pytest

from staticfacets.models import RawAttribute
from staticfacets.normalization import (
    normalize,
    normalize_attribute,
    normalize_filters,
    parse_filter_attributes,
)


@pytest.mark.parametrize(
    "raw",
    ["Pet Friendly", "  Yes ", "2 Bedrooms", "Size: XL", "---", "", "already-canonical", "Ünïcode Ok"],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


def test_normalize_attribute_slugifies_both_sides():
    assert normalize_attribute(" Pet Friendly ", "Yes") == ("pet-friendly", "yes")


def test_parse_filter_attributes_accepts_models_and_mappings():
    parsed = parse_filter_attributes(
        [RawAttribute("Size", "Small"), {"name": "Colour", "value": "Dark Red"}]
    )
    assert parsed == {"size": "small", "colour": "dark-red"}


def test_parse_filter_attributes_drops_malformed_entries():
    parsed = parse_filter_attributes(
        [
            {"name": "Size"},
            {"value": "orphan"},
            {"name": None, "value": "x"},
            {"name": "!!!", "value": "blank key"},
            {"name": "Colour", "value": "   "},
            {"name": "Type", "value": "Cottage"},
        ]
    )
    assert parsed == {"type": "cottage"}


def test_parse_filter_attributes_later_duplicate_wins():
    parsed = parse_filter_attributes(
        [RawAttribute("Size", "Small"), RawAttribute("size", "Large")]
    )
    assert parsed == {"size": "large"}


def test_parse_filter_attributes_handles_missing_list():
    assert parse_filter_attributes(None) == {}
    assert parse_filter_attributes([]) == {}


def test_normalize_filters_canonicalizes_caller_input():
    assert normalize_filters({"Pet Friendly": "Yes"}) == {"pet-friendly": "yes"}
    assert normalize_filters(None) == {}
