import pytest

from staticfacets.build import (
    CollectionRegistry,
    configure_filters,
    product_filter_config,
    property_filter_config,
)
from staticfacets.models import Item, RawAttribute


def make_item(title: str, tag: str, *attributes: tuple[str, str], categories=None) -> Item:
    return Item(
        title=title,
        tags=[tag],
        categories=categories or [],
        filter_attributes=[RawAttribute(name, value) for name, value in attributes],
    )


class StubCollectionApi:
    def __init__(self, items: list[Item]) -> None:
        self.items = items
        self.requested: list[str] = []

    def get_filtered_by_tag(self, tag: str) -> list[Item]:
        self.requested.append(tag)
        return [item for item in self.items if tag in item.tags]


def catalog_items() -> list[Item]:
    return [
        make_item("Kettle", "products", ("Colour", "Red"), ("Capacity", "1.7 L")),
        make_item("Toaster", "products", ("Colour", "Red"), ("Capacity", "2 Slice")),
        make_item("Mug", "products", ("Colour", "Blue")),
        make_item("Seaview", "property", ("Type", "Cottage"), ("Bedrooms", "2")),
        make_item("Hilltop", "property", ("Type", "Cottage"), ("Bedrooms", "3")),
    ]


def test_registry_rejects_duplicate_names():
    registry = CollectionRegistry()
    registry.add_collection("pages", lambda api: [])
    with pytest.raises(ValueError):
        registry.add_collection("pages", lambda api: [])
    registry.add_filter("ui", lambda: None)
    with pytest.raises(ValueError):
        registry.add_filter("ui", lambda: None)


def test_product_config_builds_pages_with_ui():
    api = StubCollectionApi(catalog_items())
    config = product_filter_config()
    pages = config.pages_collection(api)
    assert api.requested == ["products"]
    paths = {page.path for page in pages}
    assert "colour/red" in paths
    assert "capacity/1-7-l/colour/red" in paths
    assert {"colour/red/price-asc", "name-asc"} <= paths
    assert all(page.filter_ui is not None for page in pages)
    red = next(page for page in pages if page.path == "colour/red")
    assert red.filter_ui.clear_all_url == "/products"


def test_product_config_redirects_dangling_keys():
    api = StubCollectionApi(catalog_items())
    redirects = product_filter_config().redirects_collection(api)
    rules = {redirect.source: redirect.target for redirect in redirects}
    assert rules["/products/search/colour/"] == "/products/#content"
    assert rules["/products/search/colour/blue/capacity/"] == "/products/search/colour/blue/#content"


def test_config_without_attributes_has_no_redirects():
    api = StubCollectionApi([make_item("Plain", "products")])
    assert product_filter_config().redirects_collection(api) == []
    assert product_filter_config().attributes_collection(api).attributes == {}


def test_property_config_ui_filter():
    api = StubCollectionApi(catalog_items())
    config = property_filter_config()
    catalog = config.attributes_collection(api)
    pages = config.pages_collection(api)
    ui = config.build_ui_data(catalog, {"type": "cottage"}, pages)
    assert ui.active_filters[0].remove_url == "/properties"
    bedrooms = next(group for group in ui.groups if group.name == "bedrooms")
    assert [option.url for option in bedrooms.options] == [
        "/properties#bedrooms/2/type/cottage",
        "/properties#bedrooms/3/type/cottage",
    ]


def test_configure_filters_registers_everything():
    registry = CollectionRegistry()
    configure_filters(registry)
    assert set(registry.collections) == {
        "filteredProductPages",
        "productFilterRedirects",
        "productFilterAttributes",
        "filteredPropertyPages",
        "propertyFilterRedirects",
        "propertyFilterAttributes",
        "filteredCategoryProductPages",
        "categoryFilterAttributes",
        "categoryFilterRedirects",
        "categoryListingFilterUI",
    }
    assert set(registry.filters) == {
        "buildProductFilterUIData",
        "getProductsByFilters",
        "buildPropertyFilterUIData",
        "getPropertiesByFilters",
        "buildCategoryFilterUIData",
    }
    items_filter = registry.filters["getProductsByFilters"]
    found = items_filter(catalog_items(), {"colour": "red"})
    assert [item.title for item in found] == ["Kettle", "Toaster"]
