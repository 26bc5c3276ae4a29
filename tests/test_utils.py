from __future__ import annotations

import unittest
from unittest import mock

from staticfacets.utils import env_int, parse_price_string, slugify


class UtilsTests(unittest.TestCase):
    def test_slugify_generates_clean_url_component(self) -> None:
        self.assertEqual(slugify("  Pet Friendly!  "), "pet-friendly")

    def test_slugify_collapses_runs_of_symbols(self) -> None:
        self.assertEqual(slugify("Size -- XL / Tall"), "size-xl-tall")

    def test_slugify_empty_values_stay_empty(self) -> None:
        self.assertEqual(slugify(""), "")
        self.assertEqual(slugify("  ***  "), "")

    def test_parse_price_string_extracts_value_and_currency(self) -> None:
        self.assertEqual(parse_price_string("$129.99"), (129.99, "USD"))

    def test_parse_price_string_rejects_text_without_digits(self) -> None:
        self.assertIsNone(parse_price_string("call for price"))

    def test_env_int_parses_and_disables(self) -> None:
        with mock.patch.dict("os.environ", {"FACET_LIMIT": "4"}):
            self.assertEqual(env_int("FACET_LIMIT", 10), 4)
        with mock.patch.dict("os.environ", {"FACET_LIMIT": "none"}):
            self.assertIsNone(env_int("FACET_LIMIT", 10))
        with mock.patch.dict("os.environ", {"FACET_LIMIT": "lots"}):
            self.assertEqual(env_int("FACET_LIMIT", 10), 10)


if __name__ == "__main__":
    unittest.main()
