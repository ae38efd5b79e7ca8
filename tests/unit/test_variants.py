"""
Tests for variant code sets.
"""

import pytest

from bitcoin_scripts.category import Category
from descriptors.exceptions import ParseError, VariantsParseError
from descriptors.variants import Variants


class TestVariants:

    def test_parse_any_order(self):
        variants = Variants.parse("SHB")
        assert variants == Variants(bare=True, hashed=True, segwit=True)
        assert str(variants) == "BHS"

    def test_categories_in_display_order(self):
        variants = Variants.parse("TSNHB")
        assert list(variants.categories()) == [
            Category.BARE, Category.HASHED, Category.NESTED, Category.SEGWIT, Category.TAPROOT
        ]

    def test_from_categories(self):
        variants = Variants.from_categories([Category.SEGWIT, Category.NESTED])
        assert str(variants) == "NS"
        assert variants.has(Category.NESTED)
        assert not variants.has(Category.BARE)

    @pytest.mark.parametrize("text", ["", "X", "BB", "bh", "B H"])
    def test_invalid(self, text):
        with pytest.raises(VariantsParseError):
            Variants.parse(text)

    def test_error_hierarchy(self):
        with pytest.raises(ParseError):
            Variants.parse("Q")
        with pytest.raises(ValueError):
            Variants.parse("Q")

    def test_empty(self):
        assert Variants().is_empty()
        assert not Variants(taproot=True).is_empty()

    def test_category_codes(self):
        for category in Category:
            assert Category.from_code(category.code) is category
        with pytest.raises(ValueError):
            Category.from_code("Z")
