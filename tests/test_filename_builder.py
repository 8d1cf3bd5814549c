"""
Unit tests for filename_builder and categories modules.
"""

import pytest

from GC_Libs.CatalogLib.categories import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    category_labels,
    find_category_by_id,
    find_category_by_label,
)
from GC_Libs.CatalogLib.filename_builder import (
    generate_full_filename,
    is_accessory,
    output_filenames,
    sanitize_item_name,
)


class TestSanitizeItemName:
    """Tests for sanitize_item_name function."""

    def test_strips_unsafe_characters(self):
        assert sanitize_item_name('a\\b/c:d*e?f"g<h>i|j') == "abcdefghij"

    def test_empty_name_uses_default(self):
        assert sanitize_item_name("") == "装備"
        assert sanitize_item_name(None) == "装備"

    def test_trims_whitespace(self):
        assert sanitize_item_name("  星のドレス ") == "星のドレス"


class TestGenerateFullFilename:
    """Tests for generate_full_filename function."""

    def test_regular_category(self):
        assert generate_full_filename("4_2_ドレス", "星空のドレス") == "4_2_ドレス_星空のドレス"

    def test_accessory_gets_overlap_marker(self):
        assert generate_full_filename("12_10_アクセサリー", "星の/ピアス") == "12_10_アクセサリー_overlap_星のピアス"

    def test_empty_name(self):
        assert generate_full_filename("2_7_くつ", "") == "2_7_くつ_装備"

    @pytest.mark.parametrize("category_id, expected", [
        ("12_10_アクセサリー", True),
        ("4_2_ドレス", False),
        ("13_11_エフェクト", False),
    ])
    def test_is_accessory(self, category_id, expected):
        assert is_accessory(category_id) is expected


class TestOutputFilenames:
    """Tests for output_filenames function."""

    def test_full_and_thumbnail(self):
        assert output_filenames("4_2_ドレス_星空") == ("4_2_ドレス_星空.png", "4_2_ドレス_星空_サムネ.png")


class TestCategories:
    """Tests for category lookup."""

    def test_nine_categories(self):
        assert len(CATEGORIES) == 9
        assert len({c.id for c in CATEGORIES}) == 9

    def test_default_is_dress(self):
        assert DEFAULT_CATEGORY.id == "4_2_ドレス"

    def test_lookup(self):
        assert find_category_by_label("くつ").id == "2_7_くつ"
        assert find_category_by_id("10_1_かお").label == "かお"
        assert find_category_by_label("ドラゴン") is None
        assert find_category_by_id(None) is None

    def test_labels_in_order(self):
        assert category_labels()[0] == "インナー"
        assert category_labels()[-1] == "エフェクト"
