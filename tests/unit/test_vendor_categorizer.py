# -*- coding: utf-8 -*-
"""
Test Vendor Categorizer

Static table -> cache -> AI -> "Other".
"""

from unittest.mock import Mock

import pytest

from expense_tracker.services.storage import CategoryMapping, MemoryStore
from expense_tracker.shared.category_resolver import (
    AI_CATEGORIES,
    QUERY_CATEGORIES,
    coerce_ai_category,
    load_vendor_table,
)
from expense_tracker.shared.vendor_categorizer import VendorCategorizer

# No key of the bundled table is a substring of this name (or the reverse)
UNKNOWN_VENDOR = "Quartzbrook Tailors"


class TestBundledVendorTable:
    def test_keys_are_lowercase(self):
        table = load_vendor_table()
        assert table
        assert all(key == key.lower() for key in table)

    def test_amazon_maps_to_amazon(self):
        assert load_vendor_table()["amazon"] == "Amazon"

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            load_vendor_table()["new vendor"] = "Food"


class TestStaticLookup:
    def test_exact_match_is_case_insensitive(self):
        categorizer = VendorCategorizer()
        assert categorizer.categorize("SWIGGY") == "Food"
        assert categorizer.categorize("  Swiggy ") == "Food"

    def test_partial_match_vendor_contains_key(self):
        categorizer = VendorCategorizer(vendor_table={"zomato": "Food"})
        assert categorizer.categorize("ZOMATO ORDER 1234") == "Food"

    def test_partial_match_key_contains_vendor(self):
        categorizer = VendorCategorizer(vendor_table={"big bazaar": "Shopping"})
        assert categorizer.categorize("Bazaar") == "Shopping"

    def test_partial_match_first_entry_in_table_order_wins(self):
        # "licious" sits before "lic" in the bundled table
        categorizer = VendorCategorizer()
        assert categorizer.categorize("RAZORPAY LICIOUS") == "Food"

    def test_exact_beats_partial(self):
        table = {"amazon": "Amazon", "amazon prime": "Entertainment"}
        categorizer = VendorCategorizer(vendor_table=table)
        assert categorizer.categorize("Amazon Prime") == "Entertainment"


class TestFallbacks:
    @pytest.mark.parametrize("vendor", ["", "   ", None])
    def test_empty_vendor_is_other(self, vendor):
        classifier = Mock()
        categorizer = VendorCategorizer(classifier=classifier)
        assert categorizer.categorize(vendor) == "Other"
        classifier.classify_vendor.assert_not_called()

    def test_unknown_vendor_without_classifier_is_other(self):
        assert VendorCategorizer().categorize(UNKNOWN_VENDOR) == "Other"

    def test_cache_hit_skips_classifier(self):
        store = MemoryStore()
        store.save_category_mapping(CategoryMapping(vendor=UNKNOWN_VENDOR, category="Shopping", source="manual"))
        classifier = Mock()

        categorizer = VendorCategorizer(store=store, classifier=classifier)

        assert categorizer.categorize(UNKNOWN_VENDOR.upper()) == "Shopping"
        classifier.classify_vendor.assert_not_called()

    def test_ai_answer_is_cached_and_reused(self):
        store = MemoryStore()
        classifier = Mock()
        classifier.classify_vendor.return_value = "Shopping"
        categorizer = VendorCategorizer(store=store, classifier=classifier)

        assert categorizer.categorize(UNKNOWN_VENDOR) == "Shopping"
        assert categorizer.categorize(UNKNOWN_VENDOR) == "Shopping"

        classifier.classify_vendor.assert_called_once_with(UNKNOWN_VENDOR)
        mapping = store.mappings["quartzbrook tailors"]
        assert mapping.category == "Shopping"
        assert mapping.source == "ai"

    def test_ai_answer_outside_closed_set_becomes_other(self):
        store = MemoryStore()
        classifier = Mock()
        classifier.classify_vendor.return_value = "Groceries"
        categorizer = VendorCategorizer(store=store, classifier=classifier)

        assert categorizer.categorize(UNKNOWN_VENDOR) == "Other"
        assert store.mappings["quartzbrook tailors"].category == "Other"

    def test_classifier_failure_degrades_to_other(self):
        store = MemoryStore()
        classifier = Mock()
        classifier.classify_vendor.side_effect = RuntimeError("API down")
        categorizer = VendorCategorizer(store=store, classifier=classifier)

        assert categorizer.categorize(UNKNOWN_VENDOR) == "Other"
        assert store.mappings == {}

    def test_cache_lookup_failure_is_a_miss(self):
        store = Mock()
        store.get_category_mapping.side_effect = RuntimeError("redis down")
        classifier = Mock()
        classifier.classify_vendor.return_value = "Bills"
        categorizer = VendorCategorizer(vendor_table={}, store=store, classifier=classifier)

        assert categorizer.categorize(UNKNOWN_VENDOR) == "Bills"

    def test_failed_cache_write_keeps_ai_answer(self):
        store = Mock()
        store.get_category_mapping.return_value = None
        store.save_category_mapping.side_effect = RuntimeError("redis down")
        classifier = Mock()
        classifier.classify_vendor.return_value = "Travel"
        categorizer = VendorCategorizer(vendor_table={}, store=store, classifier=classifier)

        assert categorizer.categorize(UNKNOWN_VENDOR) == "Travel"


class TestCategoryLabels:
    def test_coerce_keeps_allowed_label(self):
        for label in AI_CATEGORIES:
            assert coerce_ai_category(label) == label

    def test_coerce_strips_whitespace(self):
        assert coerce_ai_category(" Food\n") == "Food"

    @pytest.mark.parametrize("label", ["Amazon", "food", "Groceries", "", None])
    def test_coerce_rejects_everything_else(self, label):
        assert coerce_ai_category(label) == "Other"

    def test_amazon_is_query_label_but_not_ai_label(self):
        assert "Amazon" in QUERY_CATEGORIES
        assert "Amazon" not in AI_CATEGORIES
