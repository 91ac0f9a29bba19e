# -*- coding: utf-8 -*-
"""
Vendor categorization with a layered fallback chain:
1. Static table, exact match (lowercased vendor)
2. Static table, substring match in either direction
3. Persistent cache (vendor -> category mappings written by step 4)
4. AI classifier, answer coerced into the closed category set and written
   back to the cache so each distinct vendor is classified at most once
5. "Other"

categorize() never raises: an unavailable cache or classifier is a miss.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Protocol

from expense_tracker.services.storage import CategoryMapping, TransactionStore
from expense_tracker.shared.category_resolver import (
    DEFAULT_CATEGORY,
    coerce_ai_category,
    load_vendor_table,
    normalize_vendor,
)

logger = logging.getLogger(__name__)


class VendorClassifier(Protocol):
    def classify_vendor(self, vendor: str) -> str: ...


# (vendor as written, lowercased vendor) -> category or None for a miss
Strategy = Callable[[str, str], Optional[str]]


class VendorCategorizer:
    """Resolve a vendor name to a spending category."""

    def __init__(
        self,
        vendor_table: Optional[Mapping[str, str]] = None,
        store: Optional[TransactionStore] = None,
        classifier: Optional[VendorClassifier] = None,
    ):
        """
        Args:
            vendor_table: lowercase vendor -> category (defaults to the bundled YAML table)
            store: persistence used as the vendor mapping cache
            classifier: AI fallback; None disables step 4
        """
        self.vendor_table = vendor_table if vendor_table is not None else load_vendor_table()
        self.store = store
        self.classifier = classifier
        self.strategies: list[tuple[str, Strategy]] = [
            ("static_exact", self._static_exact),
            ("static_partial", self._static_partial),
            ("cache", self._cached),
            ("ai", self._ai),
        ]

    def categorize(self, vendor: str) -> str:
        if not vendor or not vendor.strip():
            return DEFAULT_CATEGORY

        vendor_lower = normalize_vendor(vendor)
        for name, strategy in self.strategies:
            category = strategy(vendor, vendor_lower)
            if category:
                logger.debug(f"Vendor {vendor!r} -> {category} ({name})")
                return category

        return DEFAULT_CATEGORY

    def _static_exact(self, vendor: str, vendor_lower: str) -> Optional[str]:
        return self.vendor_table.get(vendor_lower)

    def _static_partial(self, vendor: str, vendor_lower: str) -> Optional[str]:
        # First entry in table order wins when several keys overlap
        for mapped_vendor, category in self.vendor_table.items():
            if mapped_vendor in vendor_lower or vendor_lower in mapped_vendor:
                return category
        return None

    def _cached(self, vendor: str, vendor_lower: str) -> Optional[str]:
        if self.store is None:
            return None
        try:
            mapping = self.store.get_category_mapping(vendor_lower)
        except Exception as e:
            logger.warning(f"Category cache lookup failed for {vendor!r}: {e}")
            return None
        return mapping.category if mapping else None

    def _ai(self, vendor: str, vendor_lower: str) -> Optional[str]:
        if self.classifier is None:
            return None
        try:
            answer = self.classifier.classify_vendor(vendor)
        except Exception as e:
            logger.warning(f"AI vendor classification failed for {vendor!r}: {e}")
            return None
        if not answer or not answer.strip():
            return None

        category = coerce_ai_category(answer)
        logger.info(f"AI classified vendor {vendor!r} as {category!r}")

        if self.store is not None:
            try:
                self.store.save_category_mapping(
                    CategoryMapping(vendor=vendor_lower, category=category, source="ai")
                )
            except Exception as e:
                logger.warning(f"Failed to cache AI category for {vendor!r}: {e}")
        return category
