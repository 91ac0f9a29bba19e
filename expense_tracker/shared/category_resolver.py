# -*- coding: utf-8 -*-
"""
Category tables and label validation.

The static vendor table is loaded once from
expense_tracker/config/vendor_categories.yaml and exposed read-only; callers
that need a different table inject their own mapping into VendorCategorizer.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"
TRANSFER_CATEGORY = "Transfer"

# Closed set the AI classifier is allowed to answer with.
AI_CATEGORIES: frozenset[str] = frozenset({
    "Food",
    "Shopping",
    "Travel",
    "Entertainment",
    "Bills",
    "Healthcare",
    "Other",
})

# "Amazon" only ever comes from the static table, but it is a valid query label.
QUERY_CATEGORIES: frozenset[str] = AI_CATEGORIES | {"Amazon"}

_VENDOR_TABLE_PATH = Path(__file__).resolve().parents[1] / "config" / "vendor_categories.yaml"


def normalize_vendor(vendor: Optional[str]) -> str:
    return (vendor or "").strip().lower()


def _load_config_from_yaml(path: Path) -> dict:
    if not path.exists():
        logger.warning(f"Vendor table not found at {path}, static lookup disabled")
        return {}

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=1)
def load_vendor_table(path: Optional[str] = None) -> Mapping[str, str]:
    """
    Load the static vendor -> category table.

    Keys are lowercased; entry order from the file is kept because substring
    matching returns the first entry that hits.
    """
    data = _load_config_from_yaml(Path(path) if path else _VENDOR_TABLE_PATH)
    vendors = data.get("vendors") if isinstance(data, dict) else None
    if not isinstance(vendors, dict):
        return MappingProxyType({})

    table = {normalize_vendor(str(k)): str(v) for k, v in vendors.items() if k is not None and v}
    logger.debug(f"Loaded {len(table)} static vendor mappings")
    return MappingProxyType(table)


def coerce_ai_category(label: Optional[str]) -> str:
    """Map an AI answer onto the closed category set ("Other" when outside it)."""
    category = (label or "").strip()
    if category in AI_CATEGORIES:
        return category
    logger.warning(f"AI returned category outside the allowed set: {label!r}, using '{DEFAULT_CATEGORY}'")
    return DEFAULT_CATEGORY


def is_query_category(label: Optional[str]) -> bool:
    return (label or "") in QUERY_CATEGORIES
