# -*- coding: utf-8 -*-
"""
Persistence capability

The core only needs five things from storage: append a transaction, read all
transactions back, look up / upsert a vendor category mapping, and keep the
bodies nothing could parse. Range filtering is never pushed down to the
store; the aggregation service filters in memory.

Which implementation is used is decided by whoever builds the objects
(see assistant_cli.build_store); nothing in the core reads the environment
to pick one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from expense_tracker.errors import StorageError
from expense_tracker.parser.types import Transaction
from expense_tracker.services.kv_store import KVStore
from expense_tracker.shared.category_resolver import normalize_vendor

logger = logging.getLogger(__name__)

MAPPING_SOURCES = ("manual", "ai")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CategoryMapping:
    """A cached vendor -> category resolution (one per lowercased vendor)."""

    vendor: str
    category: str
    source: str = "ai"
    created: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        self.vendor = normalize_vendor(self.vendor)
        if self.source not in MAPPING_SOURCES:
            raise ValueError(f"Unknown mapping source: {self.source}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendor": self.vendor,
            "category": self.category,
            "source": self.source,
            "created": self.created.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryMapping":
        created = data.get("created")
        return cls(
            vendor=data["vendor"],
            category=data["category"],
            source=data.get("source", "ai"),
            created=datetime.fromisoformat(created) if created else _utcnow(),
        )


class TransactionStore(Protocol):
    def save_transaction(self, tx: Transaction) -> None: ...

    def fetch_all_transactions(self) -> List[Transaction]: ...

    def get_category_mapping(self, vendor: str) -> Optional[CategoryMapping]: ...

    def save_category_mapping(self, mapping: CategoryMapping) -> None: ...

    def save_unparsed_email(self, body: str, headers: Dict[str, str]) -> None: ...

    def close(self) -> None: ...


class MemoryStore:
    """In-process store for tests, dry runs and deployments without Redis."""

    def __init__(self, transactions: Optional[List[Transaction]] = None):
        self.transactions: List[Transaction] = list(transactions or [])
        self.mappings: Dict[str, CategoryMapping] = {}
        self.unparsed: List[Dict[str, Any]] = []

    def save_transaction(self, tx: Transaction) -> None:
        self.transactions.append(tx)

    def fetch_all_transactions(self) -> List[Transaction]:
        return list(self.transactions)

    def get_category_mapping(self, vendor: str) -> Optional[CategoryMapping]:
        return self.mappings.get(normalize_vendor(vendor))

    def save_category_mapping(self, mapping: CategoryMapping) -> None:
        self.mappings[mapping.vendor] = mapping

    def save_unparsed_email(self, body: str, headers: Dict[str, str]) -> None:
        self.unparsed.append({"body": body, "headers": dict(headers or {}), "received": _utcnow().isoformat()})

    def close(self) -> None:
        pass


class RedisStore:
    """
    Redis-backed store built on KVStore.

    Keys (under the KVStore prefix):
    - transactions              list of Transaction.to_dict()
    - category_mapping:<vendor> CategoryMapping.to_dict()
    - unparsed_emails           list of {"body", "headers", "received"}
    """

    TRANSACTIONS_KEY = "transactions"
    MAPPING_KEY = "category_mapping:{vendor}"
    UNPARSED_KEY = "unparsed_emails"

    def __init__(self, kv_store: Optional[KVStore] = None):
        self.kv = kv_store or KVStore()

    def save_transaction(self, tx: Transaction) -> None:
        if not self.kv.append(self.TRANSACTIONS_KEY, tx.to_dict()):
            raise StorageError(f"Failed to save {tx.type.value} transaction")

    def fetch_all_transactions(self) -> List[Transaction]:
        try:
            rows = self.kv.read_list(self.TRANSACTIONS_KEY, raise_errors=True)
        except Exception as e:
            raise StorageError(f"Failed to fetch transactions: {e}") from e

        transactions = []
        for row in rows:
            try:
                transactions.append(Transaction.from_dict(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed stored transaction {row!r}: {e}")
        return transactions

    def get_category_mapping(self, vendor: str) -> Optional[CategoryMapping]:
        data = self.kv.get(self.MAPPING_KEY.format(vendor=normalize_vendor(vendor)))
        if not data:
            return None
        try:
            return CategoryMapping.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed category mapping for {vendor!r}: {e}")
            return None

    def save_category_mapping(self, mapping: CategoryMapping) -> None:
        # SET overwrites, so a second write for the same vendor is an upsert
        if not self.kv.set(self.MAPPING_KEY.format(vendor=mapping.vendor), mapping.to_dict()):
            raise StorageError(f"Failed to save category mapping for {mapping.vendor!r}")

    def save_unparsed_email(self, body: str, headers: Dict[str, str]) -> None:
        record = {"body": body, "headers": dict(headers or {}), "received": _utcnow().isoformat()}
        if not self.kv.append(self.UNPARSED_KEY, record):
            raise StorageError("Failed to save unparsed email")

    def close(self) -> None:
        self.kv.close()
