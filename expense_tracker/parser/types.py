# -*- coding: utf-8 -*-
"""
Transaction types produced by the email parser.

A Transaction is created once, at ingestion time, from one notification body
and is never updated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Source notification format (wire value is stored with the record)."""

    HDFC_CREDIT_CARD = "HDFCCreditCard"
    HDFC_BANK_TRANSFER = "HDFCBankTransfer"
    ICICI_CREDIT_CARD = "ICICICreditCard"
    ICICI_BANK_TRANSFER = "ICICIBankTransfer"   # iMobile card bill payment
    ICICI_IMPS = "ICICIIMPS"

    @classmethod
    def from_string(cls, value: str) -> "TransactionType":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown transaction type: {value}")


@dataclass(frozen=True)
class Transaction:
    """單筆交易資料（Parser 輸出）"""

    type: TransactionType
    amount: float
    date_time: datetime
    vendor: str = ""
    category: str = "Other"
    card_ending: Optional[str] = None
    debited_account: Optional[str] = None
    credited_account: Optional[str] = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"amount must be non-negative, got {self.amount}")
        if not self.category:
            raise ValueError("category must be set before a transaction is created")

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping (date_time as ISO-8601)."""
        return {
            "type": self.type.value,
            "card_ending": self.card_ending,
            "debited_account": self.debited_account,
            "credited_account": self.credited_account,
            "amount": self.amount,
            "vendor": self.vendor,
            "date_time": self.date_time.isoformat(),
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            type=TransactionType.from_string(data["type"]),
            amount=float(data["amount"]),
            date_time=datetime.fromisoformat(data["date_time"]),
            vendor=data.get("vendor") or "",
            category=data.get("category") or "Other",
            card_ending=data.get("card_ending"),
            debited_account=data.get("debited_account"),
            credited_account=data.get("credited_account"),
        )
