# -*- coding: utf-8 -*-
"""
Bank Notification Extractors

One (pattern, builder) pair per notification grammar. EXTRACTORS is evaluated
in order and the first builder that returns a Transaction wins; results are
never merged.

A builder that hits a malformed amount or date raises ParserError. The chain
logs it and moves on to the next extractor.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol

from expense_tracker.parser.errors import ParserError, ParserErrorCode
from expense_tracker.parser.extract_amount import parse_amount
from expense_tracker.parser.extract_date import (
    bank_timezone,
    parse_hdfc_card_datetime,
    parse_hdfc_legacy_datetime,
    parse_hdfc_transfer_date,
    parse_icici_card_datetime,
    parse_imps_datetime,
)
from expense_tracker.parser.types import Transaction, TransactionType
from expense_tracker.shared.category_resolver import TRANSFER_CATEGORY

logger = logging.getLogger(__name__)


class Categorizer(Protocol):
    def categorize(self, vendor: str) -> str: ...


Builder = Callable[[re.Match, Categorizer, Optional[datetime]], Transaction]


@dataclass(frozen=True)
class Extractor:
    name: str
    pattern: re.Pattern
    build: Builder

    def try_parse(
        self,
        text: str,
        categorizer: Categorizer,
        received_at: Optional[datetime] = None,
    ) -> Optional[Transaction]:
        match = self.pattern.search(text)
        if not match:
            return None
        try:
            return self.build(match, categorizer, received_at)
        except ParserError as e:
            logger.warning(f"[{self.name}] pattern matched but rejected: {e}")
            return None


# ICICI: "ICICI Bank Credit Card XX1234 has been used for a transaction of INR 1,234.00
#         on Jan 5, 2026 at 10:30:00. Info: AMAZON PAY. The Available Credit Limit ..."
# Vendor capture stops at the first ". The" so the trailing limit sentence is dropped.
_ICICI_CARD_PATTERN = re.compile(
    r"ICICI Bank Credit Card (\w+) has been used for a transaction of INR ([\d,\.]+) "
    r"on ([A-Za-z]+ \d{1,2}, \d{4}) at (\d{2}:\d{2}:\d{2})\. Info: (.+?)\.\s+The"
)

# HDFC (current): "Rs.304.00 is debited from your HDFC Bank Credit Card ending 4207
#                  towards RAZORPAY LICIOUS on 09 Jan, 2026 at 16:28:26."
_HDFC_CARD_PATTERN = re.compile(
    r"Rs\.?([\d,\.]+)\s+is\s+debited\s+from\s+your\s+HDFC\s+Bank\s+Credit\s+Card\s+ending\s+(\d+)"
    r"\s+towards\s+(.+?)\s+on\s+(\d{1,2}\s+[A-Za-z]{3},\s+\d{4})\s+at\s+(\d{2}:\d{2}:\d{2})"
)

# HDFC (legacy): "Credit Card ending 1234 for Rs 100.00 at VENDOR on 01-01-2024 12:00:00"
_HDFC_LEGACY_PATTERN = re.compile(
    r"Credit Card ending (\d+) for Rs ([\d,.]+) at (.*?) on (\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2})"
)

# ICICI iMobile: "payment of INR 5,000.00 using iMobile towards 4315XXXX from your Account XX123"
_CARD_PAYMENT_PATTERN = re.compile(
    r"payment of [₹INR ]*([\d,\.]+) using iMobile towards (\w+) from your Account (\w+)"
)

# ICICI IMPS: "You have made an online IMPS payment of Rs 1,000.00 towards JOHN DOE
#              on Jan 05, 2026 at 01:15 p.m. from your ICICI Bank Savings Account XX123"
_IMPS_PATTERN = re.compile(
    r"You have made an online IMPS payment of Rs ([\d,\.]+) towards (.+) "
    r"on ([A-Za-z]+ \d{2}, \d{4}) at (\d{2}:\d{2}) (a\.m\.|p\.m\.) from your .* Account (\w+)"
)

# HDFC transfer: "Your A/c XX1234 is debited for INR 2,500.00 on 05-01-24 and A/c XX5678 is credited"
_BANK_TRANSFER_PATTERN = re.compile(
    r"Your A/c (\w+) is debited for INR ([\d,\.]+) on (\d{2}-\d{2}-\d{2}) and A/c (\w+) is credited"
)


def _build_icici_card(match: re.Match, categorizer: Categorizer, received_at: Optional[datetime]) -> Transaction:
    amount = parse_amount(match.group(2))
    dt = parse_icici_card_datetime(match.group(3), match.group(4))
    vendor = match.group(5).strip()
    return Transaction(
        type=TransactionType.ICICI_CREDIT_CARD,
        card_ending=match.group(1),
        amount=amount,
        vendor=vendor,
        date_time=dt,
        category=categorizer.categorize(vendor),
    )


def _build_hdfc_card(match: re.Match, categorizer: Categorizer, received_at: Optional[datetime]) -> Transaction:
    amount = parse_amount(match.group(1))
    dt = parse_hdfc_card_datetime(match.group(4), match.group(5))
    vendor = match.group(3).strip()
    return Transaction(
        type=TransactionType.HDFC_CREDIT_CARD,
        card_ending=match.group(2),
        amount=amount,
        vendor=vendor,
        date_time=dt,
        category=categorizer.categorize(vendor),
    )


def _build_hdfc_legacy(match: re.Match, categorizer: Categorizer, received_at: Optional[datetime]) -> Transaction:
    amount = parse_amount(match.group(2))
    dt = parse_hdfc_legacy_datetime(match.group(4))
    vendor = match.group(3).strip()
    return Transaction(
        type=TransactionType.HDFC_CREDIT_CARD,
        card_ending=match.group(1),
        amount=amount,
        vendor=vendor,
        date_time=dt,
        category=categorizer.categorize(vendor),
    )


def _build_card_payment(match: re.Match, categorizer: Categorizer, received_at: Optional[datetime]) -> Transaction:
    amount = parse_amount(match.group(1))
    # iMobile 通知沒有日期，改用收信時間
    if received_at is None:
        raise ParserError.from_code(ParserErrorCode.MISSING_DATE)
    if received_at.tzinfo is None:
        received_at = received_at.replace(tzinfo=bank_timezone())
    reference = match.group(2).strip()
    return Transaction(
        type=TransactionType.ICICI_BANK_TRANSFER,
        card_ending=reference,
        debited_account=match.group(3),
        amount=amount,
        vendor=reference,
        date_time=received_at,
        category=categorizer.categorize(reference),
    )


def _build_imps(match: re.Match, categorizer: Categorizer, received_at: Optional[datetime]) -> Transaction:
    amount = parse_amount(match.group(1))
    dt = parse_imps_datetime(match.group(3), match.group(4), match.group(5))
    payee = match.group(2).strip()
    return Transaction(
        type=TransactionType.ICICI_IMPS,
        debited_account=match.group(6),
        amount=amount,
        vendor=payee,
        date_time=dt,
        category=categorizer.categorize(payee),
    )


def _build_bank_transfer(match: re.Match, categorizer: Categorizer, received_at: Optional[datetime]) -> Transaction:
    amount = parse_amount(match.group(2))
    dt = parse_hdfc_transfer_date(match.group(3))
    # 純轉帳：沒有商家，不經過分類器
    return Transaction(
        type=TransactionType.HDFC_BANK_TRANSFER,
        debited_account=match.group(1),
        credited_account=match.group(4),
        amount=amount,
        date_time=dt,
        category=TRANSFER_CATEGORY,
    )


# Priority order matters: first match wins.
EXTRACTORS: tuple[Extractor, ...] = (
    Extractor("icici_credit_card", _ICICI_CARD_PATTERN, _build_icici_card),
    Extractor("hdfc_credit_card", _HDFC_CARD_PATTERN, _build_hdfc_card),
    Extractor("hdfc_credit_card_legacy", _HDFC_LEGACY_PATTERN, _build_hdfc_legacy),
    Extractor("icici_card_payment", _CARD_PAYMENT_PATTERN, _build_card_payment),
    Extractor("icici_imps", _IMPS_PATTERN, _build_imps),
    Extractor("hdfc_bank_transfer", _BANK_TRANSFER_PATTERN, _build_bank_transfer),
)
