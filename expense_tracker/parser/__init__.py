# -*- coding: utf-8 -*-
"""
Parser Module for bank notification emails

此模組負責將銀行通知信內文解析為 Transaction。
解析失敗是常態（行銷信、OTP 等），回傳 None 而不是丟例外，
呼叫端再把信件存到 unparsed。

主要入口：
- parse_email(text, categorizer) -> Transaction | None

Usage:
    from expense_tracker.parser import parse_email
    tx = parse_email(body, categorizer)
"""

import logging
from datetime import datetime
from typing import Optional

from expense_tracker.parser.errors import ParserError, ParserErrorCode
from expense_tracker.parser.extractors import EXTRACTORS, Categorizer, Extractor
from expense_tracker.parser.normalize_input import strip_html_tags
from expense_tracker.parser.types import Transaction, TransactionType

logger = logging.getLogger(__name__)


def parse_email(
    text: str,
    categorizer: Categorizer,
    *,
    received_at: Optional[datetime] = None,
) -> Optional[Transaction]:
    """
    解析銀行通知信內文。

    Args:
        text: 信件內文（已解碼，可能仍含 HTML）
        categorizer: 商家分類器，帶商家的格式會同步呼叫
        received_at: 收信時間；只有沒有日期的格式（iMobile 繳卡費）會用到

    Returns:
        Transaction，或 None（沒有任何格式符合）
    """
    if not text or not text.strip():
        return None

    clean_text = strip_html_tags(text)

    for extractor in EXTRACTORS:
        tx = extractor.try_parse(clean_text, categorizer, received_at)
        if tx is not None:
            logger.info(
                f"Parsed {tx.type.value} transaction via {extractor.name}: "
                f"{tx.amount:.2f} {tx.vendor or '-'} -> {tx.category}"
            )
            return tx

    logger.info("No known transaction format detected")
    return None


# Export
__all__ = [
    "parse_email",
    "strip_html_tags",
    "Transaction",
    "TransactionType",
    "Extractor",
    "EXTRACTORS",
    "ParserError",
    "ParserErrorCode",
]
