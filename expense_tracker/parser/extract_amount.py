# -*- coding: utf-8 -*-
"""
Amount Extraction

負責將通知信中擷取到的金額字串轉為數值。
支援格式：
- 一般格式：304.00
- 千分位：1,234.50, 1,00,000.00 (Indian grouping)
- 整數：500
"""

import re

from expense_tracker.parser.errors import ParserError, ParserErrorCode

# 去除千分位後只允許「整數」或「整數.小數」
_AMOUNT_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")


def parse_amount(text: str) -> float:
    """
    將金額字串轉為 float。

    Args:
        text: 擷取到的金額字串 (e.g., "1,234.50")

    Returns:
        金額 (float)，保證 >= 0

    Raises:
        ParserError: 金額格式錯誤（含字母、多個小數點、空字串等）
    """
    if text is None:
        raise ParserError.from_code(ParserErrorCode.INVALID_AMOUNT, value=text)

    cleaned = text.strip().replace(",", "")
    # 通知信常見句尾句點 ("INR 500.")
    cleaned = cleaned.rstrip(".")
    if not _AMOUNT_PATTERN.match(cleaned):
        raise ParserError.from_code(ParserErrorCode.INVALID_AMOUNT, value=text)

    try:
        return float(cleaned)
    except ValueError:
        raise ParserError.from_code(ParserErrorCode.INVALID_AMOUNT, value=text)
