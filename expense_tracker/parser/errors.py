# -*- coding: utf-8 -*-
"""
Parser Error Types

A ParserError never leaves the extractor chain: the extractor that raised it
is treated as not matching and the next one is tried.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class ParserErrorCode(Enum):
    """Parser 錯誤代碼"""

    INVALID_AMOUNT = "invalid_amount"   # 金額格式錯誤
    INVALID_DATE = "invalid_date"       # 日期/時間格式錯誤
    MISSING_DATE = "missing_date"       # 格式本身沒有日期，且呼叫端未提供收信時間


ERROR_MESSAGES = {
    ParserErrorCode.INVALID_AMOUNT: "Malformed amount: {value!r}",
    ParserErrorCode.INVALID_DATE: "Malformed date/time: {value!r}",
    ParserErrorCode.MISSING_DATE: "Notification carries no date and no received-at time was given",
}


@dataclass
class ParserError(Exception):
    """Parser 解析錯誤"""

    code: ParserErrorCode
    message: str
    details: Optional[dict] = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_code(cls, code: ParserErrorCode, **kwargs) -> "ParserError":
        """從錯誤代碼建立錯誤物件"""
        template = ERROR_MESSAGES.get(code, "Parse error")
        message = template.format(**kwargs) if kwargs else template
        return cls(code=code, message=message, details=kwargs if kwargs else None)
