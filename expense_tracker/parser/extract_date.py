# -*- coding: utf-8 -*-
"""
Date Extraction

負責將各銀行通知信的日期/時間字串轉為 datetime。
每家銀行（甚至同一家銀行的不同通知）格式都不同，各自一個函式：
- HDFC 信用卡（新）：09 Jan, 2026 + 16:28:26
- HDFC 信用卡（舊）：01-01-2024 12:00:00
- HDFC 轉帳：05-01-24 (DD-MM-YY)
- ICICI 信用卡：Jan 5, 2026 + 10:30:00
- ICICI IMPS：Jan 05, 2026 + 01:15 p.m.

Bank timestamps carry no zone. They are localized to BANK_TIMEZONE and only
converted to UTC when compared against a period range.
"""

from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from expense_tracker.config import BANK_TIMEZONE
from expense_tracker.parser.errors import ParserError, ParserErrorCode

_HDFC_CARD_FORMAT = "%d %b, %Y %H:%M:%S"
_HDFC_LEGACY_FORMAT = "%d-%m-%Y %H:%M:%S"
_HDFC_TRANSFER_FORMAT = "%d-%m-%y"
_ICICI_CARD_FORMAT = "%b %d, %Y %H:%M:%S"
_IMPS_FORMAT = "%b %d, %Y %H:%M"


def bank_timezone() -> tzinfo:
    return ZoneInfo(BANK_TIMEZONE)


def _parse(value: str, layout: str, tz: Optional[tzinfo]) -> datetime:
    try:
        parsed = datetime.strptime(value.strip(), layout)
    except (ValueError, AttributeError):
        raise ParserError.from_code(ParserErrorCode.INVALID_DATE, value=value)
    return parsed.replace(tzinfo=tz or bank_timezone())


def parse_hdfc_card_datetime(date_text: str, time_text: str, tz: Optional[tzinfo] = None) -> datetime:
    """解析 "09 Jan, 2026" + "16:28:26" """
    return _parse(f"{date_text} {time_text}", _HDFC_CARD_FORMAT, tz)


def parse_hdfc_legacy_datetime(text: str, tz: Optional[tzinfo] = None) -> datetime:
    """解析 "01-01-2024 12:00:00" (DD-MM-YYYY)"""
    return _parse(text, _HDFC_LEGACY_FORMAT, tz)


def parse_hdfc_transfer_date(text: str, tz: Optional[tzinfo] = None) -> datetime:
    """解析 "05-01-24" (DD-MM-YY)，時間為當日 00:00"""
    return _parse(text, _HDFC_TRANSFER_FORMAT, tz)


def parse_icici_card_datetime(date_text: str, time_text: str, tz: Optional[tzinfo] = None) -> datetime:
    """解析 "Jan 5, 2026" + "10:30:00" """
    return _parse(f"{date_text} {time_text}", _ICICI_CARD_FORMAT, tz)


def to_twenty_four_hour(clock: str, meridiem: str) -> str:
    """
    將 12 小時制 "HH:MM" + "a.m."/"p.m." 轉為 24 小時制 "HH:MM"。

    - p.m. 且小時不是 12 → 加 12 ("01:15 p.m." → "13:15")
    - "12:xx p.m." 維持 12
    - a.m. 原樣保留（"12:xx a.m." 也維持 12）
    """
    if meridiem != "p.m." or clock.startswith("12"):
        return clock

    hour_text, _, minute_text = clock.partition(":")
    try:
        hour = int(hour_text)
    except ValueError:
        raise ParserError.from_code(ParserErrorCode.INVALID_DATE, value=clock)
    return f"{hour + 12:02d}:{minute_text}"


def parse_imps_datetime(date_text: str, clock: str, meridiem: str, tz: Optional[tzinfo] = None) -> datetime:
    """解析 "Jan 05, 2026" + "01:15" + "p.m." """
    return _parse(f"{date_text} {to_twenty_four_hour(clock, meridiem)}", _IMPS_FORMAT, tz)
