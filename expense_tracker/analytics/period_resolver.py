# -*- coding: utf-8 -*-
"""
Period Resolver

Maps a symbolic period name to an inclusive [start, end] range in UTC.

- TODAY / YESTERDAY: the whole calendar day, 00:00:00 to 23:59:59.999999
- THIS_WEEK / THIS_MONTH: from the week (Monday) / month start up to now
- LAST_WEEK / LAST_MONTH: the whole previous calendar week / month

"This" periods are to-date: they end at now, not at the end of the period.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Tuple, Union

from expense_tracker.errors import ExpenseTrackerError


class Period(str, Enum):
    TODAY = "TODAY"
    YESTERDAY = "YESTERDAY"
    THIS_WEEK = "THIS_WEEK"
    LAST_WEEK = "LAST_WEEK"
    THIS_MONTH = "THIS_MONTH"
    LAST_MONTH = "LAST_MONTH"


class InvalidPeriodError(ExpenseTrackerError):
    """Unrecognized period name."""

    def __init__(self, period: object):
        self.period = period
        super().__init__(f"invalid period: {period}")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _start_of_day(day) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _end_of_day(day) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def _as_utc(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def resolve_period(
    period: Union[Period, str],
    *,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """
    Resolve a period name relative to now (server clock, UTC).

    Raises:
        InvalidPeriodError: period is not one of Period's values
    """
    try:
        name = Period(period)
    except ValueError:
        raise InvalidPeriodError(period)

    now = _as_utc(now or utcnow())
    today = now.date()

    if name is Period.TODAY:
        return _start_of_day(today), _end_of_day(today)

    if name is Period.YESTERDAY:
        yesterday = today - timedelta(days=1)
        return _start_of_day(yesterday), _end_of_day(yesterday)

    # ISO-8601: Monday is weekday 0
    start_of_this_week = today - timedelta(days=today.weekday())

    if name is Period.THIS_WEEK:
        return _start_of_day(start_of_this_week), now

    if name is Period.LAST_WEEK:
        start_of_last_week = start_of_this_week - timedelta(days=7)
        end_of_last_week = start_of_this_week - timedelta(days=1)
        return _start_of_day(start_of_last_week), _end_of_day(end_of_last_week)

    first_of_this_month = today.replace(day=1)

    if name is Period.THIS_MONTH:
        return _start_of_day(first_of_this_month), now

    # LAST_MONTH
    last_of_last_month = first_of_this_month - timedelta(days=1)
    return _start_of_day(last_of_last_month.replace(day=1)), _end_of_day(last_of_last_month)


def months_back_start(now: datetime, months: int) -> datetime:
    """First instant of the month `months` months before now's month."""
    now = _as_utc(now)
    index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(index, 12)
    return datetime(year, month + 1, 1, tzinfo=timezone.utc)
