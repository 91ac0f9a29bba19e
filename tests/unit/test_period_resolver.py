# -*- coding: utf-8 -*-

from datetime import datetime, timedelta, timezone

import pytest

from expense_tracker.analytics.period_resolver import (
    InvalidPeriodError,
    Period,
    months_back_start,
    resolve_period,
)

# Wednesday
NOW = datetime(2026, 3, 18, 14, 30, 0, tzinfo=timezone.utc)


def test_today_covers_whole_day() -> None:
    start, end = resolve_period(Period.TODAY, now=NOW)
    assert start == datetime(2026, 3, 18, 0, 0, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 3, 18, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_yesterday() -> None:
    start, end = resolve_period("YESTERDAY", now=NOW)
    assert start == datetime(2026, 3, 17, tzinfo=timezone.utc)
    assert end == datetime(2026, 3, 17, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_this_week_starts_monday_and_ends_now() -> None:
    start, end = resolve_period(Period.THIS_WEEK, now=NOW)
    assert start == datetime(2026, 3, 16, tzinfo=timezone.utc)
    assert start.weekday() == 0
    assert end == NOW


def test_last_week_is_full_previous_week() -> None:
    start, end = resolve_period(Period.LAST_WEEK, now=NOW)
    assert start == datetime(2026, 3, 9, tzinfo=timezone.utc)
    assert end == datetime(2026, 3, 15, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_this_month_ends_now() -> None:
    start, end = resolve_period(Period.THIS_MONTH, now=NOW)
    assert start == datetime(2026, 3, 1, tzinfo=timezone.utc)
    assert end == NOW


def test_last_month_ends_on_its_last_instant() -> None:
    start, end = resolve_period(Period.LAST_MONTH, now=NOW)
    assert start == datetime(2026, 2, 1, tzinfo=timezone.utc)
    assert end == datetime(2026, 2, 28, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_last_month_across_year_boundary() -> None:
    start, end = resolve_period(Period.LAST_MONTH, now=datetime(2026, 1, 10, tzinfo=timezone.utc))
    assert start == datetime(2025, 12, 1, tzinfo=timezone.utc)
    assert end.date() == datetime(2025, 12, 31).date()


def test_this_week_on_monday_starts_today() -> None:
    monday = datetime(2026, 3, 16, 8, 0, tzinfo=timezone.utc)
    start, _ = resolve_period(Period.THIS_WEEK, now=monday)
    assert start == datetime(2026, 3, 16, tzinfo=timezone.utc)


def test_now_in_other_zone_is_converted_to_utc() -> None:
    # 2026-03-19 01:00 at UTC+5:30 is still 2026-03-18 in UTC
    ist_now = datetime(2026, 3, 19, 1, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    start, end = resolve_period(Period.TODAY, now=ist_now)
    assert start.date() == datetime(2026, 3, 18).date()
    assert end.tzinfo == timezone.utc


@pytest.mark.parametrize("name", ["LAST_YEAR", "today", "", "NEXT_WEEK"])
def test_unknown_period_raises_with_offending_value(name) -> None:
    with pytest.raises(InvalidPeriodError) as exc_info:
        resolve_period(name, now=NOW)
    assert exc_info.value.period == name
    assert "invalid period" in str(exc_info.value)


def test_months_back_start() -> None:
    assert months_back_start(NOW, 1) == datetime(2026, 2, 1, tzinfo=timezone.utc)
    assert months_back_start(NOW, 3) == datetime(2025, 12, 1, tzinfo=timezone.utc)
    assert months_back_start(NOW, 12) == datetime(2025, 3, 1, tzinfo=timezone.utc)
