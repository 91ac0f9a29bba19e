# -*- coding: utf-8 -*-
"""
Aggregation Service

Computes the numbers a spending answer is built on. Every operation fetches
all transactions, keeps those whose UTC timestamp lies in the resolved
[start, end] range (both ends inclusive) and aggregates in memory.

Operations are read-only and deterministic for a given transaction set and
clock.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple, Union

from expense_tracker.analytics.models import (
    AnomalyResult,
    CategoryBreakdownResult,
    CategoryComparisonResult,
    CategoryInsight,
    CategorySpendResult,
    ComparisonResult,
    SpendResult,
    TopMerchantsResult,
    TrendResult,
    VendorSpendResult,
)
from expense_tracker.analytics.period_resolver import Period, months_back_start, resolve_period, utcnow
from expense_tracker.config import MONTHLY_TREND_MONTHS, TOP_MERCHANTS_LIMIT
from expense_tracker.errors import ValidationError
from expense_tracker.parser.types import Transaction
from expense_tracker.services.storage import TransactionStore

logger = logging.getLogger(__name__)

PeriodName = Union[Period, str]

# Anomaly threshold: max(mean + 2 * stddev, 2 * mean)
ANOMALY_STDDEV_FACTOR = 2.0
ANOMALY_MEAN_FLOOR_FACTOR = 2.0


def _period_label(period: PeriodName) -> str:
    return period.value if isinstance(period, Period) else str(period)


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _sum(transactions: List[Transaction]) -> float:
    return sum(tx.amount for tx in transactions)


def _rank_vendors(transactions: List[Transaction]) -> List[Tuple[str, float]]:
    totals: Dict[str, float] = defaultdict(float)
    for tx in transactions:
        if tx.vendor:
            totals[tx.vendor] += tx.amount
    # Order among equal totals is not part of the contract
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def _exceeds(amount: float, threshold: float) -> bool:
    # One outlier among n sits at most sqrt(n - 1) deviations out, so with five
    # transactions it lands exactly on mean + 2 * stddev. A zero threshold
    # (all-zero window) flags nothing.
    return amount > threshold or (threshold > 0 and math.isclose(amount, threshold))


class AggregationService:
    """Intent-independent aggregation over a TransactionStore."""

    def __init__(self, store: TransactionStore, *, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utcnow

    def now(self) -> datetime:
        return _utc(self.clock())

    def fetch_transactions_in_range(self, start: datetime, end: datetime) -> List[Transaction]:
        all_transactions = self.store.fetch_all_transactions()
        filtered = [tx for tx in all_transactions if start <= _utc(tx.date_time) <= end]
        logger.debug(
            f"Filtered {len(all_transactions)} transactions to {len(filtered)} "
            f"in range {start.isoformat()} to {end.isoformat()}"
        )
        return filtered

    def _transactions_for(self, period: PeriodName) -> List[Transaction]:
        start, end = resolve_period(period, now=self.now())
        return self.fetch_transactions_in_range(start, end)

    def get_total_spend(self, period: PeriodName) -> SpendResult:
        transactions = self._transactions_for(period)
        total = _sum(transactions)
        logger.info(f"Total spend for {_period_label(period)}: {total:.2f} ({len(transactions)} transactions)")
        return SpendResult(period=_period_label(period), total_spent=total)

    def get_category_spend(self, category: str, period: PeriodName) -> CategorySpendResult:
        if not category:
            raise ValidationError("category is required")

        # Category labels are canonical; match is exact and case-sensitive
        matching = [tx for tx in self._transactions_for(period) if tx.category == category]
        total = _sum(matching)
        average = total / len(matching) if matching else 0.0
        logger.info(f"Category {category!r} spend for {_period_label(period)}: {total:.2f} over {len(matching)} transactions")
        return CategorySpendResult(
            category=category,
            period=_period_label(period),
            total_spent=total,
            average=average,
        )

    def get_vendor_spend(self, vendor: str, period: PeriodName) -> VendorSpendResult:
        if not vendor or not vendor.strip():
            raise ValidationError("vendor is required")

        vendor_lower = vendor.strip().lower()
        matching = [tx for tx in self._transactions_for(period) if tx.vendor.strip().lower() == vendor_lower]
        total = _sum(matching)
        average = total / len(matching) if matching else 0.0
        return VendorSpendResult(
            vendor=vendor.strip(),
            period=_period_label(period),
            total_spent=total,
            count=len(matching),
            average=average,
        )

    def compare_categories(self, category1: str, category2: str, period: PeriodName) -> CategoryComparisonResult:
        if not category1 or not category2:
            raise ValidationError("both categories are required")

        transactions = self._transactions_for(period)
        totals = {
            category1: _sum([tx for tx in transactions if tx.category == category1]),
            category2: _sum([tx for tx in transactions if tx.category == category2]),
        }
        logger.info(f"Category comparison for {_period_label(period)}: {totals}")
        return CategoryComparisonResult(period=_period_label(period), totals=totals)

    def compare_periods(self, period1: PeriodName, period2: PeriodName) -> ComparisonResult:
        # Both windows are resolved before any fetch so a bad second period fails fast
        now = self.now()
        start1, end1 = resolve_period(period1, now=now)
        start2, end2 = resolve_period(period2, now=now)

        amount1 = _sum(self.fetch_transactions_in_range(start1, end1))
        amount2 = _sum(self.fetch_transactions_in_range(start2, end2))

        if amount1 > 0:
            delta_percent = (amount2 - amount1) / amount1 * 100
        elif amount2 > 0:
            delta_percent = 100.0
        else:
            delta_percent = 0.0

        logger.info(
            f"Period comparison {_period_label(period1)}={amount1:.2f} vs "
            f"{_period_label(period2)}={amount2:.2f}: {delta_percent:.2f}%"
        )
        return ComparisonResult(
            base_period=_period_label(period1),
            compare_period=_period_label(period2),
            base_amount=amount1,
            compare_amount=amount2,
            delta_percent=delta_percent,
        )

    def get_top_merchants(self, period: PeriodName, limit: int = TOP_MERCHANTS_LIMIT) -> TopMerchantsResult:
        if limit <= 0:
            limit = TOP_MERCHANTS_LIMIT

        transactions = self._transactions_for(period)
        ranking = _rank_vendors(transactions)
        logger.info(f"Top {min(limit, len(ranking))} of {len(ranking)} merchants for {_period_label(period)}")
        return TopMerchantsResult(period=_period_label(period), ranking=ranking[:limit])

    def get_category_breakdown(self, period: PeriodName, limit: int = TOP_MERCHANTS_LIMIT) -> CategoryBreakdownResult:
        if limit <= 0:
            limit = TOP_MERCHANTS_LIMIT

        transactions = self._transactions_for(period)
        total = _sum(transactions)

        by_category: Dict[str, List[Transaction]] = defaultdict(list)
        for tx in transactions:
            by_category[tx.category].append(tx)

        categories: Dict[str, CategoryInsight] = {}
        for category, members in sorted(by_category.items(), key=lambda item: _sum(item[1]), reverse=True):
            category_total = _sum(members)
            top = _rank_vendors(members)
            categories[category] = CategoryInsight(
                total_spent=category_total,
                count=len(members),
                average=category_total / len(members),
                percentage=category_total / total * 100 if total > 0 else 0.0,
                top_vendor=top[0][0] if top else None,
            )

        logger.info(
            f"Category breakdown for {_period_label(period)}: {total:.2f} over "
            f"{len(transactions)} transactions in {len(categories)} categories"
        )
        return CategoryBreakdownResult(
            period=_period_label(period),
            total_spent=total,
            transaction_count=len(transactions),
            average=total / len(transactions) if transactions else 0.0,
            categories=categories,
            top_vendors=_rank_vendors(transactions)[:limit],
        )

    def get_daily_trend(self, period: PeriodName) -> TrendResult:
        buckets: Dict[str, float] = defaultdict(float)
        for tx in self._transactions_for(period):
            buckets[_utc(tx.date_time).strftime("%Y-%m-%d")] += tx.amount
        return TrendResult(granularity="daily", period=_period_label(period), buckets=dict(buckets))

    def get_monthly_trend(self, months: int = MONTHLY_TREND_MONTHS) -> TrendResult:
        if months <= 0:
            months = MONTHLY_TREND_MONTHS

        # Own window, not a named period: N whole months back through now
        now = self.now()
        start = months_back_start(now, months)

        buckets: Dict[str, float] = defaultdict(float)
        for tx in self.fetch_transactions_in_range(start, now):
            buckets[_utc(tx.date_time).strftime("%Y-%m")] += tx.amount
        return TrendResult(granularity="monthly", period=f"LAST_{months}_MONTHS", buckets=dict(buckets))

    def get_anomalies(self, period: PeriodName) -> AnomalyResult:
        transactions = self._transactions_for(period)
        if not transactions:
            logger.info(f"No transactions for {_period_label(period)}, empty anomaly result")
            return AnomalyResult(period=_period_label(period), average=0.0, threshold=0.0, anomalies=[])

        count = len(transactions)
        average = _sum(transactions) / count

        # Population standard deviation; a single transaction has none
        variance = 0.0
        if count > 1:
            variance = sum((tx.amount - average) ** 2 for tx in transactions) / count
        std_dev = math.sqrt(variance)

        threshold = max(
            average + ANOMALY_STDDEV_FACTOR * std_dev,
            average * ANOMALY_MEAN_FLOOR_FACTOR,
        )
        anomalies = [tx for tx in transactions if _exceeds(tx.amount, threshold)]

        logger.info(
            f"Anomalies for {_period_label(period)}: {len(anomalies)} of {count} "
            f"(mean {average:.2f}, stddev {std_dev:.2f}, threshold {threshold:.2f})"
        )
        return AnomalyResult(
            period=_period_label(period),
            average=average,
            threshold=threshold,
            anomalies=anomalies,
        )
