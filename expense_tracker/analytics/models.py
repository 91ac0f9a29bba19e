# -*- coding: utf-8 -*-
"""
Aggregation result shapes.

Plain records built fresh for each query and never persisted. to_dict()
gives the JSON payload handed to the explanation step, which must treat the
numbers as ground truth.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from expense_tracker.parser.types import Transaction


@dataclass(frozen=True)
class SpendResult:
    period: str
    total_spent: float

    def to_dict(self) -> Dict[str, Any]:
        return {"period": self.period, "total_spent": self.total_spent}


@dataclass(frozen=True)
class CategorySpendResult:
    category: str
    period: str
    total_spent: float
    average: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "period": self.period,
            "total_spent": self.total_spent,
            "average": self.average,
        }


@dataclass(frozen=True)
class VendorSpendResult:
    vendor: str
    period: str
    total_spent: float
    count: int
    average: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendor": self.vendor,
            "period": self.period,
            "total_spent": self.total_spent,
            "count": self.count,
            "average": self.average,
        }


@dataclass(frozen=True)
class CategoryComparisonResult:
    """Independent sums for exactly two category labels over one window."""

    period: str
    totals: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {"period": self.period, "totals": dict(self.totals)}


@dataclass(frozen=True)
class ComparisonResult:
    base_period: str
    compare_period: str
    base_amount: float
    compare_amount: float
    delta_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_period": self.base_period,
            "compare_period": self.compare_period,
            "base_amount": self.base_amount,
            "compare_amount": self.compare_amount,
            "delta_percent": self.delta_percent,
        }


@dataclass(frozen=True)
class TopMerchantsResult:
    """Vendors by descending spend. Order among equal sums is unspecified."""

    period: str
    ranking: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def merchants(self) -> Dict[str, float]:
        return dict(self.ranking)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "merchants": [{"vendor": vendor, "amount": amount} for vendor, amount in self.ranking],
        }


@dataclass(frozen=True)
class TrendResult:
    """Spend per bucket; keys are YYYY-MM-DD (daily) or YYYY-MM (monthly)."""

    granularity: str
    period: str
    buckets: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "granularity": self.granularity,
            "period": self.period,
            "trend_data": dict(sorted(self.buckets.items())),
        }


@dataclass(frozen=True)
class AnomalyResult:
    period: str
    average: float
    threshold: float
    anomalies: List[Transaction] = field(default_factory=list)

    @property
    def anomaly_count(self) -> int:
        return len(self.anomalies)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "average": self.average,
            "threshold": self.threshold,
            "anomaly_count": self.anomaly_count,
            "anomalies": [tx.to_dict() for tx in self.anomalies],
        }


@dataclass(frozen=True)
class CategoryInsight:
    total_spent: float
    count: int
    average: float
    percentage: float
    top_vendor: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_spent": self.total_spent,
            "count": self.count,
            "average": self.average,
            "percentage": self.percentage,
            "top_vendor": self.top_vendor,
        }


@dataclass(frozen=True)
class CategoryBreakdownResult:
    """
    Overview of one window: totals, per-category insights and top vendors.

    Percentages are shares of total_spent and are 0 when nothing was spent.
    """

    period: str
    total_spent: float
    transaction_count: int
    average: float
    categories: Dict[str, CategoryInsight] = field(default_factory=dict)
    top_vendors: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def spending_by_category(self) -> Dict[str, float]:
        return {name: insight.total_spent for name, insight in self.categories.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "total_spent": self.total_spent,
            "transaction_count": self.transaction_count,
            "average": self.average,
            "categories": {name: insight.to_dict() for name, insight in self.categories.items()},
            "top_vendors": [{"vendor": vendor, "amount": amount} for vendor, amount in self.top_vendors],
        }
