# -*- coding: utf-8 -*-
"""
ExpenseIntent: the structured description of a spending question.

Intents are produced outside this package (an LLM classifier) and consumed by
the dispatcher. Wire values of IntentType and Period are stable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from expense_tracker.analytics.period_resolver import Period
from expense_tracker.errors import IntentError
from expense_tracker.shared.category_resolver import is_query_category

logger = logging.getLogger(__name__)


class IntentType(str, Enum):
    TOTAL_SPEND = "TOTAL_SPEND"
    CATEGORY_SUMMARY = "CATEGORY_SUMMARY"
    CATEGORY_COMPARISON = "CATEGORY_COMPARISON"
    PERIOD_COMPARISON = "PERIOD_COMPARISON"
    TOP_MERCHANTS = "TOP_MERCHANTS"
    DAILY_TREND = "DAILY_TREND"
    MONTHLY_TREND = "MONTHLY_TREND"
    ANOMALY_EXPLANATION = "ANOMALY_EXPLANATION"
    BUDGET_STATUS = "BUDGET_STATUS"
    GENERAL_INSIGHT = "GENERAL_INSIGHT"


def clamp_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if confidence != confidence:  # NaN
        return 0.0
    return min(max(confidence, 0.0), 1.0)


def _optional_text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise IntentError(f"{key} must be a string, got {type(value).__name__}")
    return value.strip() or None


@dataclass
class ExpenseIntent:
    """
    Validated query description.

    confidence is informational only; it is clamped into [0, 1] and never
    used to gate aggregation.
    """

    intent_type: IntentType
    category: Optional[str] = None
    period: Optional[Period] = None
    vendor: Optional[str] = None
    amount: Optional[float] = None
    parameters: Dict[str, str] = field(default_factory=dict)
    confidence: float = 0.0

    def __post_init__(self) -> None:
        self.confidence = clamp_confidence(self.confidence)
        if self.parameters is None:
            self.parameters = {}

    def param(self, key: str) -> str:
        """Extra parameter as a trimmed string ("" when absent)."""
        return str(self.parameters.get(key) or "").strip()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"intent_type": self.intent_type.value, "confidence": self.confidence}
        if self.category:
            data["category"] = self.category
        if self.period is not None:
            data["period"] = self.period.value
        if self.vendor:
            data["vendor"] = self.vendor
        if self.amount is not None:
            data["amount"] = self.amount
        if self.parameters:
            data["parameters"] = dict(self.parameters)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpenseIntent":
        """
        Build an intent from classifier JSON.

        Raises:
            IntentError: missing/unknown intent_type, unknown period, bad amount,
                non-string category or vendor
        """
        if not isinstance(data, dict):
            raise IntentError(f"intent must be a JSON object, got {type(data).__name__}")

        raw_type = data.get("intent_type")
        try:
            intent_type = IntentType(raw_type)
        except ValueError:
            raise IntentError(f"invalid intent type: {raw_type}")

        period = None
        raw_period = data.get("period")
        if raw_period:
            try:
                period = Period(raw_period)
            except ValueError:
                raise IntentError(f"invalid period: {raw_period}")

        # Categories outside the known label set are dropped, not guessed
        category = _optional_text(data, "category")
        if category and not is_query_category(category):
            logger.warning(f"Dropping unknown category from intent: {category!r}")
            category = None

        amount = data.get("amount")
        if amount is not None:
            try:
                amount = float(amount)
            except (TypeError, ValueError):
                raise IntentError(f"invalid amount: {amount!r}")

        raw_parameters = data.get("parameters") or {}
        if not isinstance(raw_parameters, dict):
            raise IntentError("parameters must be a JSON object")
        parameters = {str(k): str(v) for k, v in raw_parameters.items() if v is not None}

        return cls(
            intent_type=intent_type,
            category=category,
            period=period,
            vendor=_optional_text(data, "vendor"),
            amount=amount,
            parameters=parameters,
            confidence=data.get("confidence", 0.0),
        )
