# -*- coding: utf-8 -*-
"""
Intent Dispatcher

Validates an ExpenseIntent and routes it to the matching AggregationService
call. Validation runs before any aggregation so a query missing a category
never aggregates over an empty or default one. Only the period has a default
(THIS_MONTH).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Tuple

from expense_tracker.analytics.intent import ExpenseIntent, IntentType
from expense_tracker.analytics.period_resolver import Period
from expense_tracker.analytics.service import AggregationService
from expense_tracker.config import DEFAULT_PERIOD, MONTHLY_TREND_MONTHS, TOP_MERCHANTS_LIMIT
from expense_tracker.errors import UnsupportedIntentError, ValidationError

logger = logging.getLogger(__name__)


def _summary_category(intent: ExpenseIntent) -> str:
    return (intent.category or "").strip() or intent.param("category")


def _comparison_categories(intent: ExpenseIntent) -> Tuple[str, str]:
    category1 = intent.param("category1") or (intent.category or "").strip()
    return category1, intent.param("category2")


def _comparison_periods(intent: ExpenseIntent) -> Tuple[str, str]:
    return intent.param("period1"), intent.param("period2")


def _int_param(intent: ExpenseIntent, key: str, default: int) -> int:
    raw = intent.param(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {key}={raw!r}, using {default}")
        return default


def _intent_type(intent: ExpenseIntent) -> IntentType:
    try:
        return IntentType(intent.intent_type)
    except ValueError:
        raise UnsupportedIntentError(str(intent.intent_type))


def validate_intent(intent: ExpenseIntent) -> None:
    """
    Check the fields each intent type needs.

    Raises:
        ValidationError: a required field is missing (message names field and intent type)
    """
    intent_type = _intent_type(intent)

    if intent_type is IntentType.CATEGORY_SUMMARY:
        if not _summary_category(intent):
            raise ValidationError(f"category is required for {intent_type.value} intent")

    elif intent_type is IntentType.CATEGORY_COMPARISON:
        category1, category2 = _comparison_categories(intent)
        if not category1 or not category2:
            missing = "category1" if not category1 else "category2"
            raise ValidationError(
                f"both category1 and category2 are required for {intent_type.value} intent (missing {missing})"
            )
        if category1 == category2:
            raise ValidationError(f"category1 and category2 must differ for {intent_type.value} intent")

    elif intent_type is IntentType.PERIOD_COMPARISON:
        period1, period2 = _comparison_periods(intent)
        if not period1 or not period2:
            missing = "period1" if not period1 else "period2"
            raise ValidationError(
                f"both period1 and period2 are required for {intent_type.value} intent (missing {missing})"
            )


def execute_aggregation(intent: ExpenseIntent, service: AggregationService) -> Any:
    """
    Validate the intent and run its aggregation.

    Returns:
        One of the result records in expense_tracker.analytics.models

    Raises:
        ValidationError: required intent fields missing
        UnsupportedIntentError: no route for the intent type
        InvalidPeriodError: a period name could not be resolved
    """
    validate_intent(intent)
    intent_type = _intent_type(intent)

    period = intent.period.value if isinstance(intent.period, Period) else (intent.period or DEFAULT_PERIOD)
    logger.info(f"Dispatching {intent_type.value} (period={period}, confidence={intent.confidence:.2f})")

    routes: Dict[IntentType, Callable[[], Any]] = {
        IntentType.TOTAL_SPEND: lambda: service.get_total_spend(period),
        IntentType.CATEGORY_SUMMARY: lambda: service.get_category_spend(_summary_category(intent), period),
        IntentType.CATEGORY_COMPARISON: lambda: service.compare_categories(*_comparison_categories(intent), period),
        IntentType.PERIOD_COMPARISON: lambda: service.compare_periods(*_comparison_periods(intent)),
        IntentType.TOP_MERCHANTS: lambda: service.get_top_merchants(
            period, _int_param(intent, "limit", TOP_MERCHANTS_LIMIT)
        ),
        IntentType.DAILY_TREND: lambda: service.get_daily_trend(period),
        IntentType.MONTHLY_TREND: lambda: service.get_monthly_trend(
            _int_param(intent, "months", MONTHLY_TREND_MONTHS)
        ),
        IntentType.ANOMALY_EXPLANATION: lambda: service.get_anomalies(period),
        # No budget definitions exist yet; falls back to the period total
        IntentType.BUDGET_STATUS: lambda: service.get_total_spend(period),
        IntentType.GENERAL_INSIGHT: lambda: service.get_category_breakdown(
            period, _int_param(intent, "limit", TOP_MERCHANTS_LIMIT)
        ),
    }

    route = routes.get(intent_type)
    if route is None:
        raise UnsupportedIntentError(intent_type.value)
    return route()
