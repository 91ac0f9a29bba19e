# -*- coding: utf-8 -*-
"""
Spending analytics: period resolution, aggregation and intent dispatch.

The numbers produced here are the ground truth for any explanation written
afterwards; nothing downstream recalculates them.
"""

from .dispatcher import execute_aggregation, validate_intent
from .intent import ExpenseIntent, IntentType
from .period_resolver import InvalidPeriodError, Period, resolve_period
from .service import AggregationService

__all__ = [
    "AggregationService",
    "ExpenseIntent",
    "IntentType",
    "InvalidPeriodError",
    "Period",
    "execute_aggregation",
    "resolve_period",
    "validate_intent",
]
