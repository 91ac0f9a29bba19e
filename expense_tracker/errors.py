# -*- coding: utf-8 -*-
"""
Error types shared by the query path.

Parsing and categorization failures never reach these: they degrade to
"no match" and "Other" where they happen.
"""


class ExpenseTrackerError(Exception):
    """Base class for errors surfaced to the caller."""


class ValidationError(ExpenseTrackerError):
    """An intent or aggregation argument is missing a required field."""


class UnsupportedIntentError(ExpenseTrackerError):
    """The dispatcher has no route for the intent type."""

    def __init__(self, intent_type: str):
        self.intent_type = intent_type
        super().__init__(f"unsupported intent type: {intent_type}")


class IntentError(ExpenseTrackerError):
    """Classifier output could not be turned into an ExpenseIntent."""


class StorageError(ExpenseTrackerError):
    """A persistence write was lost."""
