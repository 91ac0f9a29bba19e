"""Bank-notification expense tracker: extraction, categorization and aggregation."""

__version__ = "0.3.0"
