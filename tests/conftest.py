from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from expense_tracker.parser.types import Transaction, TransactionType


def _top_level_tests_group(path: Path) -> str | None:
    parts = path.parts
    try:
        tests_index = parts.index("tests")
    except ValueError:
        return None
    if tests_index + 1 >= len(parts):
        return None
    return parts[tests_index + 1]


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    for item in items:
        group = _top_level_tests_group(Path(str(item.fspath)))
        if group in ("unit", "parser"):
            item.add_marker(pytest.mark.unit)
        elif group == "integration":
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def food_transaction() -> Transaction:
    return Transaction(
        type=TransactionType.HDFC_CREDIT_CARD,
        amount=304.0,
        date_time=datetime(2026, 1, 9, 16, 28, 26, tzinfo=timezone.utc),
        vendor="RAZORPAY LICIOUS",
        category="Food",
        card_ending="4207",
    )
