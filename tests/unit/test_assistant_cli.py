# -*- coding: utf-8 -*-

import json
from datetime import datetime, timezone

import pytest

from expense_tracker import assistant_cli
from expense_tracker.analytics.intent import ExpenseIntent, IntentType
from expense_tracker.analytics.period_resolver import Period
from expense_tracker.parser.types import Transaction, TransactionType
from expense_tracker.services.storage import MemoryStore

HDFC_CARD = (
    "Dear Customer, Rs.304.00 is debited from your HDFC Bank Credit Card ending 4207 "
    "towards RAZORPAY LICIOUS on 09 Jan, 2026 at 16:28:26."
)


@pytest.fixture
def store(monkeypatch) -> MemoryStore:
    memory_store = MemoryStore()
    monkeypatch.setattr(assistant_cli, "build_store", lambda: memory_store)
    return memory_store


def _output(capsys) -> dict:
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def _recent_transaction(amount: float, vendor: str = "SWIGGY", category: str = "Food") -> Transaction:
    return Transaction(
        type=TransactionType.ICICI_CREDIT_CARD,
        amount=amount,
        date_time=datetime.now(timezone.utc),
        vendor=vendor,
        category=category,
    )


def test_ingest_files(store, tmp_path, capsys) -> None:
    card = tmp_path / "card.txt"
    card.write_text(HDFC_CARD, encoding="utf-8")
    otp = tmp_path / "otp.txt"
    otp.write_text("Your OTP is 482913. Do not share it.", encoding="utf-8")

    exit_code = assistant_cli.main(["ingest", str(card), str(otp), "--no-llm"])

    assert exit_code == 0
    payload = _output(capsys)
    assert payload["summary"] == {"parsed": 1, "unparsed": 1, "failed": 0, "by_type": {"HDFCCreditCard": 1}}
    assert store.transactions[0].category == "Food"
    assert store.unparsed[0]["headers"] == {"source": str(otp)}


def test_ingest_missing_file(store, tmp_path, capsys) -> None:
    exit_code = assistant_cli.main(["ingest", str(tmp_path / "nope.txt"), "--no-llm"])

    assert exit_code == 1
    assert _output(capsys)["status"] == "error"


def test_ingest_rejects_bad_received_at(store, tmp_path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        assistant_cli.main(["ingest", str(tmp_path / "a.txt"), "--received-at", "yesterday"])
    assert exc_info.value.code == 2


def test_query_with_intent_json(store, capsys) -> None:
    store.transactions.extend([_recent_transaction(100), _recent_transaction(50)])

    exit_code = assistant_cli.main(
        ["query", "--intent-json", json.dumps({"intent_type": "CATEGORY_SUMMARY", "category": "Food"})]
    )

    assert exit_code == 0
    payload = _output(capsys)
    assert payload["intent"]["intent_type"] == "CATEGORY_SUMMARY"
    assert payload["data"] == {"category": "Food", "period": "THIS_MONTH", "total_spent": 150.0, "average": 75.0}


def test_query_validation_error(store, capsys) -> None:
    intent = {"intent_type": "CATEGORY_COMPARISON", "parameters": {"category1": "Food"}}

    exit_code = assistant_cli.main(["query", "--intent-json", json.dumps(intent)])

    assert exit_code == 1
    payload = _output(capsys)
    assert payload["status"] == "error"
    assert payload["error"]["type"] == "ValidationError"
    assert "category2" in payload["error"]["message"]


def test_query_invalid_period(store, capsys) -> None:
    exit_code = assistant_cli.main(
        ["query", "--intent-json", '{"intent_type": "PERIOD_COMPARISON", '
         '"parameters": {"period1": "LAST_MONTH", "period2": "NEXT_YEAR"}}']
    )

    assert exit_code == 1
    assert _output(capsys)["error"]["type"] == "InvalidPeriodError"


def test_query_malformed_json(store, capsys) -> None:
    assert assistant_cli.main(["query", "--intent-json", "{not json"]) == 1
    assert _output(capsys)["status"] == "error"


def test_query_question_without_api_key(store, monkeypatch, capsys) -> None:
    monkeypatch.setattr(assistant_cli, "missing_llm_config", lambda: ["OPENAI_API_KEY"])

    assert assistant_cli.main(["query", "--question", "How much did I spend today?"]) == 1
    assert "OPENAI_API_KEY" in _output(capsys)["error"]["message"]


def test_query_question_is_classified(store, mocker, capsys) -> None:
    store.transactions.append(_recent_transaction(42))
    mocker.patch.object(assistant_cli, "missing_llm_config", return_value=[])
    classify = mocker.patch.object(
        assistant_cli,
        "classify_intent",
        return_value=ExpenseIntent(intent_type=IntentType.TOTAL_SPEND, period=Period.TODAY, confidence=0.9),
    )

    assert assistant_cli.main(["query", "--question", "How much did I spend today?"]) == 0

    classify.assert_called_once_with("How much did I spend today?")
    payload = _output(capsys)
    assert payload["data"] == {"period": "TODAY", "total_spent": 42.0}


def test_query_classifier_failure_is_reported(store, mocker, capsys) -> None:
    mocker.patch.object(assistant_cli, "missing_llm_config", return_value=[])
    mocker.patch.object(assistant_cli, "classify_intent", side_effect=RuntimeError("rate limited"))

    assert assistant_cli.main(["query", "--question", "How much?"]) == 1
    assert _output(capsys)["error"]["type"] == "IntentError"


def test_categorize_static_vendor(store, capsys) -> None:
    assert assistant_cli.main(["categorize", "Zomato", "--no-llm"]) == 0
    assert _output(capsys)["category"] == "Food"


def test_vendor_spend(store, capsys) -> None:
    store.transactions.extend([_recent_transaction(30, vendor="Uber", category="Travel"),
                               _recent_transaction(10, vendor="UBER", category="Travel")])

    assert assistant_cli.main(["vendor-spend", "uber", "--period", "THIS_MONTH"]) == 0
    data = _output(capsys)["data"]
    assert data["total_spent"] == 40.0
    assert data["count"] == 2


def test_build_classifier_respects_no_llm(monkeypatch) -> None:
    monkeypatch.setattr(assistant_cli, "missing_llm_config", lambda: [])
    assert assistant_cli.build_classifier(no_llm=True) is None


def test_build_classifier_without_api_key(monkeypatch) -> None:
    monkeypatch.setattr(assistant_cli, "missing_llm_config", lambda: ["OPENAI_API_KEY"])
    assert assistant_cli.build_classifier(no_llm=False) is None


def test_build_store_defaults_to_memory(monkeypatch) -> None:
    monkeypatch.setattr(assistant_cli, "KV_ENABLED", False)
    assert isinstance(assistant_cli.build_store(), MemoryStore)


def test_query_non_string_category_is_reported(store, capsys) -> None:
    intent = {"intent_type": "CATEGORY_SUMMARY", "category": 5}

    assert assistant_cli.main(["query", "--intent-json", json.dumps(intent)]) == 1
    payload = _output(capsys)
    assert payload["status"] == "error"
    assert payload["error"]["type"] == "IntentError"
    assert "category" in payload["error"]["message"]
