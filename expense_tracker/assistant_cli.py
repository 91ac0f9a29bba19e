# -*- coding: utf-8 -*-
"""Expense tracker CLI.

Local entry point that wires the parser, categorizer, store and aggregation
service together and prints JSON on stdout.

- `ingest` reads mail bodies from files and stores what the parser extracts.
- `query` answers one intent (given as JSON, or classified from a question).
- `categorize` / `vendor-spend` expose the categorizer and vendor totals.

`--no-llm` never calls OpenAI. The store is Redis when REDIS_URL is set and
an in-process MemoryStore otherwise (nothing survives between runs then).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from expense_tracker.analytics.dispatcher import execute_aggregation
from expense_tracker.analytics.intent import ExpenseIntent
from expense_tracker.analytics.service import AggregationService
from expense_tracker.config import DEFAULT_PERIOD, KV_ENABLED, LOG_LEVEL, missing_llm_config
from expense_tracker.errors import ExpenseTrackerError, IntentError
from expense_tracker.gpt.intent_classifier import classify_intent
from expense_tracker.gpt.vendor_classifier import OpenAIVendorClassifier
from expense_tracker.services.ingest import MailMessage, process_emails
from expense_tracker.services.kv_store import KVStore
from expense_tracker.services.storage import MemoryStore, RedisStore, TransactionStore
from expense_tracker.shared.vendor_categorizer import VendorCategorizer, VendorClassifier

logger = logging.getLogger(__name__)


def _print_json(payload: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False))
    sys.stdout.write("\n")


def _print_error(error_type: str, message: str) -> int:
    _print_json({"status": "error", "error": {"type": error_type, "message": message}})
    return 1


def build_store() -> TransactionStore:
    if KV_ENABLED:
        return RedisStore(KVStore())
    logger.info("REDIS_URL not set, using in-memory store")
    return MemoryStore()


def build_classifier(no_llm: bool) -> Optional[VendorClassifier]:
    if no_llm:
        return None
    missing = missing_llm_config()
    if missing:
        logger.warning(f"AI vendor classification disabled, missing: {', '.join(missing)}")
        return None
    return OpenAIVendorClassifier()


def _parse_received_at(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid --received-at: {value!r}")


def cmd_ingest(args: argparse.Namespace) -> int:
    messages = []
    for raw_path in args.paths:
        path = Path(raw_path)
        try:
            body = path.read_text(encoding="utf-8")
        except OSError as e:
            return _print_error("io_error", f"cannot read {path}: {e}")
        messages.append(MailMessage(body=body, headers={"source": str(path)}, received_at=args.received_at))

    store = build_store()
    try:
        categorizer = VendorCategorizer(store=store, classifier=build_classifier(args.no_llm))
        summary = process_emails(messages, store, categorizer)
    finally:
        store.close()

    _print_json({"status": "ok", "summary": summary.to_dict()})
    return 0


def _load_intent(args: argparse.Namespace) -> ExpenseIntent:
    if args.intent_json:
        try:
            data = json.loads(args.intent_json)
        except json.JSONDecodeError as e:
            raise ExpenseTrackerError(f"invalid --intent-json: {e}")
        return ExpenseIntent.from_dict(data)

    missing = missing_llm_config()
    if missing:
        raise ExpenseTrackerError(f"--question needs {', '.join(missing)}")
    try:
        return classify_intent(args.question)
    except ExpenseTrackerError:
        raise
    except Exception as e:
        raise IntentError(f"intent classification failed: {e}") from e


def cmd_query(args: argparse.Namespace) -> int:
    store = build_store()
    try:
        intent = _load_intent(args)
        result = execute_aggregation(intent, AggregationService(store))
    except ExpenseTrackerError as e:
        return _print_error(type(e).__name__, str(e))
    finally:
        store.close()

    _print_json({"status": "ok", "intent": intent.to_dict(), "data": result.to_dict()})
    return 0


def cmd_categorize(args: argparse.Namespace) -> int:
    store = build_store()
    try:
        categorizer = VendorCategorizer(store=store, classifier=build_classifier(args.no_llm))
        category = categorizer.categorize(args.vendor)
    finally:
        store.close()

    _print_json({"status": "ok", "vendor": args.vendor, "category": category})
    return 0


def cmd_vendor_spend(args: argparse.Namespace) -> int:
    store = build_store()
    try:
        result = AggregationService(store).get_vendor_spend(args.vendor, args.period)
    except ExpenseTrackerError as e:
        return _print_error(type(e).__name__, str(e))
    finally:
        store.close()

    _print_json({"status": "ok", "data": result.to_dict()})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="expense-tracker", description="Bank notification expense tracker")
    sub = parser.add_subparsers(dest="command", required=True)

    ingest = sub.add_parser("ingest", help="Parse notification bodies from files and store the transactions")
    ingest.add_argument("paths", nargs="+", metavar="PATH")
    ingest.add_argument("--received-at", type=_parse_received_at, help="ISO timestamp used for formats without a date")
    ingest.add_argument("--no-llm", action="store_true", help="Never call OpenAI (static table and cache only)")
    ingest.set_defaults(func=cmd_ingest)

    query = sub.add_parser("query", help="Answer a spending question with aggregated numbers")
    source = query.add_mutually_exclusive_group(required=True)
    source.add_argument("--intent-json", help="ExpenseIntent as JSON")
    source.add_argument("--question", help="Natural-language question (classified with OpenAI)")
    query.set_defaults(func=cmd_query)

    categorize = sub.add_parser("categorize", help="Resolve the category of a vendor name")
    categorize.add_argument("vendor")
    categorize.add_argument("--no-llm", action="store_true", help="Never call OpenAI (static table and cache only)")
    categorize.set_defaults(func=cmd_categorize)

    vendor_spend = sub.add_parser("vendor-spend", help="Total and average spend at one vendor")
    vendor_spend.add_argument("vendor")
    vendor_spend.add_argument("--period", default=DEFAULT_PERIOD)
    vendor_spend.set_defaults(func=cmd_vendor_spend)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
