# -*- coding: utf-8 -*-
"""
Ingestion pass

Runs a batch of mail bodies through the parser and writes the outcome to a
TransactionStore. One bad message or one failed write never stops the batch.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from expense_tracker.parser import parse_email
from expense_tracker.parser.extractors import Categorizer
from expense_tracker.services.storage import TransactionStore

logger = logging.getLogger(__name__)


@dataclass
class MailMessage:
    body: str
    headers: Dict[str, str] = field(default_factory=dict)
    received_at: Optional[datetime] = None


@dataclass
class IngestSummary:
    """
    parsed:   transactions extracted and stored
    unparsed: messages no extractor matched
    failed:   store writes that raised (either kind)
    """

    parsed: int = 0
    unparsed: int = 0
    failed: int = 0
    by_type: Counter = field(default_factory=Counter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parsed": self.parsed,
            "unparsed": self.unparsed,
            "failed": self.failed,
            "by_type": dict(self.by_type),
        }


def process_emails(
    messages: Iterable[MailMessage],
    store: TransactionStore,
    categorizer: Categorizer,
) -> IngestSummary:
    summary = IngestSummary()

    for index, message in enumerate(messages):
        tx = parse_email(message.body, categorizer, received_at=message.received_at)

        if tx is None:
            summary.unparsed += 1
            try:
                store.save_unparsed_email(message.body, message.headers)
            except Exception as e:
                summary.failed += 1
                logger.error(f"Failed to keep unparsed message #{index}: {e}")
            continue

        try:
            store.save_transaction(tx)
        except Exception as e:
            summary.failed += 1
            logger.error(f"Failed to save {tx.type.value} transaction from message #{index}: {e}")
            continue

        summary.parsed += 1
        summary.by_type[tx.type.value] += 1

    logger.info(
        f"Ingestion finished: {summary.parsed} parsed, {summary.unparsed} unparsed, {summary.failed} failed"
    )
    return summary
