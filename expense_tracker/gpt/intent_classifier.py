# -*- coding: utf-8 -*-
"""
GPT Intent Classifier

Turns a natural-language spending question into an ExpenseIntent. The model
only labels the question; every number in the answer comes from the
aggregation service.
"""

import json
import logging
import re
from typing import Any, Optional

from openai import OpenAI

from expense_tracker.analytics.intent import ExpenseIntent, IntentType
from expense_tracker.analytics.period_resolver import Period
from expense_tracker.config import GPT_MODEL, OPENAI_API_KEY
from expense_tracker.errors import IntentError
from expense_tracker.shared.category_resolver import QUERY_CATEGORIES

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def build_intent_prompt(question: str) -> str:
    intent_types = "\n".join(f'- "{t.value}"' for t in IntentType)
    periods = ", ".join(p.value for p in Period)
    categories = ", ".join(sorted(QUERY_CATEGORIES))

    return f"""You are an expense tracker intent classifier. Analyze the user's question and extract structured intent information.

User Question: "{question}"

Valid Intent Types (use exactly these strings):
{intent_types}

Valid Categories (if mentioned): {categories}

Valid Period Values (if mentioned): {periods}
If no time period is mentioned, omit the period field.

Extra fields go into "parameters" (string values):
- CATEGORY_COMPARISON: "category1", "category2"
- PERIOD_COMPARISON: "period1", "period2" (period values above)
- TOP_MERCHANTS: "limit"
- MONTHLY_TREND: "months"

Return ONLY a JSON object:
{{
  "intent_type": "<intent type>",
  "category": "<category, omit if not mentioned>",
  "period": "<period, omit if not mentioned>",
  "vendor": "<vendor, omit if not mentioned>",
  "amount": <number, omit if not mentioned>,
  "parameters": {{}},
  "confidence": <0.0-1.0>
}}

Examples:
Question: "How much did I spend on food this month?"
Response: {{"intent_type": "CATEGORY_SUMMARY", "category": "Food", "period": "THIS_MONTH", "confidence": 0.95}}

Question: "Compare food and shopping last month"
Response: {{"intent_type": "CATEGORY_COMPARISON", "period": "LAST_MONTH", "parameters": {{"category1": "Food", "category2": "Shopping"}}, "confidence": 0.9}}
"""


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    return _CODE_FENCE_RE.sub("", (text or "").strip()).strip()


def parse_intent_response(text: str) -> ExpenseIntent:
    """
    Raises:
        IntentError: response is not JSON or does not describe a valid intent
    """
    cleaned = strip_code_fences(text)
    try:
        data: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise IntentError(f"intent response is not valid JSON: {e}")
    return ExpenseIntent.from_dict(data)


def classify_intent(
    question: str,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    client: Optional[OpenAI] = None,
) -> ExpenseIntent:
    """
    Classify a spending question.

    Raises:
        ValueError: API Key 未設定
        IntentError: the model answer could not be used
        Exception: GPT API 呼叫失敗
    """
    if not question or not question.strip():
        raise IntentError("question is empty")

    if client is None:
        key = api_key or OPENAI_API_KEY
        if not key:
            raise ValueError("OPENAI_API_KEY is not set")
        client = OpenAI(api_key=key)

    try:
        completion = client.chat.completions.create(
            model=model or GPT_MODEL,
            messages=[
                {"role": "system", "content": "You classify personal finance questions. Reply with JSON only."},
                {"role": "user", "content": build_intent_prompt(question.strip())},
            ],
            temperature=0,
        )
    except Exception as e:
        logger.error(f"GPT intent classification failed: {e}")
        raise

    response_text = completion.choices[0].message.content or ""
    logger.debug(f"GPT intent response: {response_text}")

    intent = parse_intent_response(response_text)
    logger.info(f"Classified question as {intent.intent_type.value} (confidence {intent.confidence:.2f})")
    return intent
