# -*- coding: utf-8 -*-
"""
GPT Vendor Classifier

Last step of the vendor categorizer chain. Asks the model for exactly one
label from the closed category set; VendorCategorizer coerces anything else
to "Other" and caches the answer.
"""

import logging
from typing import Optional

from openai import OpenAI

from expense_tracker.config import GPT_MODEL, OPENAI_API_KEY
from expense_tracker.shared.category_resolver import AI_CATEGORIES

logger = logging.getLogger(__name__)

_CATEGORY_ORDER = ("Food", "Shopping", "Travel", "Entertainment", "Bills", "Healthcare", "Other")


def build_vendor_prompt(vendor: str) -> str:
    labels = ", ".join(f'"{c}"' for c in _CATEGORY_ORDER if c in AI_CATEGORIES)
    return f"""Classify this vendor into one of these categories:
[{labels}]

Vendor: "{vendor}"

Instructions:
- Return ONLY the category name (e.g., "Food", "Shopping", etc.)
- Do not include any explanation or additional text
- Use "Other" if the vendor doesn't clearly fit any category
- Consider common vendor patterns and business types

Category:"""


class OpenAIVendorClassifier:
    """VendorClassifier backed by an OpenAI chat completion."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        if client is None:
            key = api_key or OPENAI_API_KEY
            if not key:
                raise ValueError("OPENAI_API_KEY is not set")
            client = OpenAI(api_key=key)
        self.client = client
        self.model = model or GPT_MODEL

    def classify_vendor(self, vendor: str) -> str:
        """
        Returns:
            The raw label the model answered with, stripped of quotes and whitespace

        Raises:
            Exception: GPT API call failed (the categorizer treats it as a miss)
        """
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": build_vendor_prompt(vendor)}],
                temperature=0,
                max_tokens=20,
            )
        except Exception as e:
            logger.error(f"GPT vendor classification failed: {e}")
            raise

        answer = (completion.choices[0].message.content or "").strip().strip('"').strip()
        logger.debug(f"GPT vendor answer for {vendor!r}: {answer!r}")
        return answer
