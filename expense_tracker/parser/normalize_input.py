# -*- coding: utf-8 -*-
"""Notification body normalization.

Goal:
- Bank alerts often arrive as text/html only; the patterns are written against
  the visible text, so tags and layout whitespace are removed first.
- Be conservative: entities such as "&nbsp;" are the only markup decoded.
"""

from __future__ import annotations

import html
import re

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_html_tags(text: str) -> str:
    s = text or ""

    # 1) Drop tags: <td>Rs.304.00</td> -> Rs.304.00
    s = _TAG_PATTERN.sub("", s)

    # 2) &nbsp; / &amp; and friends
    s = html.unescape(s)

    # 3) Collapse spaces, newlines and non-breaking spaces
    s = _WHITESPACE_PATTERN.sub(" ", s)

    return s.strip()
