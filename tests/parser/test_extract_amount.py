# -*- coding: utf-8 -*-
"""
Unit tests for extract_amount module.
"""

import pytest

from expense_tracker.parser.errors import ParserError, ParserErrorCode
from expense_tracker.parser.extract_amount import parse_amount


class TestParseAmount:
    """Tests for parse_amount function."""

    # === Valid amounts ===

    def test_plain_decimal(self):
        assert parse_amount("304.00") == 304.0

    def test_integer(self):
        assert parse_amount("500") == 500.0

    def test_thousands_separator(self):
        """1,234.50 -> 1234.5"""
        assert parse_amount("1,234.50") == 1234.5

    def test_indian_grouping(self):
        """1,00,000.00 -> 100000"""
        assert parse_amount("1,00,000.00") == 100000.0

    def test_trailing_sentence_period(self):
        """INR 500. -> 500"""
        assert parse_amount("500.") == 500.0

    def test_surrounding_whitespace(self):
        assert parse_amount("  75.25 ") == 75.25

    def test_zero_is_allowed(self):
        assert parse_amount("0.00") == 0.0

    # === Malformed amounts ===

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3", "-50", "12a", ",", None])
    def test_malformed_amount_raises(self, text):
        with pytest.raises(ParserError) as exc_info:
            parse_amount(text)
        assert exc_info.value.code == ParserErrorCode.INVALID_AMOUNT
