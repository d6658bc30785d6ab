"""
Tests for monetary token extraction and money normalization.
"""
import pytest
from decimal import Decimal

from ledger_parser.core.tokens import MonetaryToken, extract_tokens, parse_magnitude, contains_token
from ledger_parser.core.normalize import (
    clean_description, normalize_money, normalize_text, remove_first, strip_cell,
    multiply, normalize_account_number, quantize, total,
)


class TestExtractTokens:
    """Monetary token grammar."""

    def test_finds_all_tokens_in_order(self):
        tokens = extract_tokens("CHECK 102 1,234.56 25.00- 9,876.54")
        assert [t.raw_text for t in tokens] == ["1,234.56", "25.00-", "9,876.54"]
        assert [t.is_negative for t in tokens] == [False, True, False]

    def test_thousands_separators_are_stripped(self):
        token = extract_tokens("1,234,567.89")[0]
        assert token.magnitude == Decimal("1234567.89")

    def test_trailing_minus_sets_sign_not_magnitude(self):
        token = extract_tokens("271.84-")[0]
        assert token.magnitude == Decimal("271.84")
        assert token.is_negative
        assert token.signed == Decimal("-271.84")

    def test_signs_normalize_to_same_magnitude(self):
        plain = extract_tokens("271.84")[0]
        trailing = extract_tokens("271.84-")[0]
        assert plain.magnitude == trailing.magnitude

    @pytest.mark.parametrize("text", [
        "03-14",
        "CHECK #102",
        "12.5",
        "1234.56",
        "12.345",
        "1,23.45",
    ])
    def test_other_numeric_shapes_are_not_tokens(self, text):
        assert extract_tokens(text) == []
        assert not contains_token(text)

    def test_empty_span(self):
        assert extract_tokens("") == []
        assert extract_tokens(None) == []

    def test_token_positions(self):
        token = extract_tokens("FEE 25.00-")[0]
        assert (token.start, token.end) == (4, 10)

    def test_token_equality(self):
        assert MonetaryToken("1.00", Decimal("1.00"), False) == extract_tokens("x 1.00")[0]

    def test_unparseable_magnitude_is_zero(self):
        assert parse_magnitude("abc") == Decimal("0")


class TestNormalize:
    """Text and money helpers."""

    def test_normalize_text_collapses_whitespace(self):
        assert normalize_text("  A   B\tC \n") == "A B C"

    def test_remove_first_only_removes_one_occurrence(self):
        assert remove_first("10.00 PAID 10.00", "10.00") == " PAID 10.00"

    def test_clean_description_strips_noise(self):
        text = "DEPOSIT Continued From Previous Page  ATM -"
        assert clean_description(text) == "DEPOSIT ATM"

    @pytest.mark.parametrize("text", [
        "CHECK #102 PURCHASE AT STORE",
        "continued from continued from previous page previous page",
        "FEE - -",
        "  spaced   out  ",
        "",
    ])
    def test_clean_description_is_idempotent(self, text):
        once = clean_description(text)
        assert clean_description(once) == once

    @pytest.mark.parametrize("raw,expected", [
        ("1,234.56", Decimal("1234.56")),
        ("25.00-", Decimal("-25.00")),
        ("-25.00", Decimal("-25.00")),
        ("(25.00)", Decimal("-25.00")),
        ("$ 1,000.00", Decimal("1000.00")),
        ("", Decimal("0.00")),
        ("n/a", Decimal("0.00")),
    ])
    def test_normalize_money(self, raw, expected):
        assert normalize_money(raw) == expected

    def test_strip_cell(self):
        assert strip_cell(' "03-14" ') == "03-14"
        assert strip_cell(None) == ""

    def test_normalize_account_number(self):
        assert normalize_account_number("Acct # 1000-123456") == "1000123456"

    def test_quantize_rounds_half_up(self):
        assert quantize(Decimal("0.625")) == Decimal("0.63")
        assert quantize(None) is None

    def test_quantize_keeps_every_digit_of_large_amounts(self):
        amount = Decimal("1" + "000" * 10 + ".005")
        assert quantize(amount) == Decimal("1" + "000" * 10 + ".01")
        assert quantize(Decimal("-" + "9" * 40)) == Decimal("-" + "9" * 40 + ".00")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
    def test_quantize_non_finite_is_zero(self, value):
        assert quantize(Decimal(value)) == Decimal("0.00")

    def test_total_is_exact(self):
        big = Decimal("1" + "000" * 10 + ".55")
        assert total([big, Decimal("0.45"), Decimal("NaN")]) == Decimal("1" + "000" * 9 + "001.00")
        assert total([]) == Decimal("0")

    def test_multiply_is_exact(self):
        big = Decimal("1" + "000" * 10 + ".55")
        assert multiply(big, Decimal("2")) == Decimal("2" + "000" * 10 + ".10")

    def test_large_grouped_token_magnitude(self):
        raw = "1" + ",000" * 10 + ".00"
        token = extract_tokens(f"WIRE {raw}-")[0]
        assert token.magnitude == Decimal("1" + "000" * 10 + ".00")
        assert token.signed == Decimal("-1" + "000" * 10 + ".00")
