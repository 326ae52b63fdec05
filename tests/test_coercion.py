"""Tests for literal coercion."""

import pytest

from docsql.query.coercion import coerce_literal, format_literal, parse_number, strip_quotes


class TestCoerceLiteral:
    """Tests for coerce_literal precedence."""

    def test_booleans_are_case_sensitive(self):
        assert coerce_literal("true") is True
        assert coerce_literal("false") is False
        assert coerce_literal("True") == "True"
        assert coerce_literal("FALSE") == "FALSE"

    def test_integers_and_floats(self):
        assert coerce_literal("21") == 21
        assert isinstance(coerce_literal("21"), int)
        assert coerce_literal("-3") == -3
        assert coerce_literal("2.5") == 2.5
        assert coerce_literal("1e3") == 1000.0
        assert coerce_literal(".5") == 0.5

    def test_mixed_token_is_not_a_number(self):
        assert coerce_literal("123abc") == "123abc"

    def test_empty_token_is_not_zero(self):
        assert coerce_literal("") == ""

    def test_quotes_strip_exactly_one_layer(self):
        assert coerce_literal("'Ann'") == "Ann"
        assert coerce_literal('"Ann"') == "Ann"
        assert coerce_literal("'\"x\"'") == '"x"'
        assert coerce_literal("\"'x'\"") == "'x'"

    def test_quoted_number_stays_a_string(self):
        assert coerce_literal("'21'") == "21"
        assert coerce_literal('"true"') == "true"

    def test_mismatched_quotes_are_kept(self):
        assert coerce_literal("'Ann\"") == "'Ann\""
        assert coerce_literal("'") == "'"

    def test_bare_word_is_verbatim(self):
        assert coerce_literal("Ann") == "Ann"

    @pytest.mark.parametrize("token", ["nan", "inf", "-Infinity", "1_000", "1e400"])
    def test_non_decimal_or_overflowing_number_stays_a_string(self, token):
        assert coerce_literal(token) == token

    @pytest.mark.parametrize("token", ["0", "42", "-7", "3.25", "1e3", "1e308", "true", "false"])
    def test_number_and_boolean_round_trip(self, token):
        value = coerce_literal(token)
        assert coerce_literal(format_literal(value)) == value


class TestFormatLiteral:
    """Tests for format_literal."""

    def test_formats_scalars(self):
        assert format_literal(True) == "true"
        assert format_literal(None) == "null"
        assert format_literal(5) == "5"
        assert format_literal("x") == "x"

    def test_formats_nested_values_as_json(self):
        assert format_literal({"a": 1}) == '{"a": 1}'


class TestStripQuotes:
    """Tests for id quote stripping."""

    def test_strips_single_and_double(self):
        assert strip_quotes("'abc123'") == "abc123"
        assert strip_quotes('"abc123"') == "abc123"
        assert strip_quotes("abc123") == "abc123"
        assert strip_quotes("  'abc' ") == "abc"


class TestParseNumber:
    """Tests for parse_number."""

    def test_decimal_literals(self):
        assert parse_number("7") == 7
        assert parse_number("-0.25") == -0.25
        assert parse_number("2E2") == 200.0

    @pytest.mark.parametrize("token", ["", " 1", "nan", "inf", "1_000", "0x10", "1e400"])
    def test_rejected(self, token):
        assert parse_number(token) is None
