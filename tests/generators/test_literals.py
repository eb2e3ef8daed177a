"""Tests for literal formatting utilities"""

import pytest
from blocks2rego.core.order import Order
from blocks2rego.generators.literals import (
    force_string, format_number, is_number, is_string_literal, multiline_quote,
    parse_number, prefix_lines, quote, wrap_comment,
)


class TestQuote:
    """Test suite for string literal encoding"""

    def test_plain(self):
        assert quote("hello") == "'hello'"

    def test_escapes_quote(self):
        assert quote("it's") == "'it\\'s'"

    def test_escapes_backslash(self):
        assert quote("a\\b") == "'a\\\\b'"

    def test_escapes_newline(self):
        assert quote("a\nb") == "'a\\\nb'"

    def test_multiline(self):
        """Test each line is quoted and joined with a newline term"""
        assert multiline_quote("a\nb") == "'a' + '\\n' +\n'b'"

    def test_multiline_single_line(self):
        assert multiline_quote("abc") == "'abc'"


class TestForceString:
    """Test suite for force_string"""

    def test_literal_left_alone(self):
        assert force_string("'abc'") == ("'abc'", Order.ATOMIC)

    def test_escaped_quote_literal(self):
        assert is_string_literal("'it\\'s'")

    def test_expression_wrapped(self):
        assert force_string("x") == ("String(x)", Order.FUNCTION_CALL)

    def test_concatenation_wrapped(self):
        """Test two adjacent literals are not one literal"""
        assert force_string("'a' + 'b'")[1] == Order.FUNCTION_CALL


class TestNumbers:
    """Test suite for number helpers"""

    @pytest.mark.parametrize("code", ["0", "42", "-7", "3.25", " 5 "])
    def test_is_number(self, code):
        assert is_number(code)

    @pytest.mark.parametrize("code", ["x", "1e3", "(5)", "5 + 1", "-x", ""])
    def test_is_not_number(self, code):
        assert not is_number(code)

    @pytest.mark.parametrize("value,expected", [
        (4, "4"),
        (4.0, "4"),
        (-0.0, "0"),
        (2.5, "2.5"),
        (-3, "-3"),
        (1e-06, "0.000001"),
        (1e-07, "1e-7"),
        (1.5e-05, "0.000015"),
        (2.5e-08, "2.5e-8"),
        (1e22, "1e+22"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_parse_number(self):
        assert parse_number("12") == 12
        assert parse_number("1.5") == 1.5
        assert parse_number(7) == 7
        assert parse_number("") == 0

    def test_parse_number_invalid(self):
        with pytest.raises(ValueError):
            parse_number("twelve")


class TestPrefixLines:
    """Test suite for prefix_lines"""

    def test_prefixes_every_line(self):
        assert prefix_lines("a;\nb;\n", "  ") == "  a;\n  b;\n"

    def test_trailing_newline_not_prefixed(self):
        assert prefix_lines("a\n", "// ") == "// a\n"

    def test_blank_lines_prefixed(self):
        assert prefix_lines("a\n\nb", "// ") == "// a\n// \n// b"


class TestWrapComment:
    """Test suite for comment wrapping"""

    def test_short_comment_unchanged(self):
        assert wrap_comment("short", 57) == "short"

    def test_long_comment_wrapped(self):
        text = "one two three four five"
        assert wrap_comment(text, 10) == "one two\nthree four\nfive"

    def test_explicit_newlines_kept(self):
        assert wrap_comment("first\nsecond", 57) == "first\nsecond"

    def test_long_word_not_split(self):
        text = "see https://example.com/a/very/long/path"
        assert wrap_comment(text, 17) == "see\nhttps://example.com/a/very/long/path"

    def test_hyphenated_word_not_split(self):
        assert wrap_comment("aaaa well-known-thing", 13) == "aaaa\nwell-known-thing"
