"""Literal and text formatting utilities for Blocks2Rego

String literal encoding, number formatting, line prefixing and
comment wrapping.
"""

import math
import re
import textwrap
from decimal import Decimal
from typing import Tuple, Union

from blocks2rego.core.order import Order

_NUMBER_LITERAL = re.compile(r'^\s*-?\d+(\.\d+)?\s*$')
_STRING_LITERAL = re.compile(r"^\s*'([^']|\\')*'\s*$")
_NEWLINE_NOT_AT_END = re.compile(r'\n(?!\Z)')


def quote(text: str) -> str:
    """Encode a string as a single-quoted Rego string literal"""
    text = (text.replace('\\', '\\\\')
                .replace('\n', '\\\n')
                .replace("'", "\\'"))
    return f"'{text}'"


def multiline_quote(text: str) -> str:
    """Encode a multiline string as a concatenation of quoted lines"""
    lines = [quote(line) for line in text.split('\n')]
    return " + '\\n' +\n".join(lines)


def is_string_literal(code: str) -> bool:
    """Check if code is a single-quoted string literal"""
    return bool(_STRING_LITERAL.match(code))


def force_string(value: str) -> Tuple[str, Order]:
    """Wrap a value in String(...) unless it is already a string literal

    Returns:
        Code and order of the string expression
    """
    if is_string_literal(value):
        return value, Order.ATOMIC
    return f"String({value})", Order.FUNCTION_CALL


def is_number(code: str) -> bool:
    """Check if code is a plain (optionally negative) decimal numeral"""
    return bool(_NUMBER_LITERAL.match(code))


def format_number(value: Union[int, float]) -> str:
    """Format a number the way the target runtime prints it

    Integral values lose their fractional part, negative zero prints as 0.
    Magnitudes in [1e-6, 1e21) print in plain decimal notation, others
    with an unpadded signed exponent (1e-7, 1.5e+22).
    """
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer() and abs(value) < 1e21:
            value = int(value)
        else:
            return _format_float(value)
    if value == 0:
        return '0'
    return str(value)


def _format_float(value: float) -> str:
    text = repr(value)
    if 'e' not in text:
        return text
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), 'f')
    mantissa, exponent = text.split('e')
    power = int(exponent)
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def parse_number(text: Union[str, int, float]) -> Union[int, float]:
    """Parse a numeric field value

    Raises:
        ValueError: If the text is not a number
    """
    if isinstance(text, bool):
        raise ValueError(f"Not a number: {text!r}")
    if isinstance(text, (int, float)):
        return text
    stripped = str(text).strip()
    if not stripped:
        return 0
    try:
        return int(stripped)
    except ValueError:
        return float(stripped)


def prefix_lines(text: str, prefix: str) -> str:
    """Prepend a prefix to every line of text

    A trailing newline does not start a new prefixed line.
    """
    return prefix + _NEWLINE_NOT_AT_END.sub('\n' + prefix, text)


def wrap_comment(text: str, width: int) -> str:
    """Word-wrap comment text at whitespace, keeping explicit line breaks

    Long words and hyphenated words are never split.
    """
    wrapped = []
    for line in text.split('\n'):
        wrapped.extend(textwrap.wrap(line, width, break_long_words=False,
                                     break_on_hyphens=False) or [''])
    return '\n'.join(wrapped)
