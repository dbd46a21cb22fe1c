"""
65816 Assembly Lexical Primitives
=================================

This module implements the character-level building blocks of the
grammar: identifiers, numeric literals, whitespace and ordered choice.
There is no separate tokenization pass; every grammar rule reads the
source text directly through these helpers.

Calling Convention
------------------
Every scanner takes the full text and a start position and returns a
``(new_position, value)`` pair. On failure it raises a ParseError whose
``offset`` is the position where the attempted token started. Nothing
is mutated, so a failed attempt leaves no trace and the caller can try
another rule from the same position.

Identifiers
-----------
Identifiers follow Unicode Standard Annex #31 (Unicode Identifier and
Pattern Syntax): the first character is XID_Start, the rest are
XID_Continue. Underscores are allowed anywhere, and ``!`` is allowed as
the first character only (xkas and Asar use it for defines):

| Input      | Identifier | Remainder |
|------------|------------|-----------|
| hello      | hello      |           |
| abc123     | abc123     |           |
| he+        | he         | +         |
| !variable  | !variable  |           |
| !!         | !          | !         |
| 世界       | 世界       |           |

Number Formats
--------------
| Format      | Prefix | Example       | Width     |
|-------------|--------|---------------|-----------|
| Decimal     | (none) | 123           | NONE      |
| Hexadecimal | $      | $7F           | ONE_BYTE  |
| Hexadecimal | $      | $007F         | TWO_BYTES |
| Hexadecimal | $      | $7F7F7F       | NONE      |

Values above $FFFFFFFF raise NumericOverflowError.
"""

import string
from typing import Callable, Sequence, TypeVar

from mvp.errors import (
    ExhaustedAlternativesError,
    GrammarMismatchError,
    LexError,
    NumericOverflowError,
    ParseError,
)
from mvp.parser.ast import MAX_NUMBER, Number, NumberWidth


T = TypeVar("T")

# A grammar rule applied at a position: returns (new_position, value)
Rule = Callable[[int], tuple[int, T]]

WHITESPACE = " \t\r\n\f\v"

# Characters that continue an arithmetic expression
OPERATOR_CHARS = "+-*/"

DECIMAL_DIGITS = string.digits
HEX_DIGITS = string.hexdigits

# Longest digit runs (without leading zeros) that can fit in 32 bits
_MAX_DECIMAL_DIGITS = len(str(MAX_NUMBER))
_MAX_HEX_DIGITS = 8


# =============================================================================
# Character Classes
# =============================================================================

def is_identifier_start(char: str) -> bool:
    """Check whether ``char`` may start an identifier."""
    if len(char) != 1:
        return False
    return char == "!" or char == "_" or char.isidentifier()


def is_identifier_continue(char: str) -> bool:
    """Check whether ``char`` may continue an identifier."""
    if len(char) != 1:
        return False
    return char == "_" or ("a" + char).isidentifier()


# =============================================================================
# Character Access
# =============================================================================

def peek(text: str, pos: int) -> str:
    """Return the character at ``pos``, or "" past the end of text."""
    return text[pos:pos + 1]


def skip_whitespace(text: str, pos: int) -> int:
    """Return the first position at or after ``pos`` that is not whitespace."""
    # Note: "" in WHITESPACE is True, so check bounds first
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return pos


def at_word_end(text: str, pos: int) -> bool:
    """Check that no identifier character follows ``pos``."""
    return not is_identifier_continue(peek(text, pos))


def expect_char(
    text: str,
    pos: int,
    chars: str,
    what: str,
    error: type[ParseError] = LexError,
) -> tuple[int, str]:
    """
    Consume one character out of ``chars``.

    Args:
        text: Source text
        pos: Position of the expected character
        chars: Accepted characters (compared case-sensitively)
        what: Description for the error message
        error: Error class to raise; composite rules pass
               GrammarMismatchError once their first token matched

    Returns:
        (position after the character, the character)
    """
    char = peek(text, pos)
    if not char or char not in chars:
        found = repr(char) if char else "end of input"
        raise error(f"expected {what}, found {found}", pos, text)
    return pos + 1, char


def expect_token(
    text: str,
    pos: int,
    chars: str,
    what: str,
    error: type[ParseError] = LexError,
) -> tuple[int, str]:
    """
    Like expect_char, but skips whitespace before and after the character.
    """
    pos = skip_whitespace(text, pos)
    end, char = expect_char(text, pos, chars, what, error)
    return skip_whitespace(text, end), char


def scan_run(text: str, pos: int, chars: str) -> int:
    """Return the end of the maximal run of ``chars`` starting at ``pos``."""
    end = pos
    while end < len(text) and text[end] in chars:
        end += 1
    return end


# =============================================================================
# Token Scanners
# =============================================================================

def scan_identifier(text: str, pos: int) -> tuple[int, str]:
    """
    Scan the maximal identifier starting at ``pos``.

    Raises:
        LexError: If the first character cannot start an identifier
    """
    if not is_identifier_start(peek(text, pos)):
        found = repr(peek(text, pos)) if pos < len(text) else "end of input"
        raise LexError(f"expected identifier, found {found}", pos, text)

    end = pos + 1
    while end < len(text) and is_identifier_continue(text[end]):
        end += 1
    return end, text[pos:end]


def hex_width_for_length(length: int) -> NumberWidth:
    """Map the digit count of a hex literal to its suggested width."""
    if length == 2:
        return NumberWidth.ONE_BYTE
    if length == 4:
        return NumberWidth.TWO_BYTES
    return NumberWidth.NONE


def _check_range(digits: str, radix: int, max_digits: int, literal: str,
                 pos: int, text: str) -> int:
    # Refuse long runs before converting; int() rejects very long strings
    if len(digits.lstrip("0")) > max_digits:
        raise NumericOverflowError(literal, pos, text)
    value = int(digits, radix)
    if value > MAX_NUMBER:
        raise NumericOverflowError(literal, pos, text)
    return value


def scan_decimal(text: str, pos: int) -> tuple[int, Number]:
    """
    Scan a decimal literal: a maximal run of ASCII digits.

    Raises:
        LexError: If no digit starts at ``pos``
        NumericOverflowError: If the value exceeds 32 bits
    """
    end = scan_run(text, pos, DECIMAL_DIGITS)
    if end == pos:
        raise LexError("expected decimal number", pos, text)

    digits = text[pos:end]
    value = _check_range(digits, 10, _MAX_DECIMAL_DIGITS, digits, pos, text)
    return end, Number(value, NumberWidth.NONE)


def scan_hex(text: str, pos: int) -> tuple[int, Number]:
    """
    Scan a hexadecimal literal: ``$``, optional whitespace, hex digits.

    The number of digit characters, leading zeros included, decides the
    literal's NumberWidth.

    Raises:
        LexError: If no ``$`` starts at ``pos``
        GrammarMismatchError: If ``$`` is not followed by hex digits
        NumericOverflowError: If the value exceeds 32 bits
    """
    digits_start, _ = expect_char(text, pos, "$", "'$'")
    digits_start = skip_whitespace(text, digits_start)

    end = scan_run(text, digits_start, HEX_DIGITS)
    if end == digits_start:
        raise GrammarMismatchError("expected hex digits after '$'", digits_start, text)

    digits = text[digits_start:end]
    value = _check_range(digits, 16, _MAX_HEX_DIGITS, f"${digits}", pos, text)
    return end, Number(value, hex_width_for_length(len(digits)))


# =============================================================================
# Ordered Choice
# =============================================================================

def first_of(
    alternatives: Sequence[Rule],
    text: str,
    pos: int,
    what: str,
) -> tuple[int, T]:
    """
    Try each alternative at ``pos`` in order and return the first success.

    Every alternative starts from the same position; since rules never
    mutate shared state, a failed alternative leaves nothing behind.
    Fatal errors propagate immediately.

    Raises:
        ExhaustedAlternativesError: If every alternative failed
    """
    failures: list[ParseError] = []

    for alternative in alternatives:
        try:
            return alternative(pos)
        except ParseError as error:
            if error.fatal:
                raise
            failures.append(error)

    raise ExhaustedAlternativesError(f"expected {what}", pos, text, failures)


# =============================================================================
# Entry Point
# =============================================================================

def parse_identifier(text: str) -> tuple[str, str]:
    """
    Parse an identifier at the start of ``text``.

    No whitespace is skipped on either side.

    Example:
        >>> parse_identifier("he+")
        ('+', 'he')

    Returns:
        (remainder, identifier)

    Raises:
        LexError: If ``text`` does not start with an identifier
    """
    end, name = scan_identifier(text, 0)
    return text[end:], name
