# =============================================================================
# test_lexer.py - Lexical Primitive Unit Tests
# =============================================================================
# Tests for the character-level scanners of the 65816 grammar.
#
# Test coverage includes:
#   - Identifiers: ASCII, Unicode, underscore and '!' prefix
#   - Number formats: decimal and hexadecimal ($)
#   - Width inference from hex digit count
#   - 32-bit overflow detection
#   - Ordered choice (first_of) and its failure reporting
# =============================================================================

import pytest
from mvp.errors import (
    ExhaustedAlternativesError,
    GrammarMismatchError,
    LexError,
    NumericOverflowError,
)
from mvp.parser.ast import Number, NumberWidth
from mvp.parser.lexer import (
    first_of,
    is_identifier_continue,
    is_identifier_start,
    parse_identifier,
    scan_decimal,
    scan_hex,
    skip_whitespace,
)


# =============================================================================
# Identifier Tests
# =============================================================================

class TestIdentifiers:
    """Test identifier recognition."""

    @pytest.mark.parametrize("text,expected", [
        ("hello", ("", "hello")),
        ("abc123", ("", "abc123")),
        ("he+", ("+", "he")),
        ("!variable", ("", "!variable")),
        ("!!", ("!", "!")),
        ("世界", ("", "世界")),
        ("_tmp", ("", "_tmp")),
        ("snake_case", ("", "snake_case")),
        ("a.b", (".b", "a")),
    ])
    def test_identifier(self, text, expected):
        """Identifiers are the longest valid prefix of the input."""
        assert parse_identifier(text) == expected

    def test_digit_start_rejected(self):
        """Identifiers cannot start with a digit."""
        with pytest.raises(LexError):
            parse_identifier("4")

    def test_empty_input_rejected(self):
        """Empty input has no identifier."""
        with pytest.raises(LexError):
            parse_identifier("")

    def test_leading_whitespace_not_skipped(self):
        """parse_identifier does not skip whitespace."""
        with pytest.raises(LexError) as exc_info:
            parse_identifier(" x")
        assert exc_info.value.offset == 0

    def test_bang_only_at_start(self):
        """'!' may start an identifier but not continue one."""
        assert is_identifier_start("!")
        assert not is_identifier_continue("!")

    def test_digits_continue_identifiers(self):
        """Digits may continue but not start an identifier."""
        assert is_identifier_continue("7")
        assert not is_identifier_start("7")

    def test_character_classes_reject_empty(self):
        """The empty string past the end of text is no identifier character."""
        assert not is_identifier_start("")
        assert not is_identifier_continue("")


# =============================================================================
# Decimal Number Tests
# =============================================================================

class TestDecimalNumbers:
    """Test decimal literal scanning."""

    def test_simple_decimal(self):
        """Decimal literals have no suggested width."""
        assert scan_decimal("42", 0) == (2, Number(42, NumberWidth.NONE))

    def test_stops_at_non_digit(self):
        """Scanning stops at the first non-digit."""
        assert scan_decimal("12ab", 0) == (2, Number(12))

    def test_scans_from_position(self):
        """Scanning starts at the given position."""
        assert scan_decimal("x = 7", 4) == (5, Number(7))

    def test_leading_zeros(self):
        """Leading zeros do not change the value."""
        assert scan_decimal("007", 0) == (3, Number(7))

    def test_largest_value(self):
        """$FFFFFFFF is the largest accepted decimal value."""
        assert scan_decimal("4294967295", 0) == (10, Number(0xFFFFFFFF))

    def test_overflow(self):
        """One past 32 bits is an overflow, not a truncation."""
        with pytest.raises(NumericOverflowError) as exc_info:
            scan_decimal("4294967296", 0)
        assert exc_info.value.literal == "4294967296"
        assert exc_info.value.fatal

    def test_very_long_overflow(self):
        """Very long digit runs overflow too."""
        with pytest.raises(NumericOverflowError):
            scan_decimal("9" * 5000, 0)

    def test_not_a_digit(self):
        """A non-digit start is a lexical error."""
        with pytest.raises(LexError):
            scan_decimal("$10", 0)


# =============================================================================
# Hexadecimal Number Tests
# =============================================================================

class TestHexNumbers:
    """Test hexadecimal literal scanning and width inference."""

    @pytest.mark.parametrize("text,value,width", [
        ("$0", 0x0, NumberWidth.NONE),
        ("$7F", 0x7F, NumberWidth.ONE_BYTE),
        ("$00", 0x00, NumberWidth.ONE_BYTE),
        ("$0F", 0x0F, NumberWidth.ONE_BYTE),
        ("$010", 0x10, NumberWidth.NONE),
        ("$007F", 0x7F, NumberWidth.TWO_BYTES),
        ("$7F7F7F", 0x7F7F7F, NumberWidth.NONE),
        ("$FFFFFFFF", 0xFFFFFFFF, NumberWidth.NONE),
        ("$ff", 0xFF, NumberWidth.ONE_BYTE),
    ])
    def test_hex_width(self, text, value, width):
        """The digit count, not the value, decides the width."""
        end, number = scan_hex(text, 0)
        assert end == len(text)
        assert number == Number(value, width)

    def test_whitespace_after_dollar(self):
        """Whitespace is allowed between '$' and the digits."""
        assert scan_hex("$ 10", 0) == (4, Number(0x10, NumberWidth.ONE_BYTE))

    def test_leading_zeros_beyond_eight_digits(self):
        """Leading zeros do not count towards overflow."""
        end, number = scan_hex("$0000000000FF", 0)
        assert number.value == 0xFF
        assert number.width is NumberWidth.NONE

    def test_overflow(self):
        """Nine significant hex digits overflow."""
        with pytest.raises(NumericOverflowError) as exc_info:
            scan_hex("$100000000", 0)
        assert exc_info.value.literal == "$100000000"

    def test_dollar_without_digits(self):
        """'$' alone is a partial match."""
        with pytest.raises(GrammarMismatchError):
            scan_hex("$", 0)

    def test_missing_dollar(self):
        """Hex literals need their prefix."""
        with pytest.raises(LexError):
            scan_hex("10", 0)


# =============================================================================
# Helper Tests
# =============================================================================

class TestHelpers:
    """Test whitespace skipping and ordered choice."""

    def test_skip_whitespace(self):
        """Spaces, tabs and newlines are all whitespace."""
        assert skip_whitespace(" \t\n x", 0) == 4

    def test_skip_whitespace_at_end(self):
        """Skipping at the end of text stays at the end."""
        assert skip_whitespace("ab", 2) == 2

    def test_first_of_returns_first_success(self):
        """The first alternative that succeeds wins."""
        result = first_of(
            [
                lambda at: scan_hex("42", at),
                lambda at: scan_decimal("42", at),
                lambda at: (0, "never"),
            ],
            "42",
            0,
            "number",
        )
        assert result == (2, Number(42))

    def test_first_of_collects_failures(self):
        """When every alternative fails, all failures are kept."""
        with pytest.raises(ExhaustedAlternativesError) as exc_info:
            first_of(
                [
                    lambda at: scan_hex("xyz", at),
                    lambda at: scan_decimal("xyz", at),
                ],
                "xyz",
                0,
                "number",
            )
        error = exc_info.value
        assert len(error.failures) == 2
        assert error.offset == 0
        assert error.message == "expected number"

    def test_first_of_most_specific(self):
        """most_specific is the failure that got furthest."""
        with pytest.raises(ExhaustedAlternativesError) as exc_info:
            first_of(
                [
                    lambda at: scan_hex("$ ", at),
                    lambda at: scan_decimal("$ ", at),
                ],
                "$ ",
                0,
                "number",
            )
        assert isinstance(exc_info.value.most_specific, GrammarMismatchError)
        assert exc_info.value.hint == "expected hex digits after '$'"

    def test_first_of_propagates_fatal(self):
        """Fatal errors stop the alternation."""
        with pytest.raises(NumericOverflowError):
            first_of(
                [
                    lambda at: scan_decimal("99999999999", at),
                    lambda at: (0, "fallback"),
                ],
                "99999999999",
                0,
                "number",
            )
