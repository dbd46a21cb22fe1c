"""
MVP Error Hierarchy
===================

This module defines the exception hierarchy for the whole toolkit.
All exceptions inherit from MvpError, allowing callers to catch every
toolkit error with a single except clause if desired.

Exception Hierarchy
-------------------
MvpError (base)
├── ParseError (grammar-related)
│   ├── LexError - input does not start with a valid token
│   ├── NumericOverflowError - literal does not fit in 32 bits
│   ├── GrammarMismatchError - parts of a composite rule did not all match
│   ├── ExhaustedAlternativesError - no alternative of a choice matched
│   └── NestingTooDeepError - nesting exceeded the configured depth
├── ProgramError - one or more lines of a program failed to parse
└── TooManyErrors - error collector limit reached

Fatal vs. Recoverable
---------------------
Ordered alternation catches ParseError and tries the next alternative.
Errors whose ``fatal`` flag is set are never swallowed that way: an
overflowing literal or a runaway nesting depth means no other alternative
can succeed on the same text, so the error propagates to the caller as is.

Error messages follow this format once a location is known:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MvpError(Exception):
    """
    Base exception for all toolkit errors.

        try:
            parse_program(source)
        except MvpError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Parse Exceptions
# =============================================================================

class ParseError(MvpError):
    """
    Base exception for all grammar failures.

    The grammar works on plain text, so every error records ``offset``,
    the index into the text handed to the entry point where the failing
    rule started. The program driver later turns the offset into a full
    SourceLocation and attaches the offending source line.

    Attributes:
        message: The error description
        offset: 0-based position in the parsed text
        text: The text that was being parsed (optional)
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    fatal = False

    def __init__(
        self,
        message: str,
        offset: int = 0,
        text: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.offset = offset
        self.text = text
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def remainder(self) -> Optional[str]:
        """The unparsed text starting where the failing rule started."""
        if self.text is None:
            return None
        return self.text[self.offset:]

    def with_location(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "ParseError":
        """
        Return a copy of this error positioned in a source file.

        The copy keeps the concrete error class so callers can still
        distinguish an overflow from a plain mismatch.
        """
        error = self.__class__.__new__(self.__class__)
        error.__dict__.update(self.__dict__)
        error.location = location
        error.source_line = source_line
        Exception.__init__(error, error._format_message())
        return error

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            game.asm:15:9: error: expected expression
                LDA ($19
                    ^
            hint: expected ')'
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexError(ParseError):
    """
    Input does not begin with a valid token for the attempted rule.

    Examples:
        - Identifier starting with a digit
        - Non-digit where a number was expected
        - Missing punctuation such as ')' or ','
    """
    pass


class NumericOverflowError(ParseError):
    """
    Numeric literal exceeds the unsigned 32-bit range.

    Literals are never truncated or saturated, so this error is fatal:
    no alternative rule is tried once a literal has overflowed.
    """

    fatal = True

    def __init__(
        self,
        literal: str,
        offset: int = 0,
        text: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.literal = literal
        super().__init__(
            f"numeric literal '{literal}' does not fit in 32 bits",
            offset,
            text,
            location=location,
            hint=hint or "largest accepted value is $FFFFFFFF (4294967295)",
            source_line=source_line,
        )


class GrammarMismatchError(ParseError):
    """
    The parts of a composite rule did not all succeed in sequence.

    Raised, for example, for an opening parenthesis with no matching
    close. Errors raised after a rule has committed to its shape (a call
    whose argument list is malformed) are marked fatal so alternation
    does not hide them behind a shorter successful parse.
    """

    def __init__(self, *args, fatal: bool = False, **kwargs):
        self.fatal = fatal
        super().__init__(*args, **kwargs)


class ExhaustedAlternativesError(ParseError):
    """
    Every alternative of an ordered choice failed.

    The error is reported at the position where alternation began. The
    individual failures are kept in ``failures``; ``most_specific`` is the
    one that got furthest into the text, which usually names the real
    problem.
    """

    def __init__(
        self,
        message: str,
        offset: int = 0,
        text: Optional[str] = None,
        failures: Optional[list[ParseError]] = None,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.failures = list(failures or [])

        if hint is None and self.failures:
            hint = self.deepest_failure().message

        super().__init__(
            message,
            offset,
            text,
            location=location,
            hint=hint,
            source_line=source_line,
        )

    @property
    def most_specific(self) -> Optional[ParseError]:
        """
        The alternative failure that progressed furthest, if any.

        On a tie the later alternative wins.
        """
        if not self.failures:
            return None
        return max(reversed(self.failures), key=lambda failure: failure.offset)

    def deepest_failure(self) -> ParseError:
        """Follow most_specific through nested alternations to a leaf error."""
        error: ParseError = self
        while isinstance(error, ExhaustedAlternativesError) and error.most_specific:
            error = error.most_specific
        return error


class NestingTooDeepError(ParseError):
    """
    Parentheses, brackets or call arguments are nested too deeply.

    The limit comes from GrammarOptions.max_depth and protects the
    recursive descent from exhausting the interpreter stack on hostile
    input.
    """

    fatal = True

    def __init__(
        self,
        max_depth: int,
        offset: int = 0,
        text: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.max_depth = max_depth
        super().__init__(
            f"expression nested deeper than {max_depth} levels",
            offset,
            text,
            location=location,
            hint="raise max_depth (MVP_MAX_DEPTH) if the nesting is intended",
            source_line=source_line,
        )


# =============================================================================
# Program Exceptions
# =============================================================================

class ProgramError(MvpError):
    """
    One or more lines of a program failed to parse.

    Raised by the program driver after every line has been tried, so
    the user sees all problems at once.

    Attributes:
        errors: The located ParseError of each failing line
    """

    def __init__(self, errors: list[ParseError], report: str = ""):
        self.errors = list(errors)
        count = len(self.errors)
        word = "error" if count == 1 else "errors"
        super().__init__(report or f"{count} parse {word}")


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The program driver uses this to continue with the next line after a
    line fails, collecting every error before reporting them together.

    Example:
        collector = ErrorCollector(max_errors=100)

        try:
            for line in lines:
                try:
                    parse(line)
                except ParseError as error:
                    collector.add(error)
        except TooManyErrors:
            pass  # Already collected max_errors

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[ParseError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: ParseError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def report(self) -> str:
        """
        Format all errors and warnings for display.

        Returns:
            Formatted string with all errors and warnings
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)


class TooManyErrors(MvpError):
    """
    Raised when too many errors have been encountered.

    This stops the driver from flooding the user when a file is not
    assembly source at all.
    """

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)
