"""
Assembly Expression Grammar
===========================

This module implements the expression grammar used by operands,
assignments and keywords. Expressions are parsed into AST nodes; they
are never evaluated here, since symbols are resolved by a later stage.

Expression Grammar
------------------
A recursive descent parser with two left-associative precedence tiers
(from lowest to highest):

1. Additive: + -
2. Multiplicative: * /
3. Top-level forms, tried in order, first match wins:
   a. ( expression )
   b. decimal number            42
   c. hexadecimal number        $2A
   d. function call             bank(label), f()
   e. variable or label         label, +, ++, -, --

Whitespace between tokens is insignificant.

Calls and Variables
-------------------
A name directly followed by ``(`` is always a call. Once the parenthesis
is seen the call must parse completely: ``f((1, 2))`` fails instead of
falling back to the variable ``f`` with ``((1, 2))`` left over.

Relative Labels
---------------
A run of ``+`` or ``-`` characters in value position is a relative
label. The run's length is its rank, so ``+ + ++`` reads as the forward
label ``+`` plus the forward label ``++``.

Example Usage
-------------
>>> from mvp.parser.expressions import parse_expression
>>> remainder, expression = parse_expression("2 + 3 * 4")
>>> print(expression)
(2 + (3 * 4))
"""

from typing import Optional

from mvp.config import GrammarOptions
from mvp.errors import (
    GrammarMismatchError,
    LexError,
    NestingTooDeepError,
    ParseError,
)
from mvp.parser.ast import (
    BinaryExpression,
    BinaryOperator,
    CallExpression,
    Expression,
    NamedLabel,
    NumberExpression,
    RelativeLabel,
    VariableExpression,
    VariableName,
)
from mvp.parser.lexer import (
    expect_token,
    first_of,
    peek,
    scan_decimal,
    scan_hex,
    scan_identifier,
    scan_run,
    skip_whitespace,
)


ADDITIVE_OPERATORS = {
    "+": BinaryOperator.ADD,
    "-": BinaryOperator.SUB,
}

MULTIPLICATIVE_OPERATORS = {
    "*": BinaryOperator.MUL,
    "/": BinaryOperator.DIV,
}

RELATIVE_MARKERS = "+-"


class ExpressionGrammar:
    """
    Parses assembly expressions into AST nodes.

    The grammar holds nothing but its options, so one instance can be
    shared freely. Each rule takes the text, a start position and the
    current nesting depth, and returns ``(end_position, node)`` where
    ``end_position`` is already past any trailing whitespace.

    Attributes:
        options: Grammar options (nesting limit)
    """

    def __init__(self, options: Optional[GrammarOptions] = None):
        self.options = options or GrammarOptions()

    # =========================================================================
    # Main Parsing Interface
    # =========================================================================

    def parse_expression(self, text: str) -> tuple[str, Expression]:
        """
        Parse an expression at the start of ``text``.

        Returns:
            (remainder, expression)

        Raises:
            ParseError: If no expression starts the text
        """
        end, expression = self.expression(text, skip_whitespace(text, 0), 0)
        return text[end:], expression

    def expression(self, text: str, pos: int, depth: int) -> tuple[int, Expression]:
        """Parse addition and subtraction."""
        return self._fold(text, pos, depth, ADDITIVE_OPERATORS, self._term)

    # =========================================================================
    # Precedence Tiers
    # =========================================================================

    def _term(self, text: str, pos: int, depth: int) -> tuple[int, Expression]:
        """Parse multiplication and division."""
        return self._fold(text, pos, depth, MULTIPLICATIVE_OPERATORS, self._top_expression)

    def _fold(self, text, pos, depth, operators, operand) -> tuple[int, Expression]:
        """
        Parse ``operand (operator operand)*`` and fold it to the left.

        An operator whose right-hand side does not parse is left
        unconsumed, along with everything after it.
        """
        pos, left = operand(text, pos, depth)

        while peek(text, pos) in operators:
            operator = operators[text[pos]]
            try:
                end, right = operand(text, skip_whitespace(text, pos + 1), depth)
            except ParseError as error:
                if error.fatal:
                    raise
                break
            left = BinaryExpression(operator, left, right)
            pos = end

        return pos, left

    def _top_expression(self, text: str, pos: int, depth: int) -> tuple[int, Expression]:
        """Parse the atomic forms, first match wins."""
        pos = skip_whitespace(text, pos)
        return first_of(
            [
                lambda at: self._paren_expression(text, at, depth),
                lambda at: self._number(text, at),
                lambda at: self._hex_number(text, at),
                lambda at: self._call(text, at, depth),
                lambda at: self._variable(text, at),
            ],
            text,
            pos,
            "expression",
        )

    # =========================================================================
    # Top-Level Forms
    # =========================================================================

    def _paren_expression(self, text: str, pos: int, depth: int) -> tuple[int, Expression]:
        """Parse ``( expression )``."""
        start = pos
        pos, _ = expect_token(text, pos, "(", "'('")
        depth = self.enter(text, start, depth)

        try:
            pos, expression = self.expression(text, pos, depth)
        except ParseError as error:
            if error.fatal:
                raise
            raise GrammarMismatchError(
                "expected expression after '('", error.offset, text, hint=error.message
            ) from error

        pos, _ = expect_token(text, pos, ")", "')'", GrammarMismatchError)
        return pos, expression

    def _number(self, text: str, pos: int) -> tuple[int, Expression]:
        end, number = scan_decimal(text, pos)
        return skip_whitespace(text, end), NumberExpression(number)

    def _hex_number(self, text: str, pos: int) -> tuple[int, Expression]:
        end, number = scan_hex(text, pos)
        return skip_whitespace(text, end), NumberExpression(number)

    def _call(self, text: str, pos: int, depth: int) -> tuple[int, Expression]:
        """
        Parse ``name ( [expression (, expression)*] )``.

        Everything after the opening parenthesis is committed: a failure
        there is fatal so the name is not reparsed as a plain variable.
        """
        end, name = scan_identifier(text, pos)
        paren = skip_whitespace(text, end)
        if peek(text, paren) != "(":
            raise LexError(f"expected '(' after '{name}'", paren, text)

        depth = self.enter(text, paren, depth)
        pos = skip_whitespace(text, paren + 1)
        arguments: list[Expression] = []

        if peek(text, pos) == ")":
            return skip_whitespace(text, pos + 1), CallExpression(VariableName(name), ())

        while True:
            try:
                pos, argument = self.expression(text, pos, depth)
                arguments.append(argument)
                pos, separator = expect_token(text, pos, ",)", "',' or ')'")
            except ParseError as error:
                if error.fatal:
                    raise
                raise GrammarMismatchError(
                    f"malformed argument list in call to '{name}'",
                    error.offset,
                    text,
                    hint=error.message,
                    fatal=True,
                ) from error
            if separator == ")":
                break

        return pos, CallExpression(VariableName(name), tuple(arguments))

    def _variable(self, text: str, pos: int) -> tuple[int, Expression]:
        """Parse a named label or a relative label."""
        marker = peek(text, pos)
        if marker and marker in RELATIVE_MARKERS:
            end, label = scan_relative_label(text, pos)
            return skip_whitespace(text, end), VariableExpression(label)

        end, name = scan_identifier(text, pos)
        return skip_whitespace(text, end), VariableExpression(NamedLabel(VariableName(name)))

    # =========================================================================
    # Nesting Guard
    # =========================================================================

    def enter(self, text: str, pos: int, depth: int) -> int:
        """Return the depth one level down, refusing to go past max_depth."""
        depth += 1
        if depth > self.options.max_depth:
            raise NestingTooDeepError(self.options.max_depth, pos, text)
        return depth


def scan_relative_label(text: str, pos: int) -> tuple[int, RelativeLabel]:
    """
    Scan a run of ``+`` or ``-`` as a relative label.

    The run consists of one repeated character, so ``+-`` scans as ``+``.

    Raises:
        LexError: If no marker starts at ``pos``
    """
    marker = peek(text, pos)
    if not marker or marker not in RELATIVE_MARKERS:
        raise LexError("expected relative label", pos, text)

    end = scan_run(text, pos, marker)
    rank = end - pos
    return end, RelativeLabel(rank if marker == "+" else -rank)


# =============================================================================
# Convenience Functions
# =============================================================================

_default_grammar = ExpressionGrammar()


def parse_expression(text: str) -> tuple[str, Expression]:
    """
    Parse an expression at the start of ``text`` with default options.

    Example:
        >>> remainder, expression = parse_expression("(2 + 3) * 4 rest")
        >>> remainder, str(expression)
        ('rest', '((2 + 3) * 4)')

    Returns:
        (remainder, expression)
    """
    return _default_grammar.parse_expression(text)
