"""
65816 Instruction and Statement Grammar
=======================================

This module implements the statement grammar: instructions with their
addressing modes, assignments, label declarations and keywords. It
builds on the expression grammar and produces Statement nodes.

Statement Types
---------------
Tried in this order at the start of a statement:

1. **KeywordStatement**: assembler keyword
   ```asm
   org $8000
   ```

2. **LabelStatement**: label declaration
   ```asm
   loop:           ; named label, colon directly after the name
   +               ; forward relative label
   --              ; backward relative label of rank 2
   ```

3. **AssignmentStatement**: name = expression
   ```asm
   !speed = $10
   ```

4. **OpcodeStatement**: mnemonic, optional width suffix, operand
   ```asm
   LDA.w #$1000
   ```

Addressing Mode Detection
-------------------------
The operand is matched against these shapes in priority order; the
first one that matches wins:

| #  | Syntax          | Mode             | Example        |
|----|-----------------|------------------|----------------|
| 1  | (expr),y        | INDIRECT_Y       | LDA ($10),y    |
| 2  | (expr)          | INDIRECT         | JMP ($1000)    |
| 3  | (expr,x)        | X_INDIRECT       | LDA ($10,x)    |
| 4  | expr,expr       | MOVE             | LDA $10,x      |
| 5  | expr            | ADDRESS          | LDA $10        |
| 6  | #expr           | IMMEDIATE        | LDA #$10       |
| 7  | [expr],y        | LONG_INDIRECT_Y  | LDA [$10],y    |
| 8  | [expr]          | LONG_INDIRECT    | LDA [$10]      |
| 9  | (expr,s),y      | STACK_INDIRECT_Y | LDA ($03,s),y  |
| 10 | (nothing)       | IMPLIED          | NOP            |

The order matters where shapes overlap:

- ``($19)+2`` is not INDIRECT: a closing parenthesis followed by an
  arithmetic operator means the parentheses only group a sub-expression,
  so the operand falls through to ADDRESS with value ``$19 + 2``.
- MOVE comes before ADDRESS, otherwise ADDRESS would take ``$10`` out of
  ``$10,x`` and leave ``,x`` behind.

Register letters (x, y, s) are case-insensitive. Whether a mnemonic
supports the mode it was written with is not checked here; that is the
encoder's business (see mvp.cpu).
"""

from typing import Optional

from mvp.errors import GrammarMismatchError, LexError, ParseError
from mvp.parser.ast import (
    ADDRESS,
    IMMEDIATE,
    IMPLIED,
    INDIRECT,
    INDIRECT_Y,
    LONG_INDIRECT,
    LONG_INDIRECT_Y,
    STACK_INDIRECT_Y,
    X_INDIRECT,
    AssignmentStatement,
    Expression,
    KeywordStatement,
    LabelStatement,
    NamedLabel,
    Opcode,
    OpcodeMode,
    OpcodeStatement,
    OrgKeyword,
    Statement,
    VariableName,
)
from mvp.parser.expressions import (
    RELATIVE_MARKERS,
    ExpressionGrammar,
    scan_relative_label,
)
from mvp.parser.lexer import (
    OPERATOR_CHARS,
    WHITESPACE,
    at_word_end,
    expect_char,
    expect_token,
    first_of,
    peek,
    scan_identifier,
    skip_whitespace,
)


# Width suffix letters (.b, .w, .l) and the operand size they force
WIDTH_LETTERS = {
    "b": 1,
    "w": 2,
    "l": 3,
}

# Characters that end a statement on the current line
STATEMENT_TERMINATORS = ":;"

KEYWORDS = frozenset({"org"})

# An operand: its addressing mode and value (None for implied)
Operand = tuple[OpcodeMode, Optional[Expression]]


def at_statement_end(text: str, pos: int) -> bool:
    """
    Check whether the statement ends at ``pos``.

    A statement ends at the end of the text, at a line break, at a ``:``
    separator or at a ``;`` comment, with any whitespace in between.
    """
    while pos < len(text) and text[pos] in WHITESPACE:
        if text[pos] == "\n":
            return True
        pos += 1
    return pos >= len(text) or text[pos] in STATEMENT_TERMINATORS


class Grammar(ExpressionGrammar):
    """
    Parses assembly statements into AST nodes.

    Usage:
        grammar = Grammar(GrammarOptions(max_depth=32))
        remainder, statement = grammar.parse_statement("LDA ($10),y")
    """

    # =========================================================================
    # Main Parsing Interface
    # =========================================================================

    def parse_statement(self, text: str) -> tuple[str, Statement]:
        """
        Parse one statement at the start of ``text``.

        Surrounding whitespace is skipped; whatever follows the statement
        is returned untouched so the caller can continue from there.

        Returns:
            (remainder, statement)

        Raises:
            ParseError: If no statement starts the text
        """
        end, statement = self.statement(text, skip_whitespace(text, 0))
        return text[end:], statement

    def parse_assignment(self, text: str) -> tuple[str, AssignmentStatement]:
        """
        Parse ``name = expression`` at the start of ``text``.

        Returns:
            (remainder, assignment)
        """
        end, statement = self._assignment(text, skip_whitespace(text, 0))
        return text[end:], statement

    def statement(self, text: str, pos: int) -> tuple[int, Statement]:
        return first_of(
            [
                lambda at: self._keyword(text, at),
                lambda at: self._label_declaration(text, at),
                lambda at: self._assignment(text, at),
                lambda at: self._opcode(text, at),
            ],
            text,
            pos,
            "statement",
        )

    # =========================================================================
    # Statement Forms
    # =========================================================================

    def _keyword(self, text: str, pos: int) -> tuple[int, Statement]:
        end, name = scan_identifier(text, pos)
        if name.lower() not in KEYWORDS:
            raise LexError(f"'{name}' is not a keyword", pos, text)

        try:
            end, address = self.expression(text, skip_whitespace(text, end), 0)
        except ParseError as error:
            if error.fatal:
                raise
            raise GrammarMismatchError(
                f"expected address after '{name}'", error.offset, text, hint=error.message
            ) from error

        return end, KeywordStatement(OrgKeyword(address))

    def _label_declaration(self, text: str, pos: int) -> tuple[int, Statement]:
        marker = peek(text, pos)
        if marker and marker in RELATIVE_MARKERS:
            end, label = scan_relative_label(text, pos)
            if not at_statement_end(text, end):
                raise GrammarMismatchError(
                    "relative label declaration must stand alone", end, text
                )
            return skip_whitespace(text, end), LabelStatement(label)

        end, name = scan_identifier(text, pos)
        end, _ = expect_char(text, end, ":", "':' after label name")
        return skip_whitespace(text, end), LabelStatement(NamedLabel(VariableName(name)))

    def _assignment(self, text: str, pos: int) -> tuple[int, AssignmentStatement]:
        end, name = scan_identifier(text, pos)
        end, _ = expect_token(text, end, "=", "'='")

        try:
            end, value = self.expression(text, end, 0)
        except ParseError as error:
            if error.fatal:
                raise
            raise GrammarMismatchError(
                f"expected expression after '{name} ='", error.offset, text, hint=error.message
            ) from error

        return end, AssignmentStatement(VariableName(name), value)

    def _opcode(self, text: str, pos: int) -> tuple[int, Statement]:
        end, name = scan_identifier(text, pos)
        end, width = self._width_suffix(text, end)
        end, (mode, value) = self._operand(text, end)
        return end, OpcodeStatement(Opcode(name, width, mode, value))

    def _width_suffix(self, text: str, pos: int) -> tuple[int, Optional[int]]:
        """Parse an optional ``.b``, ``.w`` or ``.l`` suffix."""
        dot = skip_whitespace(text, pos)
        if peek(text, dot) != ".":
            return pos, None

        letter_pos = skip_whitespace(text, dot + 1)
        letter = peek(text, letter_pos).lower()
        if letter in WIDTH_LETTERS and at_word_end(text, letter_pos + 1):
            return letter_pos + 1, WIDTH_LETTERS[letter]

        raise GrammarMismatchError("expected width suffix .b, .w or .l", letter_pos, text)

    # =========================================================================
    # Operands
    # =========================================================================

    def _operand(self, text: str, pos: int) -> tuple[int, Operand]:
        return first_of(
            [
                lambda at: self._indirect_y(text, at),
                lambda at: self._indirect(text, at),
                lambda at: self._x_indirect(text, at),
                lambda at: self._move(text, at),
                lambda at: self._address(text, at),
                lambda at: self._immediate(text, at),
                lambda at: self._long_indirect_y(text, at),
                lambda at: self._long_indirect(text, at),
                lambda at: self._stack_indirect_y(text, at),
                lambda at: self._implied(text, at),
            ],
            text,
            pos,
            "operand",
        )

    def _indirect_y(self, text: str, pos: int) -> tuple[int, Operand]:
        """``(expr),y``"""
        pos, value = self._bracketed(text, pos, "(", ")")
        pos = self._index_register(text, pos, "y")
        return pos, (INDIRECT_Y, value)

    def _indirect(self, text: str, pos: int) -> tuple[int, Operand]:
        """``(expr)`` not followed by an arithmetic operator."""
        pos, value = self._bracketed(text, pos, "(", ")")
        if peek(text, pos) and peek(text, pos) in OPERATOR_CHARS:
            raise GrammarMismatchError(
                "parenthesised value continues as an expression", pos, text
            )
        return pos, (INDIRECT, value)

    def _x_indirect(self, text: str, pos: int) -> tuple[int, Operand]:
        """``(expr,x)``"""
        start = pos
        pos, _ = expect_token(text, pos, "(", "'('")
        depth = self.enter(text, start, 0)
        pos, value = self._inner_expression(text, pos, depth)
        pos, _ = expect_token(text, pos, ",", "','", GrammarMismatchError)
        pos = self._register(text, pos, "x")
        pos, _ = expect_token(text, pos, ")", "')'", GrammarMismatchError)
        return pos, (X_INDIRECT, value)

    def _move(self, text: str, pos: int) -> tuple[int, Operand]:
        """``expr,expr``"""
        pos, value = self.expression(text, pos, 0)
        pos, _ = expect_token(text, pos, ",", "','", GrammarMismatchError)
        pos, second = self._inner_expression(text, pos, 0)
        return pos, (OpcodeMode.move(second), value)

    def _address(self, text: str, pos: int) -> tuple[int, Operand]:
        pos, value = self.expression(text, pos, 0)
        return pos, (ADDRESS, value)

    def _immediate(self, text: str, pos: int) -> tuple[int, Operand]:
        """``#expr``"""
        pos, _ = expect_token(text, pos, "#", "'#'")
        pos, value = self._inner_expression(text, pos, 0)
        return pos, (IMMEDIATE, value)

    def _long_indirect_y(self, text: str, pos: int) -> tuple[int, Operand]:
        """``[expr],y``"""
        pos, value = self._bracketed(text, pos, "[", "]")
        pos = self._index_register(text, pos, "y")
        return pos, (LONG_INDIRECT_Y, value)

    def _long_indirect(self, text: str, pos: int) -> tuple[int, Operand]:
        """``[expr]``"""
        pos, value = self._bracketed(text, pos, "[", "]")
        return pos, (LONG_INDIRECT, value)

    def _stack_indirect_y(self, text: str, pos: int) -> tuple[int, Operand]:
        """``(expr,s),y``"""
        start = pos
        pos, _ = expect_token(text, pos, "(", "'('")
        depth = self.enter(text, start, 0)
        pos, value = self._inner_expression(text, pos, depth)
        pos, _ = expect_token(text, pos, ",", "','", GrammarMismatchError)
        pos = self._register(text, pos, "s")
        pos, _ = expect_token(text, pos, ")", "')'", GrammarMismatchError)
        pos = self._index_register(text, pos, "y")
        return pos, (STACK_INDIRECT_Y, value)

    def _implied(self, text: str, pos: int) -> tuple[int, Operand]:
        if not at_statement_end(text, pos):
            raise LexError("expected operand or end of statement", pos, text)
        return skip_whitespace(text, pos), (IMPLIED, None)

    # =========================================================================
    # Operand Helpers
    # =========================================================================

    def _bracketed(self, text: str, pos: int, opening: str, closing: str) -> tuple[int, Expression]:
        """Parse ``opening expr closing`` one nesting level down."""
        start = pos
        pos, _ = expect_token(text, pos, opening, f"'{opening}'")
        depth = self.enter(text, start, 0)
        pos, value = self._inner_expression(text, pos, depth)
        pos, _ = expect_token(text, pos, closing, f"'{closing}'", GrammarMismatchError)
        return pos, value

    def _inner_expression(self, text: str, pos: int, depth: int) -> tuple[int, Expression]:
        """Parse an expression that follows an operand's opening token."""
        try:
            return self.expression(text, pos, depth)
        except ParseError as error:
            if error.fatal:
                raise
            raise GrammarMismatchError(
                "expected expression", error.offset, text, hint=error.message
            ) from error

    def _index_register(self, text: str, pos: int, letter: str) -> int:
        """Parse ``,letter`` after a bracketed operand."""
        pos, _ = expect_token(text, pos, ",", "','", GrammarMismatchError)
        return self._register(text, pos, letter)

    def _register(self, text: str, pos: int, letter: str) -> int:
        pos = skip_whitespace(text, pos)
        if peek(text, pos).lower() != letter or not at_word_end(text, pos + 1):
            raise GrammarMismatchError(f"expected register '{letter}'", pos, text)
        return skip_whitespace(text, pos + 1)


# =============================================================================
# Convenience Functions
# =============================================================================

_default_grammar = Grammar()


def parse_statement(text: str) -> tuple[str, Statement]:
    """
    Parse one statement at the start of ``text`` with default options.

    Example:
        >>> remainder, statement = parse_statement("LDA $19,x : RTS")
        >>> remainder, str(statement)
        (': RTS', 'LDA $19,x')

    Returns:
        (remainder, statement)
    """
    return _default_grammar.parse_statement(text)


def parse_assignment(text: str) -> tuple[str, AssignmentStatement]:
    """Parse ``name = expression`` at the start of ``text`` with default options."""
    return _default_grammar.parse_assignment(text)
