"""
MVP - 65816 Assembly Grammar Toolkit
====================================

This package parses source text written for 65816-family assemblers
(the CPU of the Super Nintendo and the Apple IIgs) into an immutable
abstract syntax tree.

Main Components
---------------
- **parser**: Grammar and AST
    Identifiers, numeric literals, expressions, labels, instructions with
    their addressing modes, and a line-oriented program driver

- **cpu**: W65C816 encoding tables
    Opcode lookup by mnemonic and addressing mode

- **cli**: Command-line tools (mvpparse)

The grammar only recognises structure. Symbols are not resolved, no
addresses are computed and no bytes are emitted.

Quick Start
-----------
Parse a single statement:
    >>> from mvp import parse_statement
    >>> remainder, statement = parse_statement("LDA ($10),y")
    >>> statement.opcode.mode.kind
    <ModeKind.INDIRECT_Y: 6>

Parse a whole program:
    >>> from mvp import parse_program
    >>> program = parse_program("org $8000\\nstart: NOP", "demo.asm")
    >>> len(program)
    3

Or use the command-line tool:
    $ mvpparse demo.asm

Version History
---------------
1.0.0 - Initial release with the statement grammar, program driver and
        accumulator-group opcode table
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from mvp.config import DriverOptions, GrammarOptions
from mvp.errors import (
    MvpError,
    SourceLocation,
    ParseError,
    LexError,
    NumericOverflowError,
    GrammarMismatchError,
    ExhaustedAlternativesError,
    NestingTooDeepError,
    ProgramError,
    ErrorCollector,
    TooManyErrors,
)
from mvp.parser import (
    Grammar,
    ExpressionGrammar,
    Program,
    SourceStatement,
    parse_identifier,
    parse_expression,
    parse_statement,
    parse_assignment,
    parse_program,
)
from mvp.cpu import AddressingMode, get_opcode, get_valid_modes

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "GrammarOptions",
    "DriverOptions",
    # Parsing
    "Grammar",
    "ExpressionGrammar",
    "Program",
    "SourceStatement",
    "parse_identifier",
    "parse_expression",
    "parse_statement",
    "parse_assignment",
    "parse_program",
    # Encoding
    "AddressingMode",
    "get_opcode",
    "get_valid_modes",
    # Exception hierarchy
    "MvpError",
    "SourceLocation",
    "ParseError",
    "LexError",
    "NumericOverflowError",
    "GrammarMismatchError",
    "ExhaustedAlternativesError",
    "NestingTooDeepError",
    "ProgramError",
    "ErrorCollector",
    "TooManyErrors",
]
