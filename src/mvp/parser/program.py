"""
Program Driver
==============

This module parses whole source files. The grammar itself works on one
statement at a time; the driver walks the source line by line, strips
comments, splits each line into statements and attaches a source
location to every statement and every error.

Line Structure
--------------
    [statement] [: statement]... [; comment]

- A ``;`` starts a comment that runs to the end of the line.
- A ``:`` separates statements on one line. A named label declaration
  already ends with its own colon, so ``loop: LDA #$00`` is two
  statements without an extra separator.
- Anything left on a line after a statement that is neither a separator
  nor a comment is an error.

Error Handling
--------------
A failing line does not stop the driver. The error is positioned with
its line and column, the driver continues with the next line, and once
all lines have been tried every collected error is raised together in a
ProgramError. Collection stops early after ``max_errors`` failures.

Example Usage
-------------
>>> from mvp.parser.program import parse_program
>>> program = parse_program("start: LDA #$00 : RTS ; done", "demo.asm")
>>> [str(item.statement) for item in program.statements]
['start:', 'LDA #$00', 'RTS']
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from mvp.config import DriverOptions
from mvp.errors import (
    ErrorCollector,
    GrammarMismatchError,
    ParseError,
    ProgramError,
    SourceLocation,
    TooManyErrors,
)
from mvp.parser.ast import LabelStatement, Statement
from mvp.parser.grammar import Grammar
from mvp.parser.lexer import skip_whitespace


logger = logging.getLogger(__name__)

COMMENT_CHAR = ";"
SEPARATOR_CHAR = ":"


# =============================================================================
# Program Model
# =============================================================================

@dataclass(frozen=True)
class SourceStatement:
    """
    A parsed statement together with where it was written.

    Attributes:
        statement: The statement node
        location: Position of the statement's first character
    """
    statement: Statement
    location: SourceLocation


@dataclass
class Program:
    """
    All statements of a source file, in source order.

    Attributes:
        filename: Name the source was read from
        statements: Located statements
    """
    filename: str
    statements: list[SourceStatement] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[SourceStatement]:
        return iter(self.statements)


# =============================================================================
# Line Handling
# =============================================================================

def strip_comment(line: str) -> str:
    """Remove a trailing ``;`` comment from a source line."""
    return line.split(COMMENT_CHAR, 1)[0]


def parse_line(
    grammar: Grammar,
    line: str,
    line_number: int,
    filename: str = "<input>",
) -> list[SourceStatement]:
    """
    Parse every statement on one source line.

    Args:
        grammar: Grammar to parse statements with
        line: Source line without its line terminator
        line_number: 1-based line number for locations
        filename: Source name for locations

    Returns:
        The line's statements, possibly none for blank or comment lines

    Raises:
        ParseError: On the first statement that fails; ``offset`` is the
                    index into ``line``
    """
    code = strip_comment(line)
    statements: list[SourceStatement] = []
    pos = skip_whitespace(code, 0)

    while pos < len(code):
        if code[pos] == SEPARATOR_CHAR:
            pos = skip_whitespace(code, pos + 1)
            continue

        end, statement = grammar.statement(code, pos)
        location = SourceLocation(filename, line_number, pos + 1)
        statements.append(SourceStatement(statement, location))

        pos = skip_whitespace(code, end)
        if pos >= len(code) or code[pos] == SEPARATOR_CHAR:
            continue
        if isinstance(statement, LabelStatement):
            # The label's colon already separates it from what follows
            continue

        raise GrammarMismatchError(
            f"unexpected '{code[pos:].rstrip()}' after statement",
            pos,
            code,
            hint="separate statements on one line with ':'",
        )

    return statements


# =============================================================================
# Main Entry Point
# =============================================================================

def parse_program(
    source: str,
    filename: str = "<input>",
    options: Optional[DriverOptions] = None,
) -> Program:
    """
    Parse a complete program.

    Args:
        source: Program text
        filename: Name used in locations and error messages
        options: Driver options; defaults to DriverOptions()

    Returns:
        The parsed Program

    Raises:
        ProgramError: If any line failed to parse. ``errors`` holds one
                      located ParseError per failing line.
    """
    options = options or DriverOptions()
    grammar = Grammar(options.grammar)
    collector = ErrorCollector(max_errors=options.max_errors)
    program = Program(filename)

    lines = source.splitlines()
    logger.debug(f"Parsing {filename}: {len(lines)} lines")

    try:
        for line_number, line in enumerate(lines, start=1):
            try:
                program.statements.extend(parse_line(grammar, line, line_number, filename))
            except ParseError as error:
                location = SourceLocation(filename, line_number, error.offset + 1)
                logger.debug(f"{location}: {error.message}")
                collector.add(error.with_location(location, line))
    except TooManyErrors as error:
        logger.debug(f"{filename}: {error}")
        collector.add_warning(str(error))

    if collector.has_errors():
        raise ProgramError(collector.errors, collector.report())

    logger.debug(f"Parsed {len(program)} statements from {filename}")
    return program
