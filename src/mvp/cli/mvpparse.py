"""
mvpparse - 65816 Assembly Parser Command-Line Interface
=======================================================

This module implements the command-line interface for the parser. It
reads a source file, parses it with the program driver and prints one
line per statement, so the parse of a file can be checked from the
terminal.

Output Format
-------------
    line:column  Kind  source-form

    1:1  Label  start:
    1:8  Opcode  LDA #$00
    2:5  Opcode  RTS

Usage Examples
--------------
Basic parse:
    $ mvpparse game.asm

Deeper expression nesting:
    $ mvpparse --max-depth 80 generated.asm

Verbose mode:
    $ mvpparse -v game.asm
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from mvp import __version__
from mvp.cli.errors import handle_cli_exception
from mvp.config import DriverOptions, max_supported_depth
from mvp.parser.ast import Statement
from mvp.parser.program import parse_program


logger = logging.getLogger(__name__)


def statement_kind(statement: Statement) -> str:
    """Short name of a statement's type: "Opcode", "Label", ..."""
    return type(statement).__name__.removesuffix("Statement")


def build_options(max_depth: Optional[int], max_errors: Optional[int]) -> DriverOptions:
    """Environment configuration with command-line overrides applied."""
    options = DriverOptions.from_env()
    if max_depth is not None:
        options = replace(options, grammar=replace(options.grammar, max_depth=max_depth))
    if max_errors is not None:
        options = replace(options, max_errors=max_errors)
    return options


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1, max=max_supported_depth()),
    default=None,
    help="Maximum nesting of parentheses and brackets (default: 64, env MVP_MAX_DEPTH)",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many failing lines (default: 100, env MVP_MAX_ERRORS)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="mvpparse")
def main(
    input_file: Path,
    max_depth: Optional[int],
    max_errors: Optional[int],
    verbose: bool,
) -> None:
    """
    Parse 65816 assembly source and print its statements.

    INPUT_FILE is the assembly source file (.asm) to parse.

    Each statement is printed with its line and column, its kind and
    its normalised source form. Parse errors are reported on stderr.

    \b
    Examples:
        mvpparse game.asm
        mvpparse --max-errors 10 game.asm
    """
    if verbose:
        logging.basicConfig(format="%(name)s: %(message)s")
        logging.getLogger("mvp").setLevel(logging.DEBUG)

    try:
        options = build_options(max_depth, max_errors)

        if verbose:
            click.echo(f"Parsing {input_file}...")
            click.echo(
                f"Limits: depth {options.grammar.max_depth}, errors {options.max_errors}"
            )

        source = input_file.read_text(encoding="utf-8")
        program = parse_program(source, str(input_file), options)

        for item in program:
            location = item.location
            click.echo(
                f"{location.line}:{location.column}  "
                f"{statement_kind(item.statement)}  {item.statement}"
            )

        if verbose:
            click.echo(f"Parse complete: {len(program)} statements")

    except Exception as e:
        logger.debug(f"mvpparse failed on {input_file}: {e!r}")
        handle_cli_exception(e, verbose=verbose, error_type="Parse")


if __name__ == "__main__":
    main()
