"""
MVP Configuration
=================

Options for the grammar and the program driver. Configuration can come
from:
- Default values (defined here)
- Environment variables (``from_env``)
- Command-line options (the CLI overrides individual fields)

Environment variables (all optional):
    MVP_MAX_DEPTH: Maximum nesting depth of parentheses/brackets/calls
    MVP_MAX_ERRORS: Maximum errors collected before the driver stops
"""

from dataclasses import dataclass, field, replace
import os
import sys


DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_ERRORS = 100

# Interpreter frames used by one level of nesting, and frames left for
# the caller and the statement rules above the expression grammar.
FRAMES_PER_LEVEL = 10
STACK_RESERVE = 200


def max_supported_depth() -> int:
    """Deepest max_depth the current recursion limit can parse."""
    return max(1, (sys.getrecursionlimit() - STACK_RESERVE) // FRAMES_PER_LEVEL)


@dataclass(frozen=True)
class GrammarOptions:
    """
    Options that shape how the grammar parses.

    Attributes:
        max_depth: How many parenthesised sub-expressions, call argument
                   lists and operand brackets may be nested before
                   NestingTooDeepError is raised (default: 64).
                   Bounded by max_supported_depth() so the guard fires
                   before the interpreter runs out of stack
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.max_depth > max_supported_depth():
            raise ValueError(
                f"max_depth {self.max_depth} exceeds the supported maximum "
                f"of {max_supported_depth()} (see sys.setrecursionlimit)"
            )

    @classmethod
    def from_env(cls) -> "GrammarOptions":
        """Create GrammarOptions from MVP_MAX_DEPTH, falling back to defaults."""
        options = cls()

        if depth := os.environ.get("MVP_MAX_DEPTH"):
            try:
                options = replace(options, max_depth=int(depth))
            except ValueError:
                pass  # Ignore invalid values

        return options


@dataclass(frozen=True)
class DriverOptions:
    """
    Options for the program driver.

    Attributes:
        max_errors: Stop after this many failing lines (default: 100)
        grammar: Options handed to the statement grammar
    """

    max_errors: int = DEFAULT_MAX_ERRORS
    grammar: GrammarOptions = field(default_factory=GrammarOptions)

    @classmethod
    def from_env(cls) -> "DriverOptions":
        """Create DriverOptions from MVP_MAX_ERRORS and MVP_MAX_DEPTH."""
        options = cls(grammar=GrammarOptions.from_env())

        if max_errors := os.environ.get("MVP_MAX_ERRORS"):
            try:
                options = replace(options, max_errors=int(max_errors))
            except ValueError:
                pass

        return options
