"""
MVP Command-Line Interface
==========================

This package provides the command-line tools of the toolkit:

- **mvpparse**: Parse a 65816 assembly file and print its statements

Each tool is implemented as a Click-based CLI application with help
text and uniform exit codes (see mvp.cli.errors).
"""

__all__ = ["mvpparse"]
