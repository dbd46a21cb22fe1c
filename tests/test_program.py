# =============================================================================
# test_program.py - Program Driver Tests
# =============================================================================
# Tests for parsing whole source files line by line.
#
# Test coverage includes:
#   - Statement separators, comments and blank lines
#   - Source locations of statements
#   - Error collection across lines, with line/column reporting
#   - The max_errors cap and grammar options
# =============================================================================

import pytest
from mvp.config import DriverOptions, GrammarOptions
from mvp.errors import (
    GrammarMismatchError,
    NestingTooDeepError,
    NumericOverflowError,
    ProgramError,
    SourceLocation,
)
from mvp.parser.ast import KeywordStatement, LabelStatement, OpcodeStatement
from mvp.parser.grammar import Grammar
from mvp.parser.program import Program, parse_line, parse_program, strip_comment


# =============================================================================
# Helper Functions
# =============================================================================

def rendered(program: Program) -> list[str]:
    return [str(item.statement) for item in program]


def positions(program: Program) -> list[tuple[int, int]]:
    return [(item.location.line, item.location.column) for item in program]


# =============================================================================
# Line Structure Tests
# =============================================================================

class TestLineStructure:
    """Test how lines are split into statements."""

    def test_separators_and_comment(self):
        program = parse_program("start: LDA #$00 : RTS ; done")
        assert rendered(program) == ["start:", "LDA #$00", "RTS"]
        assert positions(program) == [(1, 1), (1, 8), (1, 19)]

    def test_several_lines(self):
        program = parse_program("NOP\n  LDA $10\n")
        assert rendered(program) == ["NOP", "LDA $10"]
        assert positions(program) == [(1, 1), (2, 3)]

    def test_blank_and_comment_lines(self):
        program = parse_program("; header\n\n   \n\tRTS")
        assert len(program) == 1
        assert positions(program) == [(4, 2)]

    def test_label_then_instruction(self):
        program = parse_program("loop: DEX")
        assert [type(item.statement) for item in program] == [
            LabelStatement,
            OpcodeStatement,
        ]

    def test_relative_label_then_instruction(self):
        assert rendered(parse_program("+ : NOP")) == ["+", "NOP"]

    def test_empty_segments_ignored(self):
        assert rendered(parse_program(": NOP :: RTS :")) == ["NOP", "RTS"]

    def test_typical_program(self):
        source = "\n".join([
            "; copy a block",
            "org $8000",
            "!count = 16",
            "start:",
            "    LDX #!count",
            "-",
            "    LDA table,x : STA $7E00,x",
            "    DEX",
            "    BNE -",
            "    RTS",
        ])
        program = parse_program(source, "copy.asm")
        assert isinstance(program.statements[0].statement, KeywordStatement)
        assert rendered(program)[4:7] == ["-", "LDA table,x", "STA $7E00,x"]
        assert program.statements[4].location == SourceLocation("copy.asm", 6, 1)
        assert len(program) == 10

    def test_crlf_line_endings(self):
        program = parse_program("NOP\r\nRTS\r\n")
        assert positions(program) == [(1, 1), (2, 1)]

    def test_strip_comment(self):
        assert strip_comment("LDA #1 ; load ; twice") == "LDA #1 "

    def test_parse_line_directly(self):
        statements = parse_line(Grammar(), "  INX : INY", 7, "loop.asm")
        assert [item.location for item in statements] == [
            SourceLocation("loop.asm", 7, 3),
            SourceLocation("loop.asm", 7, 9),
        ]


# =============================================================================
# Error Reporting Tests
# =============================================================================

class TestErrorReporting:
    """Test error collection and locations."""

    def test_errors_collected_per_line(self):
        source = "NOP\nLDA (\nRTS\nLDA #4294967296"
        with pytest.raises(ProgramError) as exc_info:
            parse_program(source, "demo.asm")

        errors = exc_info.value.errors
        assert len(errors) == 2
        assert errors[0].location == SourceLocation("demo.asm", 2, 1)
        assert errors[0].source_line == "LDA ("
        assert isinstance(errors[1], NumericOverflowError)
        assert errors[1].location == SourceLocation("demo.asm", 4, 6)

    def test_report_format(self):
        with pytest.raises(ProgramError) as exc_info:
            parse_program("NOP\nLDA #4294967296", "demo.asm")

        report = str(exc_info.value)
        assert "demo.asm:2:6: error: numeric literal '4294967296'" in report
        assert "    LDA #4294967296" in report
        assert "1 error, 0 warnings" in report

    def test_trailing_garbage(self):
        with pytest.raises(ProgramError) as exc_info:
            parse_program("LDA $10 $20")

        error = exc_info.value.errors[0]
        assert isinstance(error, GrammarMismatchError)
        assert "unexpected '$20' after statement" in error.message
        assert error.location.column == 9

    def test_garbage_after_implied_instruction(self):
        with pytest.raises(ProgramError) as exc_info:
            parse_program("RTS )")
        assert exc_info.value.errors[0].location.column == 1

    def test_max_errors(self):
        source = "\n".join(["LDA ("] * 5)
        options = DriverOptions(max_errors=2)
        with pytest.raises(ProgramError) as exc_info:
            parse_program(source, options=options)

        assert len(exc_info.value.errors) == 2
        assert "too many errors" in str(exc_info.value)

    def test_grammar_options_used(self):
        options = DriverOptions(grammar=GrammarOptions(max_depth=2))
        with pytest.raises(ProgramError) as exc_info:
            parse_program("LDA (((1)))", options=options)
        assert isinstance(exc_info.value.errors[0], NestingTooDeepError)

    def test_no_partial_program(self):
        """A failing line means no Program is returned at all."""
        with pytest.raises(ProgramError):
            parse_program("NOP\n)")
