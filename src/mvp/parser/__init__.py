"""
65816 Assembly Parser
=====================

This package turns 65816 assembly source text into an abstract syntax
tree. There is no tokenization pass: each grammar rule reads the text
directly and either returns the node it recognised together with the
unparsed remainder, or raises a ParseError.

Main Components
---------------
- **lexer**: Identifiers, numeric literals and ordered choice
- **expressions**: Expression grammar (ExpressionGrammar)
- **grammar**: Instruction and statement grammar (Grammar)
- **ast**: Immutable AST node types
- **program**: Line-oriented driver for whole source files

Parsing Process
---------------
1. **Statements**: ``parse_statement`` recognises one keyword, label
   declaration, assignment or instruction and returns the remainder.
2. **Operands**: the addressing mode is the first of ten operand shapes
   that matches; ``($19)+2`` is an address, ``($19)`` is indirect.
3. **Programs**: ``parse_program`` applies the statement grammar to each
   line and reports every failing line with its location.

Example Usage
-------------
>>> from mvp.parser import parse_statement
>>> remainder, statement = parse_statement("LDA.w ($10),y")
>>> print(statement)
LDA.w ($10),y
"""

from mvp.parser.ast import (
    AssignmentStatement,
    BinaryExpression,
    BinaryOperator,
    CallExpression,
    Condition,
    Expression,
    IfStatement,
    Keyword,
    KeywordStatement,
    Label,
    LabelStatement,
    ModeKind,
    NamedLabel,
    Number,
    NumberExpression,
    NumberWidth,
    Opcode,
    OpcodeMode,
    OpcodeStatement,
    OrgKeyword,
    RelativeLabel,
    Statement,
    VariableExpression,
    VariableName,
)
from mvp.parser.lexer import parse_identifier
from mvp.parser.expressions import ExpressionGrammar, parse_expression
from mvp.parser.grammar import Grammar, parse_assignment, parse_statement
from mvp.parser.program import Program, SourceStatement, parse_program

__all__ = [
    # Entry points
    "parse_identifier",
    "parse_expression",
    "parse_statement",
    "parse_assignment",
    "parse_program",
    # Grammar classes
    "ExpressionGrammar",
    "Grammar",
    # Program model
    "Program",
    "SourceStatement",
    # AST
    "AssignmentStatement",
    "BinaryExpression",
    "BinaryOperator",
    "CallExpression",
    "Condition",
    "Expression",
    "IfStatement",
    "Keyword",
    "KeywordStatement",
    "Label",
    "LabelStatement",
    "ModeKind",
    "NamedLabel",
    "Number",
    "NumberExpression",
    "NumberWidth",
    "Opcode",
    "OpcodeMode",
    "OpcodeStatement",
    "OrgKeyword",
    "RelativeLabel",
    "Statement",
    "VariableExpression",
    "VariableName",
]
