"""
Assembly Abstract Syntax Tree (AST) Definitions
===============================================

This module defines the node types produced by the grammar. The AST is
a tree of immutable values: every node is built once during a parse,
compares by value, and owns its children exclusively.

Node Hierarchy
--------------
Statement
├── LabelStatement - label declaration (named or relative)
├── OpcodeStatement - processor operation
├── KeywordStatement - assembler keyword (ORG)
├── IfStatement - group of conditional branches
└── AssignmentStatement - name = expression

Expression
├── NumberExpression - numeric literal with its surface width
├── VariableExpression - reference to a label
├── BinaryExpression - two operands joined by an operator
└── CallExpression - function call with ordered arguments

Label
├── NamedLabel - reference by identifier
└── RelativeLabel - run of '+' (forward) or '-' (backward)

Design Notes
------------
- Variants are frozen dataclasses; each union is a plain ``Union`` alias
  so consumers dispatch with ``isinstance`` or ``match``.
- ``str(node)`` renders assembly-like source. Binary expressions are
  always parenthesised so the rendered text shows the tree shape.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union


MAX_NUMBER = 0xFFFFFFFF


# =============================================================================
# Names and Labels
# =============================================================================

@dataclass(frozen=True)
class VariableName:
    """
    A unique name of an identifier in a program.

    Most of the time a Label is used when a value is referenced, but
    assignments need a name where a relative reference makes no sense.
    """
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class NamedLabel:
    """Reference to a location or value by name."""
    name: VariableName

    def __str__(self) -> str:
        return str(self.name)


@dataclass(frozen=True)
class RelativeLabel:
    """
    Reference to a nearby unnamed location.

    Attributes:
        offset: Signed distance rank. Negative values point backward,
                positive values forward; the magnitude is the number of
                markers in the run (``+`` is 1, ``++`` is 2, ``--`` is -2).
    """
    offset: int

    def __post_init__(self):
        if self.offset == 0:
            raise ValueError("relative label offset cannot be 0")

    def __str__(self) -> str:
        marker = "+" if self.offset > 0 else "-"
        return marker * abs(self.offset)


Label = Union[NamedLabel, RelativeLabel]


# =============================================================================
# Numbers
# =============================================================================

class NumberWidth(Enum):
    """
    Byte width suggested by a numeric literal's surface form.

    65816 has immediate instructions that share one opcode but take one
    or two operand bytes depending on CPU flags. The assembler never
    guesses the size from a value, except for hexadecimal literals
    written with exactly two or four digits:

        LDA #$10    ; one byte literal,  A9 10
        LDA #$1000  ; two byte literal,  A9 00 10
        LDA #$010   ; no suggested width

    The width is a syntactic annotation only and is never derived from
    the numeric value.
    """
    NONE = auto()
    ONE_BYTE = auto()
    TWO_BYTES = auto()


@dataclass(frozen=True)
class Number:
    """
    Unsigned 32-bit numeric literal.

    Attributes:
        value: The literal's value (0 to $FFFFFFFF)
        width: Width suggested by the literal's digit count
    """
    value: int
    width: NumberWidth = NumberWidth.NONE

    def __post_init__(self):
        if not 0 <= self.value <= MAX_NUMBER:
            raise ValueError(f"number {self.value} outside unsigned 32-bit range")

    def __str__(self) -> str:
        if self.width is NumberWidth.ONE_BYTE:
            return f"${self.value:02X}"
        if self.width is NumberWidth.TWO_BYTES:
            return f"${self.value:04X}"
        return str(self.value)


# =============================================================================
# Expressions
# =============================================================================

class BinaryOperator(Enum):
    """
    An operator that takes two arguments.

    The value of each member is its surface symbol. The grammar currently
    produces ADD, SUB, MUL and DIV; the shift and bitwise operators are
    representable for later grammar extensions.
    """
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    SHL = "<<"
    SHR = ">>"
    XOR = "^"
    AND = "&"
    OR = "|"

    @property
    def symbol(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberExpression:
    number: Number

    def __str__(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class VariableExpression:
    label: Label

    def __str__(self) -> str:
        return str(self.label)


@dataclass(frozen=True)
class BinaryExpression:
    """Two operand expressions joined by a binary operator."""
    operator: BinaryOperator
    left: "Expression"
    right: "Expression"

    def __str__(self) -> str:
        return f"({self.left} {self.operator.symbol} {self.right})"


@dataclass(frozen=True)
class CallExpression:
    """
    Function call such as ``bank(label)``.

    Attributes:
        name: The called function
        arguments: Ordered arguments, possibly empty
    """
    name: VariableName
    arguments: tuple["Expression", ...] = ()

    def __str__(self) -> str:
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.name}({args})"


Expression = Union[NumberExpression, VariableExpression, BinaryExpression, CallExpression]


# =============================================================================
# Opcodes
# =============================================================================

class ModeKind(Enum):
    """Operand shapes an instruction can take."""
    IMPLIED = auto()            # no argument
    IMMEDIATE = auto()          # #$
    ADDRESS = auto()            # $
    INDIRECT = auto()           # ($)
    X_INDIRECT = auto()         # ($,x)
    INDIRECT_Y = auto()         # ($),y
    STACK_INDIRECT_Y = auto()   # ($,s),y
    LONG_INDIRECT = auto()      # [$]
    LONG_INDIRECT_Y = auto()    # [$],y
    MOVE = auto()               # $,$
    ACCUMULATOR = auto()        # A


# Rendering of each operand shape, "{}" stands for the operand value
_MODE_FORMATS = {
    ModeKind.IMPLIED: "",
    ModeKind.IMMEDIATE: "#{}",
    ModeKind.ADDRESS: "{}",
    ModeKind.INDIRECT: "({})",
    ModeKind.X_INDIRECT: "({},x)",
    ModeKind.INDIRECT_Y: "({}),y",
    ModeKind.STACK_INDIRECT_Y: "({},s),y",
    ModeKind.LONG_INDIRECT: "[{}]",
    ModeKind.LONG_INDIRECT_Y: "[{}],y",
    ModeKind.ACCUMULATOR: "A",
}


@dataclass(frozen=True)
class OpcodeMode:
    """
    Addressing-mode shape of an instruction operand.

    MOVE is the generalized two-operand form: it covers index registers
    (``$19,x``), stack relative (``$03,s``) and block moves
    (``$7E,$7F``). The second operand is a full expression, so a register
    name and a label look the same at this layer.

    Attributes:
        kind: Which shape the operand has
        second: Second operand, present only for MOVE
    """
    kind: ModeKind
    second: Optional["Expression"] = None

    def __post_init__(self):
        if (self.kind is ModeKind.MOVE) != (self.second is not None):
            raise ValueError("only MOVE mode carries a second operand")

    @classmethod
    def move(cls, second: "Expression") -> "OpcodeMode":
        return cls(ModeKind.MOVE, second)

    def format_operand(self, value: Optional["Expression"]) -> str:
        """Render an operand value in this mode's syntax."""
        if self.kind is ModeKind.MOVE:
            return f"{value},{self.second}"
        return _MODE_FORMATS[self.kind].format(value)

    def __str__(self) -> str:
        return self.kind.name


IMPLIED = OpcodeMode(ModeKind.IMPLIED)
IMMEDIATE = OpcodeMode(ModeKind.IMMEDIATE)
ADDRESS = OpcodeMode(ModeKind.ADDRESS)
INDIRECT = OpcodeMode(ModeKind.INDIRECT)
X_INDIRECT = OpcodeMode(ModeKind.X_INDIRECT)
INDIRECT_Y = OpcodeMode(ModeKind.INDIRECT_Y)
STACK_INDIRECT_Y = OpcodeMode(ModeKind.STACK_INDIRECT_Y)
LONG_INDIRECT = OpcodeMode(ModeKind.LONG_INDIRECT)
LONG_INDIRECT_Y = OpcodeMode(ModeKind.LONG_INDIRECT_Y)
ACCUMULATOR = OpcodeMode(ModeKind.ACCUMULATOR)


# Width suffix letter for each explicit operand size
WIDTH_SUFFIXES = {1: "b", 2: "w", 3: "l"}


@dataclass(frozen=True)
class Opcode:
    """
    Processor operation.

    Attributes:
        name: Mnemonic as written in the source
        width: Explicit operand size from a .b/.w/.l suffix (1, 2 or 3)
        mode: Operand shape
        value: Operand expression; None only for implied instructions
    """
    name: str
    width: Optional[int]
    mode: OpcodeMode
    value: Optional["Expression"]

    def __post_init__(self):
        if self.width is not None and self.width not in WIDTH_SUFFIXES:
            raise ValueError(f"invalid opcode width {self.width}")
        if (self.value is None) != (self.mode.kind is ModeKind.IMPLIED):
            raise ValueError("only implied opcodes have no operand value")

    def __str__(self) -> str:
        text = self.name
        if self.width is not None:
            text += f".{WIDTH_SUFFIXES[self.width]}"
        operand = self.mode.format_operand(self.value)
        if operand:
            text += f" {operand}"
        return text


# =============================================================================
# Statements
# =============================================================================

@dataclass(frozen=True)
class OrgKeyword:
    """Keyword that changes the position the code is written to."""
    address: "Expression"

    def __str__(self) -> str:
        return f"org {self.address}"


Keyword = OrgKeyword


@dataclass(frozen=True)
class LabelStatement:
    """Label declaration."""
    label: Label

    def __str__(self) -> str:
        if isinstance(self.label, RelativeLabel):
            return str(self.label)
        return f"{self.label}:"


@dataclass(frozen=True)
class OpcodeStatement:
    opcode: Opcode

    def __str__(self) -> str:
        return str(self.opcode)


@dataclass(frozen=True)
class KeywordStatement:
    keyword: Keyword

    def __str__(self) -> str:
        return str(self.keyword)


@dataclass(frozen=True)
class AssignmentStatement:
    """Assignment of an expression to a variable name."""
    name: VariableName
    value: "Expression"

    def __str__(self) -> str:
        return f"{self.name} = {self.value}"


@dataclass(frozen=True)
class Condition:
    """
    A single branch of an if block.

    Attributes:
        predicate: Condition to test; None for the final else branch
        statements: Statements of the branch, in source order
    """
    predicate: Optional["Expression"]
    statements: tuple["Statement", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class IfStatement:
    """Group of if blocks, possibly with else-if and else branches."""
    conditions: tuple[Condition, ...]

    def __str__(self) -> str:
        lines = []
        for index, condition in enumerate(self.conditions):
            if condition.predicate is None:
                lines.append("else")
            elif index == 0:
                lines.append(f"if {condition.predicate}")
            else:
                lines.append(f"elseif {condition.predicate}")
            lines.extend(f"    {statement}" for statement in condition.statements)
        lines.append("endif")
        return "\n".join(lines)


Statement = Union[
    LabelStatement,
    OpcodeStatement,
    KeywordStatement,
    IfStatement,
    AssignmentStatement,
]
